SYSTEM_PROMPT = """You are a career advisor for students and early-career job seekers in India.
Be encouraging, specific and practical. Never mention sensitive personal attributes.
When asked for JSON, output ONLY valid JSON with no markdown or commentary."""


EDUCATION_DISPLAY = {
    "12th": "12th Standard",
    "Diploma": "Diploma",
    "UG": "Undergraduate Degree",
    "PG": "Postgraduate Degree",
    "Other": "Other Education",
}

BUDGET_DISPLAY = {
    "free": "free resources only (YouTube, free courses, documentation)",
    "low": "low-cost resources (under ₹1000/month for courses, books)",
    "any": "any budget resources (premium courses, certifications, tools)",
}


def language_name(code: str) -> str:
    return "Hindi" if code == "hi" else "English"


def time_text(hours: int) -> str:
    if hours <= 5:
        return "part-time learning"
    if hours <= 10:
        return "moderate learning pace"
    if hours <= 20:
        return "intensive learning"
    return "full-time learning pace"


EXPLAIN_TEMPLATE = """You are a career advisor helping a user understand why a specific job role fits their background.

User Profile:
- Name: {name}
- Education: {education}
- Current Skills: {skills}
- Interests: {interests}
- Weekly Study Time: {weekly_time} hours
- Budget Preference: {budget}
- Language: {language}

Job Role: {title}
Required Skills: {role_skills}

Task: Write a concise explanation (maximum 120 words) in {language} explaining why this role is a good fit for the user.

Focus on:
1. How their current skills align with the role requirements
2. How their interests connect to this career path
3. Why this role makes sense given their background

Guidelines:
- Be encouraging and positive
- Use specific examples from their skills
- Include a 2-3 bullet mapping like "python -> data cleaning, automation" using the user's skills
- Write in {language}

Response: Write only the explanation, no additional formatting or text."""


PLAN_TEMPLATE = """You are a learning path designer creating a 4-week structured learning plan.

User Context:
- Current Skills: {skills}
- Skills to Learn: {gap_skills}
- Weekly Study Time: {weekly_time} hours ({pace})
- Budget: {budget}
- Language: {language}

Create a 4-week learning plan in JSON format with the following structure:

{{
  "prerequisites": ["skill or concept"],
  "weeks": [
    {{
      "week": 1,
      "topics": ["Topic 1", "Topic 2"],
      "timePerTopicHours": [2, 2],
      "practice": ["Practice activity 1", "Practice activity 2"],
      "assessment": "Assessment description",
      "project": "Project description",
      "resources": [
        {{"title": "NPTEL/YouTube/Docs link title", "type": "free|low|paid", "url": "https://..."}}
      ]
    }}
  ]
}}

Guidelines:
- Each week should have 2-3 topics that build progressively
- Practice activities should be hands-on and practical
- Assessments should be measurable (quizzes, tests, etc.)
- Projects should build on previous weeks toward one cumulative portfolio project
- Respect the {weekly_time} hours per week constraint; sum(timePerTopicHours) <= {weekly_time}
- Use {budget}; prefer NPTEL, IIT courses, official docs and low-bandwidth options
- Make content relevant to the Indian job market

Response: Return ONLY the JSON object, no additional text or markdown formatting."""


EXTRACT_SKILLS_TEMPLATE = """You are a skills extractor. Given a user's free-text description, extract hard and soft skills with confidence scores and short evidence quotes from the text. Return ONLY JSON.

Input Language: {language}

Text:
\"\"\"
{text}
\"\"\"

Output JSON schema:
{{
  "hardSkills": [{{"name": "python", "confidence": 0.9, "evidence": "built a script in python"}}],
  "softSkills": [{{"name": "communication", "confidence": 0.8, "evidence": "presented in college"}}]
}}

Guidelines:
- Use standardized skill names (e.g., python, sql, excel, react, aws)
- Confidence in [0,1]
- Evidence must be a short quote from input
- Return only JSON, no markdown."""


def build_explain_prompt(profile, role) -> str:
    return EXPLAIN_TEMPLATE.format(
        name=profile.name,
        education=EDUCATION_DISPLAY.get(profile.education, profile.education),
        skills=", ".join(profile.skills),
        interests=", ".join(profile.interests),
        weekly_time=profile.weekly_time,
        budget=profile.budget,
        language=language_name(profile.language),
        title=role.title,
        role_skills=", ".join(s.name for s in role.skills),
    )


def build_plan_prompt(profile, gap_skills) -> str:
    return PLAN_TEMPLATE.format(
        skills=", ".join(profile.skills),
        gap_skills=", ".join(gap_skills) or "deepen existing skills",
        weekly_time=profile.weekly_time,
        pace=time_text(profile.weekly_time),
        budget=BUDGET_DISPLAY.get(profile.budget, profile.budget),
        language=language_name(profile.language),
    )


def build_extract_skills_prompt(text: str, language: str = "en") -> str:
    return EXTRACT_SKILLS_TEMPLATE.format(text=text, language=language_name(language))
