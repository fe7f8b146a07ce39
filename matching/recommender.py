import logging
import math
import re
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence

import config
from schemas import Profile, Role, RoleMatch
from .errors import SkillExtractionError
from .plan_parser import parse_plan, safe_parse_json
from .prompts import build_explain_prompt, build_extract_skills_prompt, build_plan_prompt
from .ranker import rank_roles
from .scorer import calculate_enhanced_fit_score, round_half_up
from .skills import default_canonicalizer

logger = logging.getLogger(__name__)

_EMAIL_RX = re.compile(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.IGNORECASE)
_PHONE_RX = re.compile(r"\b\+?\d[\d\s().-]{8,}\b")

# demand score blend: posting frequency, trend slope, salary index
DEMAND_WEIGHTS = (0.45, 0.35, 0.20)


class TextGenerator(Protocol):
    def generate(self, prompt: str) -> str:
        ...


TrendLookup = Callable[[str], Optional[Dict[str, Any]]]


def _number(value) -> Optional[float]:
    if isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value):
        return float(value)
    return None


def compute_demand_score(doc: Dict[str, Any]) -> Optional[int]:
    """round(100 * (0.45 freq + 0.35 trend + 0.20 salary)); missing fields count as 0."""
    try:
        freq = float(doc.get("postingFrequencyNorm") or 0)
        trend = float(doc.get("trendSlopeNorm") or 0)
        salary = float(doc.get("salaryIndexNorm") or 0)
    except (TypeError, ValueError):
        return None
    w_f, w_t, w_s = DEMAND_WEIGHTS
    score = 100 * (w_f * freq + w_t * trend + w_s * salary)
    return round_half_up(score) if math.isfinite(score) else None


def lookup_demand_score(role_id: str, trend_lookup: Optional[TrendLookup]) -> Optional[int]:
    """Stored demandScore of the role_<id> snapshot; None when absent or unreadable."""
    if trend_lookup is None:
        return None
    try:
        doc = trend_lookup(f"role_{role_id}")
    except Exception as e:
        logger.warning(f"Trend lookup failed for role {role_id}: {e}")
        return None
    score = _number(doc.get("demandScore")) if isinstance(doc, dict) else None
    return round_half_up(score) if score is not None else None


def _build_recommendation(
    profile: Profile,
    match: RoleMatch,
    client: TextGenerator,
    trend_lookup: Optional[TrendLookup],
    canonicalizer,
) -> Dict[str, Any]:
    role = match.role
    explanation = client.generate(build_explain_prompt(profile, role))
    plan_text = client.generate(build_plan_prompt(profile, match.gap_skills))
    plan = parse_plan(plan_text)

    fit_score = calculate_enhanced_fit_score(
        profile.skills, role.skills, profile.interests, role, canonicalizer
    )
    why = (explanation or "").strip() or f"Good match based on your {', '.join(profile.skills)} skills."

    return {
        "roleId": role.role_id,
        "title": role.title,
        "fitScore": fit_score,
        "demandScore": lookup_demand_score(role.role_id, trend_lookup),
        "why": why,
        "overlapSkills": list(match.overlap_skills),
        "gapSkills": list(match.gap_skills),
        "plan": plan,
    }


def generate_recommendations(
    profile: Profile,
    roles: Sequence[Role],
    client: TextGenerator,
    trend_lookup: Optional[TrendLookup] = None,
    top_k: int = config.TOP_K_ROLES,
    canonicalizer=None,
) -> List[Dict[str, Any]]:
    """Explain and plan the top_k roles one after another.

    A failure while generating one role drops only that role; the caller
    decides what an empty result means.
    """
    recommendations = []
    for match in rank_roles(profile, roles, top_k, canonicalizer):
        try:
            recommendations.append(
                _build_recommendation(profile, match, client, trend_lookup, canonicalizer)
            )
        except Exception as e:
            logger.error(f"Error generating recommendation for {match.role.title}: {e}")
    return recommendations


def redact_pii(text: str) -> str:
    text = _EMAIL_RX.sub("[redacted-email]", text)
    return _PHONE_RX.sub("[redacted-phone]", text)


def _canonical_skill_list(items, canonicalizer) -> List[Dict[str, Any]]:
    out = []
    for item in items if isinstance(items, list) else []:
        if not isinstance(item, dict):
            continue
        name = canonicalizer.canonicalize(item.get("name") or "")
        if not name:
            continue
        confidence = _number(item.get("confidence"))
        evidence = item.get("evidence")
        out.append({
            "name": name,
            "confidence": confidence if confidence is not None else 0,
            "evidence": evidence if isinstance(evidence, str) else "",
        })
    return out


def extract_skills(text: str, language: str, client: TextGenerator, canonicalizer=None) -> Dict[str, List[Dict[str, Any]]]:
    """Ask the model for hard/soft skills in `text` after stripping contact details."""
    c = canonicalizer or default_canonicalizer()
    response = client.generate(build_extract_skills_prompt(redact_pii(text), language))
    payload = safe_parse_json(response)
    if payload is None:
        raise SkillExtractionError("Failed to parse AI response")
    return {
        "hardSkills": _canonical_skill_list(payload.get("hardSkills"), c),
        "softSkills": _canonical_skill_list(payload.get("softSkills"), c),
    }
