from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Dict, Any


# Cleaned user profile (camelCase on the wire)
class Profile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    education: str = "Other"
    skills: List[str] = []
    interests: List[str] = []
    weekly_time: int = Field(default=5, alias="weeklyTime")
    budget: str = "free"
    language: str = "en"


# Catalog entries
class RoleSkill(BaseModel):
    name: str
    weight: float = 1.0


class Role(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    role_id: str = Field(alias="roleId")
    title: str
    sector: str = ""
    description: Optional[str] = None
    skills: List[RoleSkill] = []


# Ranking output for a single role
class RoleMatch(BaseModel):
    role: Role
    score: int
    overlap_skills: List[str] = []
    gap_skills: List[str] = []


# One assembled recommendation; plan follows the 4-week learning plan layout
class Recommendation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    role_id: str = Field(alias="roleId")
    title: str
    fit_score: int = Field(alias="fitScore")
    demand_score: Optional[int] = Field(default=None, alias="demandScore")
    why: str
    overlap_skills: List[str] = Field(default=[], alias="overlapSkills")
    gap_skills: List[str] = Field(default=[], alias="gapSkills")
    plan: Dict[str, Any]


class RecommendResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    recommendations: List[Recommendation]
    generated_at: str = Field(alias="generatedAt")


class ExtractedSkill(BaseModel):
    name: str
    confidence: float = 0
    evidence: str = ""


class ExtractSkillsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    hard_skills: List[ExtractedSkill] = Field(default=[], alias="hardSkills")
    soft_skills: List[ExtractedSkill] = Field(default=[], alias="softSkills")


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    service: str
    version: str


class SuggestSkillsIn(BaseModel):
    skills: List[str] = []
    limit: int = Field(default=10, ge=1, le=50)
