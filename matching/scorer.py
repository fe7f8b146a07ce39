import math
from typing import Dict, List, Optional, Sequence
import numpy as np

from .skills import SkillCanonicalizer, default_canonicalizer

# Blend weights for the per-role score
W_FIT, W_OVERLAP, W_INTEREST = 0.6, 0.2, 0.2


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _canon(canonicalizer: Optional[SkillCanonicalizer]) -> SkillCanonicalizer:
    return canonicalizer or default_canonicalizer()


def _name_and_weight(skill):
    """Role skills come either as RoleSkill models or plain {name, weight} dicts."""
    if isinstance(skill, dict):
        return skill.get("name", ""), skill.get("weight")
    return getattr(skill, "name", ""), getattr(skill, "weight", None)


def cosine_similarity(a: Dict[str, float], b: Dict[str, float]) -> float:
    keys = list(set(a) | set(b))
    if not keys:
        return 0.0
    va = np.array([a.get(k, 0.0) for k in keys], dtype=float)
    vb = np.array([b.get(k, 0.0) for k in keys], dtype=float)
    na, nb = np.linalg.norm(va), np.linalg.norm(vb)
    if na == 0 or nb == 0:
        return 0.0
    sim = float(np.dot(va, vb) / (na * nb))
    return max(0.0, min(1.0, sim))


def normalize_skills(skills: Sequence[str], canonicalizer=None) -> Dict[str, float]:
    c = _canon(canonicalizer)
    vec = {}
    for s in skills or []:
        key = c.canonicalize(s)
        if key:
            vec[key] = 1.0
    return vec


def role_skill_vector(role_skills: Sequence, canonicalizer=None) -> Dict[str, float]:
    c = _canon(canonicalizer)
    vec = {}
    for skill in role_skills or []:
        name, weight = _name_and_weight(skill)
        key = c.canonicalize(name)
        if key:
            vec[key] = float(weight) if weight else 1.0
    return vec


def calculate_fit_score(user_skills: Sequence[str], role_skills: Sequence, canonicalizer=None) -> int:
    """Cosine similarity between the user's skills and a role's weighted skills, 0..100."""
    if not user_skills or not role_skills:
        return 0
    sim = cosine_similarity(
        normalize_skills(user_skills, canonicalizer),
        role_skill_vector(role_skills, canonicalizer),
    )
    return round_half_up(sim * 100)


def _canonical_lists(user_skills, role_skills, canonicalizer):
    c = _canon(canonicalizer)
    users = [c.canonicalize(s) for s in user_skills or []]
    roles = [c.canonicalize(_name_and_weight(s)[0]) for s in role_skills or []]
    return users, roles


def calculate_overlap_ratio(user_skills: Sequence[str], role_skills: Sequence, canonicalizer=None) -> float:
    if not user_skills or not role_skills:
        return 0.0
    users, roles = _canonical_lists(user_skills, role_skills, canonicalizer)
    overlap = set(users) & set(roles)
    overlap.discard("")
    return len(overlap) / len(roles)


def calculate_overlap_skills(user_skills: Sequence[str], role_skills: Sequence, canonicalizer=None) -> List[str]:
    """Role skills the user already has, in the user's order."""
    users, roles = _canonical_lists(user_skills, role_skills, canonicalizer)
    role_set = set(roles)
    return list(dict.fromkeys(s for s in users if s and s in role_set))


def calculate_gap_skills(user_skills: Sequence[str], role_skills: Sequence, canonicalizer=None) -> List[str]:
    """Role skills the user still lacks, in the role's order."""
    users, roles = _canonical_lists(user_skills, role_skills, canonicalizer)
    user_set = set(users)
    return list(dict.fromkeys(s for s in roles if s and s not in user_set))


def calculate_interest_match(interests: Sequence[str], role) -> float:
    # plain substring test against "{sector} {title}"
    if not interests or role is None:
        return 0.0
    if isinstance(role, dict):
        sector, title = role.get("sector", ""), role.get("title", "")
    else:
        sector, title = getattr(role, "sector", ""), getattr(role, "title", "")
    role_text = f"{sector} {title}".lower()
    for interest in interests:
        i = (interest or "").lower().strip()
        if i and i in role_text:
            return 1.0
    return 0.0


def calculate_enhanced_fit_score(user_skills, role_skills, interests, role, canonicalizer=None) -> int:
    fit = calculate_fit_score(user_skills, role_skills, canonicalizer)
    overlap = calculate_overlap_ratio(user_skills, role_skills, canonicalizer)
    interest = calculate_interest_match(interests, role)
    return round_half_up(W_FIT * fit + W_OVERLAP * overlap * 100 + W_INTEREST * interest * 100)
