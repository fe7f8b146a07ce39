import json
import logging
from collections import Counter
from typing import List, Sequence

from schemas import Profile, Role, RoleMatch
from .scorer import (
    calculate_enhanced_fit_score,
    calculate_gap_skills,
    calculate_overlap_skills,
)
from .skills import default_canonicalizer

logger = logging.getLogger(__name__)


def load_roles(path: str) -> List[Role]:
    """Load the fixed role catalog; accepts a JSON list or a {roleId: role} object."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    items = list(data.values()) if isinstance(data, dict) else data
    roles = [Role.model_validate(item) for item in items]
    logger.info(f"Loaded {len(roles)} roles from {path}")
    return roles


def rank_roles(profile: Profile, roles: Sequence[Role], top_k: int = 3, canonicalizer=None) -> List[RoleMatch]:
    """Score every catalog role against the profile and keep the best top_k.

    sorted() is stable, so equal scores keep catalog order.
    """
    matches = []
    for role in roles:
        matches.append(
            RoleMatch(
                role=role,
                score=calculate_enhanced_fit_score(
                    profile.skills, role.skills, profile.interests, role, canonicalizer
                ),
                overlap_skills=calculate_overlap_skills(profile.skills, role.skills, canonicalizer),
                gap_skills=calculate_gap_skills(profile.skills, role.skills, canonicalizer),
            )
        )
    matches.sort(key=lambda m: m.score, reverse=True)
    return matches[: max(0, top_k)]


def suggest_skills_to_learn(user_skills: Sequence[str], roles: Sequence[Role], limit: int = 10, canonicalizer=None) -> List[str]:
    """Skills the user lacks, most widely required across the catalog first."""
    c = canonicalizer or default_canonicalizer()
    have = {c.canonicalize(s) for s in user_skills or []}
    freq = Counter()
    for role in roles:
        for skill in dict.fromkeys(c.canonicalize(s.name) for s in role.skills):
            if skill and skill not in have:
                freq[skill] += 1
    # most_common keeps first-insertion order among equal counts
    return [skill for skill, _ in freq.most_common(limit)]
