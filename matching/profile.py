"""Profile validation at the HTTP boundary and lenient cleaning everywhere else.

The two are separate: `validate_request` rejects bad input and
reports every problem at once, while `validate_and_clean_profile` never
rejects and instead coerces values into range.
"""
import math
import numbers
from typing import Any, Dict, List

import config
from schemas import Profile
from .skills import default_canonicalizer

EDUCATION_LEVELS = ("12th", "Diploma", "UG", "PG", "Other")
BUDGETS = ("free", "low", "any")
LANGUAGES = ("en", "hi")

DEFAULT_EDUCATION = "Other"
DEFAULT_BUDGET = "free"
DEFAULT_LANGUAGE = "en"

MIN_WEEKLY_HOURS, MAX_WEEKLY_HOURS = 1, 40


def _is_number(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(value)


def _is_string_list(value) -> bool:
    return isinstance(value, list) and len(value) > 0 and all(isinstance(v, str) for v in value)


def validate_request(body: Any) -> List[str]:
    """Return every violation in a /api/recommend body (empty list when valid)."""
    errors = []
    if not isinstance(body, dict):
        return ["request body must be a JSON object"]

    uid = body.get("uid")
    if not uid or not isinstance(uid, str):
        errors.append("uid is required and must be a string")

    profile = body.get("profile")
    if not isinstance(profile, dict):
        errors.append("profile is required and must be an object")
        return errors

    name = profile.get("name")
    if not isinstance(name, str) or len(name.strip()) < 2:
        errors.append("name must be at least 2 characters long")

    if profile.get("education") not in EDUCATION_LEVELS:
        errors.append(f"education must be one of: {', '.join(EDUCATION_LEVELS)}")

    if not _is_string_list(profile.get("skills")):
        errors.append("skills must be a non-empty array of strings")

    if not _is_string_list(profile.get("interests")):
        errors.append("interests must be a non-empty array of strings")

    weekly = profile.get("weeklyTime")
    if not _is_number(weekly) or not MIN_WEEKLY_HOURS <= weekly <= MAX_WEEKLY_HOURS:
        errors.append(f"weeklyTime must be a number between {MIN_WEEKLY_HOURS} and {MAX_WEEKLY_HOURS}")

    if profile.get("budget") not in BUDGETS:
        errors.append(f"budget must be one of: {', '.join(BUDGETS)}")

    if profile.get("language") not in LANGUAGES:
        errors.append(f"language must be one of: {', '.join(LANGUAGES)}")

    return errors


def _clean_list(values, limit: int, canonicalizer) -> List[str]:
    if not isinstance(values, list):
        return []
    cleaned = [canonicalizer.sanitize(v) for v in values]
    return [v for v in cleaned if v][:limit]


# interests feed a substring match, so they are only trimmed and lowercased
def _lower_list(values, limit: int) -> List[str]:
    if not isinstance(values, list):
        return []
    cleaned = [v.strip().lower() for v in values if isinstance(v, str)]
    return [v for v in cleaned if v][:limit]


def validate_and_clean_profile(profile: Dict[str, Any], canonicalizer=None) -> Dict[str, Any]:
    """Coerce a profile dict into range without ever rejecting it."""
    c = canonicalizer or default_canonicalizer()
    cleaned = dict(profile or {})

    cleaned["skills"] = _clean_list(cleaned.get("skills"), config.MAX_PROFILE_SKILLS, c)
    cleaned["interests"] = _clean_list(cleaned.get("interests"), config.MAX_PROFILE_INTERESTS, c)

    weekly = cleaned.get("weeklyTime")
    if _is_number(weekly):
        cleaned["weeklyTime"] = int(min(max(weekly, MIN_WEEKLY_HOURS), MAX_WEEKLY_HOURS))
    else:
        cleaned.pop("weeklyTime", None)

    if cleaned.get("education") not in EDUCATION_LEVELS:
        cleaned["education"] = DEFAULT_EDUCATION
    if cleaned.get("budget") not in BUDGETS:
        cleaned["budget"] = DEFAULT_BUDGET
    if cleaned.get("language") not in LANGUAGES:
        cleaned["language"] = DEFAULT_LANGUAGE

    return cleaned


def normalize_profile(profile: Dict[str, Any], canonicalizer=None) -> Profile:
    """Build the typed profile used for ranking from an already-validated dict."""
    cleaned = validate_and_clean_profile(profile, canonicalizer)
    cleaned["interests"] = _lower_list((profile or {}).get("interests"), config.MAX_PROFILE_INTERESTS)
    name = cleaned.get("name")
    cleaned["name"] = name.strip() if isinstance(name, str) else ""
    return Profile.model_validate(cleaned)
