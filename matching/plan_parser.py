"""Turn free-form model output into a 4-week learning plan.

`parse_plan` never raises: anything it cannot repair is replaced by a generic
plan so a recommendation always carries a usable curriculum.
"""
import copy
import json
import logging
import re
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

PLAN_WEEKS = 4

_JSON_FENCE_RX = re.compile(r"```json\s*(.*?)\s*```", re.DOTALL)
_ANY_FENCE_RX = re.compile(r"```\s*(.*?)\s*```", re.DOTALL)

PLACEHOLDER_TOPICS = "Topics to be determined"
PLACEHOLDER_PRACTICE = "Practice activities to be determined"
PLACEHOLDER_ASSESSMENT = "Assessment to be determined"
PLACEHOLDER_PROJECT = "Project to be determined"

FALLBACK_PLAN = {
    "prerequisites": [],
    "weeks": [
        {
            "week": 1,
            "topics": ["Basic concepts and fundamentals"],
            "practice": ["Hands-on exercises and tutorials"],
            "assessment": "Knowledge check quiz",
            "project": "Simple introductory project",
        },
        {
            "week": 2,
            "topics": ["Intermediate concepts and techniques"],
            "practice": ["Practical exercises and case studies"],
            "assessment": "Skills assessment",
            "project": "Intermediate level project",
        },
        {
            "week": 3,
            "topics": ["Advanced concepts and best practices"],
            "practice": ["Complex exercises and real-world scenarios"],
            "assessment": "Advanced skills test",
            "project": "Advanced level project",
        },
        {
            "week": 4,
            "topics": ["Integration and real-world application"],
            "practice": ["Final project preparation"],
            "assessment": "Final project review",
            "project": "Capstone project",
        },
    ],
}


def fallback_plan() -> Dict[str, Any]:
    return copy.deepcopy(FALLBACK_PLAN)


def _brace_slice(text: str) -> str:
    first, last = text.find("{"), text.rfind("}")
    if first != -1 and last > first:
        return text[first:last + 1]
    return text


def extract_json_text(text: str) -> str:
    """Prefer a ```json fence, then any fence, then the outermost braces."""
    m = _JSON_FENCE_RX.search(text) or _ANY_FENCE_RX.search(text)
    if m:
        return m.group(1).strip()
    return _brace_slice(text).strip()


def safe_parse_json(text) -> Optional[Dict[str, Any]]:
    """Parse the outermost {...} of `text`; None unless it yields an object."""
    if not isinstance(text, str):
        return None
    try:
        data = json.loads(_brace_slice(text))
    except (ValueError, RecursionError):
        return None
    return data if isinstance(data, dict) else None


def _repair_week(week: Any, number: int) -> Dict[str, Any]:
    week = dict(week) if isinstance(week, dict) else {}
    week["week"] = number
    if not isinstance(week.get("topics"), list):
        week["topics"] = [PLACEHOLDER_TOPICS]
    if not isinstance(week.get("practice"), list):
        week["practice"] = [PLACEHOLDER_PRACTICE]
    if not week.get("assessment"):
        week["assessment"] = PLACEHOLDER_ASSESSMENT
    if not week.get("project"):
        week["project"] = PLACEHOLDER_PROJECT
    if "resources" in week and not isinstance(week["resources"], list):
        del week["resources"]
    return week


def parse_plan(raw_text) -> Dict[str, Any]:
    if not isinstance(raw_text, str):
        logger.warning("Plan response was not text; using fallback plan")
        return fallback_plan()

    try:
        plan = json.loads(extract_json_text(raw_text))
    except (ValueError, RecursionError) as e:
        logger.warning(f"Could not parse learning plan JSON ({e}); using fallback plan")
        return fallback_plan()

    if not isinstance(plan, dict) or not isinstance(plan.get("weeks"), list):
        logger.warning("Learning plan is missing a weeks list; using fallback plan")
        return fallback_plan()

    weeks = plan["weeks"][:PLAN_WEEKS]
    while len(weeks) < PLAN_WEEKS:
        weeks.append({"week": len(weeks) + 1})
    plan["weeks"] = [_repair_week(w, i + 1) for i, w in enumerate(weeks)]

    if not isinstance(plan.get("prerequisites"), list):
        plan["prerequisites"] = []
    return plan
