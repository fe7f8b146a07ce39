import json

import pytest

from conftest import TWO_WEEK_PLAN
from matching.plan_parser import (
    PLACEHOLDER_ASSESSMENT,
    PLACEHOLDER_PRACTICE,
    PLACEHOLDER_PROJECT,
    PLACEHOLDER_TOPICS,
    fallback_plan,
    parse_plan,
    safe_parse_json,
)


def _week(n, **extra):
    week = {"week": n, "topics": [f"t{n}"], "practice": [f"p{n}"], "assessment": f"a{n}", "project": f"j{n}"}
    week.update(extra)
    return week


def test_fenced_two_week_plan_is_padded_to_four():
    plan = parse_plan(TWO_WEEK_PLAN)
    assert [w["week"] for w in plan["weeks"]] == [1, 2, 3, 4]
    assert plan["weeks"][0]["topics"] == ["SQL joins"]
    assert plan["prerequisites"] == ["basic computer literacy"]
    for padded in plan["weeks"][2:]:
        assert padded["topics"] == [PLACEHOLDER_TOPICS]
        assert padded["practice"] == [PLACEHOLDER_PRACTICE]
        assert padded["assessment"] == PLACEHOLDER_ASSESSMENT
        assert padded["project"] == PLACEHOLDER_PROJECT


def test_generic_fence_is_accepted():
    text = "```\n" + json.dumps({"weeks": [_week(1), _week(2), _week(3), _week(4)]}) + "\n```"
    plan = parse_plan(text)
    assert [w["topics"] for w in plan["weeks"]] == [["t1"], ["t2"], ["t3"], ["t4"]]


def test_braces_inside_prose_are_found():
    text = "Sure! " + json.dumps({"weeks": [_week(1)]}) + " Hope this helps."
    plan = parse_plan(text)
    assert plan["weeks"][0]["project"] == "j1"
    assert len(plan["weeks"]) == 4


def test_extra_weeks_are_truncated():
    plan = parse_plan(json.dumps({"weeks": [_week(i) for i in range(1, 7)]}))
    assert [w["week"] for w in plan["weeks"]] == [1, 2, 3, 4]
    assert plan["weeks"][3]["topics"] == ["t4"]


def test_week_numbers_follow_position():
    plan = parse_plan(json.dumps({"weeks": [_week(7), _week(7), {"week": "3"}, "not a week"]}))
    assert [w["week"] for w in plan["weeks"]] == [1, 2, 3, 4]
    assert plan["weeks"][3]["topics"] == [PLACEHOLDER_TOPICS]


def test_bad_fields_get_placeholders():
    week = _week(1, topics="SQL", practice=None, assessment="", project=0, resources="none")
    plan = parse_plan(json.dumps({"weeks": [week], "prerequisites": "none"}))
    first = plan["weeks"][0]
    assert first["topics"] == [PLACEHOLDER_TOPICS]
    assert first["practice"] == [PLACEHOLDER_PRACTICE]
    assert first["assessment"] == PLACEHOLDER_ASSESSMENT
    assert first["project"] == PLACEHOLDER_PROJECT
    assert "resources" not in first
    assert plan["prerequisites"] == []


def test_resources_and_extra_keys_survive():
    resources = [{"title": "NPTEL Python", "type": "free", "url": "https://nptel.ac.in"}]
    plan = parse_plan(json.dumps({"weeks": [_week(1, resources=resources, timePerTopicHours=[2])]}))
    assert plan["weeks"][0]["resources"] == resources
    assert plan["weeks"][0]["timePerTopicHours"] == [2]


@pytest.mark.parametrize("raw", [
    "not json at all",
    "```json\n{broken\n```",
    '{"plan": "no weeks here"}',
    '{"weeks": "four"}',
    "[1, 2, 3]",
    "",
    None,
])
def test_unusable_input_falls_back(raw):
    assert parse_plan(raw) == fallback_plan()


@pytest.mark.parametrize("raw", [
    TWO_WEEK_PLAN, "garbage", '{"weeks": []}', '{"weeks": [null, 3, "x", [], {}]}', "{}}{{",
])
def test_always_four_numbered_weeks(raw):
    weeks = parse_plan(raw)["weeks"]
    assert [w["week"] for w in weeks] == [1, 2, 3, 4]
    assert all(w["topics"] and w["practice"] for w in weeks)


def test_fallback_plan_is_a_fresh_copy():
    plan = fallback_plan()
    plan["weeks"].clear()
    assert len(fallback_plan()["weeks"]) == 4


def test_safe_parse_json():
    assert safe_parse_json('noise {"a": 1} noise') == {"a": 1}
    assert safe_parse_json("[1, 2]") is None
    assert safe_parse_json("{oops}") is None
    assert safe_parse_json(None) is None
