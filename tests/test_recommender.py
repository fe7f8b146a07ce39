import pytest

from conftest import FakeClient
from matching.errors import SkillExtractionError
from matching.ranker import rank_roles
from matching.recommender import (
    compute_demand_score,
    extract_skills,
    generate_recommendations,
    lookup_demand_score,
    redact_pii,
)


def test_generates_top_three_in_rank_order(roles, analyst_profile, fake_client):
    recs = generate_recommendations(analyst_profile, roles, fake_client)
    expected = rank_roles(analyst_profile, roles, 3)
    assert [r["roleId"] for r in recs] == [m.role.role_id for m in expected]
    assert [r["fitScore"] for r in recs] == [m.score for m in expected]

    first = recs[0]
    assert first["roleId"] == "data_analyst"
    assert first["why"] == "Your skills line up well with this role."
    assert first["overlapSkills"] == ["python", "sql", "excel"]
    assert first["gapSkills"] == ["statistics", "powerbi", "data visualization"]
    assert [w["week"] for w in first["plan"]["weeks"]] == [1, 2, 3, 4]
    assert first["demandScore"] is None


def test_roles_are_generated_sequentially(roles, analyst_profile, fake_client):
    generate_recommendations(analyst_profile, roles, fake_client)
    kinds = ["plan" if "learning path designer" in p else "explain" for p in fake_client.prompts]
    assert kinds == ["explain", "plan"] * 3
    assert "Skills to Learn: statistics, powerbi, data visualization" in fake_client.prompts[1]


def test_failed_role_is_skipped(roles, analyst_profile):
    client = FakeClient(fail_titles=["Data Analyst"])
    recs = generate_recommendations(analyst_profile, roles, client)
    assert len(recs) == 2
    assert "data_analyst" not in [r["roleId"] for r in recs]


def test_every_role_failing_gives_empty_result(roles, analyst_profile):
    assert generate_recommendations(analyst_profile, roles, FakeClient(fail_all=True)) == []


def test_empty_explanation_uses_template(roles, analyst_profile):
    recs = generate_recommendations(analyst_profile, roles, FakeClient(explanation="   "))
    assert recs[0]["why"] == "Good match based on your python, sql, excel skills."


def test_unparseable_plan_degrades_to_fallback(roles, analyst_profile):
    recs = generate_recommendations(analyst_profile, roles, FakeClient(plan="I cannot do that"))
    assert recs[0]["plan"]["weeks"][0]["topics"] == ["Basic concepts and fundamentals"]


def test_demand_score_from_trend_snapshot(roles, analyst_profile, fake_client):
    docs = {"role_data_analyst": {"demandScore": 72.6}, "role_ml_engineer": {"demandScore": "high"}}
    recs = generate_recommendations(analyst_profile, roles, fake_client, trend_lookup=docs.get)
    assert recs[0]["demandScore"] == 73
    assert all(r["demandScore"] is None for r in recs[1:])
    assert lookup_demand_score("ml_engineer", docs.get) is None


def test_trend_lookup_failure_is_silent():
    def broken(doc_id):
        raise RuntimeError("store offline")

    assert lookup_demand_score("data_analyst", broken) is None
    assert lookup_demand_score("data_analyst", None) is None
    assert lookup_demand_score("data_analyst", lambda _: None) is None


def test_compute_demand_score():
    doc = {"postingFrequencyNorm": 0.8, "trendSlopeNorm": 0.4, "salaryIndexNorm": 0.5}
    assert compute_demand_score(doc) == 60
    assert compute_demand_score({}) == 0
    assert compute_demand_score({"postingFrequencyNorm": "abc"}) is None


def test_redact_pii():
    text = "Mail me at asha.k@example.com or call +91 98765 43210 today"
    redacted = redact_pii(text)
    assert "[redacted-email]" in redacted
    assert "[redacted-phone]" in redacted
    assert "@" not in redacted
    assert "98765" not in redacted
    assert redacted.endswith("today")


def test_extract_skills_canonicalizes_and_redacts():
    client = FakeClient(extraction='```json {"hardSkills": [{"name": "Python3", "confidence": 0.9, '
                                   '"evidence": "wrote python scripts"}, {"name": "!!!"}], '
                                   '"softSkills": [{"name": "Team Work", "confidence": "high"}, "oops"]} ```')
    result = extract_skills("I wrote python scripts. Reach me at me@example.com", "en", client)
    assert result["hardSkills"] == [{"name": "python", "confidence": 0.9, "evidence": "wrote python scripts"}]
    assert result["softSkills"] == [{"name": "teamwork", "confidence": 0, "evidence": ""}]
    assert "me@example.com" not in client.prompts[0]


def test_extract_skills_unparseable_response():
    with pytest.raises(SkillExtractionError):
        extract_skills("I know python and sql well", "en", FakeClient(extraction="no json here"))


@pytest.mark.parametrize("bad", [float("inf"), float("-inf"), float("nan")])
def test_non_finite_demand_snapshot_keeps_the_role(roles, analyst_profile, fake_client, bad):
    docs = {"role_data_analyst": {"demandScore": bad}}
    recs = generate_recommendations(analyst_profile, roles, fake_client, trend_lookup=docs.get)
    assert recs[0]["roleId"] == "data_analyst"
    assert recs[0]["demandScore"] is None
    assert compute_demand_score({"postingFrequencyNorm": bad}) is None


def test_malformed_snapshot_gives_no_demand_score():
    assert lookup_demand_score("data_analyst", lambda _: ["not", "a", "dict"]) is None
