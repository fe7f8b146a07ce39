from matching.ranker import load_roles, rank_roles, suggest_skills_to_learn
from schemas import Profile, Role


def _profile(skills, interests):
    return Profile(name="Test User", skills=skills, interests=interests, weeklyTime=8)


def test_bundled_catalog_loads(roles):
    ids = [r.role_id for r in roles]
    assert len(ids) == 10
    assert len(set(ids)) == len(ids)
    assert all(r.skills for r in roles)


def test_load_roles_accepts_keyed_object(tmp_path):
    path = tmp_path / "roles.json"
    path.write_text(
        '{"a": {"roleId": "a", "title": "A", "sector": "S", "skills": [{"name": "x"}]}}',
        encoding="utf-8",
    )
    roles = load_roles(str(path))
    assert roles[0].role_id == "a"
    assert roles[0].skills[0].weight == 1.0


def test_analyst_profile_ranks_data_analyst_first(roles, analyst_profile):
    matches = rank_roles(analyst_profile, roles, top_k=3)
    assert len(matches) == 3
    assert matches[0].role.role_id == "data_analyst"
    assert matches[0].overlap_skills == ["python", "sql", "excel"]
    assert matches[0].gap_skills == ["statistics", "powerbi", "data visualization"]
    scores = [m.score for m in matches]
    assert scores == sorted(scores, reverse=True)


def test_zero_overlap_profile_still_gets_top_k(roles):
    matches = rank_roles(_profile(["underwater basket weaving"], ["zzz"]), roles, top_k=3)
    assert len(matches) == 3
    assert all(m.score == 0 for m in matches)
    # ties keep catalog order
    assert [m.role.role_id for m in matches] == [r.role_id for r in roles[:3]]


def test_empty_catalog_gives_empty_result(analyst_profile):
    assert rank_roles(analyst_profile, [], top_k=3) == []


def test_top_k_larger_than_catalog(roles, analyst_profile):
    assert len(rank_roles(analyst_profile, roles, top_k=50)) == len(roles)


def test_interest_breaks_skill_tie():
    roles = [
        Role(roleId="one", title="Backend Developer", sector="Software", skills=[{"name": "python"}]),
        Role(roleId="two", title="Data Engineer", sector="Data", skills=[{"name": "python"}]),
    ]
    matches = rank_roles(_profile(["python"], ["data"]), roles, top_k=2)
    assert [m.role.role_id for m in matches] == ["two", "one"]
    assert matches[0].score == 100
    assert matches[1].score == 80


def test_suggest_skills_to_learn(roles):
    suggestions = suggest_skills_to_learn(["python"], roles, limit=5)
    assert len(suggestions) == 5
    assert "python" not in suggestions
    assert suggestions[0] == "excel"
