import json

import pytest
from fastapi.testclient import TestClient

import config
from matching.errors import LLMUpstreamError
from matching.ranker import load_roles
from schemas import Profile
from store import DocumentStore


TWO_WEEK_PLAN = """Here is your plan:
```json
{
  "prerequisites": ["basic computer literacy"],
  "weeks": [
    {"week": 1, "topics": ["SQL joins"], "practice": ["HackerRank SQL"], "assessment": "Quiz", "project": "Sales DB"},
    {"week": 2, "topics": ["Dashboards"], "practice": ["Build a chart"], "assessment": "Review", "project": "Sales dashboard"}
  ]
}
```
Good luck!"""


class FakeClient:
    """Stands in for GroqClient; answers by prompt type and records every prompt."""

    def __init__(self, explanation="Your skills line up well with this role.", plan=TWO_WEEK_PLAN,
                 extraction=None, fail_titles=(), fail_all=False):
        self.explanation = explanation
        self.plan = plan
        self.extraction = extraction
        self.fail_titles = tuple(fail_titles)
        self.fail_all = fail_all
        self.prompts = []

    def generate(self, prompt):
        self.prompts.append(prompt)
        if self.fail_all or any(f"Job Role: {t}\n" in prompt for t in self.fail_titles):
            raise LLMUpstreamError("AI service internal error")
        if prompt.startswith("You are a skills extractor"):
            return self.extraction
        if "learning path designer" in prompt:
            return self.plan
        return self.explanation


@pytest.fixture
def roles():
    return load_roles(config.ROLES_PATH)


@pytest.fixture
def store(tmp_path):
    s = DocumentStore(f"sqlite:///{tmp_path / 'test.db'}")
    yield s
    s.engine.dispose()


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def analyst_profile():
    return Profile(
        name="Asha",
        education="UG",
        skills=["python", "sql", "excel"],
        interests=["technology"],
        weeklyTime=10,
        budget="free",
        language="en",
    )


@pytest.fixture
def request_body():
    return {
        "uid": "user-123",
        "profile": {
            "name": "  Asha Kumar ",
            "education": "UG",
            "skills": ["Python", "SQL", "MS Excel"],
            "interests": ["Technology"],
            "weeklyTime": 10,
            "budget": "free",
            "language": "en",
        },
    }


@pytest.fixture
def api(store, roles, fake_client):
    import app as app_module

    app_module.app.dependency_overrides[app_module.get_store] = lambda: store
    app_module.app.dependency_overrides[app_module.get_roles] = lambda: roles
    app_module.app.dependency_overrides[app_module.get_llm_client] = lambda: fake_client
    yield TestClient(app_module.app)
    app_module.app.dependency_overrides.clear()


def write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)
