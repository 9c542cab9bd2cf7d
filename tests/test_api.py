"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from prompt_discipline.api.server import app


@pytest.fixture
def client(monkeypatch, mock_claude_dir, temp_dir):
    monkeypatch.setenv("CLAUDE_CONFIG_DIR", str(mock_claude_dir))
    monkeypatch.setenv("PREFLIGHT_HOME", str(temp_dir / "runtime"))
    return TestClient(app)


class TestServer:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_root(self, client):
        assert client.get("/").json()["name"] == "Prompt Discipline"


class TestTriageRoutes:
    def test_vague_prompt(self, client):
        response = client.post("/api/triage", json={"prompt": "fix it"})

        assert response.status_code == 200
        body = response.json()
        assert body["level"] == "ambiguous"
        assert body["recommendedTools"] == ["clarify-intent", "scope-work"]
        assert body["crossServiceHits"] is None

    def test_empty_prompt_is_rejected(self, client):
        assert client.post("/api/triage", json={"prompt": ""}).status_code == 422

    def test_unknown_strictness_is_rejected(self, client):
        response = client.post("/api/triage", json={"prompt": "fix it", "strictness": "paranoid"})
        assert response.status_code == 422

    def test_missing_project_path(self, client, temp_dir):
        response = client.post(
            "/api/triage",
            json={"prompt": "fix it", "projectPath": str(temp_dir / "nope")},
        )
        assert response.status_code == 404

    def test_project_config_is_used(self, client, temp_dir):
        config_dir = temp_dir / "project" / ".preflight"
        config_dir.mkdir(parents=True)
        (config_dir / "triage.yml").write_text("rules:\n  skip:\n    - deploy\n")

        response = client.post(
            "/api/triage",
            json={"prompt": "deploy", "projectPath": str(temp_dir / "project")},
        )

        assert response.json()["reasons"] == ["matches skip keyword: deploy"]


class TestScorecardRoutes:
    def test_scorecard(self, client):
        response = client.post("/api/scorecard", json={"project": "demo"})

        assert response.status_code == 200
        body = response.json()
        assert body["kind"] == "scorecard"
        assert len(body["categories"]) == 12
        assert body["text"].startswith("# 📊 Prompt Discipline Scorecard")

    def test_no_sessions(self, client):
        body = client.post("/api/scorecard", json={"project": "missing"}).json()

        assert body["kind"] == "empty"
        assert body["categories"] == []

    def test_baseline_after_scorecard(self, client):
        client.post("/api/scorecard", json={"project": "demo"})

        response = client.get("/api/baseline/demo")

        assert response.status_code == 200
        assert response.json()["sessionCount"] == 1

    def test_unknown_baseline(self, client):
        assert client.get("/api/baseline/unknown").status_code == 404
