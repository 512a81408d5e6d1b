"""Scenario route tests — generate, fallback, export, options, error mapping."""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import json
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from app.agents.scenario_agent.generator import synthesize
from app.constants import AI_ADDONS, AUTOMATION_MATURITY_LEVELS
from app.main import app
from app.services.openai_client import ChatCompletion

client = TestClient(app)

EXAMPLE_PAYLOAD = {
    "idea": "Leads entrants non qualifies",
    "dataSources": "HubSpot, Slack",
    "outputs": "alertes Slack",
    "automationMaturity": "expert",
    "aiAddons": [],
}


@pytest.fixture(autouse=True)
def no_openai_key(monkeypatch):
    """Rules path unless a test opts in."""
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_MODEL", raising=False)


# ---------------------------------------------------------------------------
# POST /scenario/generate
# ---------------------------------------------------------------------------

class TestGenerate:
    def test_rules_blueprint_without_key(self):
        res = client.post("/scenario/generate", json=EXAMPLE_PAYLOAD)

        assert res.status_code == 200, res.text
        data = res.json()
        assert data["meta"]["provider"] == "architect-rules"
        assert "model" not in data["meta"]
        assert data["meta"]["createdAt"].endswith("Z")
        assert [m["order"] for m in data["modules"]] == [1, 2, 3, 4, 5, 6]
        assert data["aiBrain"]["models"] == ["gpt-4.1", "o1-mini"]
        assert len(data["quickWins"]) == 3
        assert "aiAssist" in data["modules"][0]

    @pytest.mark.parametrize("body", [{}, {"idea": "   "}, {"idea": 5}])
    def test_missing_idea_is_400(self, body):
        res = client.post("/scenario/generate", json=body)
        assert res.status_code == 400
        assert "describe the idea" in res.json()["detail"]

    @pytest.mark.parametrize("body", [["idea"], "idea", 3, None])
    def test_non_object_body_is_400(self, body):
        res = client.post("/scenario/generate", json=body)
        assert res.status_code == 400
        assert "expected a JSON object" in res.json()["detail"]

    def test_undecodable_body_is_400(self):
        res = client.post(
            "/scenario/generate",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert res.status_code == 400

    def test_service_blueprint_with_key(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        wire = synthesize({"idea": "Qualify inbound leads"}).to_wire()
        wire.pop("meta")
        wire["title"] = "From the service"
        completion = ChatCompletion(content="```json\n" + json.dumps(wire) + "\n```", model="gpt-4.1-2025-04-14")

        with patch(
            "app.agents.scenario_agent.generator.call_openai_chat_async",
            new=AsyncMock(return_value=completion),
        ):
            res = client.post("/scenario/generate", json=EXAMPLE_PAYLOAD)

        assert res.status_code == 200, res.text
        data = res.json()
        assert data["title"] == "From the service"
        assert data["meta"]["provider"] == "openai"
        assert data["meta"]["model"] == "gpt-4.1-2025-04-14"

    def test_unparseable_service_answer_is_502(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        with patch(
            "app.agents.scenario_agent.generator.call_openai_chat_async",
            new=AsyncMock(return_value=ChatCompletion(content="no json", model="gpt-4.1")),
        ):
            res = client.post("/scenario/generate", json=EXAMPLE_PAYLOAD)

        assert res.status_code == 502
        assert res.json()["detail"] == "Failed to parse the AI response."

    def test_unreachable_service_falls_back(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        with patch(
            "app.agents.scenario_agent.generator.call_openai_chat_async",
            new=AsyncMock(return_value=None),
        ):
            res = client.post("/scenario/generate", json=EXAMPLE_PAYLOAD)

        assert res.status_code == 200
        assert res.json()["meta"]["provider"] == "architect-rules"


# ---------------------------------------------------------------------------
# POST /scenario/fallback
# ---------------------------------------------------------------------------

class TestFallback:
    def test_ignores_configured_key(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        with patch(
            "app.agents.scenario_agent.generator.call_openai_chat_async", new=AsyncMock()
        ) as mocked:
            res = client.post("/scenario/fallback", json={"idea": "x" * 21})

        mocked.assert_not_called()
        assert res.status_code == 200
        data = res.json()
        assert len(data["modules"]) == 4
        assert data["trigger"]["inputs"] == ["CRM", "Support", "Knowledge base", "Product"]

    def test_blank_idea_is_400(self):
        assert client.post("/scenario/fallback", json={"idea": ""}).status_code == 400


# ---------------------------------------------------------------------------
# POST /scenario/export
# ---------------------------------------------------------------------------

class TestExport:
    def test_generated_blueprint_exports_to_markdown(self):
        blueprint = client.post("/scenario/fallback", json=EXAMPLE_PAYLOAD).json()

        res = client.post("/scenario/export", json=blueprint)

        assert res.status_code == 200
        assert res.headers["content-type"].startswith("text/markdown")
        assert res.text.startswith("# Leads entrants non qualifies")
        assert "- 3. HubSpot - Create/Update Contact:" in res.text

    def test_incomplete_blueprint_is_422(self):
        assert client.post("/scenario/export", json={"title": "only"}).status_code == 422


# ---------------------------------------------------------------------------
# GET /scenario/options, /, /health
# ---------------------------------------------------------------------------

class TestInfoEndpoints:
    def test_options(self):
        data = client.get("/scenario/options").json()
        assert data["automationMaturityLevels"] == AUTOMATION_MATURITY_LEVELS
        assert data["defaultAutomationMaturity"] == "intermediate"
        assert data["aiAddons"] == AI_ADDONS
        assert "Anomaly detection" in data["aiAddons"]
        assert len(data["ideaPresets"]) == 3

    def test_root_and_health(self):
        assert client.get("/").json()["name"] == "AI Scenario Architect"
        assert client.get("/health").json()["status"] == "healthy"

    def test_health_names_the_service(self):
        assert client.get("/health").json()["service"] == "ai-scenario-architect"

    def test_cors_origins_read_from_env(self, monkeypatch):
        from app.main import _cors_origins

        monkeypatch.setenv("CORS_ORIGINS", "https://a.example, ,https://b.example")
        assert _cors_origins() == ["https://a.example", "https://b.example"]
