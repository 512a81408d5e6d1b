"""Markdown export tests."""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import datetime, timezone

from app.agents.scenario_agent.generator import synthesize
from app.services.blueprint_export import render_blueprint_markdown

SECTIONS = [
    "## AI brain",
    "### Prompt blueprint",
    "## Trigger",
    "## Make modules",
    "## Cognitive automations",
    "## Data products",
    "## Monitoring",
    "## Implementation",
    "## AI guardrails",
    "## Quick wins",
]


def _blueprint(**payload):
    payload.setdefault("idea", "Triage Zendesk tickets")
    return synthesize(payload, clock=lambda: datetime(2026, 1, 1, tzinfo=timezone.utc))


def test_sections_in_contract_order():
    markdown = render_blueprint_markdown(_blueprint())
    positions = [markdown.index(section) for section in SECTIONS]
    assert positions == sorted(positions)
    assert markdown.startswith("# Triage Zendesk tickets\n\n**Mission**: ")


def test_every_module_and_list_item_rendered():
    blueprint = _blueprint(dataSources="Zendesk, Notion", aiAddons=["Anomaly detection"], outputs="dashboard")
    markdown = render_blueprint_markdown(blueprint)

    for module in blueprint.modules:
        assert f"- {module.order}. {module.app} - {module.module}: {module.purpose} | AI: {module.ai_assist}" in markdown
    for guardrail in blueprint.guardrails:
        assert f"- {guardrail}" in markdown
    for win in blueprint.quick_wins:
        assert f"- {win}" in markdown
    for sprint in blueprint.implementation:
        assert f"- {sprint.sprint}: {sprint.focus}" in markdown
        for deliverable in sprint.deliverables:
            assert f"  - {deliverable}" in markdown
    for touch in blueprint.automations[1].ai_touchpoints:
        assert f"  - AI: {touch}" in markdown
    assert "- Inputs: Zendesk, Notion" in markdown
    assert f"- Models: {', '.join(blueprint.ai_brain.models)}" in markdown


def test_monitoring_lines():
    blueprint = _blueprint()
    markdown = render_blueprint_markdown(blueprint)
    assert f"- Lead KPIs: {', '.join(blueprint.monitoring.lead_kpis)}" in markdown
    assert f"- Lag KPIs: {', '.join(blueprint.monitoring.lag_kpis)}" in markdown
    assert f"- Quality: {', '.join(blueprint.monitoring.qa)}" in markdown
