"""Markdown export of a scenario blueprint.

Walks every blueprint section in contract order; needs nothing beyond the
blueprint itself.
"""

from __future__ import annotations

from typing import List

from ..agents.scenario_agent.schema import ScenarioBlueprint


def render_blueprint_markdown(blueprint: ScenarioBlueprint) -> str:
    brain = blueprint.ai_brain
    trigger = blueprint.trigger
    lines: List[str] = [
        f"# {blueprint.title}",
        "",
        f"**Mission**: {blueprint.mission}",
        "",
        "## AI brain",
        f"- Orchestration: {brain.orchestration}",
        f"- Models: {', '.join(brain.models)}",
        f"- Safeguards: {', '.join(brain.safeguards)}",
        "",
        "### Prompt blueprint",
        *(f"- {step}" for step in brain.prompt_blueprint),
        "",
        "## Trigger",
        f"- Description: {trigger.description}",
        f"- Cadence: {trigger.cadence}",
        f"- Inputs: {', '.join(trigger.inputs)}",
        f"- Kick-off: {trigger.kickoff}",
        "",
        "## Make modules",
    ]

    for module in blueprint.modules:
        lines.append(
            f"- {module.order}. {module.app} - {module.module}: {module.purpose} | AI: {module.ai_assist}"
        )

    lines += ["", "## Cognitive automations"]
    for automation in blueprint.automations:
        lines.append(f"- {automation.title}: {automation.description}")
        lines.extend(f"  - AI: {touch}" for touch in automation.ai_touchpoints)

    lines += ["", "## Data products"]
    for product in blueprint.data_products:
        lines.append(f"- {product.name}: {product.purpose} (consumers: {', '.join(product.consumers)})")

    monitoring = blueprint.monitoring
    lines += [
        "",
        "## Monitoring",
        f"- Lead KPIs: {', '.join(monitoring.lead_kpis)}",
        f"- Lag KPIs: {', '.join(monitoring.lag_kpis)}",
        f"- Quality: {', '.join(monitoring.qa)}",
    ]

    lines += ["", "## Implementation"]
    for sprint in blueprint.implementation:
        lines.append(f"- {sprint.sprint}: {sprint.focus}")
        lines.extend(f"  - {deliverable}" for deliverable in sprint.deliverables)

    lines += ["", "## AI guardrails"]
    lines.extend(f"- {guardrail}" for guardrail in blueprint.guardrails)

    lines += ["", "## Quick wins"]
    lines.extend(f"- {win}" for win in blueprint.quick_wins)

    return "\n".join(lines)
