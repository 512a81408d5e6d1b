"""Prompts for the completion-service path of the Scenario Agent.

The system prompt pins the blueprint schema; the user prompt carries the
normalized request as a JSON document.
"""

from __future__ import annotations

import json

from .rules import ScenarioDecisionContext

SYSTEM_PROMPT = """You are a senior Make (Integromat) automation architect.
You produce implementation-ready scenario blueprints: concise, exhaustive, in English.
AI is the core of every scenario you design.

Respond ONLY with a valid JSON object, no extra text, matching this schema exactly:
{
  "title": string,
  "mission": string,
  "aiBrain": {"orchestration": string, "models": [string], "promptBlueprint": [string], "safeguards": [string]},
  "trigger": {"description": string, "cadence": string, "inputs": [string], "kickoff": string},
  "modules": [{"order": int (1-based, contiguous), "app": string, "module": string, "purpose": string, "aiAssist": string}],
  "automations": [{"title": string, "description": string, "aiTouchpoints": [string]}],
  "dataProducts": [{"name": string, "purpose": string, "consumers": [string]}],
  "monitoring": {"leadKpis": [string], "lagKpis": [string], "qa": [string]},
  "implementation": [{"sprint": string, "focus": string, "deliverables": [string]}],
  "guardrails": [string],
  "quickWins": [string]
}
"""


def build_user_prompt(ctx: ScenarioDecisionContext) -> str:
    """Serialize the request for the model; lists are sent pre-parsed."""
    request = ctx.request
    return json.dumps(
        {
            "brief": request.idea,
            "businessContext": request.context,
            "dataSources": ctx.sources,
            "outputs": ctx.outputs,
            "aiPersonality": request.ai_personality,
            "tone": request.tone,
            "automationMaturity": request.automation_maturity,
            "painPoints": request.pain_points,
            "aiAddons": request.ai_addons,
        },
        ensure_ascii=False,
    )
