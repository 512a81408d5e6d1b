"""Scenario decision rules: deterministic, no LLM, no randomness.

Each rule reads the normalized request (plus its parsed lists) and
produces one piece of the blueprint. Rules are independent and applied
sequentially by the generator.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ...constants import ANOMALY_DETECTION_ADDON
from .connectors import match_connectors, parse_list
from .intake import ScenarioRequest

TITLE_MAX_LENGTH = 80
_TITLE_ELLIPSIS = "..."

FALLBACK_TITLE = "AI-augmented Make scenario for a revenue team"
FALLBACK_TRIGGER_DESCRIPTION = "Incoming business event (lead, ticket, process)."
FALLBACK_MISSION_FLOW = "the target flow"
FALLBACK_MISSION_SOURCES = "the existing tools"
FALLBACK_MISSION_OUTPUTS = "operational deliverables"

DEFAULT_TRIGGER_INPUTS: List[str] = ["CRM", "Support", "Knowledge base", "Product"]
TRIGGER_KICKOFF = "AI agent checks volume and SLA, then activates the matching path."

MATURITY_MODELS: Dict[str, List[str]] = {
    "beginner": ["gpt-4o-mini", "gpt-4o-mini-transcribe"],
    "intermediate": ["gpt-4.1-mini", "gpt-4o-mini-perform"],
    "expert": ["gpt-4.1", "o1-mini"],
}

CADENCE_REALTIME = "Real time, with a retry every 5 minutes on failure."
CADENCE_INTERVAL = "Every 15 minutes, plus manual runs when needed."

PROMPT_BLUEPRINT: List[str] = [
    "Analyse the incoming context (intent, tone, key data).",
    "Generate structured recommendations aligned with the business goals.",
    "Run a quick self-critique to check consistency and guardrails.",
]

BASE_GUARDRAILS: List[str] = [
    "Human validation on critical or sensitive actions.",
    "Strict logging of AI decisions in Airtable/Notion for audit.",
    "Automatic regression tests on every prompt update.",
]
ANOMALY_GUARDRAIL = "Immediate Slack alert when an anomaly is detected on the flows."

BASE_QUICK_WINS: List[str] = [
    "Set up a Make router with AI scoring to classify events.",
    "Automate a rich Slack notification with AI recommendations.",
    "Build an Airtable base to track decisions and feedback.",
]
DASHBOARD_QUICK_WIN = "Publish a mini Looker Studio dashboard based on the generated AI KPIs."
_DASHBOARD_OUTPUT = re.compile(r"dashboard|data", re.IGNORECASE)


# ── Static blueprint content ─────────────────────────────────────────────

INGESTION_STEP: Dict[str, str] = {
    "app": "Make Webhook",
    "module": "Custom Trigger",
    "purpose": "Receive the event (form, ticket, lead) and tag its metadata.",
    "ai_assist": "AI micro-agent classifies the flow and rates its urgency.",
}
ENRICHMENT_STEP: Dict[str, str] = {
    "app": "OpenAI",
    "module": "Responses API",
    "purpose": "Extract key data, detect intents and add contextual enrichment.",
    "ai_assist": "Moderates incoming data and applies the prompt blueprint for the AI persona.",
}
ROUTING_STEP: Dict[str, str] = {
    "app": "Scenario Router",
    "module": "Make Tools",
    "purpose": "Router branch that steers flows (quick win vs expert handling).",
    "ai_assist": "Automatic scoring picks the best path from risk and value.",
}
GENERATION_STEP: Dict[str, str] = {
    "app": "OpenAI",
    "module": "Text Generation",
    "purpose": "Write personalised messages, recommendations or summaries.",
    "ai_assist": "Keeps the configured tone and injects evidence from the sources.",
}

AUTOMATIONS: List[Dict[str, Any]] = [
    {
        "title": "AI steering flow",
        "description": (
            "Central decision pipeline that evaluates every event, assigns a priority "
            "and proposes the best action."
        ),
        "ai_touchpoints": [
            "Multi-criteria evaluation (volume, value, SLA) by an AI agent.",
            "Contextual action plan generated for the humans in the loop.",
            "Automatic monitoring with prompt retuning from feedback.",
        ],
    },
    {
        "title": "Continuous learning loop",
        "description": (
            "Collect feedback (clicks, replies, outcome) to recalibrate the AI strategy "
            "and the scenario filters."
        ),
        "ai_touchpoints": [
            "Lightweight reinforcement rules on the scores.",
            "Sentiment analysis and anomaly detection on the outputs.",
        ],
    },
]

DATA_PRODUCTS: List[Dict[str, Any]] = [
    {
        "name": "AI decision hub",
        "purpose": "Central dashboard of AI decisions, human feedback and business results.",
        "consumers": ["Ops team", "Leadership", "Product manager"],
    },
    {
        "name": "Prompt & results journal",
        "purpose": "History of deployed prompts, their versions and effectiveness metrics.",
        "consumers": ["Make architect", "Data team", "Compliance"],
    },
]

MONITORING: Dict[str, List[str]] = {
    "lead_kpis": [
        "Average reaction time after trigger",
        "Average AI score vs actual score",
        "Acceptance rate of AI recommendations",
    ],
    "lag_kpis": [
        "Revenue or retention impact over 30 days",
        "Net Promoter Score after automation",
        "Volume of manual rework required",
    ],
    "qa": [
        "AI answers compared with human answers",
        "Human escalation rate against benchmark",
        "Input data quality (completeness)",
    ],
}

IMPLEMENTATION_PLAN: List[Dict[str, Any]] = [
    {
        "sprint": "Week 1",
        "focus": "Foundation & data schema",
        "deliverables": [
            "Shared data model and mapping of critical fields",
            "Core tools connected and trigger tests",
            "AI persona and initial prompts defined",
        ],
    },
    {
        "sprint": "Week 2",
        "focus": "Core automations & generative AI",
        "deliverables": [
            "Router and conditional paths built",
            "OpenAI integration for enrichment and content generation",
            "Usage reports and lead KPIs in place",
        ],
    },
    {
        "sprint": "Week 3",
        "focus": "Guardrails & industrialisation",
        "deliverables": [
            "QA test sets + human validation",
            "Recovery playbooks and monitoring guide",
            "Production deploy and feedback retro",
        ],
    },
]


@dataclass
class ScenarioDecisionContext:
    """Normalized request plus the lists parsed out of it."""

    request: ScenarioRequest
    sources: List[str] = field(default_factory=list)
    outputs: List[str] = field(default_factory=list)


def build_decision_context(request: ScenarioRequest) -> ScenarioDecisionContext:
    return ScenarioDecisionContext(
        request=request,
        sources=parse_list(request.data_sources),
        outputs=parse_list(request.outputs),
    )


# ── Pipeline ─────────────────────────────────────────────────────────────

def assemble_pipeline(connectors: List[Dict[str, str]]) -> List[Dict[str, Any]]:
    """Fixed intake + enrichment, matched connectors, then router + generation.

    Orders are 1-based and contiguous: the pipeline has ``4 + len(connectors)`` steps.
    """
    steps = [INGESTION_STEP, ENRICHMENT_STEP, *connectors, ROUTING_STEP, GENERATION_STEP]
    return [{"order": index, **step} for index, step in enumerate(steps, start=1)]


def decide_modules(ctx: ScenarioDecisionContext) -> List[Dict[str, Any]]:
    connectors = match_connectors(ctx.sources, ctx.request.idea, ctx.request.context)
    return assemble_pipeline(connectors)


# ── Prose ────────────────────────────────────────────────────────────────

def decide_title(ctx: ScenarioDecisionContext) -> str:
    idea = ctx.request.idea.strip()
    if len(idea) > TITLE_MAX_LENGTH:
        return idea[: TITLE_MAX_LENGTH - len(_TITLE_ELLIPSIS)] + _TITLE_ELLIPSIS
    return idea or FALLBACK_TITLE


def decide_mission(ctx: ScenarioDecisionContext) -> str:
    flow = ctx.request.idea.strip().lower() or FALLBACK_MISSION_FLOW
    sources = ", ".join(ctx.sources) if ctx.sources else FALLBACK_MISSION_SOURCES
    outputs = ", ".join(ctx.outputs) if ctx.outputs else FALLBACK_MISSION_OUTPUTS
    return (
        f"Build an intelligent Make scenario able to orchestrate {flow}, "
        f"building on {sources} to produce {outputs} with a reliable AI co-pilot."
    )


def decide_orchestration(ctx: ScenarioDecisionContext) -> str:
    return (
        f"A {ctx.request.ai_personality.lower()} AI agent supervises every step "
        "and adjusts the scenario."
    )


# ── Maturity-driven settings ─────────────────────────────────────────────

def decide_models(automation_maturity: str) -> List[str]:
    """Model pair for a maturity level; unknown levels behave as intermediate."""
    return list(MATURITY_MODELS.get(automation_maturity, MATURITY_MODELS["intermediate"]))


def decide_cadence(automation_maturity: str) -> str:
    if automation_maturity == "expert":
        return CADENCE_REALTIME
    return CADENCE_INTERVAL


def decide_trigger(ctx: ScenarioDecisionContext) -> Dict[str, Any]:
    return {
        "description": ctx.request.idea.strip() or FALLBACK_TRIGGER_DESCRIPTION,
        "cadence": decide_cadence(ctx.request.automation_maturity),
        "inputs": list(ctx.sources) if ctx.sources else list(DEFAULT_TRIGGER_INPUTS),
        "kickoff": TRIGGER_KICKOFF,
    }


# ── Guardrails & quick wins ──────────────────────────────────────────────

def decide_guardrails(ctx: ScenarioDecisionContext) -> List[str]:
    guardrails = list(BASE_GUARDRAILS)
    if ANOMALY_DETECTION_ADDON in ctx.request.ai_addons:
        guardrails.append(ANOMALY_GUARDRAIL)
    return guardrails


def decide_quick_wins(ctx: ScenarioDecisionContext) -> List[str]:
    quick_wins = list(BASE_QUICK_WINS)
    if any(_DASHBOARD_OUTPUT.search(item) for item in ctx.outputs):
        quick_wins.append(DASHBOARD_QUICK_WIN)
    return quick_wins
