"""Centralized constants shared across the scenario agent and routes.

This module is the SINGLE SOURCE OF TRUTH for automation maturity levels,
the AI add-on catalog, and the form presets. Reused by:
  - Scenario Agent (intake + rules)
  - Scenario routes (GET /scenario/options)
  - Frontend form (mirrored in the client)
"""

from __future__ import annotations

# ── Automation maturity ─────────────────────────────────────────────────
# Single-select. Anything else is normalized to DEFAULT_AUTOMATION_MATURITY.

AUTOMATION_MATURITY_LEVELS: list[str] = [
    "beginner",
    "intermediate",
    "expert",
]

DEFAULT_AUTOMATION_MATURITY = "intermediate"


# ── AI add-ons ──────────────────────────────────────────────────────────
# Multi-select. Labels are matched verbatim by the rules engine.

ANOMALY_DETECTION_ADDON = "Anomaly detection"

AI_ADDONS: list[str] = [
    "Sentiment analysis",
    "Priority scoring",
    "Smart upsell",
    ANOMALY_DETECTION_ADDON,
    "Automatic summary",
    "Message generation",
    "Lead qualification",
    "Live translation",
]


# ── Request defaults ────────────────────────────────────────────────────

DEFAULT_AI_PERSONALITY = "Reliable AI architect"
DEFAULT_TONE = "Professional and concrete"


# ── Idea presets (form shortcuts) ───────────────────────────────────────

IDEA_PRESETS: list[dict[str, str]] = [
    {
        "title": "B2B lead nurturing",
        "description": (
            "Turn inbound website leads into personalised sequences automatically, "
            "with smart scoring and CRM synchronisation."
        ),
    },
    {
        "title": "Multichannel customer support",
        "description": (
            "Unify Slack, email and support-desk tickets to route requests and "
            "suggest contextual AI answers."
        ),
    },
    {
        "title": "SaaS onboarding",
        "description": (
            "Automate SaaS customer onboarding by connecting billing, product usage "
            "and proactive AI-driven alerts."
        ),
    },
]
