"""Scenario request intake: validation with safe defaults.

Turns an arbitrary decoded JSON body into a canonical ScenarioRequest.
Only a missing / blank idea (or a non-object body) is an error; every
other malformed field is silently replaced by its documented default.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple

from ...constants import (
    AUTOMATION_MATURITY_LEVELS,
    DEFAULT_AI_PERSONALITY,
    DEFAULT_AUTOMATION_MATURITY,
    DEFAULT_TONE,
)


class ScenarioValidationError(ValueError):
    """Raised when a scenario request cannot be normalized."""


@dataclass(frozen=True)
class ScenarioRequest:
    """Canonical, immutable scenario request."""

    idea: str
    context: str = ""
    pain_points: str = ""
    data_sources: str = ""
    outputs: str = ""
    ai_personality: str = DEFAULT_AI_PERSONALITY
    tone: str = DEFAULT_TONE
    automation_maturity: str = DEFAULT_AUTOMATION_MATURITY
    ai_addons: Tuple[str, ...] = ()


def _text_or_default(value: Any, default: str) -> str:
    return value if isinstance(value, str) else default


def normalize_scenario_request(raw: Any) -> ScenarioRequest:
    """Validate a raw payload and return a ScenarioRequest.

    Raises
    ------
    ScenarioValidationError
        If the payload is not an object, or ``idea`` is missing, not text,
        or blank after trimming.
    """
    if not isinstance(raw, dict):
        raise ScenarioValidationError("Invalid payload: expected a JSON object.")

    idea = raw.get("idea")
    if not isinstance(idea, str) or not idea.strip():
        raise ScenarioValidationError("Please describe the idea or problem to automate.")

    maturity = raw.get("automationMaturity")
    if maturity not in AUTOMATION_MATURITY_LEVELS:
        maturity = DEFAULT_AUTOMATION_MATURITY

    addons = raw.get("aiAddons")
    if isinstance(addons, list):
        addons = tuple(item for item in addons if isinstance(item, str))
    else:
        addons = ()

    return ScenarioRequest(
        idea=idea,
        context=_text_or_default(raw.get("context"), ""),
        pain_points=_text_or_default(raw.get("painPoints"), ""),
        data_sources=_text_or_default(raw.get("dataSources"), ""),
        outputs=_text_or_default(raw.get("outputs"), ""),
        ai_personality=_text_or_default(raw.get("aiPersonality"), DEFAULT_AI_PERSONALITY),
        tone=_text_or_default(raw.get("tone"), DEFAULT_TONE),
        automation_maturity=maturity,
        ai_addons=addons,
    )
