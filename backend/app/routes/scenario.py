"""Scenario routes: generate and export automation blueprints.

Endpoints:
  POST /scenario/generate   — Blueprint via OpenAI when configured, rules otherwise
  POST /scenario/fallback   — Blueprint via deterministic rules only
  POST /scenario/export     — Markdown export of a blueprint
  GET  /scenario/options    — Form options (maturity levels, add-ons, presets)
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import PlainTextResponse

from ..agents.scenario_agent.generator import ScenarioParseError, generate_scenario, synthesize
from ..agents.scenario_agent.intake import ScenarioValidationError, normalize_scenario_request
from ..agents.scenario_agent.schema import ScenarioBlueprint
from ..constants import AI_ADDONS, AUTOMATION_MATURITY_LEVELS, DEFAULT_AUTOMATION_MATURITY, IDEA_PRESETS
from ..services.blueprint_export import render_blueprint_markdown

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/scenario",
    tags=["Scenario"],
)


# ── Helpers ──────────────────────────────────────────────────────────────

async def _read_body(request: Request) -> Any:
    """Decode the JSON body; undecodable bodies are reported as invalid payloads."""
    try:
        return await request.json()
    except ValueError as exc:
        raise ScenarioValidationError("Invalid payload: expected a JSON object.") from exc


def _bad_request(exc: ScenarioValidationError) -> HTTPException:
    logger.warning("Scenario request rejected: %s", exc)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


# ── Routes ───────────────────────────────────────────────────────────────

@router.post(
    "/generate",
    response_model=ScenarioBlueprint,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Generate Automation Blueprint",
    response_description="Automation blueprint (camelCase JSON)",
)
async def generate(request: Request) -> ScenarioBlueprint:
    """Generate a blueprint for a business problem.

    Rules:
    - OPENAI_API_KEY set and reachable → completion-service blueprint
    - Otherwise → deterministic rules blueprint
    - Unparseable service answer → 502
    """
    try:
        scenario_request = normalize_scenario_request(await _read_body(request))
    except ScenarioValidationError as exc:
        raise _bad_request(exc)

    try:
        return await generate_scenario(scenario_request)
    except ScenarioParseError as exc:
        logger.error("Scenario generation failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to parse the AI response.",
        )


@router.post(
    "/fallback",
    response_model=ScenarioBlueprint,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Generate Rules-Based Blueprint",
    response_description="Automation blueprint from the deterministic rules engine",
)
async def generate_fallback(request: Request) -> ScenarioBlueprint:
    """Generate a blueprint without calling any external service."""
    try:
        return synthesize(await _read_body(request))
    except ScenarioValidationError as exc:
        raise _bad_request(exc)


@router.post(
    "/export",
    response_class=PlainTextResponse,
    summary="Export Blueprint as Markdown",
)
async def export_blueprint(blueprint: ScenarioBlueprint) -> PlainTextResponse:
    """Render a blueprint as a Markdown document."""
    return PlainTextResponse(render_blueprint_markdown(blueprint), media_type="text/markdown")


@router.get(
    "/options",
    summary="Scenario Form Options",
)
async def options() -> dict:
    """Choices offered by the scenario form."""
    return {
        "automationMaturityLevels": AUTOMATION_MATURITY_LEVELS,
        "defaultAutomationMaturity": DEFAULT_AUTOMATION_MATURITY,
        "aiAddons": AI_ADDONS,
        "ideaPresets": IDEA_PRESETS,
    }
