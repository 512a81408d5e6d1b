"""Scenario Generator Agent: automation blueprint generation.

Two producers share the ScenarioBlueprint contract:
  1. Completion service (OpenAI) when OPENAI_API_KEY is configured and reachable
  2. Deterministic rules (`generate_fallback_scenario`) otherwise

The rules path has no I/O and no randomness; the only non-deterministic
value is meta.createdAt, read from an injectable clock.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Callable

from pydantic import ValidationError

from ...services.openai_client import (
    call_openai_chat_async,
    get_openai_model,
    is_openai_available,
    sanitize_json,
)
from .intake import ScenarioRequest, normalize_scenario_request
from .prompts import SYSTEM_PROMPT, build_user_prompt
from .rules import (
    AUTOMATIONS,
    DATA_PRODUCTS,
    IMPLEMENTATION_PLAN,
    MONITORING,
    PROMPT_BLUEPRINT,
    build_decision_context,
    decide_guardrails,
    decide_mission,
    decide_models,
    decide_modules,
    decide_orchestration,
    decide_quick_wins,
    decide_title,
    decide_trigger,
)
from .schema import BlueprintMeta, ScenarioBlueprint

FALLBACK_PROVIDER = "architect-rules"
OPENAI_PROVIDER = "openai"

Clock = Callable[[], datetime]


class ScenarioParseError(RuntimeError):
    """The completion service answered, but not with a usable blueprint."""


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with milliseconds and a Z suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def generate_fallback_scenario(request: ScenarioRequest, *, clock: Clock = utc_now) -> ScenarioBlueprint:
    """Build a complete blueprint from the request using deterministic rules."""
    ctx = build_decision_context(request)
    print(
        f"🛠️ [SCENARIO] Rules fallback: maturity={request.automation_maturity}, "
        f"sources={len(ctx.sources)}, outputs={len(ctx.outputs)}"
    )

    # ── Apply deterministic rules ─────────────────────────────
    modules = decide_modules(ctx)
    guardrails = decide_guardrails(ctx)
    quick_wins = decide_quick_wins(ctx)
    print(f"🛠️ [SCENARIO] Pipeline assembled: {len(modules)} modules")

    # ── Assemble blueprint ────────────────────────────────────
    blueprint = ScenarioBlueprint(
        title=decide_title(ctx),
        mission=decide_mission(ctx),
        ai_brain={
            "orchestration": decide_orchestration(ctx),
            "models": decide_models(request.automation_maturity),
            "prompt_blueprint": PROMPT_BLUEPRINT,
            "safeguards": guardrails,
        },
        trigger=decide_trigger(ctx),
        modules=modules,
        automations=AUTOMATIONS,
        data_products=DATA_PRODUCTS,
        monitoring=MONITORING,
        implementation=IMPLEMENTATION_PLAN,
        guardrails=guardrails,
        quick_wins=quick_wins,
        meta=BlueprintMeta(provider=FALLBACK_PROVIDER, created_at=format_timestamp(clock())),
    )

    print(f"✅ [SCENARIO] Blueprint generated: provider={FALLBACK_PROVIDER}")
    return blueprint


def synthesize(raw_input: Any, *, clock: Clock = utc_now) -> ScenarioBlueprint:
    """Normalize an untyped payload and run the rules generator.

    Raises
    ------
    ScenarioValidationError
        If the payload is not an object or has no usable idea.
    """
    return generate_fallback_scenario(normalize_scenario_request(raw_input), clock=clock)


def parse_completion_blueprint(raw_text: str, *, model: str, clock: Clock = utc_now) -> ScenarioBlueprint:
    """Turn completion text into a blueprint whose meta identifies the service.

    Raises
    ------
    ScenarioParseError
        If no JSON object can be extracted or it does not fit the schema.
    """
    try:
        parsed = json.loads(sanitize_json(raw_text))
    except ValueError as exc:  # json.JSONDecodeError is a ValueError
        raise ScenarioParseError(f"Completion is not valid JSON: {exc}") from exc

    if not isinstance(parsed, dict):
        raise ScenarioParseError("Completion JSON is not an object.")

    parsed["meta"] = {
        "provider": OPENAI_PROVIDER,
        "model": model,
        "createdAt": format_timestamp(clock()),
    }
    try:
        return ScenarioBlueprint.model_validate(parsed)
    except ValidationError as exc:
        raise ScenarioParseError(
            f"Completion does not match the blueprint schema ({exc.error_count()} errors)."
        ) from exc


async def generate_scenario(request: ScenarioRequest, *, clock: Clock = utc_now) -> ScenarioBlueprint:
    """Generate a blueprint, preferring the completion service when configured.

    Falls back to the rules generator when no key is set or the service
    cannot be reached.

    Raises
    ------
    ScenarioParseError
        If the service answered with text that is not a valid blueprint.
    """
    if not is_openai_available():
        print("⚠️  [SCENARIO] OPENAI_API_KEY not set: using rules fallback")
        return generate_fallback_scenario(request, clock=clock)

    ctx = build_decision_context(request)
    messages = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_user_prompt(ctx)},
    ]
    model = get_openai_model(request.automation_maturity)

    print(f"🧠 [SCENARIO] Calling OpenAI (model={model})")
    completion = await call_openai_chat_async(messages=messages, model=model)
    if completion is None:
        print("⚠️  [SCENARIO] OpenAI unreachable: using rules fallback")
        return generate_fallback_scenario(request, clock=clock)

    blueprint = parse_completion_blueprint(completion.content, model=completion.model, clock=clock)
    print(f"✅ [SCENARIO] Blueprint generated: provider={OPENAI_PROVIDER}, modules={len(blueprint.modules)}")
    return blueprint
