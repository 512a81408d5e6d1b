"""Scenario Blueprint schema: strict output contract.

Both the rules-based fallback and the completion-service path must return
this exact shape. Field names are snake_case in Python and camelCase on
the wire (``aiBrain``, ``quickWins``, ``createdAt``...).
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _BlueprintModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class AIBrain(_BlueprintModel):
    orchestration: str = Field(..., description="How the supervising AI agent drives the scenario")
    models: List[str] = Field(..., description="Model identifiers, chosen from automation maturity")
    prompt_blueprint: List[str] = Field(..., description="Ordered prompt steps")
    safeguards: List[str] = Field(..., description="Ordered guardrail strings")


class ScenarioTrigger(_BlueprintModel):
    description: str
    cadence: str
    inputs: List[str]
    kickoff: str


class ScenarioModule(_BlueprintModel):
    order: int = Field(..., ge=1, description="1-based position in the pipeline")
    app: str
    module: str
    purpose: str
    ai_assist: str


class CognitiveAutomation(_BlueprintModel):
    title: str
    description: str
    ai_touchpoints: List[str]


class DataProduct(_BlueprintModel):
    name: str
    purpose: str
    consumers: List[str]


class MonitoringPlan(_BlueprintModel):
    lead_kpis: List[str]
    lag_kpis: List[str]
    qa: List[str]


class SprintPlan(_BlueprintModel):
    sprint: str
    focus: str
    deliverables: List[str]


class BlueprintMeta(_BlueprintModel):
    provider: str = Field(..., description="'architect-rules' for the fallback, 'openai' otherwise")
    model: Optional[str] = Field(default=None, description="Model reported by the completion service")
    created_at: str = Field(..., description="ISO-8601 UTC creation timestamp")


class ScenarioBlueprint(_BlueprintModel):
    """Locked automation blueprint schema. Do NOT add or remove fields."""

    title: str
    mission: str
    ai_brain: AIBrain
    trigger: ScenarioTrigger
    modules: List[ScenarioModule]
    automations: List[CognitiveAutomation]
    data_products: List[DataProduct]
    monitoring: MonitoringPlan
    implementation: List[SprintPlan]
    guardrails: List[str]
    quick_wins: List[str]
    meta: BlueprintMeta

    def to_wire(self) -> dict:
        """camelCase JSON-ready dict, without unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)
