"""
════════════════════════════════════════════════════════════════════════════════
PECOS REQUEST SCHEMAS - Pydantic models for caller-facing validation
════════════════════════════════════════════════════════════════════════════════

Requests arrive as JSON-shaped dicts with camelCase keys (snake_case is
accepted too). The engines assume valid input; these models are the gate.

Schemas:
- ProjectRequest: project record to evaluate (COCOMO, FP, ROI, NPV, IRR, payback)
- DelphiRequest / RegressionRequest: cost estimation
- DecisionTreeRequest: decision tree analysis
- OptimizeRequest / LevelingRequest / ScenarioRequest: resource allocation
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

PROBABILITY_SUM_TOLERANCE = 1e-6


class _Request(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        allow_inf_nan=False,
        extra="ignore",
    )

    def to_wire(self) -> Dict[str, Any]:
        """camelCase dict, the shape the engines' from_dict() accept."""
        return self.model_dump(by_alias=True, exclude_none=True)


# ═══════════════════════════════════════════════════════════════════════════════
# PROJECT
# ═══════════════════════════════════════════════════════════════════════════════

class RiskFactorsInput(_Request):
    technical: float = Field(0.0, ge=0, le=1)
    market: float = Field(0.0, ge=0, le=1)
    organizational: float = Field(0.0, ge=0, le=1)


class FunctionPointCounts(_Request):
    """Raw function-point counts; absent or zero counts use the defaults."""
    inputs: int = Field(10, ge=0)
    outputs: int = Field(8, ge=0)
    inquiries: int = Field(5, ge=0)
    files: int = Field(3, ge=0)
    interfaces: int = Field(2, ge=0)

    @model_validator(mode="after")
    def apply_defaults_for_zero(self) -> "FunctionPointCounts":
        defaults = {"inputs": 10, "outputs": 8, "inquiries": 5, "files": 3, "interfaces": 2}
        for name, default in defaults.items():
            if not getattr(self, name):
                setattr(self, name, default)
        return self


class CostEstimationsInput(_Request):
    expert_judgment: Optional[float] = Field(None, ge=0)


class BudgetingOverrides(_Request):
    total_budget: Optional[float] = Field(None, ge=0)
    projected_revenue: Optional[float] = Field(None, ge=0)


class ProjectRequest(_Request):
    """Project record as supplied by the persistence layer or a form."""

    name: str = Field(..., min_length=1)
    description: str = ""
    team_size: int = Field(1, ge=1)
    estimated_lines_of_code: float = Field(..., ge=0)
    timeframe_months: int = Field(..., ge=1)
    hourly_rate: float = Field(85.0, ge=0)
    risk_factors: Optional[RiskFactorsInput] = None
    function_points: Optional[FunctionPointCounts] = None
    cost_estimations: Optional[CostEstimationsInput] = None
    budgeting_metrics: Optional[BudgetingOverrides] = None

    @field_validator("team_size", "hourly_rate", mode="before")
    @classmethod
    def falsy_to_default(cls, v, info):
        if v in (None, 0, ""):
            return 1 if info.field_name == "team_size" else 85.0
        return v


# ═══════════════════════════════════════════════════════════════════════════════
# COST ESTIMATION
# ═══════════════════════════════════════════════════════════════════════════════

class ExpertEstimateInput(_Request):
    expert_id: str
    optimistic: float = Field(..., ge=0)
    most_likely: float = Field(..., ge=0)
    pessimistic: float = Field(..., ge=0)
    confidence: float = Field(..., ge=0, le=1)

    @model_validator(mode="after")
    def check_order(self) -> "ExpertEstimateInput":
        if not (self.optimistic <= self.most_likely <= self.pessimistic):
            raise ValueError(
                f"Invalid estimate data for expert {self.expert_id}. "
                f"Ensure optimistic <= mostLikely <= pessimistic"
            )
        return self


class DelphiRequest(_Request):
    estimates: List[ExpertEstimateInput] = Field(..., min_length=1)
    iterations: int = Field(3, ge=1)
    risk_factors: Optional[RiskFactorsInput] = None


class HistoricalProjectInput(_Request):
    lines_of_code: float = Field(..., gt=0)
    team_size: float = Field(..., gt=0)
    complexity: float = Field(..., ge=1, le=5)
    actual_cost: float = Field(..., gt=0)
    actual_duration: float = Field(..., gt=0)


class NewProjectInput(_Request):
    lines_of_code: float = Field(..., gt=0)
    team_size: float = Field(..., gt=0)
    complexity: float = Field(..., ge=1, le=5)


class RegressionRequest(_Request):
    historical_data: List[HistoricalProjectInput] = Field(..., min_length=2)
    new_project: NewProjectInput


# ═══════════════════════════════════════════════════════════════════════════════
# DECISION TREE
# ═══════════════════════════════════════════════════════════════════════════════

class DecisionNodeInput(_Request):
    id: str
    name: str
    type: Literal["decision", "chance", "outcome"]
    probability: Optional[float] = Field(None, ge=0, le=1)
    cost: float = 0.0
    value: float = 0.0
    children: List["DecisionNodeInput"] = Field(default_factory=list)

    @model_validator(mode="after")
    def warn_on_probability_sum(self) -> "DecisionNodeInput":
        if self.type == "chance" and self.children:
            total = sum(c.probability or 0.0 for c in self.children)
            if not math.isclose(total, 1.0, abs_tol=PROBABILITY_SUM_TOLERANCE):
                logger.warning(
                    f"Chance node {self.id}: child probabilities sum to {total:.4f}, not 1"
                )
        return self


class DecisionTreeRequest(_Request):
    decision_tree: DecisionNodeInput

    @model_validator(mode="after")
    def check_unique_ids(self) -> "DecisionTreeRequest":
        seen = set()
        pending = [self.decision_tree]
        while pending:
            node = pending.pop()
            if node.id in seen:
                raise ValueError(f"Duplicate decision node id: {node.id}")
            seen.add(node.id)
            pending.extend(node.children)
        return self


# ═══════════════════════════════════════════════════════════════════════════════
# RESOURCE ALLOCATION
# ═══════════════════════════════════════════════════════════════════════════════

class ResourceRequirementInput(_Request):
    resource_id: str
    amount: float = Field(..., ge=0)


class TaskInput(_Request):
    id: str
    name: str
    duration: int = Field(..., ge=0)
    required_resources: List[ResourceRequirementInput] = Field(default_factory=list)
    prerequisites: List[str] = Field(default_factory=list)
    priority: float = 0.0


class ResourceInput(_Request):
    id: str
    name: str
    type: str = ""
    max_capacity: float = Field(..., ge=0)
    hourly_rate: float = Field(0.0, ge=0)
    availability: List[float] = Field(default_factory=list)

    @field_validator("availability")
    @classmethod
    def check_availability(cls, v: List[float]) -> List[float]:
        if any(a < 0 or a > 1 for a in v):
            raise ValueError("availability multipliers must be within [0, 1]")
        return v


class OptimizeRequest(_Request):
    tasks: List[TaskInput]
    resources: List[ResourceInput]
    project_deadline: Optional[int] = Field(None, ge=0)


class ScheduleEntryInput(_Request):
    task_id: str
    start_period: int = Field(..., ge=0)
    end_period: int = Field(..., ge=0)
    assigned_resources: Dict[str, float] = Field(default_factory=dict)


class ScheduleResultInput(_Request):
    schedule: List[ScheduleEntryInput] = Field(default_factory=list)
    resource_utilization: Dict[str, List[float]] = Field(default_factory=dict)
    total_cost: float = 0.0
    project_duration: int = 0
    conflicts: List[str] = Field(default_factory=list)


class LevelingRequest(_Request):
    schedule: ScheduleResultInput
    resources_for_leveling: List[ResourceInput]


class ScenarioInput(_Request):
    resource_multiplier: float = Field(1.0, ge=0)
    budget_constraint: Optional[float] = Field(None, ge=0)
    time_constraint: Optional[int] = Field(None, ge=0)
    quality_requirement: Optional[float] = None


class ScenarioRequest(_Request):
    base_tasks: List[TaskInput]
    base_resources: List[ResourceInput]
    scenarios: List[ScenarioInput] = Field(..., min_length=1)
