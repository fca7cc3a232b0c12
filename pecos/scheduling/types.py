"""
PECOS - Scheduling Types
========================

Common value objects for the resource scheduler.

Structure:
- Task, Resource: input of a scheduling run (never mutated)
- ScheduleEntry: one placed task
- ScheduleResult: output of a run (schedule, utilization, cost, conflicts)
- ScenarioParameters / ScenarioResult: what-if runs
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union


# ═══════════════════════════════════════════════════════════════════════════════
# INPUT TYPES
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class ResourceRequirement:
    """Amount of one resource a task holds for its whole duration."""
    resource_id: str
    amount: float

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ResourceRequirement":
        return cls(
            resource_id=str(data.get("resourceId", data.get("resource_id", ""))),
            amount=float(data.get("amount", 0)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"resourceId": self.resource_id, "amount": self.amount}


@dataclass
class Task:
    """A unit of work to schedule."""
    id: str
    name: str
    duration: int                   # Periods
    required_resources: List[ResourceRequirement] = field(default_factory=list)
    prerequisites: List[str] = field(default_factory=list)
    priority: float = 0.0           # Ordering hint only

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Task":
        requirements = data.get("requiredResources", data.get("required_resources")) or []
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", data.get("id", ""))),
            duration=int(data.get("duration", 0)),
            required_resources=[
                r if isinstance(r, ResourceRequirement) else ResourceRequirement.from_dict(r)
                for r in requirements
            ],
            prerequisites=[str(p) for p in data.get("prerequisites") or []],
            priority=float(data.get("priority") or 0.0),
        )

    def copy(self) -> "Task":
        return Task(
            id=self.id,
            name=self.name,
            duration=self.duration,
            required_resources=[
                ResourceRequirement(r.resource_id, r.amount) for r in self.required_resources
            ],
            prerequisites=list(self.prerequisites),
            priority=self.priority,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "duration": self.duration,
            "requiredResources": [r.to_dict() for r in self.required_resources],
            "prerequisites": list(self.prerequisites),
            "priority": self.priority,
        }


@dataclass
class Resource:
    """A capacity-limited resource (person, team, machine, licence...)."""
    id: str
    name: str
    type: str = ""
    max_capacity: float = 0.0
    hourly_rate: float = 0.0
    availability: List[float] = field(default_factory=list)   # Per-period multipliers, cyclic

    def availability_at(self, period: int) -> float:
        """Availability multiplier of a period (1.0 when no profile is given)."""
        if not self.availability:
            return 1.0
        return self.availability[period % len(self.availability)]

    def capacity_at(self, period: int) -> float:
        return self.max_capacity * self.availability_at(period)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Resource":
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", data.get("id", ""))),
            type=str(data.get("type", "")),
            max_capacity=float(data.get("maxCapacity", data.get("max_capacity", 0))),
            hourly_rate=float(data.get("hourlyRate", data.get("hourly_rate", 0))),
            availability=[float(a) for a in data.get("availability") or []],
        )

    def copy(self, **overrides: Any) -> "Resource":
        values = {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "max_capacity": self.max_capacity,
            "hourly_rate": self.hourly_rate,
            "availability": list(self.availability),
        }
        values.update(overrides)
        return Resource(**values)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "maxCapacity": self.max_capacity,
            "hourlyRate": self.hourly_rate,
            "availability": list(self.availability),
        }


TaskLike = Union[Task, Mapping[str, Any]]
ResourceLike = Union[Resource, Mapping[str, Any]]


def coerce_tasks(tasks: Sequence[TaskLike]) -> List[Task]:
    """Fresh Task objects for a run (inputs are copied, never aliased)."""
    return [t.copy() if isinstance(t, Task) else Task.from_dict(t) for t in tasks]


def coerce_resources(resources: Sequence[ResourceLike]) -> List[Resource]:
    return [r.copy() if isinstance(r, Resource) else Resource.from_dict(r) for r in resources]


# ═══════════════════════════════════════════════════════════════════════════════
# OUTPUT TYPES
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class ScheduleEntry:
    """A task placed on the period grid: [start_period, end_period)."""
    task_id: str
    start_period: int
    end_period: int
    assigned_resources: Dict[str, float] = field(default_factory=dict)

    @property
    def duration(self) -> int:
        return self.end_period - self.start_period

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScheduleEntry":
        return cls(
            task_id=str(data.get("taskId", data.get("task_id", ""))),
            start_period=int(data.get("startPeriod", data.get("start_period", 0))),
            end_period=int(data.get("endPeriod", data.get("end_period", 0))),
            assigned_resources={
                str(k): float(v)
                for k, v in (data.get("assignedResources", data.get("assigned_resources")) or {}).items()
            },
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "taskId": self.task_id,
            "startPeriod": self.start_period,
            "endPeriod": self.end_period,
            "assignedResources": dict(self.assigned_resources),
        }


@dataclass
class ScheduleResult:
    """
    Output of a scheduling run.

    Conflicts are diagnostics, not errors: a run always completes, leaving
    infeasible tasks out of the schedule.
    """
    schedule: List[ScheduleEntry] = field(default_factory=list)
    resource_utilization: Dict[str, List[float]] = field(default_factory=dict)
    total_cost: float = 0.0
    project_duration: int = 0
    conflicts: List[str] = field(default_factory=list)

    def entry_for(self, task_id: str) -> Optional[ScheduleEntry]:
        return next((e for e in self.schedule if e.task_id == task_id), None)

    def copy(self) -> "ScheduleResult":
        return ScheduleResult(
            schedule=[
                ScheduleEntry(e.task_id, e.start_period, e.end_period, dict(e.assigned_resources))
                for e in self.schedule
            ],
            resource_utilization={k: list(v) for k, v in self.resource_utilization.items()},
            total_cost=self.total_cost,
            project_duration=self.project_duration,
            conflicts=list(self.conflicts),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScheduleResult":
        return cls(
            schedule=[ScheduleEntry.from_dict(e) for e in data.get("schedule") or []],
            resource_utilization={
                str(k): [float(u) for u in v]
                for k, v in (data.get("resourceUtilization") or {}).items()
            },
            total_cost=float(data.get("totalCost", 0)),
            project_duration=int(data.get("projectDuration", 0)),
            conflicts=[str(c) for c in data.get("conflicts") or []],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schedule": [e.to_dict() for e in self.schedule],
            "resourceUtilization": {k: list(v) for k, v in self.resource_utilization.items()},
            "totalCost": self.total_cost,
            "projectDuration": self.project_duration,
            "conflicts": list(self.conflicts),
        }


# ═══════════════════════════════════════════════════════════════════════════════
# SCENARIOS
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class ScenarioParameters:
    """What-if knobs for one scheduler re-run."""
    resource_multiplier: float = 1.0
    budget_constraint: Optional[float] = None
    time_constraint: Optional[int] = None       # Horizon override
    quality_requirement: Optional[float] = None  # Carried through, not used

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScenarioParameters":
        time_constraint = data.get("timeConstraint", data.get("time_constraint"))
        budget = data.get("budgetConstraint", data.get("budget_constraint"))
        quality = data.get("qualityRequirement", data.get("quality_requirement"))
        return cls(
            resource_multiplier=float(data.get("resourceMultiplier", data.get("resource_multiplier", 1.0))),
            budget_constraint=float(budget) if budget is not None else None,
            time_constraint=int(time_constraint) if time_constraint is not None else None,
            quality_requirement=float(quality) if quality is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"resourceMultiplier": self.resource_multiplier}
        if self.budget_constraint is not None:
            data["budgetConstraint"] = self.budget_constraint
        if self.time_constraint is not None:
            data["timeConstraint"] = self.time_constraint
        if self.quality_requirement is not None:
            data["qualityRequirement"] = self.quality_requirement
        return data


@dataclass
class ScenarioMetrics:
    efficiency: float = 0.0
    risk_level: float = 0.0
    within_budget: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"efficiency": self.efficiency, "riskLevel": self.risk_level}
        if self.within_budget is not None:
            data["withinBudget"] = self.within_budget
        return data


@dataclass
class ScenarioResult:
    scenario: ScenarioParameters
    result: ScheduleResult
    metrics: ScenarioMetrics

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scenario": self.scenario.to_dict(),
            "result": self.result.to_dict(),
            "metrics": self.metrics.to_dict(),
        }
