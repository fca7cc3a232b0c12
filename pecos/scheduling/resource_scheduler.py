"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
                    PECOS — GREEDY RESOURCE-CONSTRAINED SCHEDULER
═══════════════════════════════════════════════════════════════════════════════════════════════════════

Serial schedule generation on a discrete period grid [0, H).

    H = project_deadline or default horizon (100)

For each task in prerequisite order:

    earliest = max(end(prereq) for scheduled prerequisites)       (0 if none)

    start = min { s ∈ [earliest, H - duration] :
                  ∀ requirement r, ∀ p ∈ [s, s + duration):
                      r.resource exists  ∧
                      util[r][p] + r.amount ≤ maxCapacity[r] · availability[r][p mod len] }

    feasible  → commit r.amount to util[r][s .. s+duration), append entry
    otherwise → conflict "Cannot schedule task {name} - insufficient resources"

Totals:

    totalCost       = Σ_entries Σ_r  amount · hourlyRate · (end - start)
    projectDuration = max(end)                                   (0 if empty)

The scheduler is greedy (first feasible start, no backtracking) and never
raises for infeasibility; it reports conflicts and keeps going.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Sequence, Union

import numpy as np

from ..feature_flags import FeatureFlags
from .ordering import topological_order
from .types import (
    Resource,
    ResourceLike,
    ScheduleEntry,
    ScheduleResult,
    Task,
    TaskLike,
    coerce_resources,
    coerce_tasks,
)

logger = logging.getLogger(__name__)


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# HELPERS
# ════════════════════════════════════════════════════════════════════════════════════════════════════

def available_capacity(resource: Resource, period: int) -> float:
    """Capacity of a resource in a period: maxCapacity × availability[period mod len]."""
    return resource.capacity_at(period)


def earliest_start(
    task: Task,
    schedule: Union[Mapping[str, ScheduleEntry], Sequence[ScheduleEntry]],
) -> int:
    """Earliest start allowed by the already-scheduled prerequisites of a task."""
    if not isinstance(schedule, Mapping):
        placed: Dict[str, ScheduleEntry] = {}
        for entry in schedule:
            placed.setdefault(entry.task_id, entry)
        schedule = placed

    earliest = 0
    for prerequisite in task.prerequisites:
        entry = schedule.get(prerequisite)
        if entry is not None:
            earliest = max(earliest, entry.end_period)
    return earliest


def _capacity_profile(resource: Resource, horizon: int) -> np.ndarray:
    return np.array([available_capacity(resource, p) for p in range(horizon)], dtype=float)


def _demand(task: Task) -> Dict[str, float]:
    """Total amount per resource (repeated requirements add up)."""
    demand: Dict[str, float] = {}
    for requirement in task.required_resources:
        demand[requirement.resource_id] = demand.get(requirement.resource_id, 0.0) + requirement.amount
    return demand


def _fits(
    demand: Dict[str, float],
    start: int,
    end: int,
    utilization: Dict[str, np.ndarray],
    capacity: Dict[str, np.ndarray],
) -> bool:
    for resource_id, amount in demand.items():
        if resource_id not in capacity:
            return False
        usage = utilization[resource_id][start:end] + amount
        if np.any(usage > capacity[resource_id][start:end]):
            return False
    return True


def _find_start(
    task: Task,
    demand: Dict[str, float],
    earliest: int,
    horizon: int,
    utilization: Dict[str, np.ndarray],
    capacity: Dict[str, np.ndarray],
) -> Optional[int]:
    for start in range(earliest, horizon - task.duration + 1):
        if _fits(demand, start, start + task.duration, utilization, capacity):
            return start
    return None


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# SCHEDULER
# ════════════════════════════════════════════════════════════════════════════════════════════════════

def optimize_resource_allocation(
    tasks: Sequence[TaskLike],
    resources: Sequence[ResourceLike],
    project_deadline: Optional[int] = None,
) -> ScheduleResult:
    """
    Greedy resource-constrained schedule of tasks over a period grid.

    Args:
        tasks: Tasks (objects or wire dicts); copied, never mutated
        resources: Resources (objects or wire dicts); copied, never mutated
        project_deadline: Horizon in periods (default horizon when None or 0)

    Returns:
        ScheduleResult with entries, per-resource utilization arrays of
        length horizon, total cost, project duration and conflicts
    """
    task_list = coerce_tasks(tasks)
    resource_list = coerce_resources(resources)
    horizon = project_deadline or FeatureFlags.get_default_horizon()

    by_id: Dict[str, Resource] = {}
    for resource in resource_list:
        by_id.setdefault(resource.id, resource)

    utilization = {rid: np.zeros(horizon, dtype=float) for rid in by_id}
    capacity = {rid: _capacity_profile(r, horizon) for rid, r in by_id.items()}

    ordering = topological_order(task_list)
    conflicts: List[str] = []
    if FeatureFlags.is_enabled("report_cycles"):
        for cycle in ordering.cycles:
            conflicts.append(f"Prerequisite cycle detected: {' -> '.join(cycle)}")

    schedule: List[ScheduleEntry] = []
    placed: Dict[str, ScheduleEntry] = {}
    total_cost = 0.0

    for task in ordering.tasks:
        earliest = earliest_start(task, placed)
        demand = _demand(task)
        start = _find_start(task, demand, earliest, horizon, utilization, capacity)

        if start is None:
            conflicts.append(f"Cannot schedule task {task.name} - insufficient resources")
            logger.warning(
                f"Task {task.id} not placed: no feasible start in [{earliest}, {horizon - task.duration}]"
            )
            continue

        end = start + task.duration
        for resource_id, amount in demand.items():
            utilization[resource_id][start:end] += amount
            total_cost += amount * by_id[resource_id].hourly_rate * task.duration

        entry = ScheduleEntry(
            task_id=task.id,
            start_period=start,
            end_period=end,
            assigned_resources=demand,
        )
        schedule.append(entry)
        placed.setdefault(task.id, entry)
        logger.debug(f"Task {task.id} placed at [{start}, {end})")

    result = ScheduleResult(
        schedule=schedule,
        resource_utilization={rid: util.tolist() for rid, util in utilization.items()},
        total_cost=total_cost,
        project_duration=max((e.end_period for e in schedule), default=0),
        conflicts=conflicts,
    )
    logger.info(
        f"Scheduled {len(schedule)}/{len(ordering.tasks)} tasks: "
        f"duration={result.project_duration}, cost={result.total_cost:.2f}, "
        f"conflicts={len(conflicts)}"
    )
    return result
