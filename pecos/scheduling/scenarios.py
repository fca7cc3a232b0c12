"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
                    PECOS — SCENARIO ANALYSIS
═══════════════════════════════════════════════════════════════════════════════════════════════════════

Re-runs the scheduler under what-if parameters and compares the outcomes.

Per scenario:
    resources'  = resources with maxCapacity × resourceMultiplier   (own copy)
    horizon     = timeConstraint (default horizon when absent)
    result      = optimize_resource_allocation(tasks, resources', horizon)

    efficiency  = projectDuration / totalCost × 1000      (0 when totalCost = 0)
    riskLevel   = |conflicts| / max(1, |tasks|)
    withinBudget = totalCost ≤ budgetConstraint           (only when a budget is given)

Runs are independent, so they may fan out over a thread pool; results keep
the order of the scenarios.
"""

from __future__ import annotations

import concurrent.futures
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import pandas as pd

from ..feature_flags import FeatureFlags
from .resource_scheduler import optimize_resource_allocation
from .types import (
    ResourceLike,
    ScenarioMetrics,
    ScenarioParameters,
    ScenarioResult,
    ScheduleResult,
    TaskLike,
    coerce_resources,
    coerce_tasks,
)

logger = logging.getLogger(__name__)

ScenarioLike = Union[ScenarioParameters, Mapping[str, Any]]


def scenario_metrics(
    result: ScheduleResult,
    task_count: int,
    budget_constraint: Optional[float] = None,
) -> ScenarioMetrics:
    efficiency = result.project_duration / result.total_cost * 1000 if result.total_cost > 0 else 0.0
    return ScenarioMetrics(
        efficiency=efficiency,
        risk_level=len(result.conflicts) / max(1, task_count),
        within_budget=(
            result.total_cost <= budget_constraint if budget_constraint is not None else None
        ),
    )


def _run_scenario(
    tasks: Sequence[TaskLike],
    resources: Sequence[ResourceLike],
    scenario: ScenarioParameters,
) -> ScenarioResult:
    adjusted = [
        r.copy(max_capacity=r.max_capacity * scenario.resource_multiplier)
        for r in coerce_resources(resources)
    ]
    result = optimize_resource_allocation(tasks, adjusted, scenario.time_constraint)
    return ScenarioResult(
        scenario=scenario,
        result=result,
        metrics=scenario_metrics(result, len(tasks), scenario.budget_constraint),
    )


def perform_scenario_analysis(
    tasks: Sequence[TaskLike],
    resources: Sequence[ResourceLike],
    scenarios: Sequence[ScenarioLike],
    max_workers: Optional[int] = None,
) -> List[ScenarioResult]:
    """
    Schedule the same tasks under each scenario.

    Args:
        tasks: Base tasks
        resources: Base resources (never modified)
        scenarios: ScenarioParameters or their wire dicts
        max_workers: Thread fan-out; None uses the scenario_workers setting,
            0 or 1 runs sequentially

    Returns:
        One ScenarioResult per scenario, in input order
    """
    task_list = coerce_tasks(tasks)
    base_resources = coerce_resources(resources)
    parameters = [
        s if isinstance(s, ScenarioParameters) else ScenarioParameters.from_dict(s)
        for s in scenarios
    ]
    if max_workers is None:
        max_workers = FeatureFlags.get_scenario_workers()

    if max_workers and max_workers > 1 and len(parameters) > 1:
        logger.debug(f"Running {len(parameters)} scenarios on {max_workers} threads")
        with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
            results = list(
                executor.map(lambda s: _run_scenario(task_list, base_resources, s), parameters)
            )
    else:
        results = [_run_scenario(task_list, base_resources, s) for s in parameters]

    logger.info(f"Scenario analysis: {len(results)} scenarios over {len(task_list)} tasks")
    return results


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# REPORTING FRAMES
# ════════════════════════════════════════════════════════════════════════════════════════════════════

def scenario_comparison_frame(results: Sequence[ScenarioResult]) -> pd.DataFrame:
    """One row per scenario, for side-by-side comparison."""
    rows = []
    for i, item in enumerate(results):
        rows.append({
            "scenario": i,
            "resource_multiplier": item.scenario.resource_multiplier,
            "horizon": item.scenario.time_constraint or FeatureFlags.get_default_horizon(),
            "project_duration": item.result.project_duration,
            "total_cost": item.result.total_cost,
            "scheduled_tasks": len(item.result.schedule),
            "conflicts": len(item.result.conflicts),
            "efficiency": item.metrics.efficiency,
            "risk_level": item.metrics.risk_level,
            "within_budget": item.metrics.within_budget,
        })
    return pd.DataFrame(rows)


def utilization_frame(result: ScheduleResult) -> pd.DataFrame:
    """
    Per-period utilization, one column per resource.

    Index is the period number; empty when the result has no resources.
    """
    if not result.resource_utilization:
        return pd.DataFrame()
    frame = pd.DataFrame(result.resource_utilization)
    frame.index.name = "period"
    return frame
