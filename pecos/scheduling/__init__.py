"""
PECOS - Resource Scheduling
===========================

Greedy resource-constrained scheduler on a discrete period grid, over-allocation
detection, and what-if scenario comparison.
"""

from .types import (
    ResourceRequirement,
    Task,
    Resource,
    ScheduleEntry,
    ScheduleResult,
    ScenarioParameters,
    ScenarioMetrics,
    ScenarioResult,
)
from .ordering import OrderingResult, topological_order
from .resource_scheduler import (
    optimize_resource_allocation,
    earliest_start,
    available_capacity,
)
from .leveling import perform_resource_leveling, over_allocations
from .scenarios import (
    perform_scenario_analysis,
    scenario_metrics,
    scenario_comparison_frame,
    utilization_frame,
)

__all__ = [
    "ResourceRequirement",
    "Task",
    "Resource",
    "ScheduleEntry",
    "ScheduleResult",
    "ScenarioParameters",
    "ScenarioMetrics",
    "ScenarioResult",
    "OrderingResult",
    "topological_order",
    "optimize_resource_allocation",
    "earliest_start",
    "available_capacity",
    "perform_resource_leveling",
    "over_allocations",
    "perform_scenario_analysis",
    "scenario_metrics",
    "scenario_comparison_frame",
    "utilization_frame",
]
