"""
PECOS - Resource Leveling (detection)
=====================================

Scans the per-period utilization of a schedule against each resource's
capacity and reports every over-allocated period:

    usage[r][p] > maxCapacity[r] · availability[r][p mod len]
        → "Resource {name} over-allocated in period {p}: {usage}/{capacity}"

Nothing is moved; the returned result is a copy of the input with the
extra conflicts appended.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from .types import Resource, ResourceLike, ScheduleResult, coerce_resources

logger = logging.getLogger(__name__)


def format_quantity(value: float) -> str:
    """Integral values without a decimal part (3.0 -> "3"), others as repr."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def over_allocations(
    schedule_result: ScheduleResult,
    resources: Sequence[ResourceLike],
) -> List[str]:
    """Conflict messages for every over-committed (resource, period)."""
    by_id: Dict[str, Resource] = {}
    for resource in coerce_resources(resources):
        by_id.setdefault(resource.id, resource)

    conflicts: List[str] = []
    for resource_id, utilization in schedule_result.resource_utilization.items():
        resource = by_id.get(resource_id)
        if resource is None:
            continue
        for period, usage in enumerate(utilization):
            capacity = resource.capacity_at(period)
            if usage > capacity:
                conflicts.append(
                    f"Resource {resource.name} over-allocated in period {period}: "
                    f"{format_quantity(usage)}/{format_quantity(capacity)}"
                )
    return conflicts


def perform_resource_leveling(
    schedule_result: ScheduleResult,
    resources: Sequence[ResourceLike],
) -> ScheduleResult:
    """
    Flag over-allocated periods of a schedule.

    Args:
        schedule_result: Output of a scheduling run (or an externally built one)
        resources: Resources the utilization refers to

    Returns:
        New ScheduleResult: same schedule, conflicts = input conflicts + one
        per over-allocated period
    """
    found = over_allocations(schedule_result, resources)
    if found:
        logger.warning(f"Resource leveling found {len(found)} over-allocated periods")

    leveled = schedule_result.copy()
    leveled.conflicts.extend(found)
    return leveled
