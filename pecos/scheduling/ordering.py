"""
PECOS - Task Ordering
=====================

Prerequisite-respecting order of tasks (depth-first topological sort).

- Tasks are visited in input order (or by descending priority when the
  priority_ordering flag is on); each task follows its prerequisites.
- A prerequisite that is still being visited closes a cycle: the edge is
  skipped and the cycle is recorded, so ordering always terminates.
- Unknown prerequisite ids are ignored.
- Duplicate ids keep the first task.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Set, Tuple

from ..feature_flags import FeatureFlags
from .types import Task

logger = logging.getLogger(__name__)


@dataclass
class OrderingResult:
    tasks: List[Task] = field(default_factory=list)
    cycles: List[List[str]] = field(default_factory=list)   # e.g. [["a", "b", "a"]]

    @property
    def has_cycles(self) -> bool:
        return bool(self.cycles)


def topological_order(
    tasks: Sequence[Task],
    by_priority: Optional[bool] = None,
) -> OrderingResult:
    """
    Order tasks so that every task comes after its known prerequisites.

    Args:
        tasks: Tasks to order
        by_priority: Visit roots by descending priority (defaults to the
            priority_ordering feature flag)

    Returns:
        OrderingResult with the ordered tasks and any detected cycles
    """
    if by_priority is None:
        by_priority = FeatureFlags.is_enabled("priority_ordering")

    by_id: Dict[str, Task] = {}
    for task in tasks:
        by_id.setdefault(task.id, task)

    roots = list(tasks)
    if by_priority:
        roots.sort(key=lambda t: t.priority, reverse=True)

    result = OrderingResult()
    visited: Set[str] = set()
    visiting: List[str] = []
    on_path: Set[str] = set()
    stack: List[Tuple[str, Iterator[str]]] = []

    def enter(task_id: str) -> None:
        if task_id in visited:
            return
        if task_id in on_path:
            cycle = visiting[visiting.index(task_id):] + [task_id]
            result.cycles.append(cycle)
            logger.warning(f"Prerequisite cycle skipped: {' -> '.join(cycle)}")
            return

        task = by_id.get(task_id)
        visiting.append(task_id)
        on_path.add(task_id)
        stack.append((task_id, iter(task.prerequisites if task is not None else ())))

    # Explicit stack: prerequisite chains can be longer than the recursion limit
    for root in roots:
        enter(root.id)
        while stack:
            task_id, pending = stack[-1]
            prerequisite = next(pending, None)
            if prerequisite is not None:
                enter(prerequisite)
                continue

            stack.pop()
            visiting.pop()
            on_path.discard(task_id)
            visited.add(task_id)
            task = by_id.get(task_id)
            if task is not None:
                result.tasks.append(task)

    return result
