"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
                    PECOS — DECISION TREE MODEL
═══════════════════════════════════════════════════════════════════════════════════════════════════════

Immutable decision/chance/outcome tree.

    decision ──┬── chance ──┬── outcome (p, cost, value)
               │            └── outcome
               └── chance ──┬── outcome
                            └── outcome

Nodes are frozen; edits go through update_node(), which rebuilds only the
path from the root to the edited node and shares every other subtree.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)


class NodeType(str, Enum):
    """Kind of node in a decision tree."""
    DECISION = "decision"   # Choose the best child
    CHANCE = "chance"       # Probability-weighted children
    OUTCOME = "outcome"     # Terminal: value - cost


@dataclass(frozen=True)
class DecisionNode:
    """
    One node of a decision tree.

    Attributes:
        id: Unique identifier within the tree
        name: Label used in paths and reasoning
        type: decision, chance or outcome
        probability: Probability of this branch under its chance parent
        cost: Cost incurred on this node
        value: Payoff (outcome nodes)
        children: Ordered child nodes (empty for leaves)
    """
    id: str
    name: str
    type: NodeType
    probability: float = 0.0
    cost: float = 0.0
    value: float = 0.0
    children: Tuple["DecisionNode", ...] = field(default_factory=tuple)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DecisionNode":
        """Build a tree from its nested wire dict (missing numbers become 0)."""
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            type=NodeType(data.get("type", NodeType.OUTCOME.value)),
            probability=float(data.get("probability") or 0.0),
            cost=float(data.get("cost") or 0.0),
            value=float(data.get("value") or 0.0),
            children=tuple(cls.from_dict(c) for c in data.get("children") or ()),
        )

    def to_dict(self) -> Dict[str, Any]:
        node: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "cost": self.cost,
        }
        if self.type != NodeType.DECISION:
            node["probability"] = self.probability
        if self.type == NodeType.OUTCOME:
            node["value"] = self.value
        node["children"] = [c.to_dict() for c in self.children]
        return node


def iter_nodes(root: DecisionNode) -> Iterator[DecisionNode]:
    """Depth-first, pre-order traversal."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def find_node(root: DecisionNode, node_id: str) -> Optional[DecisionNode]:
    for node in iter_nodes(root):
        if node.id == node_id:
            return node
    return None


def update_node(root: DecisionNode, node_id: str, **changes: Any) -> DecisionNode:
    """
    Return a new tree where the node with node_id has the given fields changed.

    Untouched subtrees are shared with the input tree. If no node matches,
    the input tree itself is returned.

    Example:
        tree = update_node(tree, "success1", probability=0.6)
    """
    if "type" in changes and not isinstance(changes["type"], NodeType):
        changes["type"] = NodeType(changes["type"])
    if "children" in changes:
        changes["children"] = tuple(changes["children"])

    def rebuild(node: DecisionNode) -> DecisionNode:
        if node.id == node_id:
            return replace(node, **changes)
        if not node.children:
            return node
        new_children = tuple(rebuild(c) for c in node.children)
        if all(new is old for new, old in zip(new_children, node.children)):
            return node
        return replace(node, children=new_children)

    updated = rebuild(root)
    if updated is root:
        logger.debug(f"update_node: no node with id {node_id}")
    return updated
