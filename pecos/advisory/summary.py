"""
PECOS - Advisory Payload
========================

Builds the JSON summary handed to an advisory collaborator: one entry per
option under the tree root, with the numbers the engine already computed.

    {
      "decision": "Project Decision",
      "options": [
        {"name", "expectedValue", "successRate", "roi", "riskLevel",
         "avgCost", "avgValue", "outcomes": [{"name", "probability", "cost",
         "value", "netValue"}]}
      ]
    }

successRate and roi are percentages; they are None when an option has no
success/failure pair to profile.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Union

from ..decision import DecisionNode, NodeType, expected_value, iter_nodes, risk_metrics


def _outcomes(option: DecisionNode) -> List[Dict[str, Any]]:
    return [
        {
            "name": node.name,
            "probability": node.probability,
            "cost": node.cost,
            "value": node.value,
            "netValue": node.value - node.cost,
        }
        for node in iter_nodes(option)
        if node.type == NodeType.OUTCOME
    ]


def option_summary(option: DecisionNode) -> Dict[str, Any]:
    metrics = risk_metrics(option)
    return {
        "name": option.name,
        "expectedValue": expected_value(option),
        "successRate": metrics.success_probability * 100 if metrics else None,
        "roi": metrics.roi if metrics else None,
        "riskLevel": metrics.risk_level if metrics else "Unknown",
        "avgCost": metrics.avg_cost if metrics else None,
        "avgValue": metrics.avg_value if metrics else None,
        "outcomes": _outcomes(option),
    }


def build_advisory_payload(root: Union[DecisionNode, Mapping[str, Any]]) -> Dict[str, Any]:
    """Summary of every option directly under the root."""
    if not isinstance(root, DecisionNode):
        root = DecisionNode.from_dict(root)
    return {
        "decision": root.name,
        "options": [option_summary(child) for child in root.children],
    }
