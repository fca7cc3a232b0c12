"""
PECOS - Decision Tree Analysis
==============================

Immutable decision/chance/outcome trees, expected values, and the
risk-adjusted best-path walk.
"""

from .tree_model import (
    NodeType,
    DecisionNode,
    iter_nodes,
    find_node,
    update_node,
)
from .tree_evaluator import (
    RiskMetrics,
    RiskAnalysis,
    OptionAnalysis,
    DecisionAnalysisResult,
    expected_value,
    risk_metrics,
    risk_score,
    outcome_sensitivity,
    analyze_decision_tree,
)

__all__ = [
    "NodeType",
    "DecisionNode",
    "iter_nodes",
    "find_node",
    "update_node",
    "RiskMetrics",
    "RiskAnalysis",
    "OptionAnalysis",
    "DecisionAnalysisResult",
    "expected_value",
    "risk_metrics",
    "risk_score",
    "outcome_sensitivity",
    "analyze_decision_tree",
]
