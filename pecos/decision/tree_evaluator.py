"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
                    PECOS — DECISION TREE EVALUATOR
═══════════════════════════════════════════════════════════════════════════════════════════════════════

EXPECTED VALUE (bottom-up)
══════════════════════════

    EV(outcome)  = value - cost
    EV(chance)   = Σ_i p_i · EV(child_i)
    EV(decision) = max_i EV(child_i)
    EV(non-outcome without children) = 0

BEST PATH (top-down)
════════════════════

Decision node:
    1. Evaluate every child: EV, risk profile, own best path.
    2. Stable sort by EV descending.
    3. If |EV₁ - EV₂| / mean(EV₁, EV₂) < 5 % and both have a risk profile,
       pick by risk score:

           score = 30 · P(success)
                 + {Low: 25, Medium: 15, High: 5}[risk level]
                 + min(ROI / 10, 20)
                 + max(0, worst case / 10 000)

       The runner-up wins only with a strictly higher score.
    4. Otherwise the top-EV child wins.

Chance node:
    Follow the child with the highest probability. This is the "most likely
    realisation" narrative, not an expectation-optimal walk.

RISK PROFILE
════════════

Available when a node has one child named like "success" and one like
"failure":

    avgCost    = P(s)·cost_s + P(f)·cost_f
    avgValue   = P(s)·value_s + P(f)·value_f
    ROI        = (avgValue - avgCost) / avgCost · 100     (0 if avgCost ≤ 0)
    worstCase  = min(value_s - cost_s, value_f - cost_f)
    riskLevel  = High if P(f) > 0.30, Medium if P(f) > 0.15, else Low
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from ..finance.sensitivity import sensitivity_analysis
from .tree_model import DecisionNode, NodeType

logger = logging.getLogger(__name__)


TIE_THRESHOLD_PCT = 5.0
RISK_LEVEL_BONUS = {"Low": 25, "Medium": 15, "High": 5}
SENSITIVITY_VARIATION = 0.2


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# DATA STRUCTURES
# ════════════════════════════════════════════════════════════════════════════════════════════════════

@dataclass
class RiskMetrics:
    """Risk profile of a node with success/failure children."""
    success_probability: float
    failure_probability: float
    roi: float
    avg_cost: float
    avg_value: float
    worst_case: float
    risk_level: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "successProbability": self.success_probability,
            "failureProbability": self.failure_probability,
            "roi": self.roi,
            "avgCost": self.avg_cost,
            "avgValue": self.avg_value,
            "worstCase": self.worst_case,
            "riskLevel": self.risk_level,
        }


@dataclass
class OptionAnalysis:
    """One child of a decision node, as seen by the best-path walk."""
    name: str
    expected_value: float
    risk_metrics: Optional[RiskMetrics]
    path: List[str]


@dataclass
class RiskAnalysis:
    best_option: str
    risk_level: str
    reasoning: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bestOption": self.best_option,
            "riskLevel": self.risk_level,
            "reasoning": list(self.reasoning),
        }


@dataclass
class DecisionAnalysisResult:
    expected_value: float
    best_path: List[str]
    sensitivity_analysis: Dict[str, float] = field(default_factory=dict)
    risk_analysis: Optional[RiskAnalysis] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "expectedValue": self.expected_value,
            "bestPath": list(self.best_path),
            "sensitivityAnalysis": dict(self.sensitivity_analysis),
            "riskAnalysis": self.risk_analysis.to_dict() if self.risk_analysis else None,
        }


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# EXPECTED VALUE & RISK
# ════════════════════════════════════════════════════════════════════════════════════════════════════

def expected_value(node: DecisionNode) -> float:
    """Probability-weighted net value propagated bottom-up."""
    if node.type == NodeType.OUTCOME:
        return node.value - node.cost
    if not node.children:
        return 0.0
    if node.type == NodeType.DECISION:
        return max(expected_value(c) for c in node.children)
    return sum(c.probability * expected_value(c) for c in node.children)


def risk_metrics(node: DecisionNode) -> Optional[RiskMetrics]:
    """Risk profile from the node's success/failure children, if both exist."""
    success = next((c for c in node.children if "success" in c.name.lower()), None)
    failure = next((c for c in node.children if "failure" in c.name.lower()), None)
    if success is None or failure is None:
        return None

    p_success = success.probability
    p_failure = failure.probability
    avg_cost = p_success * success.cost + p_failure * failure.cost
    avg_value = p_success * success.value + p_failure * failure.value
    roi = (avg_value - avg_cost) / avg_cost * 100 if avg_cost > 0 else 0.0
    worst_case = min(success.value - success.cost, failure.value - failure.cost)

    if p_failure > 0.3:
        level = "High"
    elif p_failure > 0.15:
        level = "Medium"
    else:
        level = "Low"

    return RiskMetrics(
        success_probability=p_success,
        failure_probability=p_failure,
        roi=roi,
        avg_cost=avg_cost,
        avg_value=avg_value,
        worst_case=worst_case,
        risk_level=level,
    )


def risk_score(metrics: RiskMetrics) -> float:
    """Weighted tie-break score; higher is better."""
    score = metrics.success_probability * 30
    score += RISK_LEVEL_BONUS.get(metrics.risk_level, 5)
    score += min(metrics.roi / 10, 20)
    score += max(0.0, metrics.worst_case / 10000)
    return score


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# BEST PATH
# ════════════════════════════════════════════════════════════════════════════════════════════════════

def _choose_option(options: List[OptionAnalysis]) -> Tuple[OptionAnalysis, List[str]]:
    top = options[0]
    if len(options) == 1:
        return top, [f"Only one option available: {top.name}"]

    second = options[1]
    difference = abs(top.expected_value - second.expected_value)
    average = (top.expected_value + second.expected_value) / 2
    pct_difference = difference / average * 100 if average > 0 else 0.0

    if not (pct_difference < TIE_THRESHOLD_PCT and top.risk_metrics and second.risk_metrics):
        return top, [f"Clear expected value advantage: {top.expected_value:.0f}"]

    reasoning = [
        f"Expected values are very close "
        f"({top.expected_value:.0f} vs {second.expected_value:.0f})"
    ]
    top_metrics, second_metrics = top.risk_metrics, second.risk_metrics
    top_score = risk_score(top_metrics)
    second_score = risk_score(second_metrics)
    logger.debug(f"Tie-break: {top.name}={top_score:.2f}, {second.name}={second_score:.2f}")

    if second_score <= top_score:
        reasoning.append(f"{top.name} provides the best balance of return and risk")
        return top, reasoning

    reasoning.append(f"{second.name} offers better risk-adjusted returns")
    reasoning.append(
        f"Higher success probability: {second_metrics.success_probability * 100:.0f}% "
        f"vs {top_metrics.success_probability * 100:.0f}%"
    )
    if second_metrics.roi > top_metrics.roi * 1.5:
        reasoning.append(
            f"Significantly better ROI: {second_metrics.roi:.1f}% vs {top_metrics.roi:.1f}%"
        )
    if second_metrics.risk_level != top_metrics.risk_level:
        reasoning.append(
            f"Lower risk profile: {second_metrics.risk_level} vs {top_metrics.risk_level}"
        )
    return second, reasoning


def _walk(node: DecisionNode, path: List[str]) -> Tuple[List[str], Optional[RiskAnalysis]]:
    path = path + [node.name]

    if node.type == NodeType.OUTCOME or not node.children:
        return path, None

    if node.type == NodeType.DECISION:
        options = [
            OptionAnalysis(
                name=child.name,
                expected_value=expected_value(child),
                risk_metrics=risk_metrics(child),
                path=_walk(child, path)[0],
            )
            for child in node.children
        ]
        options.sort(key=lambda o: o.expected_value, reverse=True)

        best, reasoning = _choose_option(options)
        analysis = RiskAnalysis(
            best_option=best.name,
            risk_level=best.risk_metrics.risk_level if best.risk_metrics else "Unknown",
            reasoning=reasoning,
        )
        return best.path, analysis

    most_likely = max(node.children, key=lambda c: c.probability)
    return _walk(most_likely, path)


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# SENSITIVITY
# ════════════════════════════════════════════════════════════════════════════════════════════════════

def _position_key(position: Tuple[int, ...]) -> str:
    return "/".join(str(i) for i in position)


def _with_values(
    node: DecisionNode,
    values: Mapping[str, float],
    position: Tuple[int, ...] = (),
) -> DecisionNode:
    children = tuple(
        _with_values(c, values, position + (i,)) for i, c in enumerate(node.children)
    )
    key = _position_key(position)
    if node.type == NodeType.OUTCOME and key in values:
        return replace(node, value=values[key], children=children)
    return replace(node, children=children)


def outcome_sensitivity(root: DecisionNode, variation: float = SENSITIVITY_VARIATION) -> Dict[str, float]:
    """
    Sensitivity of the root expected value to each outcome value, by node id.

    Outcomes are varied by their position in the tree, so nodes sharing an id
    are still varied one at a time; the id keeps the first one's result.
    """
    outcomes = {_position_key(position): n for position, n in _iter_outcomes(root)}
    if not outcomes:
        return {}

    results = sensitivity_analysis(
        {key: n.value for key, n in outcomes.items()},
        lambda params: expected_value(_with_values(root, params)),
        variation=variation,
    )

    by_id: Dict[str, float] = {}
    for key, node in outcomes.items():
        if node.id in by_id:
            logger.warning(f"Duplicate outcome id {node.id}: sensitivity reported for the first only")
            continue
        by_id[node.id] = results[key].sensitivity
    return by_id


def _iter_outcomes(node: DecisionNode, position: Tuple[int, ...] = ()):
    if node.type == NodeType.OUTCOME:
        yield position, node
    for i, child in enumerate(node.children):
        yield from _iter_outcomes(child, position + (i,))


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# PUBLIC API
# ════════════════════════════════════════════════════════════════════════════════════════════════════

def analyze_decision_tree(root: Union[DecisionNode, Mapping[str, Any]]) -> DecisionAnalysisResult:
    """
    Expected value, best path and risk-adjusted reasoning for a tree.

    Args:
        root: DecisionNode or its nested wire dict

    Returns:
        DecisionAnalysisResult; risk_analysis is None when the path never
        crosses a decision node.
    """
    if not isinstance(root, DecisionNode):
        root = DecisionNode.from_dict(root)

    path, analysis = _walk(root, [])
    result = DecisionAnalysisResult(
        expected_value=expected_value(root),
        best_path=path,
        sensitivity_analysis=outcome_sensitivity(root),
        risk_analysis=analysis,
    )
    logger.info(
        f"Decision tree '{root.name}': EV={result.expected_value:.2f}, "
        f"path={' > '.join(result.best_path)}"
    )
    return result
