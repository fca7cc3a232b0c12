"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
                    PECOS — SIMILARITY-BASED REGRESSION ESTIMATOR
═══════════════════════════════════════════════════════════════════════════════════════════════════════

Analogy estimation: find the historical project closest to the new one and
scale its actuals by fixed elasticities.

SIMILARITY
══════════

For historical project h and new project n:

    s_loc  = 1 - |LOC_h - LOC_n| / max(LOC_h, LOC_n, 1)      (1 when both are 0)
    s_team = 1 - |T_h - T_n|     / max(T_h, T_n, 1)          (1 when both are 0)
    s_cx   = 1 - |C_h - C_n| / 5
    S_h    = (s_loc + s_team + s_cx) / 3

    h* = argmax_h S_h        (first project wins ties)

SCALING
═══════

    Cost     = cost_h*     · (LOC_n/LOC_h*)^0.7 · (T_n/T_h*)^0.3 · (C_n/C_h*)^0.2
    Duration = duration_h* · (LOC_n/LOC_h*)^0.5 · (C_n/C_h*)^0.3

A ratio is 1 when the historical dimension is 0.

GOODNESS OF FIT
═══════════════

    rSquared = max(|r(LOC, cost)|, |r(T, cost)|, |r(C, cost)|)

A coarse proxy (largest single-factor Pearson correlation), not a fitted R².
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Sequence, Union

import numpy as np

from ..finance.investment import correlation

logger = logging.getLogger(__name__)


COST_ELASTICITY = {"loc": 0.7, "team": 0.3, "complexity": 0.2}
DURATION_ELASTICITY = {"loc": 0.5, "complexity": 0.3}
COMPLEXITY_SCALE = 5
PREDICTION_Z = 1.96


@dataclass
class HistoricalProject:
    """Completed project used as ground truth."""
    lines_of_code: float
    team_size: float
    complexity: float
    actual_cost: float
    actual_duration: float

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HistoricalProject":
        return cls(
            lines_of_code=float(data.get("linesOfCode", data.get("lines_of_code", 0))),
            team_size=float(data.get("teamSize", data.get("team_size", 0))),
            complexity=float(data.get("complexity", 0)),
            actual_cost=float(data.get("actualCost", data.get("actual_cost", 0))),
            actual_duration=float(data.get("actualDuration", data.get("actual_duration", 0))),
        )


@dataclass
class ProjectProfile:
    """Size profile of the project being estimated."""
    lines_of_code: float
    team_size: float
    complexity: float

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProjectProfile":
        return cls(
            lines_of_code=float(data.get("linesOfCode", data.get("lines_of_code", 0))),
            team_size=float(data.get("teamSize", data.get("team_size", 0))),
            complexity=float(data.get("complexity", 0)),
        )


@dataclass
class RegressionResult:
    estimated_cost: float = 0.0
    estimated_duration: float = 0.0
    confidence: float = 0.0
    r_squared: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "estimatedCost": self.estimated_cost,
            "estimatedDuration": self.estimated_duration,
            "confidence": self.confidence,
            "rSquared": self.r_squared,
        }


def _dimension_similarity(a: float, b: float) -> float:
    if a == 0 and b == 0:
        return 1.0
    return 1 - abs(a - b) / max(a, b, 1)


def similarity(historical: HistoricalProject, project: ProjectProfile) -> float:
    """Mean of the LOC, team and complexity similarities."""
    loc = _dimension_similarity(historical.lines_of_code, project.lines_of_code)
    team = _dimension_similarity(historical.team_size, project.team_size)
    cx = 1 - abs(historical.complexity - project.complexity) / COMPLEXITY_SCALE
    return (loc + team + cx) / 3


def _ratio(new: float, base: float) -> float:
    return 1.0 if base == 0 else new / base


def _non_negative(value: float) -> float:
    if not math.isfinite(value):
        return 0.0
    return max(0.0, value)


def regression_estimate(
    historical_data: Sequence[Union[HistoricalProject, Mapping[str, Any]]],
    new_project: Union[ProjectProfile, Mapping[str, Any]],
) -> RegressionResult:
    """
    Estimate cost and duration from the most similar historical project.

    Returns:
        RegressionResult (all zeros without history)
    """
    history: List[HistoricalProject] = [
        h if isinstance(h, HistoricalProject) else HistoricalProject.from_dict(h)
        for h in historical_data
    ]
    if not isinstance(new_project, ProjectProfile):
        new_project = ProjectProfile.from_dict(new_project)
    if not history:
        return RegressionResult()

    costs = [h.actual_cost for h in history]
    correlations = [
        abs(correlation([h.lines_of_code for h in history], costs)),
        abs(correlation([h.team_size for h in history], costs)),
        abs(correlation([h.complexity for h in history], costs)),
    ]

    scores = [similarity(h, new_project) for h in history]
    best_index = int(np.argmax(scores))
    base = history[best_index]

    loc_ratio = _ratio(new_project.lines_of_code, base.lines_of_code)
    team_ratio = _ratio(new_project.team_size, base.team_size)
    cx_ratio = _ratio(new_project.complexity, base.complexity)

    cost = (
        base.actual_cost
        * loc_ratio ** COST_ELASTICITY["loc"]
        * team_ratio ** COST_ELASTICITY["team"]
        * cx_ratio ** COST_ELASTICITY["complexity"]
    )
    duration = (
        base.actual_duration
        * loc_ratio ** DURATION_ELASTICITY["loc"]
        * cx_ratio ** DURATION_ELASTICITY["complexity"]
    )

    # negative ratios yield complex powers
    if isinstance(cost, complex) or isinstance(duration, complex):
        cost, duration = 0.0, 0.0

    r_squared = max(correlations)
    result = RegressionResult(
        estimated_cost=_non_negative(cost),
        estimated_duration=_non_negative(duration),
        confidence=scores[best_index],
        r_squared=max(0.0, min(1.0, r_squared if math.isfinite(r_squared) else 0.0)),
    )
    logger.info(
        f"Regression: analogue #{best_index} (similarity {result.confidence:.3f}), "
        f"cost={result.estimated_cost:.0f}, duration={result.estimated_duration:.2f}"
    )
    return result


def historical_statistics(
    historical_data: Sequence[Union[HistoricalProject, Mapping[str, Any]]],
) -> Dict[str, Any]:
    """Descriptive statistics of the historical costs and durations."""
    history = [
        h if isinstance(h, HistoricalProject) else HistoricalProject.from_dict(h)
        for h in historical_data
    ]
    if not history:
        return {
            "projectCount": 0,
            "meanCost": 0.0,
            "costStandardDeviation": 0.0,
            "meanDuration": 0.0,
            "costRange": {"min": 0.0, "max": 0.0},
        }

    costs = np.array([h.actual_cost for h in history], dtype=float)
    durations = np.array([h.actual_duration for h in history], dtype=float)
    return {
        "projectCount": len(history),
        "meanCost": float(costs.mean()),
        "costStandardDeviation": float(costs.std()),
        "meanDuration": float(durations.mean()),
        "costRange": {"min": float(costs.min()), "max": float(costs.max())},
    }


def prediction_interval(estimate: float, standard_deviation: float) -> Dict[str, float]:
    """Normal-approximation 95 % band around an estimate."""
    return {
        "lower": estimate - PREDICTION_Z * standard_deviation,
        "upper": estimate + PREDICTION_Z * standard_deviation,
    }
