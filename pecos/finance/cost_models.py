"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
                    PECOS — PARAMETRIC COST MODELS
═══════════════════════════════════════════════════════════════════════════════════════════════════════

Size-driven cost models.

BASIC COCOMO
════════════

    KLOC     = LOC / 1000
    Effort   = a · KLOC^b            (person-months)
    Duration = c · Effort^d          (months)
    Cost     = Effort · H · r        (H = hours per month, r = hourly rate)

    ┌──────────────┬──────┬──────┬──────┬──────┐
    │ mode         │  a   │  b   │  c   │  d   │
    ├──────────────┼──────┼──────┼──────┼──────┤
    │ organic      │ 2.4  │ 1.05 │ 2.5  │ 0.38 │
    │ semidetached │ 3.0  │ 1.12 │ 2.5  │ 0.35 │
    │ embedded     │ 3.6  │ 1.20 │ 2.5  │ 0.32 │
    └──────────────┴──────┴──────┴──────┴──────┘

FUNCTION POINTS
═══════════════

    UFP    = 4·EI + 5·EO + 4·EQ + 10·ILF + 7·EIF
    FP     = UFP · complexity_factor
    Effort = FP · 7                   (hours)
    Cost   = Effort · r

REFERENCES
──────────
[1] Boehm (1981). Software Engineering Economics.
[2] Albrecht & Gaffney (1983). Software function, source lines of code, and
    development effort prediction. IEEE TSE.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple, Union

logger = logging.getLogger(__name__)


DEFAULT_HOURS_PER_MONTH = 160
DEFAULT_HOURLY_RATE = 75.0
HOURS_PER_FUNCTION_POINT = 7


class CocomoMode(str, Enum):
    """Basic COCOMO project classes."""
    ORGANIC = "organic"
    SEMIDETACHED = "semidetached"
    EMBEDDED = "embedded"


# (a, b, c, d)
COCOMO_COEFFICIENTS: Dict[CocomoMode, Tuple[float, float, float, float]] = {
    CocomoMode.ORGANIC: (2.4, 1.05, 2.5, 0.38),
    CocomoMode.SEMIDETACHED: (3.0, 1.12, 2.5, 0.35),
    CocomoMode.EMBEDDED: (3.6, 1.20, 2.5, 0.32),
}

FUNCTION_POINT_WEIGHTS: Dict[str, int] = {
    "inputs": 4,
    "outputs": 5,
    "inquiries": 4,
    "files": 10,
    "interfaces": 7,
}


@dataclass
class CocomoEstimate:
    """Basic COCOMO output: effort (person-months), duration (months), cost."""
    effort: float
    duration: float
    cost: float

    def to_dict(self) -> Dict[str, Any]:
        return {"effort": self.effort, "duration": self.duration, "cost": self.cost}


@dataclass
class FunctionPointEstimate:
    """Function point output: adjusted FP, effort (hours), cost."""
    function_points: float
    effort: float
    cost: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "functionPoints": self.function_points,
            "effort": self.effort,
            "cost": self.cost,
        }


def cocomo(
    lines_of_code: float,
    mode: Union[CocomoMode, str] = CocomoMode.SEMIDETACHED,
    hours_per_month: float = DEFAULT_HOURS_PER_MONTH,
    hourly_rate: float = DEFAULT_HOURLY_RATE,
) -> CocomoEstimate:
    """
    Basic COCOMO estimate.

    Args:
        lines_of_code: Delivered source lines (0 gives a zero estimate)
        mode: organic, semidetached or embedded
        hours_per_month: Working hours in one person-month
        hourly_rate: Cost of one hour

    Raises:
        ValueError: Unknown mode
    """
    mode = CocomoMode(mode)
    a, b, c, d = COCOMO_COEFFICIENTS[mode]

    kloc = lines_of_code / 1000
    effort = a * kloc ** b
    duration = c * effort ** d
    cost = effort * hours_per_month * hourly_rate

    logger.debug(f"COCOMO {mode.value}: {kloc:.2f} KLOC -> {effort:.2f} PM, {duration:.2f} months")
    return CocomoEstimate(effort=effort, duration=duration, cost=cost)


def function_points(
    inputs: float,
    outputs: float,
    inquiries: float,
    files: float,
    interfaces: float,
    complexity_factor: float = 1.0,
    hourly_rate: float = DEFAULT_HOURLY_RATE,
) -> FunctionPointEstimate:
    """Function point estimate (effort in hours, 7 h per FP)."""
    unadjusted = (
        inputs * FUNCTION_POINT_WEIGHTS["inputs"]
        + outputs * FUNCTION_POINT_WEIGHTS["outputs"]
        + inquiries * FUNCTION_POINT_WEIGHTS["inquiries"]
        + files * FUNCTION_POINT_WEIGHTS["files"]
        + interfaces * FUNCTION_POINT_WEIGHTS["interfaces"]
    )
    fp = unadjusted * complexity_factor
    effort = fp * HOURS_PER_FUNCTION_POINT
    return FunctionPointEstimate(function_points=fp, effort=effort, cost=effort * hourly_rate)
