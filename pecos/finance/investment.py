"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
                    PECOS — INVESTMENT METRICS
═══════════════════════════════════════════════════════════════════════════════════════════════════════

DEFINITIONS
═══════════

Let I be the initial investment and cf_t the cash flow of period t (t = 0..n-1,
received at the END of period t).

ROI:
    ROI = (gain - cost) / cost · 100              (0 when cost = 0)

NPV:
    NPV(r) = -I + Σ_t cf_t / (1 + r)^(t+1)

IRR (Newton-Raphson):
    f(r)  = Σ_k CF_k / (1 + r)^k                  CF = [-I, cf_0, cf_1, ...]
    f'(r) = -Σ_{k>0} k · CF_k / (1 + r)^(k+1)
    r_{n+1} = r_n - f(r_n) / f'(r_n),   r_0 = 0.1

    Stops when |f(r)| < 0.01 or f'(r) = 0. Without convergence the last
    iterate is returned as-is; use irr_with_status() to see the flag.

Payback:
    First period where the cumulative cash position turns ≥ 0, plus the
    linear fraction of that period needed to cover the remaining deficit.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

import numpy as np

logger = logging.getLogger(__name__)


IRR_INITIAL_GUESS = 0.1
IRR_TOLERANCE = 0.01


@dataclass
class IRRResult:
    """
    IRR with its convergence status.

    Attributes:
        rate: Rate in percent (last iterate when not converged)
        converged: Whether |NPV| fell below the tolerance
        iterations: Newton steps taken
    """
    rate: float
    converged: bool
    iterations: int

    def to_dict(self) -> Dict[str, Any]:
        return {"rate": self.rate, "converged": self.converged, "iterations": self.iterations}


def roi(gain: float, cost: float) -> float:
    """Return on investment in percent; 0 for a zero cost."""
    if cost == 0:
        return 0.0
    return (gain - cost) / cost * 100


def npv(cash_flows: Sequence[float], discount_rate: float, initial_investment: float) -> float:
    """Net present value, first cash flow discounted one full period."""
    value = -initial_investment
    for period, cash_flow in enumerate(cash_flows):
        value += cash_flow / (1 + discount_rate) ** (period + 1)
    return value


def irr_with_status(
    cash_flows: Sequence[float],
    initial_investment: float,
    max_iterations: int = 100,
) -> IRRResult:
    """
    Internal rate of return by Newton-Raphson, with convergence status.

    A 1 + r = 0 singularity or a float overflow ends the search as
    non-converged instead of raising.
    """
    flows: List[float] = [-initial_investment, *cash_flows]
    rate = IRR_INITIAL_GUESS
    converged = False
    steps = 0

    for _ in range(max_iterations):
        base = 1 + rate
        if base == 0:
            break
        try:
            value = 0.0
            derivative = 0.0
            for period, cf in enumerate(flows):
                value += cf / base ** period
                if period > 0:
                    derivative -= period * cf / base ** (period + 1)
        except (OverflowError, ZeroDivisionError):
            break

        if abs(value) < IRR_TOLERANCE:
            converged = True
            break
        if derivative == 0 or not math.isfinite(derivative):
            break

        rate = rate - value / derivative
        steps += 1

    if not converged:
        logger.warning(
            f"IRR did not converge after {steps} steps; returning last iterate {rate * 100:.4f}%"
        )
    return IRRResult(rate=rate * 100, converged=converged, iterations=steps)


def irr(cash_flows: Sequence[float], initial_investment: float, max_iterations: int = 100) -> float:
    """Internal rate of return in percent (last iterate when not converged)."""
    return irr_with_status(cash_flows, initial_investment, max_iterations).rate


def payback_period(cash_flows: Sequence[float], initial_investment: float) -> float:
    """
    Periods needed to recover the investment, linearly interpolated.

    Returns len(cash_flows) when the investment is never recovered.
    """
    cumulative = -initial_investment

    for period, cash_flow in enumerate(cash_flows):
        cumulative += cash_flow
        if cumulative >= 0:
            previous = cumulative - cash_flow
            fraction = -previous / cash_flow if cash_flow != 0 else 0.0
            return period + fraction

    return float(len(cash_flows))


def correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """Pearson correlation; 0 for empty or constant inputs."""
    if len(x) == 0 or len(x) != len(y):
        return 0.0

    xs = np.asarray(x, dtype=float)
    ys = np.asarray(y, dtype=float)
    dx = xs - xs.mean()
    dy = ys - ys.mean()

    denominator = math.sqrt(float(np.sum(dx * dx)) * float(np.sum(dy * dy)))
    if denominator == 0:
        return 0.0
    return float(np.sum(dx * dy)) / denominator
