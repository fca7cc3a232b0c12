"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
                    PECOS — MONTE CARLO RISK SIMULATION
═══════════════════════════════════════════════════════════════════════════════════════════════════════

Three independent risk factors perturb a base value multiplicatively.

MODEL
═════

For iteration i and factor k ∈ {technical, market, organizational}:

    u_ik ~ U(0, 1)                       (independent draws)
    F_ik = 1 + (u_ik - 0.5) · 2 · ρ_k    (ρ_k ∈ [0, 1] is the risk level)
    X_i  = base · Π_k F_ik

so each factor is uniform on [1 - ρ_k, 1 + ρ_k].

STATISTICS
══════════

    mean  = (1/N) Σ X_i
    std   = sqrt((1/N) Σ (X_i - mean)²)
    p_q   = sorted(X)[floor(N · q)]      q ∈ {0.1, 0.5, 0.9}
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

import numpy as np

from ..feature_flags import FeatureFlags

logger = logging.getLogger(__name__)


PERCENTILES = {"p10": 0.1, "p50": 0.5, "p90": 0.9}


@dataclass
class RiskFactors:
    """Risk levels in [0, 1]; 0 means no uncertainty from that source."""
    technical: float = 0.0
    market: float = 0.0
    organizational: float = 0.0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RiskFactors":
        return cls(
            technical=float(data.get("technical", 0.0)),
            market=float(data.get("market", 0.0)),
            organizational=float(data.get("organizational", 0.0)),
        )

    def as_array(self) -> np.ndarray:
        return np.array([self.technical, self.market, self.organizational], dtype=float)

    def to_dict(self) -> Dict[str, float]:
        return {
            "technical": self.technical,
            "market": self.market,
            "organizational": self.organizational,
        }


@dataclass
class SimulationResult:
    """Aggregate statistics of one Monte Carlo run."""
    mean: float = 0.0
    standard_deviation: float = 0.0
    percentiles: Dict[str, float] = field(
        default_factory=lambda: {name: 0.0 for name in PERCENTILES}
    )
    iterations: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mean": self.mean,
            "standardDeviation": self.standard_deviation,
            "percentiles": dict(self.percentiles),
        }


def monte_carlo_simulation(
    base_value: float,
    risk_factors: Union[RiskFactors, Mapping[str, Any]],
    iterations: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
) -> SimulationResult:
    """
    Simulate the base value under three independent multiplicative risks.

    Args:
        base_value: Value to perturb (cost, effort, ...)
        risk_factors: RiskFactors or {technical, market, organizational}
        iterations: Sample count (configured default when omitted)
        rng: Random generator; pass a seeded one for reproducible runs

    Returns:
        SimulationResult (zeros when iterations is 0)
    """
    if not isinstance(risk_factors, RiskFactors):
        risk_factors = RiskFactors.from_dict(risk_factors)
    if iterations is None:
        iterations = FeatureFlags.get_monte_carlo_iterations()
    if iterations <= 0:
        return SimulationResult()

    rng = rng if rng is not None else np.random.default_rng()

    draws = rng.random((iterations, 3))
    factors = 1 + (draws - 0.5) * 2 * risk_factors.as_array()
    samples = np.sort(base_value * factors[:, 0] * factors[:, 1] * factors[:, 2])

    mean = float(samples.mean())
    std = float(np.sqrt(np.mean((samples - mean) ** 2)))
    percentiles = {
        name: float(samples[math.floor(iterations * q)]) for name, q in PERCENTILES.items()
    }

    logger.debug(
        f"Monte Carlo: base={base_value}, N={iterations}, mean={mean:.2f}, std={std:.2f}"
    )
    return SimulationResult(
        mean=mean,
        standard_deviation=std,
        percentiles=percentiles,
        iterations=iterations,
    )
