"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
                    PECOS — DELPHI / PERT CONSENSUS ESTIMATOR
═══════════════════════════════════════════════════════════════════════════════════════════════════════

Each expert e gives a three-point estimate (o_e, m_e, p_e) and a confidence c_e.

    PERT_e     = (o_e + 4·m_e + p_e) / 6
    pert       = mean_e PERT_e
    final      = Σ_e PERT_e·c_e / Σ_e c_e
    consensus  = clamp(1 - σ(PERT) / mean(PERT), 0, 1)      σ = population std

consensus is 1 minus the coefficient of variation: 1 when all experts agree,
falling towards 0 as their estimates spread out.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Sequence, Union

logger = logging.getLogger(__name__)


@dataclass
class ExpertEstimate:
    """
    Three-point estimate from one expert.

    optimistic ≤ most_likely ≤ pessimistic and confidence ∈ [0, 1] are
    guaranteed by the validation layer.
    """
    expert_id: str
    optimistic: float
    most_likely: float
    pessimistic: float
    confidence: float

    @property
    def pert(self) -> float:
        return (self.optimistic + 4 * self.most_likely + self.pessimistic) / 6

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ExpertEstimate":
        return cls(
            expert_id=str(data.get("expertId", data.get("expert_id", ""))),
            optimistic=float(data["optimistic"]),
            most_likely=float(data.get("mostLikely", data.get("most_likely", 0))),
            pessimistic=float(data["pessimistic"]),
            confidence=float(data["confidence"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "expertId": self.expert_id,
            "optimistic": self.optimistic,
            "mostLikely": self.most_likely,
            "pessimistic": self.pessimistic,
            "confidence": self.confidence,
        }


@dataclass
class DelphiResult:
    final_estimate: float = 0.0
    consensus: float = 0.0
    pert: float = 0.0
    confidence_weighted_average: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "finalEstimate": self.final_estimate,
            "consensus": self.consensus,
            "pert": self.pert,
            "confidenceWeightedAverage": self.confidence_weighted_average,
        }


EstimateLike = Union[ExpertEstimate, Mapping[str, Any]]


def _coerce(estimates: Sequence[EstimateLike]) -> List[ExpertEstimate]:
    return [e if isinstance(e, ExpertEstimate) else ExpertEstimate.from_dict(e) for e in estimates]


def delphi_estimate(estimates: Sequence[EstimateLike], iterations: int = 3) -> DelphiResult:
    """
    Combine expert estimates into a consensus figure.

    Args:
        estimates: ExpertEstimate objects or their wire dicts
        iterations: Delphi rounds; accepted for interface parity, the
            aggregation is single-pass

    Returns:
        DelphiResult (all zeros when there are no experts)
    """
    experts = _coerce(estimates)
    if not experts:
        return DelphiResult()

    perts = [e.pert for e in experts]
    average = sum(perts) / len(perts)

    total_confidence = sum(e.confidence for e in experts)
    if total_confidence > 0:
        weighted = sum(p * e.confidence for p, e in zip(perts, experts)) / total_confidence
    else:
        weighted = average

    std_dev = math.sqrt(sum((p - average) ** 2 for p in perts) / len(perts))
    consensus = 1 - std_dev / average if average > 0 else 0.0

    result = DelphiResult(
        final_estimate=weighted,
        consensus=max(0.0, min(1.0, consensus)),
        pert=average,
        confidence_weighted_average=weighted,
    )
    logger.info(
        f"Delphi: {len(experts)} experts, final={result.final_estimate:.2f}, "
        f"consensus={result.consensus:.3f}"
    )
    return result


def expert_analysis(estimates: Sequence[EstimateLike]) -> List[Dict[str, Any]]:
    """
    Per-expert breakdown: PERT value, spread and where the mode sits.

    optimisticBias is the share of the range between optimistic and most
    likely; pessimisticBias the remainder. Both are 0 for a zero range.
    """
    rows = []
    for e in _coerce(estimates):
        spread = e.pessimistic - e.optimistic
        rows.append({
            "expertId": e.expert_id,
            "pertEstimate": e.pert,
            "confidence": e.confidence,
            "range": spread,
            "optimisticBias": (e.most_likely - e.optimistic) / spread if spread else 0.0,
            "pessimisticBias": (e.pessimistic - e.most_likely) / spread if spread else 0.0,
        })
    return rows


def estimate_range(estimates: Sequence[EstimateLike]) -> Dict[str, float]:
    """Lowest optimistic, highest pessimistic and the spread between them."""
    experts = _coerce(estimates)
    if not experts:
        return {"min": 0.0, "max": 0.0, "spread": 0.0}
    low = min(e.optimistic for e in experts)
    high = max(e.pessimistic for e in experts)
    return {"min": low, "max": high, "spread": high - low}
