"""
PECOS - One-at-a-time Sensitivity Analysis
==========================================

Each parameter is moved by ±variation while the others stay at their base
value:

    sensitivity_k = | (%Δ output) / (%Δ input) |
                  = | ((f(x⁺_k) - f(x)) / f(x) · 100) / (variation · 100) |
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping

logger = logging.getLogger(__name__)


@dataclass
class ParameterSensitivity:
    """Outputs at +variation and -variation and the elasticity-like ratio."""
    increase: float
    decrease: float
    sensitivity: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "increase": self.increase,
            "decrease": self.decrease,
            "sensitivity": self.sensitivity,
        }


def sensitivity_analysis(
    base_parameters: Mapping[str, float],
    calculate: Callable[[Dict[str, float]], float],
    variation: float = 0.2,
) -> Dict[str, ParameterSensitivity]:
    """
    Sensitivity of calculate() to each parameter.

    Args:
        base_parameters: Parameter name → base value (never mutated)
        calculate: Function of a parameter dict returning a scalar
        variation: Relative change applied in both directions (0.2 = ±20 %)

    Returns:
        Parameter name → ParameterSensitivity. Sensitivity is 0 when the base
        output or the variation is 0.
    """
    base = dict(base_parameters)
    base_result = calculate(dict(base))
    results: Dict[str, ParameterSensitivity] = {}

    for name, original in base.items():
        increased = dict(base)
        increased[name] = original * (1 + variation)
        increased_result = calculate(increased)

        decreased = dict(base)
        decreased[name] = original * (1 - variation)
        decreased_result = calculate(decreased)

        if base_result == 0 or variation == 0:
            sensitivity = 0.0
        else:
            output_change_pct = (increased_result - base_result) / base_result * 100
            sensitivity = abs(output_change_pct / (variation * 100))

        results[name] = ParameterSensitivity(
            increase=increased_result,
            decrease=decreased_result,
            sensitivity=sensitivity,
        )

    logger.debug(f"Sensitivity over {len(results)} parameters (variation={variation})")
    return results
