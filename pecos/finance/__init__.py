"""
PECOS - Financial Math
======================

Cost models (COCOMO, function points), investment metrics (ROI, NPV, IRR,
payback), Pearson correlation and one-at-a-time sensitivity analysis.
"""

from .cost_models import (
    CocomoMode,
    CocomoEstimate,
    FunctionPointEstimate,
    cocomo,
    function_points,
)
from .investment import (
    IRRResult,
    roi,
    npv,
    irr,
    irr_with_status,
    payback_period,
    correlation,
)
from .sensitivity import ParameterSensitivity, sensitivity_analysis

__all__ = [
    "CocomoMode",
    "CocomoEstimate",
    "FunctionPointEstimate",
    "cocomo",
    "function_points",
    "IRRResult",
    "roi",
    "npv",
    "irr",
    "irr_with_status",
    "payback_period",
    "correlation",
    "ParameterSensitivity",
    "sensitivity_analysis",
]
