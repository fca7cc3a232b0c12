"""
PECOS - Estimation Methods
==========================

- Delphi/PERT consensus of expert three-point estimates
- Monte Carlo simulation of multiplicative risk factors
- Similarity-based regression over historical projects
"""

from .delphi import (
    ExpertEstimate,
    DelphiResult,
    delphi_estimate,
    expert_analysis,
    estimate_range,
)
from .monte_carlo import (
    RiskFactors,
    SimulationResult,
    monte_carlo_simulation,
)
from .regression import (
    HistoricalProject,
    ProjectProfile,
    RegressionResult,
    regression_estimate,
    similarity,
    historical_statistics,
    prediction_interval,
)

__all__ = [
    "ExpertEstimate",
    "DelphiResult",
    "delphi_estimate",
    "expert_analysis",
    "estimate_range",
    "RiskFactors",
    "SimulationResult",
    "monte_carlo_simulation",
    "HistoricalProject",
    "ProjectProfile",
    "RegressionResult",
    "regression_estimate",
    "similarity",
    "historical_statistics",
    "prediction_interval",
]
