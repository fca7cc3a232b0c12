"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
                    PECOS — PROJECT ECONOMICS & SCHEDULING ENGINE
═══════════════════════════════════════════════════════════════════════════════════════════════════════

Pure, stateless functions to estimate, budget and schedule software projects.

ARCHITECTURE
════════════

    ┌─────────────────────────────────────────────────────────────────────────┐
    │                         ORCHESTRATION SURFACE                            │
    │   evaluate_project · estimate_cost · analyze_decision · allocate_resources│
    └──────┬──────────────┬───────────────┬────────────────┬──────────────────┘
           │              │               │                │
    ┌──────▼─────┐ ┌──────▼──────┐ ┌──────▼──────┐ ┌───────▼───────┐
    │ finance    │ │ estimation  │ │ decision    │ │ scheduling    │
    │            │ │             │ │             │ │               │
    │ • COCOMO   │ │ • Delphi    │ │ • EV        │ │ • ordering    │
    │ • FP       │ │ • MonteCarlo│ │ • best path │ │ • placement   │
    │ • NPV/IRR  │ │ • similarity│ │ • tie-break │ │ • leveling    │
    │ • payback  │ │   regression│ │             │ │ • scenarios   │
    └────────────┘ └─────────────┘ └──────┬──────┘ └───────────────┘
                                          │
                                   ┌──────▼──────┐
                                   │ advisory    │  (injected LLM client)
                                   └─────────────┘

Every call receives plain data, returns a result structure and keeps no state.
"""

from .errors import PecosError, InvalidRequestError, AdvisoryConfigurationError
from .orchestration import (
    evaluate_project,
    estimate_cost,
    analyze_decision,
    allocate_resources,
)

__version__ = "1.0.0"

__all__ = [
    "PecosError",
    "InvalidRequestError",
    "AdvisoryConfigurationError",
    "evaluate_project",
    "estimate_cost",
    "analyze_decision",
    "allocate_resources",
]
