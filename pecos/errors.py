"""
PECOS - Errors
==============

Only call-shape problems raise. Business conditions (infeasible tasks,
degenerate inputs, IRR non-convergence) are reported inside result objects.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class PecosError(Exception):
    """Base class for every error raised by the package."""


class InvalidRequestError(PecosError, ValueError):
    """
    A request rejected before it reaches the engine.

    Attributes:
        message: Human-readable summary (what the host layer returns as 400)
        details: Per-field problems, when the request came through pydantic
    """

    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or []

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "details": self.details}


class AdvisoryConfigurationError(PecosError):
    """The advisory client cannot be built (missing API key)."""
