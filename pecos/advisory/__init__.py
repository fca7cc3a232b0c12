"""
PECOS - Advisory
================

Payload builder for an AI advisory collaborator and an OpenAI-backed client.
"""

from .summary import build_advisory_payload, option_summary
from .openai_client import (
    ADVISORY_SYSTEM_PROMPT,
    FALLBACK_ANALYSIS,
    AdvisoryClient,
    OpenAIAdvisoryClient,
)

__all__ = [
    "build_advisory_payload",
    "option_summary",
    "ADVISORY_SYSTEM_PROMPT",
    "FALLBACK_ANALYSIS",
    "AdvisoryClient",
    "OpenAIAdvisoryClient",
]
