"""
Advisory collaborator backed by the OpenAI Chat Completions API.

The client is constructed explicitly and passed to analyze_decision(); there
is no module-level instance.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional, Protocol

from dotenv import load_dotenv
from openai import OpenAI

from ..errors import AdvisoryConfigurationError
from ..feature_flags import FeatureFlags

load_dotenv()
logger = logging.getLogger(__name__)


ADVISORY_SYSTEM_PROMPT = (
    "You are a financial decision analysis engine. You receive JSON describing "
    "several economic decision options, each with expected value, ROI, average "
    "cost and value, success rate and risk level. Pick the best option strictly "
    "from these numbers.\n\n"
    "Reply with a JSON object with exactly these string fields:\n"
    "- best_solution: the exact option name that is numerically best by expected "
    "value; on a tie prefer better ROI or lower risk.\n"
    "- justification_key_points: one or two sentences with the key numeric "
    "reasons (values, percentages, comparisons only).\n"
    "- justification_long: an objective numeric comparison of all options, "
    "expected value first, then ROI, risk level, success/failure rates and "
    "cost/value ratios.\n\n"
    "Use only the input data. Do not speculate or add qualitative criteria."
)

FALLBACK_ANALYSIS: Dict[str, str] = {
    "best_solution": "Unable to determine",
    "justification_key_points": "AI analysis failed to provide structured output.",
    "justification_long": "The AI analysis could not be completed due to a parsing error.",
}


class AdvisoryClient(Protocol):
    """Anything that can turn an advisory payload into a recommendation."""

    def generate_decision_analysis(self, payload: Dict[str, Any]) -> Dict[str, str]:
        ...


class OpenAIAdvisoryClient:
    """Wrapper around Chat Completions in JSON mode."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        client: Optional[Any] = None,
    ):
        self.model = model or FeatureFlags.get_advisory_model()
        if client is not None:
            self.client = client
            return

        api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise AdvisoryConfigurationError("OPENAI_API_KEY not found in environment or .env")
        self.client = OpenAI(api_key=api_key)

    def generate_decision_analysis(self, payload: Dict[str, Any]) -> Dict[str, str]:
        """
        Ask the model for a recommendation over the advisory payload.

        Returns:
            {best_solution, justification_key_points, justification_long};
            FALLBACK_ANALYSIS when the call fails or the reply is not JSON.
        """
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": ADVISORY_SYSTEM_PROMPT},
                    {"role": "user", "content": json.dumps(payload, indent=2)},
                ],
                response_format={"type": "json_object"},
                temperature=0.1,
            )
            content = response.choices[0].message.content or "{}"
            parsed = json.loads(content)
        except Exception as e:
            logger.error(f"Advisory analysis failed: {e}")
            return dict(FALLBACK_ANALYSIS)

        if not isinstance(parsed, dict):
            logger.error(f"Advisory reply is not a JSON object: {type(parsed).__name__}")
            return dict(FALLBACK_ANALYSIS)

        return {
            "best_solution": str(parsed.get("best_solution") or ""),
            "justification_key_points": str(parsed.get("justification_key_points") or ""),
            "justification_long": str(parsed.get("justification_long") or ""),
        }
