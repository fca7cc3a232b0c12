"""
PECOS - Feature Flags
=====================

Runtime configuration for the engines.

Usage:
    from pecos.feature_flags import FeatureFlags

    horizon = FeatureFlags.get_default_horizon()
    if FeatureFlags.is_enabled("report_cycles"):
        ...

Environment variables:
    PECOS_DEFAULT_HORIZON=120
    PECOS_MONTE_CARLO_ITERATIONS=5000
    PECOS_REPORT_CYCLES=false
    PECOS_PRIORITY_ORDERING=true
    PECOS_ADVISORY_MODEL=gpt-4o-mini
    PECOS_SCENARIO_WORKERS=4
"""

from __future__ import annotations

import os
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# FEATURE FLAGS CONFIG
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class FeatureFlagsConfig:
    """
    Engine configuration.

    Defaults reproduce the reference behaviour of every engine.
    """
    default_horizon: int = 100
    monte_carlo_iterations: int = 1000
    scenario_workers: int = 0
    advisory_model: str = "gpt-4o-mini"

    # Feature toggles
    report_cycles: bool = True
    priority_ordering: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "default_horizon": self.default_horizon,
            "monte_carlo_iterations": self.monte_carlo_iterations,
            "scenario_workers": self.scenario_workers,
            "advisory_model": self.advisory_model,
            "report_cycles": self.report_cycles,
            "priority_ordering": self.priority_ordering,
        }


class FeatureFlags:
    """
    Lazily loaded, process-wide view of the configuration.

    Only read-mostly settings live here; engines still take explicit
    arguments, which always win over the configured defaults.
    """

    _instance: Optional[FeatureFlagsConfig] = None

    @classmethod
    def _load_from_env(cls) -> FeatureFlagsConfig:
        """Build the configuration from PECOS_* environment variables."""
        config = FeatureFlagsConfig()

        int_mapping = {
            "PECOS_DEFAULT_HORIZON": "default_horizon",
            "PECOS_MONTE_CARLO_ITERATIONS": "monte_carlo_iterations",
            "PECOS_SCENARIO_WORKERS": "scenario_workers",
        }
        for env_var, attr_name in int_mapping.items():
            value = os.environ.get(env_var)
            if value:
                try:
                    parsed = int(value)
                except ValueError:
                    logger.warning(f"Invalid value for {env_var}: {value}")
                    continue
                if parsed < 0:
                    logger.warning(f"Negative value for {env_var} ignored: {value}")
                    continue
                setattr(config, attr_name, parsed)
                logger.info(f"Feature flag {attr_name} = {parsed}")

        bool_mapping = {
            "PECOS_REPORT_CYCLES": "report_cycles",
            "PECOS_PRIORITY_ORDERING": "priority_ordering",
        }
        for env_var, attr_name in bool_mapping.items():
            value = os.environ.get(env_var)
            if value:
                setattr(config, attr_name, value.lower() in ("true", "1", "yes"))

        model = os.environ.get("PECOS_ADVISORY_MODEL")
        if model:
            config.advisory_model = model

        return config

    @classmethod
    def get_config(cls) -> FeatureFlagsConfig:
        """Current configuration (loaded on first access)."""
        if cls._instance is None:
            cls._instance = cls._load_from_env()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the cached configuration so the next access reloads it."""
        cls._instance = None

    @classmethod
    def get_default_horizon(cls) -> int:
        return cls.get_config().default_horizon

    @classmethod
    def get_monte_carlo_iterations(cls) -> int:
        return cls.get_config().monte_carlo_iterations

    @classmethod
    def get_scenario_workers(cls) -> int:
        return cls.get_config().scenario_workers

    @classmethod
    def get_advisory_model(cls) -> str:
        return cls.get_config().advisory_model

    @classmethod
    def is_enabled(cls, feature: str) -> bool:
        """
        Whether a boolean feature is on.

        Args:
            feature: report_cycles or priority_ordering
        """
        config = cls.get_config()
        feature_map = {
            "report_cycles": config.report_cycles,
            "priority_ordering": config.priority_ordering,
        }
        return feature_map.get(feature, False)

    @classmethod
    def set_flag(cls, name: str, value: Any) -> bool:
        """
        Override one setting at runtime (tests, notebooks).

        Returns:
            True if the flag exists and was set
        """
        config = cls.get_config()
        if not hasattr(config, name):
            logger.warning(f"Unknown feature flag: {name}")
            return False
        setattr(config, name, value)
        logger.info(f"Feature flag {name} set to {value}")
        return True
