"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass
import os
from typing import Optional

import dotenv

from src.application.use_cases.get_dashboard_summary import (
    HEATMAP_MODE_ABSOLUTE,
    HEATMAP_MODES,
)
from src.domain.constants import (
    DEFAULT_HEATMAP_HIGH,
    DEFAULT_HEATMAP_MEDIUM,
    GOAL_POLICIES,
    GOAL_POLICY_CACHED,
)
from src.infrastructure.logging.logger import get_app_logger

STORE_BACKENDS = ("sqlalchemy", "memory")


@dataclass(frozen=True)
class SpendlySettings:
    """Settings for the ledger engine and its adapters.

    Attributes:
        store_backend: Document store backend (sqlalchemy or memory).
        user_id: Signed-in user id, if known at start-up.
        retry_interval_ms: Delay between identity resolution attempts.
        max_identity_attempts: Attempts before a commit is deferred.
        heatmap_mode: Heatmap thresholds mode (absolute or relative).
        heatmap_medium: Lower bound of the moderate heatmap tier.
        heatmap_high: Lower bound of the heavy heatmap tier.
        goal_policy: Goal contribution policy (cached or rolling).
    """

    store_backend: str = "sqlalchemy"
    user_id: Optional[str] = None
    retry_interval_ms: int = 300
    max_identity_attempts: int = 20
    heatmap_mode: str = HEATMAP_MODE_ABSOLUTE
    heatmap_medium: int = DEFAULT_HEATMAP_MEDIUM
    heatmap_high: int = DEFAULT_HEATMAP_HIGH
    goal_policy: str = GOAL_POLICY_CACHED

    @property
    def retry_interval_seconds(self) -> float:
        return self.retry_interval_ms / 1000

    @classmethod
    def from_env(cls) -> "SpendlySettings":
        """Build settings from environment variables.

        A ``.env`` file in the working directory is loaded first. Invalid
        values are logged and replaced by their defaults.

        Returns:
            SpendlySettings: Settings sourced from environment variables.
        """
        dotenv.load_dotenv()
        logger = get_app_logger()
        defaults = cls()
        medium = cls._int_env(
            "SPENDLY_HEATMAP_MEDIUM",
            defaults.heatmap_medium,
            minimum=1,
            logger=logger,
        )
        high = cls._int_env(
            "SPENDLY_HEATMAP_HIGH",
            defaults.heatmap_high,
            minimum=1,
            logger=logger,
        )
        if high < medium:
            logger.warning(
                f"SPENDLY_HEATMAP_HIGH ({high}) is below "
                f"SPENDLY_HEATMAP_MEDIUM ({medium}); using defaults"
            )
            medium, high = defaults.heatmap_medium, defaults.heatmap_high
        return cls(
            store_backend=cls._choice_env(
                "SPENDLY_STORE_BACKEND",
                STORE_BACKENDS,
                defaults.store_backend,
                logger=logger,
            ),
            user_id=(os.getenv("SPENDLY_USER_ID") or "").strip() or None,
            retry_interval_ms=cls._int_env(
                "SPENDLY_RETRY_INTERVAL_MS",
                defaults.retry_interval_ms,
                minimum=0,
                logger=logger,
            ),
            max_identity_attempts=cls._int_env(
                "SPENDLY_MAX_IDENTITY_ATTEMPTS",
                defaults.max_identity_attempts,
                minimum=1,
                logger=logger,
            ),
            heatmap_mode=cls._choice_env(
                "SPENDLY_HEATMAP_MODE",
                HEATMAP_MODES,
                defaults.heatmap_mode,
                logger=logger,
            ),
            heatmap_medium=medium,
            heatmap_high=high,
            goal_policy=cls._choice_env(
                "SPENDLY_GOAL_POLICY",
                GOAL_POLICIES,
                defaults.goal_policy,
                logger=logger,
            ),
        )

    @staticmethod
    def _int_env(name: str, default: int, minimum: int, logger) -> int:
        """Read an integer environment variable.

        Args:
            name: Environment variable name.
            default: Value used when unset or invalid.
            minimum: Smallest accepted value.
            logger: Logger used for warnings.

        Returns:
            int: Parsed value or the default.
        """
        raw = os.getenv(name)
        if raw is None or not raw.strip():
            return default
        try:
            value = int(raw.strip())
        except ValueError:
            logger.warning(f"Invalid {name}={raw!r}; using {default}")
            return default
        if value < minimum:
            logger.warning(
                f"{name}={value} is below {minimum}; using {default}"
            )
            return default
        return value

    @staticmethod
    def _choice_env(
        name: str,
        choices: tuple[str, ...],
        default: str,
        logger,
    ) -> str:
        raw = os.getenv(name)
        if raw is None or not raw.strip():
            return default
        value = raw.strip().lower()
        if value not in choices:
            logger.warning(
                f"Unknown {name}={raw!r}; expected one of "
                f"{', '.join(choices)}. Using {default}"
            )
            return default
        return value


__all__ = ["SpendlySettings", "STORE_BACKENDS"]
