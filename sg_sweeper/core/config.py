"""
Runtime settings for a cleanup run, read from the Lambda environment.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

from sg_sweeper.core.retry import DEFAULT_DELAY_MS, DEFAULT_MAX_ATTEMPTS

# Module logger
logger = logging.getLogger(__name__)

UNKNOWN_FUNCTION_NAME = "UnknownFunction"
DEFAULT_REGION = "us-east-1"


def _env_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(env: Mapping[str, str], key: str, default: int) -> int:
    value = env.get(key)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Ignoring non-integer {key}={value!r}, using {default}")
        return default


@dataclass(frozen=True)
class CleanupSettings:
    """
    Settings for one cleanup invocation.

    Attributes:
        function_name: Identity used as the metric's FunctionName dimension
        region: AWS region to clean
        profile: AWS profile name (CLI runs only)
        dry_run: Record candidates without deleting them
        max_attempts: Attempts per API call when throttled
        retry_delay_ms: Fixed delay between throttled attempts
        log_level: Logging level name
    """

    function_name: str = UNKNOWN_FUNCTION_NAME
    region: str = DEFAULT_REGION
    profile: Optional[str] = None
    dry_run: bool = False
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    retry_delay_ms: int = DEFAULT_DELAY_MS
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "CleanupSettings":
        """
        Build settings from environment variables.

        Args:
            env: Mapping to read from (defaults to ``os.environ``)

        Returns:
            CleanupSettings populated from the environment
        """
        env = os.environ if env is None else env
        return cls(
            function_name=env.get("AWS_LAMBDA_FUNCTION_NAME") or UNKNOWN_FUNCTION_NAME,
            region=(
                env.get("AWS_REGION")
                or env.get("AWS_DEFAULT_REGION")
                or DEFAULT_REGION
            ),
            dry_run=_env_bool(env.get("DRY_RUN")),
            max_attempts=_env_int(env, "RETRY_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS),
            retry_delay_ms=_env_int(env, "RETRY_DELAY_MS", DEFAULT_DELAY_MS),
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
        )

    def with_overrides(self, **overrides: Any) -> "CleanupSettings":
        """Return a copy with every non-None override applied."""
        return replace(
            self, **{k: v for k, v in overrides.items() if v is not None}
        )
