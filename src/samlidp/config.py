"""Connection settings for the identity platform.

Settings come from the environment and are checked once, up front, so a bad
org URL or a missing token is reported before any remote call is made.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_REQUEST_TIMEOUT_SECONDS = 30
MIN_REQUEST_TIMEOUT_SECONDS = 1
MAX_REQUEST_TIMEOUT_SECONDS = 300

# Spec files are tiny; anything bigger is not a spec
MAX_SPEC_FILE_SIZE_BYTES = 256 * 1024

# Org origin only: scheme, host and optional port
VALID_ORG_URL_PATTERN = r"^https://[A-Za-z0-9.-]+(:[0-9]+)?/?$"

_TRUE_VALUES = frozenset({"true", "1", "yes"})


class ConfigurationError(Exception):
    """Raised when the environment does not describe a usable configuration."""

    pass


def _env_int(key: str, default: int) -> int:
    raw = os.environ.get(key)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{key} must be an integer: {raw}") from e


def _env_flag(key: str) -> bool:
    return os.environ.get(key, "").strip().lower() in _TRUE_VALUES


@dataclass(frozen=True)
class Config:
    """Validated connection and runtime settings.

    Construction fails with ConfigurationError listing every invalid field,
    so one run surfaces all of them.
    """

    org_url: str
    api_token: str = field(repr=False)

    request_timeout_seconds: int = DEFAULT_REQUEST_TIMEOUT_SECONDS
    dry_run: bool = False
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        problems: list[str] = []

        if not self.org_url:
            problems.append("OKTA_ORG_URL is required")
        elif not re.match(VALID_ORG_URL_PATTERN, self.org_url):
            problems.append(f"OKTA_ORG_URL must be an https origin: {self.org_url}")

        # Never echo the token itself
        if not self.api_token:
            problems.append("OKTA_API_TOKEN is required")

        timeout = self.request_timeout_seconds
        if timeout < MIN_REQUEST_TIMEOUT_SECONDS or timeout > MAX_REQUEST_TIMEOUT_SECONDS:
            problems.append(
                f"OKTA_REQUEST_TIMEOUT must be between {MIN_REQUEST_TIMEOUT_SECONDS} "
                f"and {MAX_REQUEST_TIMEOUT_SECONDS} seconds, got {timeout}"
            )

        if self.log_level.upper() not in LOG_LEVELS:
            problems.append(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}: {self.log_level}")

        if problems:
            raise ConfigurationError("Invalid configuration:\n  - " + "\n  - ".join(problems))

    @classmethod
    def from_env(cls) -> Config:
        """Build a Config from the process environment.

        Variables:
            OKTA_ORG_URL: Org origin, e.g. https://example.okta.com
            OKTA_API_TOKEN: API token sent as ``SSWS <token>``
            OKTA_REQUEST_TIMEOUT: Per-request timeout in seconds (default: 30)
            DRY_RUN: "true", "1" or "yes" to plan without applying (default: off)
            LOG_LEVEL: Root log level (default: INFO)
        """
        return cls(
            org_url=os.environ.get("OKTA_ORG_URL", ""),
            api_token=os.environ.get("OKTA_API_TOKEN", ""),
            request_timeout_seconds=_env_int(
                "OKTA_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT_SECONDS
            ),
            dry_run=_env_flag("DRY_RUN"),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
        )
