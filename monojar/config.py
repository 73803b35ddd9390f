"""Centralised settings for the monojar service.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).

Timeouts handed to the browser are in milliseconds, matching Playwright's
own units.  The availability probe timeout is in seconds (``httpx``).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    """Read a boolean flag; unset or blank means *default*."""
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in _TRUTHY


def _default_screenshots_enabled() -> bool:
    # Diagnostic screenshots are only on by default while developing.
    is_dev = os.environ.get("APP_ENV", "production").strip().lower() == "development"
    return _env_flag("SCREENSHOTS_ENABLED", is_dev)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Target jar
    # ------------------------------------------------------------------
    default_jar_url: str = field(
        default_factory=lambda: os.environ.get("DEFAULT_JAR_URL", "").strip()
    )
    environment: str = field(
        default_factory=lambda: os.environ.get("APP_ENV", "production").strip().lower()
    )

    # ------------------------------------------------------------------
    # Browser timeouts (ms)
    # ------------------------------------------------------------------
    navigation_timeout: int = field(
        default_factory=lambda: int(os.environ.get("BROWSER_NAVIGATION_TIMEOUT", "30000"))
    )
    wait_timeout: int = field(
        default_factory=lambda: int(os.environ.get("BROWSER_WAIT_TIMEOUT", "15000"))
    )
    stats_timeout: int = field(
        default_factory=lambda: int(os.environ.get("BROWSER_STATS_TIMEOUT", "10000"))
    )

    # ------------------------------------------------------------------
    # Availability probe (seconds)
    # ------------------------------------------------------------------
    probe_timeout: float = field(
        default_factory=lambda: float(os.environ.get("PROBE_TIMEOUT", "5.0"))
    )

    # ------------------------------------------------------------------
    # Retry policy
    # ------------------------------------------------------------------
    max_retries: int = field(
        default_factory=lambda: int(os.environ.get("MAX_RETRIES", "3"))
    )
    retry_initial_delay: int = field(
        default_factory=lambda: int(os.environ.get("RETRY_INITIAL_DELAY", "1000"))
    )

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------
    screenshots_enabled: bool = field(default_factory=_default_screenshots_enabled)
    screenshot_path: Path = field(
        default_factory=lambda: Path(os.environ.get("SCREENSHOTS_PATH", "monobank-error.png"))
    )
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO").strip().upper()
    )

    # ------------------------------------------------------------------
    # HTTP API
    # ------------------------------------------------------------------
    cache_ttl: float = field(
        default_factory=lambda: float(os.environ.get("CACHE_TTL", "15"))
    )
    allowed_origins: list[str] = field(
        default_factory=lambda: [
            origin.strip()
            for origin in os.environ.get("ALLOWED_ORIGINS", "*").split(",")
            if origin.strip()
        ]
    )

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


def configure_logging(level: str | None = None) -> None:
    """Install a plain stderr handler on the root logger.

    Safe to call more than once; ``logging.basicConfig`` is a no-op when the
    root logger already has handlers.
    """
    logging.basicConfig(
        level=(level or settings.log_level),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )


# Module-level singleton; import this everywhere:
#   from monojar.config import settings
settings = Settings()
