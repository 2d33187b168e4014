"""
CX Engine Configuration
=======================

Engine limits, alert thresholds and logging options, read from the process
environment. A `.env` file at the project root is loaded first when present;
real environment variables win over it.

Environment Variables:
    CX_MAX_KEY_PHRASES: Key phrases kept per sentiment result (default: 5)
    CX_ROOT_CAUSE_TOP_UNITS: Keyword/bigram units considered for clustering (default: 20)
    CX_ROOT_CAUSE_MAX_RESULTS: Root causes returned per extraction (default: 10)
    CX_ROOT_CAUSE_SAMPLE_LIMIT: Negative texts sampled for extraction (default: 50)
    CX_MAX_BATCH_ITEMS: Feedback items analyzed per batch (default: 100)

    CX_ALERT_SENTIMENT_DROP_PCT: Sentiment drop alert, % (default: 20)
    CX_ALERT_NPS_DECLINE: NPS decline alert, points (default: 10)
    CX_ALERT_COMPLAINT_SPIKE: Complaints in 24h alert (default: 10)
    CX_ALERT_COMPETITOR_GAP: Competitor sentiment lead alert (default: 0.2)

    LOG_LEVEL: Root log level (default: INFO)
    LOG_FILE: Optional rotating log file
    LOG_JSON: Emit JSON lines (default: false)
    ENVIRONMENT: development / staging / production (default: development)

Usage:
    from cxengine.config import get_settings

    limit = get_settings().engine.root_cause_sample_limit
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, TypeVar

from dotenv import load_dotenv

from . import __version__


_DOTENV = Path(__file__).resolve().parent.parent / ".env"
if _DOTENV.exists():
    load_dotenv(_DOTENV, override=False)

T = TypeVar("T")

TRUTHY = ("true", "1", "yes", "on")


def get_env(key: str, default: Optional[str] = None, required: bool = False) -> Optional[str]:
    """Raw string value; raises ValueError when `required` and unset."""
    value = os.environ.get(key, default)
    if value is None and required:
        raise ValueError(f"Missing required environment variable {key}")
    return value


def _get_typed(key: str, default: T, cast: Callable[[str], T], kind: str) -> T:
    raw = os.environ.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        raise ValueError(f"{key}={raw!r} is not a valid {kind}") from None


def get_env_int(key: str, default: int) -> int:
    return _get_typed(key, default, int, "integer")


def get_env_float(key: str, default: float) -> float:
    return _get_typed(key, default, float, "number")


def get_env_bool(key: str, default: bool) -> bool:
    raw = os.environ.get(key)
    if raw is None:
        return default
    return raw.strip().lower() in TRUTHY


def _require_positive(obj, *names: str) -> None:
    for name in names:
        if getattr(obj, name) <= 0:
            raise ValueError(f"{type(obj).__name__}.{name} must be positive, got {getattr(obj, name)}")


@dataclass
class EngineConfig:
    """Limits for the text-analytics engine and its batch callers."""

    max_key_phrases: int = field(default_factory=lambda: get_env_int("CX_MAX_KEY_PHRASES", 5))
    root_cause_top_units: int = field(default_factory=lambda: get_env_int("CX_ROOT_CAUSE_TOP_UNITS", 20))
    root_cause_max_results: int = field(default_factory=lambda: get_env_int("CX_ROOT_CAUSE_MAX_RESULTS", 10))

    # Caller-side sampling caps
    root_cause_sample_limit: int = field(default_factory=lambda: get_env_int("CX_ROOT_CAUSE_SAMPLE_LIMIT", 50))
    max_batch_items: int = field(default_factory=lambda: get_env_int("CX_MAX_BATCH_ITEMS", 100))

    def __post_init__(self):
        if self.max_key_phrases < 0:
            raise ValueError(f"EngineConfig.max_key_phrases cannot be negative, got {self.max_key_phrases}")
        _require_positive(
            self,
            "root_cause_top_units",
            "root_cause_max_results",
            "root_cause_sample_limit",
            "max_batch_items",
        )


@dataclass
class AlertThresholds:
    """Trigger levels for the alert rules."""

    sentiment_drop_pct: float = field(default_factory=lambda: get_env_float("CX_ALERT_SENTIMENT_DROP_PCT", 20.0))
    nps_decline: float = field(default_factory=lambda: get_env_float("CX_ALERT_NPS_DECLINE", 10.0))
    complaint_spike: int = field(default_factory=lambda: get_env_int("CX_ALERT_COMPLAINT_SPIKE", 10))
    competitor_gap: float = field(default_factory=lambda: get_env_float("CX_ALERT_COMPETITOR_GAP", 0.2))

    def __post_init__(self):
        _require_positive(self, "sentiment_drop_pct", "complaint_spike")


@dataclass
class LoggingConfig:
    level: str = field(default_factory=lambda: get_env("LOG_LEVEL", "INFO"))
    log_file: Optional[str] = field(default_factory=lambda: get_env("LOG_FILE") or None)
    json_logs: bool = field(default_factory=lambda: get_env_bool("LOG_JSON", False))


@dataclass
class Settings:
    """Everything the CLI and API read at startup."""

    engine: EngineConfig = field(default_factory=EngineConfig)
    alerts: AlertThresholds = field(default_factory=AlertThresholds)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    app_name: str = "cxengine"
    app_version: str = __version__
    environment: str = field(default_factory=lambda: get_env("ENVIRONMENT", "development"))

    def is_production(self) -> bool:
        return self.environment.strip().lower() in ("production", "prod")


def load_settings() -> Settings:
    """Build fresh settings from the environment. Invalid values raise ValueError."""
    return Settings()


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Process-wide settings, built on first use."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Forget cached settings; the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
