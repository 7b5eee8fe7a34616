# ==============================================
# Configuration Management
# ==============================================
#
# PURPOSE:
#   Load and validate all configuration from environment
#   variables / .env file. Provides typed config objects
#   to all other modules.
#
# CLASSES:
# --------
# - ApiConfig (dataclass)
#     base_url: str               (default "http://localhost:4000/api")
#     export_paths: list[str]     (default ["/export-data"])
#     timeout_seconds: float|None (default None = wait forever)
#     max_parallel_fetches: int   (default 2)
#     upstream_url: str           (default "https://analyticsapi.zoho.eu")
#
# - InsightConfig (dataclass)
#     excluded_fields: tuple[str] ("Id" plus EXCLUDED_FIELDS)
#     top_n: int                  (default 3)
#     tie_break: str              (default "insertion")
#
# - AppConfig (dataclass)
#     api: ApiConfig
#     insight: InsightConfig
#     log_level: str              (default "WARNING")
#
# FUNCTION:
# ---------
# - get_config() -> AppConfig
#     Load .env using python-dotenv, construct AppConfig.
#     Returns the same singleton on repeated calls.
#
# - reset_config() -> None
#     Drop the singleton so the next get_config() re-reads the environment.
#
# USAGE:
# ------
#   from field_insights.config import get_config
#   config = get_config()
#   print(config.api.base_url)
#   print(config.insight.top_n)
#
# ==============================================

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv

from field_insights.errors import ConfigError


TIE_BREAK_CHOICES = ("insertion", "label")
LOG_LEVEL_CHOICES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Always excluded; EXCLUDED_FIELDS adds to it
RESERVED_FIELD = "Id"


@dataclass
class ApiConfig:
    """Analytics export API configuration."""
    base_url: str = "http://localhost:4000/api"
    export_paths: List[str] = field(default_factory=lambda: ["/export-data"])
    timeout_seconds: Optional[float] = None
    max_parallel_fetches: int = 2
    upstream_url: str = "https://analyticsapi.zoho.eu"


@dataclass
class InsightConfig:
    """Aggregation and ranking configuration."""
    excluded_fields: Tuple[str, ...] = ("Id",)
    top_n: int = 3
    tie_break: str = "insertion"


@dataclass
class AppConfig:
    """Main application configuration."""
    api: ApiConfig
    insight: InsightConfig
    log_level: str = "WARNING"


# Singleton instance
_config_instance: Optional[AppConfig] = None


def _split_list(raw: str) -> List[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def _env_int(name: str, default: int, minimum: int = 1) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(name, f"expected an integer, got {raw!r}")
    if value < minimum:
        raise ConfigError(name, f"must be >= {minimum}, got {value}")
    return value


def _env_timeout(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(name, f"expected a number of seconds, got {raw!r}")
    if value <= 0:
        raise ConfigError(name, f"must be positive, got {value}")
    return value


def get_config() -> AppConfig:
    """
    Load configuration from environment variables / .env file.
    Returns the same singleton instance on repeated calls.

    Returns:
        AppConfig: Application configuration

    Raises:
        ConfigError: If a variable holds a value of the wrong shape.
    """
    global _config_instance

    if _config_instance is not None:
        return _config_instance

    # Load .env file from project root
    env_path = Path(__file__).parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)

    # Build API configuration
    export_paths = _split_list(os.getenv("EXPORT_PATHS", "/export-data"))
    if not export_paths:
        raise ConfigError("EXPORT_PATHS", "at least one export path is required")

    api_config = ApiConfig(
        base_url=os.getenv("API_BASE_URL", "http://localhost:4000/api").rstrip("/"),
        export_paths=export_paths,
        timeout_seconds=_env_timeout("EXPORT_TIMEOUT_SECONDS"),
        max_parallel_fetches=_env_int("MAX_PARALLEL_FETCHES", 2),
        upstream_url=os.getenv("UPSTREAM_URL", "https://analyticsapi.zoho.eu"),
    )

    # Build insight configuration
    tie_break = os.getenv("INSIGHT_TIE_BREAK", "insertion").strip().lower()
    if tie_break not in TIE_BREAK_CHOICES:
        raise ConfigError(
            "INSIGHT_TIE_BREAK",
            f"expected one of {', '.join(TIE_BREAK_CHOICES)}, got {tie_break!r}",
        )

    extra_excluded = _split_list(os.getenv("EXCLUDED_FIELDS", ""))
    insight_config = InsightConfig(
        excluded_fields=(RESERVED_FIELD,) + tuple(
            name for name in dict.fromkeys(extra_excluded) if name != RESERVED_FIELD
        ),
        top_n=_env_int("INSIGHT_TOP_N", 3),
        tie_break=tie_break,
    )

    log_level = (os.getenv("LOG_LEVEL") or "WARNING").strip().upper()
    if log_level not in LOG_LEVEL_CHOICES:
        raise ConfigError(
            "LOG_LEVEL",
            f"expected one of {', '.join(LOG_LEVEL_CHOICES)}, got {log_level!r}",
        )

    # Build main application configuration
    _config_instance = AppConfig(
        api=api_config,
        insight=insight_config,
        log_level=log_level,
    )

    return _config_instance


def reset_config() -> None:
    """Forget the cached configuration so the next get_config() re-reads it."""
    global _config_instance
    _config_instance = None
