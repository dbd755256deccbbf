"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_float, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .extraction import ExtractionConfig, get_extraction_config
from .http_resilience import RateLimit, ResilienceConfig, RetryablePayloadError, RetryPolicy
from .logging import configure_logging, resolve_log_level
from .storage import DatabaseConfig, get_database_config, resolve_data_dir

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "ExtractionConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "RetryablePayloadError",
    "configure_logging",
    "get_database_config",
    "get_extraction_config",
    "optional_env_float",
    "require_env_vars",
    "resolve_data_dir",
    "resolve_log_level",
]
