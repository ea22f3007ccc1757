"""Application configuration helpers."""

from __future__ import annotations

from .crate_api import (
    DEFAULT_CRATE_API_URL,
    DEFAULT_CRATE_SSE_URL,
    CrateApiConfig,
    get_crate_api_config,
    get_crate_api_token,
)
from .env import env_or_default, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import NO_RETRY, RateLimit, ResilienceConfig, RetryPolicy

__all__ = [
    "DEFAULT_CRATE_API_URL",
    "DEFAULT_CRATE_SSE_URL",
    "NO_RETRY",
    "ConfigurationError",
    "CrateApiConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "env_or_default",
    "get_crate_api_config",
    "get_crate_api_token",
    "require_env_var",
    "require_env_vars",
]
