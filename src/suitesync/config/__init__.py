"""Application configuration helpers."""

from __future__ import annotations

from suitesync.common.logging import configure_logging

from .account import AccountConfig, get_account_config, get_cache_config, to_url_account_id
from .deploy import AdditionalDependencies, ManifestDependencies
from .env import require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .storage import StorageConfig, get_http_cache_path, get_storage_config

__all__ = [
    "AccountConfig",
    "AdditionalDependencies",
    "CacheConfig",
    "ConfigurationError",
    "ManifestDependencies",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_account_config",
    "get_cache_config",
    "get_http_cache_path",
    "get_storage_config",
    "require_env_var",
    "require_env_vars",
    "to_url_account_id",
]
