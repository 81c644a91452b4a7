"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_float_env, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .registry import (
    DEFAULT_METADATA_PATH,
    RegistryConfig,
    get_registry_config,
    metadata_resilience_config,
)
from .storage import (
    SnapshotDatabaseConfig,
    StorageConfig,
    get_snapshot_database_config,
    get_storage_config,
)

__all__ = [
    "DEFAULT_METADATA_PATH",
    "CacheConfig",
    "ConfigurationError",
    "MissingConfigurationError",
    "RateLimit",
    "RegistryConfig",
    "ResilienceConfig",
    "RetryPolicy",
    "SnapshotDatabaseConfig",
    "StorageConfig",
    "configure_logging",
    "get_registry_config",
    "get_snapshot_database_config",
    "get_storage_config",
    "metadata_resilience_config",
    "optional_float_env",
    "require_env_var",
    "require_env_vars",
]
