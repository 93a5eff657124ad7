"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var
from .errors import (
    ConfigurationError,
    InaccessiblePathError,
    OverridesError,
)
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .inaturalist import INaturalistConfig, get_inaturalist_config
from .overrides import load_overrides
from .reconcile import ReconcileOptions, get_reconcile_options
from .storage import StorageConfig, get_storage_config, resolve_macdive_database

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "INaturalistConfig",
    "InaccessiblePathError",
    "OverridesError",
    "RateLimit",
    "ReconcileOptions",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "get_inaturalist_config",
    "get_reconcile_options",
    "get_storage_config",
    "load_overrides",
    "optional_env_var",
    "resolve_macdive_database",
]
