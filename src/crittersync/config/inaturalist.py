"""iNaturalist configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from crittersync import __version__

from .env import env_float, optional_env_var
from .errors import ConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .storage import get_storage_config

if TYPE_CHECKING:
    from .storage import StorageConfig

DEFAULT_INATURALIST_BASE_URL = "https://api.inaturalist.org/v1/"
DEFAULT_INATURALIST_RATE_LIMIT = 1.0
INATURALIST_TIMEOUT_SECONDS = 20.0


@dataclass(frozen=True, slots=True)
class INaturalistConfig:
    resilience: ResilienceConfig


def get_inaturalist_config(*, storage: StorageConfig | None = None) -> INaturalistConfig:
    base_url = optional_env_var("INATURALIST_BASE_URL") or DEFAULT_INATURALIST_BASE_URL
    calls_per_second = env_float("INATURALIST_RATE_LIMIT", DEFAULT_INATURALIST_RATE_LIMIT)
    if calls_per_second <= 0:
        raise ConfigurationError("INATURALIST_RATE_LIMIT must be positive")

    resilience = ResilienceConfig(
        name="inaturalist",
        base_url=base_url,
        timeout_seconds=INATURALIST_TIMEOUT_SECONDS,
        ratelimit=_rate_limit(calls_per_second),
        retry=RetryPolicy(total=4),
        cache=_cache_config(optional_env_var("INATURALIST_CACHE"), storage=storage),
        default_headers={"User-Agent": f"crittersync/{__version__}"},
    )
    return INaturalistConfig(resilience=resilience)


def _should_cache_payload(payload: object) -> bool:
    return isinstance(payload, dict) and "error" not in payload


def _rate_limit(calls_per_second: float) -> RateLimit:
    if calls_per_second >= 1:
        return RateLimit(max_calls=int(calls_per_second), per_seconds=1.0)
    return RateLimit(max_calls=1, per_seconds=1.0 / calls_per_second)


def _cache_config(value: str | None, *, storage: StorageConfig | None) -> CacheConfig | None:
    backend = (value or "memory").lower()
    if backend == "off":
        return None
    if backend == "memory":
        return CacheConfig(enabled=True, backend="memory", should_cache=_should_cache_payload)
    if backend == "sqlite":
        storage_config = storage or get_storage_config()
        return CacheConfig(
            enabled=True,
            backend="sqlite",
            sqlite_path=str(storage_config.http_cache_path()),
            should_cache=_should_cache_payload,
        )
    raise ConfigurationError(f"INATURALIST_CACHE must be memory, sqlite or off, got {value!r}")
