"""Registry service configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import env_value, optional_float_env, require_env_var
from .errors import ConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_METADATA_PATH = "/og_metadata.json"
DEFAULT_HTTP_TIMEOUT_SECONDS = 10.0


def _default_resilience() -> ResilienceConfig:
    return metadata_resilience_config()


@dataclass(frozen=True, slots=True)
class RegistryConfig:
    controllers: frozenset[str]
    metadata_path: str = DEFAULT_METADATA_PATH
    resilience: ResilienceConfig = field(default_factory=_default_resilience)


def metadata_resilience_config(
    *,
    timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
    cache: CacheConfig | None = None,
) -> ResilienceConfig:
    # metadata must be read fresh on every register/update, so no cache by default
    return ResilienceConfig(
        name="metadata",
        timeout_seconds=timeout_seconds,
        retry=RetryPolicy(total=3),
        ratelimit=RateLimit(max_calls=8, per_seconds=1.0),
        cache=cache,
    )


def parse_controllers(raw: str) -> frozenset[str]:
    controllers = frozenset(part.strip() for part in raw.split(",") if part.strip())
    if not controllers:
        raise ConfigurationError("OGINDEX_CONTROLLERS must name at least one controller")
    return controllers


def get_registry_config() -> RegistryConfig:
    controllers = parse_controllers(require_env_var("OGINDEX_CONTROLLERS"))
    metadata_path = env_value("OGINDEX_METADATA_PATH") or DEFAULT_METADATA_PATH
    if not metadata_path.startswith("/"):
        metadata_path = f"/{metadata_path}"
    timeout = optional_float_env("OGINDEX_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT_SECONDS)
    cache = CacheConfig(backend="memory") if env_value("OGINDEX_HTTP_CACHE") == "1" else None

    return RegistryConfig(
        controllers=controllers,
        metadata_path=metadata_path,
        resilience=metadata_resilience_config(timeout_seconds=timeout, cache=cache),
    )
