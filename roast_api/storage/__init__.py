"""Storage module with factories for the profile cache and usage counter."""

from loguru import logger

from ..config import Settings
from ..exceptions import ConfigError
from .cache import InMemoryProfileCache
from .counter import LocalCounter, RedisCounter
from .protocols import ProfileCache, UsageCounter


def create_profile_cache(settings: Settings) -> ProfileCache:
    """Create the process-local profile cache."""
    logger.info(f"Creating in-memory profile cache (ttl={settings.profile_cache_ttl_seconds}s)")
    return InMemoryProfileCache(ttl_seconds=settings.profile_cache_ttl_seconds)


def create_counter(settings: Settings) -> UsageCounter:
    """Create the usage counter for the deployment environment.

    Production uses the durable Redis counter; every other environment
    counts in process.

    Raises:
        ConfigError: If production is selected without a Redis URL.
    """
    if settings.is_production:
        if not settings.redis_url:
            raise ConfigError(
                "Production environment requires a Redis URL for the usage counter. "
                "Please set the ROAST_REDIS_URL or KV_URL environment variable."
            )
        logger.info("Production environment detected, using Redis counter")
        return RedisCounter(settings.redis_url, settings.counter_key)

    logger.info(f"{settings.environment} environment detected, using local counter")
    return LocalCounter()


__all__ = [
    "InMemoryProfileCache",
    "LocalCounter",
    "ProfileCache",
    "RedisCounter",
    "UsageCounter",
    "create_counter",
    "create_profile_cache",
]
