"""Service factory for dependency injection."""

from dataclasses import dataclass

import httpx
from loguru import logger

from .config import Settings
from .exceptions import StorageError
from .github import ProfileFetcher
from .providers import LLMProvider, create_llm_provider
from .roast import RoastGenerator
from .storage import ProfileCache, UsageCounter, create_counter, create_profile_cache


@dataclass
class Services:
    """Components shared by all requests."""

    fetcher: ProfileFetcher
    generator: RoastGenerator
    counter: UsageCounter
    cache: ProfileCache
    llm_provider: LLMProvider
    http_client: httpx.AsyncClient


async def create_services(settings: Settings) -> Services:
    """Build and start every component for the current environment."""
    logger.info(f"Creating services for environment: {settings.environment}")

    cache = create_profile_cache(settings)
    counter = create_counter(settings)
    llm_provider = create_llm_provider(settings)
    http_client = httpx.AsyncClient(timeout=settings.http_timeout)

    if not settings.github_token:
        logger.warning("GITHUB_TOKEN not set, profile fetches will fail")

    await cache.startup()
    await counter.startup()

    services = Services(
        fetcher=ProfileFetcher(
            cache=cache,
            http_client=http_client,
            token=settings.github_token,
            api_url=settings.github_api_url,
            contributions_url=settings.contributions_api_url,
        ),
        generator=RoastGenerator(llm_provider),
        counter=counter,
        cache=cache,
        llm_provider=llm_provider,
        http_client=http_client,
    )

    logger.info("Services created successfully")
    return services


async def shutdown_services(services: Services) -> None:
    """Clean shutdown of all service components."""
    logger.info("Shutting down services")

    try:
        await services.counter.shutdown()
    except (StorageError, ConnectionError, TimeoutError, OSError) as e:
        logger.warning(f"Counter shutdown failed: {e}")

    await services.cache.shutdown()
    await services.http_client.aclose()

    logger.info("Service shutdown complete")
