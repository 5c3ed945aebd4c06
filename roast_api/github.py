"""GitHub profile fetching with caching."""

import asyncio
from typing import Any

import httpx
from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ConfigError, UpstreamError
from .models import ProfileRecord
from .storage import ProfileCache

GITHUB_API_URL = "https://api.github.com"
CONTRIBUTIONS_API_URL = "https://github-contributions-api.jogruber.de/v4"


def _response_body(response: httpx.Response) -> Any:
    """Decode an error body as JSON, falling back to text."""
    try:
        return response.json()
    except ValueError:
        return response.text or None


def contributions_total(payload: dict[str, Any]) -> int:
    """Extract the last-year contribution total from the contributions API.

    The API reports ``{"total": {"lastYear": N}}`` for ``?y=last``; a bare
    number under ``total`` is accepted as well.
    """
    total = payload.get("total", 0)
    if isinstance(total, dict):
        total = total.get("lastYear", 0)
    return int(total or 0)


def merge_profile(
    username: str,
    user: dict[str, Any],
    contributions: dict[str, Any],
) -> ProfileRecord:
    """Merge GitHub user attributes with the contribution count."""
    return ProfileRecord.model_validate(
        {
            **user,
            "username": user.get("login") or username,
            "contributions_last_year": contributions_total(contributions),
        }
    )


class ProfileFetcher:
    """Fetches and caches merged GitHub profiles."""

    def __init__(
        self,
        cache: ProfileCache,
        http_client: httpx.AsyncClient,
        token: str | None,
        api_url: str = GITHUB_API_URL,
        contributions_url: str = CONTRIBUTIONS_API_URL,
    ) -> None:
        """Initialize with injected dependencies.

        Args:
            cache: Profile cache consulted before any upstream call.
            http_client: Shared HTTP client for both upstream APIs.
            token: GitHub token sent as a bearer credential.
            api_url: Base URL of the GitHub REST API.
            contributions_url: Base URL of the contributions API.
        """
        self.cache = cache
        self.http_client = http_client
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.contributions_url = contributions_url.rstrip("/")

    async def fetch(self, username: str) -> ProfileRecord:
        """Return the profile for ``username``, from cache when fresh.

        On a miss both upstream APIs are queried concurrently; the merged
        record is cached only when both succeed.

        Raises:
            ConfigError: If no GitHub token is configured.
            UpstreamError: If either upstream request fails.
        """
        cached = await self.cache.get(username)
        if cached is not None:
            logger.debug(f"Profile cache hit for {username}")
            return cached

        logger.debug(f"Profile cache miss for {username}")

        if not self.token:
            logger.error("GitHub token is not configured")
            raise ConfigError("GitHub token is not configured")

        # A failure in either request cancels the other
        try:
            async with asyncio.TaskGroup() as group:
                user_task = group.create_task(self._get_user(username))
                contributions_task = group.create_task(self._get_contributions(username))
        except ExceptionGroup as eg:
            raise eg.exceptions[0]

        try:
            record = merge_profile(username, user_task.result(), contributions_task.result())
        except (PydanticValidationError, TypeError, ValueError) as e:
            logger.error(f"Unexpected profile data for {username}: {e}")
            raise UpstreamError(f"Unexpected profile data for {username}") from e

        await self.cache.set(username, record)
        return record

    async def _get_user(self, username: str) -> dict[str, Any]:
        return await self._get_json(
            "GitHub",
            f"{self.api_url}/users/{username}",
            headers={
                "Authorization": f"Bearer {self.token}",
                "Accept": "application/vnd.github+json",
            },
        )

    async def _get_contributions(self, username: str) -> dict[str, Any]:
        return await self._get_json(
            "Contributions API",
            f"{self.contributions_url}/{username}",
            params={"y": "last"},
        )

    async def _get_json(self, source: str, url: str, **kwargs: Any) -> dict[str, Any]:
        """GET ``url`` and decode a JSON object, mapping failures to UpstreamError."""
        try:
            response = await self.http_client.get(url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.error(f"{source} request failed with status {status_code}")
            raise UpstreamError(
                f"{source} request failed with status {status_code}",
                status_code=status_code,
                body=_response_body(e.response),
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"{source} request failed: {e}")
            raise UpstreamError(f"{source} request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"{source} returned invalid JSON")
            raise UpstreamError(f"{source} returned invalid JSON") from e

        if not isinstance(data, dict):
            raise UpstreamError(f"{source} returned an unexpected payload")
        return data
