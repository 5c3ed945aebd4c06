"""Client-side orchestration of the profile and roast endpoints."""

from types import TracebackType
from typing import Any

import httpx
from loguru import logger

from .exceptions import RoastAPIError
from .models import Language

GENERIC_ERROR_MESSAGE = "An error occurred. Please check the username and try again."


class RoastFailedError(RoastAPIError):
    """Any stage of a roast request failed."""


class RoastClient:
    """Calls the Roast API the way the web front end does.

    A roast is a profile fetch followed by a roast generation. Whichever
    stage fails, the caller gets one generic ``RoastFailedError``; the
    underlying cause is kept as ``__cause__`` and logged.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Root URL of the Roast API.
            http_client: Preconfigured client; its own base URL is used when given.
        """
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(base_url=base_url, timeout=None)

    async def __aenter__(self) -> "RoastClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()

    async def roast(self, username: str, language: Language | str = Language.ENGLISH) -> str:
        """Fetch ``username``'s profile, then roast it in ``language``.

        Raises:
            RoastFailedError: If either request fails; no partial result is returned.
        """
        language_value = language.value if isinstance(language, Language) else language
        try:
            profile = await self._post_json("/api/github-profile", {"username": username})
            result = await self._post_json(
                "/api/generate-roast",
                {"profileData": profile, "language": language_value},
            )
            return str(result["roast"])
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.error(f"Roast for {username} failed: {e}")
            raise RoastFailedError(GENERIC_ERROR_MESSAGE) from e

    async def get_count(self) -> int:
        response = await self.http_client.get("/api/user-count")
        response.raise_for_status()
        return int(response.json()["count"])

    async def increment_count(self) -> int:
        response = await self.http_client.post("/api/user-count")
        response.raise_for_status()
        return int(response.json()["count"])

    async def _post_json(self, path: str, body: dict[str, Any]) -> Any:
        response = await self.http_client.post(path, json=body)
        response.raise_for_status()
        return response.json()
