"""Domain-specific exceptions for the Roast API."""

from typing import Any


class RoastAPIError(Exception):
    """Base exception for all Roast API errors."""


class ConfigError(RoastAPIError):
    """A required credential or setting is missing."""


class UpstreamError(RoastAPIError):
    """A profile data source (GitHub or the contributions API) failed."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ValidationError(RoastAPIError):
    """Error related to input validation (not Pydantic)."""


class ModelError(RoastAPIError):
    """The generative text service call failed."""


class StorageError(RoastAPIError):
    """Error related to counter storage operations."""
