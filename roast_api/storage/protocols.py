"""Storage protocol definitions using typing.Protocol."""

from typing import Protocol

from ..models import ProfileRecord


class ProfileCache(Protocol):
    """Cache protocol for fetched GitHub profiles."""

    async def get(self, username: str) -> ProfileRecord | None:
        """Get a cached profile, or None when absent or expired."""
        ...

    async def set(self, username: str, record: ProfileRecord) -> None:
        """Store a profile; the TTL starts at insertion."""
        ...

    async def startup(self) -> None:
        """Initialize cache on startup."""
        ...

    async def shutdown(self) -> None:
        """Cleanup cache on shutdown."""
        ...


class UsageCounter(Protocol):
    """Counter protocol for the global usage count."""

    async def read(self) -> int:
        """Get the current count."""
        ...

    async def increment(self) -> int:
        """Increment the count and return the new value."""
        ...

    async def health_check(self) -> bool:
        """Check if the backing store is reachable."""
        ...

    async def startup(self) -> None:
        """Initialize counter on startup."""
        ...

    async def shutdown(self) -> None:
        """Cleanup counter on shutdown."""
        ...
