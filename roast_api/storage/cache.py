"""Profile cache implementations."""

import time
from collections.abc import Callable

from loguru import logger

from ..models import ProfileRecord

DEFAULT_TTL_SECONDS = 3600


class InMemoryProfileCache:
    """Process-local profile cache with lazy TTL expiry.

    Entries are checked for age on read, so no background sweep is needed.
    There is no capacity bound.
    """

    def __init__(
        self,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            ttl_seconds: Lifetime of an entry, counted from insertion.
            clock: Monotonic time source in seconds.
        """
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self.entries: dict[str, tuple[ProfileRecord, float]] = {}

    async def startup(self) -> None:
        """No initialization needed."""
        pass

    async def shutdown(self) -> None:
        """Drop all entries."""
        self.entries.clear()

    async def get(self, username: str) -> ProfileRecord | None:
        entry = self.entries.get(username)
        if entry is None:
            return None

        record, stored_at = entry
        if self.clock() - stored_at >= self.ttl_seconds:
            logger.debug(f"Profile cache entry expired for {username}")
            del self.entries[username]
            return None

        return record

    async def set(self, username: str, record: ProfileRecord) -> None:
        self.entries[username] = (record, self.clock())

    def __len__(self) -> int:
        return len(self.entries)
