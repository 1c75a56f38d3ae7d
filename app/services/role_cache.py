"""In-process cache of role names keyed by role id."""
import time
from typing import Callable, Optional

from cachetools import TTLCache

DEFAULT_MAX_ENTRIES = 1024


class RoleNameCache:
    """
    TTL cache consulted by the auth dependency before loading a role.

    A ttl of 0 disables caching entirely. Entries are only ever read and
    replaced whole, so the single event loop needs no locking.
    """

    def __init__(
        self,
        ttl_seconds: float,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._entries: Optional[TTLCache] = None
        if self.enabled:
            self._entries = TTLCache(maxsize=max_entries, ttl=ttl_seconds, timer=clock)

    @property
    def enabled(self) -> bool:
        return self.ttl_seconds > 0

    def get(self, role_id: str) -> Optional[str]:
        if self._entries is None:
            return None
        return self._entries.get(role_id)

    def set(self, role_id: str, name: str) -> None:
        if self._entries is not None:
            self._entries[role_id] = name

    def clear(self) -> None:
        if self._entries is not None:
            self._entries.clear()
