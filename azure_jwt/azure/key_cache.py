"""In-memory signing key cache with refresh-on-miss.

The cache holds one CacheEntry. A refresh builds a new entry and publishes it
with a single attribute assignment, so readers never see a half-updated key
set and do not need a lock. Concurrent refreshes may race; the last one to
finish wins.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

import structlog

from azure_jwt.core.key_set_source import KeySetSource
from azure_jwt.exceptions import UnknownKeyIdError
from azure_jwt.models import JWK, CacheEntry, KeySet

log = structlog.get_logger()


class KeyCache:
    """Holds the most recently fetched KeySet of one provider.

    Args:
        source: Where keys are fetched from
        ttl_seconds: Age after which the cached set is refreshed before use.
            Defaults to 24 hours. None keeps keys until a miss.
        refresh_on_miss: Refresh once when a kid is not in the cached set.
            Defaults to True.
        min_refresh_interval_seconds: Skip the refresh-on-miss while the
            cached set is younger than this. Defaults to 0 (never skip).
        clock: Returns the current Unix time. Defaults to time.time.
    """

    def __init__(
        self,
        source: KeySetSource,
        ttl_seconds: Optional[float] = 86400,  # 24 hours
        refresh_on_miss: bool = True,
        min_refresh_interval_seconds: float = 0,
        clock: Callable[[], float] = time.time,
    ):
        self.source = source
        self.ttl_seconds = ttl_seconds
        self.refresh_on_miss = refresh_on_miss
        self.min_refresh_interval_seconds = min_refresh_interval_seconds
        self.clock = clock

        self._entry: Optional[CacheEntry] = None
        self.fetch_count = 0

    @property
    def current(self) -> Optional[CacheEntry]:
        return self._entry

    def set_key_set(self, key_set: KeySet) -> None:
        """Install a key set managed by the caller."""
        self._entry = CacheEntry(key_set=key_set, fetched_at=self.clock())

    def _is_stale(self, entry: CacheEntry) -> bool:
        if self.ttl_seconds is None:
            return False
        return self.clock() - entry.fetched_at > self.ttl_seconds

    def _may_refresh_on_miss(self, entry: CacheEntry) -> bool:
        if not self.refresh_on_miss:
            return False
        return self.clock() - entry.fetched_at >= self.min_refresh_interval_seconds

    async def refresh(self) -> KeySet:
        """Fetch a new key set and publish it.

        Raises:
            DiscoveryError: If the fetch fails; the previous entry is kept
        """
        self.fetch_count += 1
        key_set = await self.source.fetch_key_set()
        self._entry = CacheEntry(key_set=key_set, fetched_at=self.clock())
        log.debug("key_cache_refreshed", key_count=len(key_set), kids=list(key_set.kids))
        return key_set

    async def resolve(self, kid: str) -> JWK:
        """Return the key for ``kid``, fetching at most once.

        Raises:
            UnknownKeyIdError: If kid is absent after the refresh
            DiscoveryError: If a needed fetch fails
        """
        entry = self._entry
        refreshed = False
        if entry is None or self._is_stale(entry):
            key_set = await self.refresh()
            refreshed = True
        else:
            key_set = entry.key_set

        key = key_set.find(kid)
        if key is not None:
            return key

        if not refreshed and self._may_refresh_on_miss(entry):
            log.debug("key_not_found_refreshing", kid=kid)
            key_set = await self.refresh()
            key = key_set.find(kid)
            if key is not None:
                return key

        log.info("signing_key_not_found", kid=kid, available_kids=list(key_set.kids))
        raise UnknownKeyIdError(kid)
