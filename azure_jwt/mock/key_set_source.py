"""Key set source for caller-managed keys.

Useful offline and in tests: no network is involved, and every fetch is
counted so refresh behavior can be asserted.
"""

from __future__ import annotations

from typing import Optional

from azure_jwt.core.key_set_source import KeySetSource
from azure_jwt.models import KeySet


class StaticKeySetSource(KeySetSource):
    """Serves whatever key set it currently holds."""

    def __init__(self, key_set: Optional[KeySet] = None):
        self._key_set = key_set if key_set is not None else KeySet()
        self.fetch_count = 0

    @property
    def key_set(self) -> KeySet:
        return self._key_set

    def set_key_set(self, key_set: KeySet) -> None:
        """Replace the served keys (simulates a provider-side rotation)."""
        self._key_set = key_set

    async def fetch_key_set(self) -> KeySet:
        self.fetch_count += 1
        return self._key_set
