"""Tests for the signing key cache."""

import asyncio

import pytest

from azure_jwt.azure.key_cache import KeyCache
from azure_jwt.exceptions import NetworkError, UnknownKeyIdError
from azure_jwt.mock.key_set_source import StaticKeySetSource
from azure_jwt.models import KeySet

from conftest import JWKS_URI, public_jwk


class Clock:
    """Manually advanced clock."""

    def __init__(self, now: float = 1_700_000_000):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def source(key_set):
    return StaticKeySetSource(key_set)


def test_cache_starts_empty(source):
    cache = KeyCache(source)

    assert cache.current is None
    assert cache.fetch_count == 0


def test_cache_defaults(source):
    """Test KeyCache default values."""
    cache = KeyCache(source)

    assert cache.ttl_seconds == 86400  # 24 hours
    assert cache.refresh_on_miss is True
    assert cache.min_refresh_interval_seconds == 0


@pytest.mark.asyncio
async def test_resolve_fetches_on_empty_cache(source):
    cache = KeyCache(source)

    key = await cache.resolve("K1")

    assert key.kid == "K1"
    assert source.fetch_count == 1
    assert cache.current.key_set is source.key_set


@pytest.mark.asyncio
async def test_resolve_cache_hit_does_not_fetch(source):
    """Test that a cached kid is served without a network call."""
    cache = KeyCache(source)
    cache.set_key_set(source.key_set)

    await cache.resolve("K1")
    await cache.resolve("K1")

    assert source.fetch_count == 0


@pytest.mark.asyncio
async def test_resolve_unknown_kid_refreshes_exactly_once(source):
    """Test that an unknown kid triggers one refresh and then fails."""
    cache = KeyCache(source)
    cache.set_key_set(source.key_set)

    with pytest.raises(UnknownKeyIdError):
        await cache.resolve("K9")

    assert source.fetch_count == 1


@pytest.mark.asyncio
async def test_resolve_unknown_kid_on_empty_cache_fetches_once(source):
    """Test that the initial fetch counts as the single refresh."""
    cache = KeyCache(source)

    with pytest.raises(UnknownKeyIdError):
        await cache.resolve("K9")

    assert source.fetch_count == 1


@pytest.mark.asyncio
async def test_each_resolve_call_gets_its_own_refresh(source):
    """Test that the refresh budget is per call, not global."""
    cache = KeyCache(source)
    cache.set_key_set(source.key_set)

    for _ in range(3):
        with pytest.raises(UnknownKeyIdError):
            await cache.resolve("K9")

    assert source.fetch_count == 3


@pytest.mark.asyncio
async def test_resolve_after_rotation(source, rsa_key, other_rsa_key):
    """Test that a newly published kid is found after the refresh."""
    cache = KeyCache(source)
    cache.set_key_set(source.key_set)
    old = cache.current

    rotated = KeySet.from_jwks({"keys": [public_jwk(rsa_key, "K1"), public_jwk(other_rsa_key, "K2")]})
    source.set_key_set(rotated)

    key = await cache.resolve("K2")

    assert key.kid == "K2"
    assert cache.current.key_set is rotated
    # The previous snapshot is replaced, never edited
    assert old.key_set.find("K2") is None


@pytest.mark.asyncio
async def test_stale_entry_is_refreshed_before_lookup(source, clock):
    """Test that keys older than the TTL are refetched."""
    cache = KeyCache(source, ttl_seconds=3600, clock=clock)
    cache.set_key_set(source.key_set)
    clock.now += 3601

    await cache.resolve("K1")

    assert source.fetch_count == 1
    assert cache.current.fetched_at == clock.now


@pytest.mark.asyncio
async def test_stale_refresh_counts_as_the_single_refresh(source, clock):
    """Test that a TTL refresh followed by a miss does not fetch again."""
    cache = KeyCache(source, ttl_seconds=3600, clock=clock)
    cache.set_key_set(source.key_set)
    clock.now += 7200

    with pytest.raises(UnknownKeyIdError):
        await cache.resolve("K9")

    assert source.fetch_count == 1


@pytest.mark.asyncio
async def test_ttl_none_never_expires(source, clock):
    cache = KeyCache(source, ttl_seconds=None, clock=clock)
    cache.set_key_set(source.key_set)
    clock.now += 10 * 86400

    await cache.resolve("K1")

    assert source.fetch_count == 0


@pytest.mark.asyncio
async def test_refresh_on_miss_disabled(source):
    cache = KeyCache(source, refresh_on_miss=False)
    cache.set_key_set(source.key_set)

    with pytest.raises(UnknownKeyIdError):
        await cache.resolve("K9")

    assert source.fetch_count == 0


@pytest.mark.asyncio
async def test_min_refresh_interval_limits_refresh_on_miss(source, clock):
    """Test that refresh-on-miss is skipped while keys are fresher than the interval."""
    cache = KeyCache(source, min_refresh_interval_seconds=3600, clock=clock)
    cache.set_key_set(source.key_set)

    with pytest.raises(UnknownKeyIdError):
        await cache.resolve("K9")
    assert source.fetch_count == 0

    clock.now += 3600
    with pytest.raises(UnknownKeyIdError):
        await cache.resolve("K9")
    assert source.fetch_count == 1


@pytest.mark.asyncio
async def test_failed_refresh_keeps_previous_entry(source):
    """Test that a failing fetch leaves the cached snapshot untouched."""

    class FailingSource(StaticKeySetSource):
        async def fetch_key_set(self):
            self.fetch_count += 1
            raise NetworkError(JWKS_URI, "timed out after 10s")

    failing = FailingSource()
    cache = KeyCache(failing)
    cache.set_key_set(source.key_set)
    before = cache.current

    with pytest.raises(NetworkError):
        await cache.resolve("K9")

    assert cache.current is before
    assert failing.fetch_count == 1


@pytest.mark.asyncio
async def test_concurrent_refreshes_publish_a_complete_set(source, rsa_key, other_rsa_key):
    """Test that racing refreshes leave one whole key set in place."""
    rotated = KeySet.from_jwks({"keys": [public_jwk(rsa_key, "K1"), public_jwk(other_rsa_key, "K2")]})
    source.set_key_set(rotated)
    cache = KeyCache(source)

    keys = await asyncio.gather(*(cache.resolve("K2") for _ in range(5)))

    assert all(key.kid == "K2" for key in keys)
    assert cache.current.key_set is rotated
    assert 1 <= source.fetch_count <= 5
