"""
tests.test_cache

Identity cache TTL, eviction and no-op writes.
"""

from __future__ import annotations

from identity_gate.auth.cache import IdentityCache
from identity_gate.auth.models import Identity


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _identity(sub: str = "auth0|1") -> Identity:
    return Identity.from_claims({"sub": sub, "roles": ["user"]})


def test_entry_is_served_until_ttl_elapses() -> None:
    clock = FakeClock()
    cache = IdentityCache(ttl_seconds=60, clock=clock)
    cache.set("auth0|1", _identity())

    clock.advance(59.9)
    assert cache.get("auth0|1") == _identity()

    clock.advance(0.2)
    assert cache.get("auth0|1") is None
    # Lazy expiry evicts on read.
    assert len(cache) == 0


def test_per_entry_ttl_override() -> None:
    clock = FakeClock()
    cache = IdentityCache(ttl_seconds=60, clock=clock)
    cache.set("short", _identity("short"), ttl_seconds=5)
    cache.set("long", _identity("long"))

    clock.advance(10)
    assert cache.get("short") is None
    assert cache.get("long") is not None


def test_set_overwrites_and_refreshes_expiry() -> None:
    clock = FakeClock()
    cache = IdentityCache(ttl_seconds=60, clock=clock)
    cache.set("auth0|1", _identity())
    clock.advance(50)
    refreshed = Identity.from_claims({"sub": "auth0|1", "roles": ["admin"]})
    cache.set("auth0|1", refreshed)

    clock.advance(50)
    assert cache.get("auth0|1") == refreshed


def test_remove_and_flush_are_immediate_and_idempotent() -> None:
    cache = IdentityCache(ttl_seconds=3600)
    cache.set("a", _identity("a"))
    cache.set("b", _identity("b"))

    cache.remove("a")
    cache.remove("a")
    assert cache.get("a") is None
    assert cache.get("b") is not None

    cache.flush()
    cache.flush()
    assert cache.get("b") is None
    assert len(cache) == 0


def test_set_none_behaves_like_remove() -> None:
    cache = IdentityCache()
    cache.set("a", None)
    assert cache.get("a") is None

    cache.set("a", _identity("a"))
    cache.set("a", None)
    assert cache.get("a") is None


def test_empty_subject_is_never_cached() -> None:
    cache = IdentityCache()
    cache.set("", _identity())
    assert len(cache) == 0


def test_purge_expired() -> None:
    clock = FakeClock()
    cache = IdentityCache(ttl_seconds=10, clock=clock)
    cache.set("a", _identity("a"))
    cache.set("b", _identity("b"), ttl_seconds=100)

    clock.advance(20)
    assert cache.purge_expired() == 1
    assert len(cache) == 1


def test_writes_sweep_entries_that_are_never_read_again() -> None:
    clock = FakeClock()
    cache = IdentityCache(ttl_seconds=10, clock=clock)
    cache.set("a", _identity("a"))
    cache.set("b", _identity("b"))

    clock.advance(11)
    cache.set("c", _identity("c"))
    assert len(cache) == 1
    assert cache.get("c") is not None


def test_sweep_runs_at_most_once_per_ttl_window() -> None:
    clock = FakeClock()
    cache = IdentityCache(ttl_seconds=10, clock=clock)
    clock.advance(10)
    cache.set("short", _identity("short"), ttl_seconds=1)

    clock.advance(2)
    cache.set("other", _identity("other"))
    # The window opened by the previous sweep has not elapsed yet.
    assert len(cache) == 2

    clock.advance(10)
    cache.set("late", _identity("late"))
    assert len(cache) == 1
