"""
identity_gate.auth.cache

In-process identity cache with TTL expiry.

Responsibilities:
- Map a subject to its normalized `Identity` until the entry expires.
- Support explicit eviction and full flush for administrative calls.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from identity_gate.auth.models import Identity
from identity_gate.settings import DEFAULT_TTL_SECONDS


@dataclass(frozen=True, slots=True)
class CacheEntry:
    identity: Identity
    expires_at: float


class IdentityCache:
    """
    Subject -> Identity store with lazy expiry.

    Expired entries are evicted when read. Writes also sweep the whole store at most
    once per TTL window, so subjects that are never read again do not accumulate.
    All operations take a lock, so the cache can be shared across threads and
    event-loop tasks. Concurrent writes for one subject are last-write-wins.
    """

    def __init__(
        self,
        *,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._next_sweep = clock() + ttl_seconds

    def get(self, subject: str) -> Identity | None:
        with self._lock:
            entry = self._entries.get(subject)
            if entry is None:
                return None
            if self._clock() >= entry.expires_at:
                del self._entries[subject]
                return None
            return entry.identity

    def set(self, subject: str, identity: Identity | None, ttl_seconds: int | None = None) -> None:
        if not subject:
            return
        if identity is None:
            self.remove(subject)
            return

        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        now = self._clock()
        with self._lock:
            if now >= self._next_sweep:
                self._sweep(now)
            self._entries[subject] = CacheEntry(identity=identity, expires_at=now + ttl)

    def remove(self, subject: str) -> None:
        with self._lock:
            self._entries.pop(subject, None)

    def flush(self) -> None:
        with self._lock:
            self._entries.clear()

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            return self._sweep(now)

    def _sweep(self, now: float) -> int:
        # Caller holds the lock.
        expired = [k for k, e in self._entries.items() if now >= e.expires_at]
        for key in expired:
            del self._entries[key]
        self._next_sweep = now + self.ttl_seconds
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


# --- Module Notes -----------------------------------------------------------
# No at-most-one-fetch guarantee: two concurrent misses for one subject both fetch the
# profile and the later `set` wins. Profiles are idempotent, so this only costs a request.
