"""
In-process fixed-window attempt limiter.

Each key gets a window that opens on its first attempt. Inside the window up to
`max_attempts` attempts are allowed; once the window has elapsed the next attempt
starts a brand new window (hard reset, no decay).

Configuration guidelines:
- `max_attempts=5`, `window_ms=15 * 60 * 1000` is the login guard setup.
- `sweep_threshold` bounds memory: when more keys than this are tracked, every
  expired entry is dropped before the next decision. This is a size-triggered
  full scan, not an LRU.

Limitations:
- State lives in the process. Several workers each keep their own table, so the
  effective limit is `max_attempts * workers`.
- Keys are usually client addresses taken from forwarded headers, which the client
  controls. This slows casual guessing down; it is not an access control.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Protocol

from loguru import logger


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class RateLimitEntry:
    """Attempt counter for one key."""

    attempt_count: int
    window_start_ms: int


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a single `RateLimiter.check` call."""

    allowed: bool
    remaining: int
    reset_in_ms: int


class RateLimitStore(Protocol):
    def get(self, key: str) -> RateLimitEntry | None: ...

    def set(self, key: str, entry: RateLimitEntry) -> None: ...

    def delete(self, key: str) -> None: ...

    def sweep(self, is_stale: Callable[[RateLimitEntry], bool]) -> int: ...

    def __len__(self) -> int: ...


class InMemoryRateLimitStore:
    """Dict-backed store; one instance per limiter."""

    def __init__(self) -> None:
        self._entries: dict[str, RateLimitEntry] = {}

    def get(self, key: str) -> RateLimitEntry | None:
        return self._entries.get(key)

    def set(self, key: str, entry: RateLimitEntry) -> None:
        self._entries[key] = entry

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def sweep(self, is_stale: Callable[[RateLimitEntry], bool]) -> int:
        stale_keys = [key for key, entry in self._entries.items() if is_stale(entry)]
        for key in stale_keys:
            del self._entries[key]
        return len(stale_keys)

    def __len__(self) -> int:
        return len(self._entries)


class RateLimiter:
    """
    Bounds attempts per key within a fixed window.

    Responsibilities:
    - Decide allow/reject for an attempt and report remaining budget.
    - Never count rejected attempts, so hammering a blocked key does not grow state.
    - Drop expired entries when the table grows past `sweep_threshold`.
    """

    def __init__(
        self,
        max_attempts: int,
        window_ms: int,
        *,
        store: RateLimitStore | None = None,
        now: Callable[[], int] | None = None,
        sweep_threshold: int = 10_000,
    ) -> None:
        if max_attempts <= 0:
            raise ValueError(f"max_attempts must be > 0 (got {max_attempts})")
        if window_ms <= 0:
            raise ValueError(f"window_ms must be > 0 (got {window_ms})")
        if sweep_threshold <= 0:
            raise ValueError(f"sweep_threshold must be > 0 (got {sweep_threshold})")

        self.max_attempts = max_attempts
        self.window_ms = window_ms
        self.sweep_threshold = sweep_threshold
        self._store: RateLimitStore = store if store is not None else InMemoryRateLimitStore()
        self._clock = now or _now_ms

    def check(self, key: str) -> RateLimitDecision:
        """Record an attempt for `key` and return the decision."""
        now = int(self._clock())

        if len(self._store) > self.sweep_threshold:
            self.sweep(now)

        entry = self._store.get(key)

        if entry is None or self._is_expired(entry, now):
            self._store.set(key, RateLimitEntry(attempt_count=1, window_start_ms=now))
            return RateLimitDecision(
                allowed=True,
                remaining=self.max_attempts - 1,
                reset_in_ms=self.window_ms,
            )

        reset_in_ms = self.window_ms - (now - entry.window_start_ms)

        if entry.attempt_count >= self.max_attempts:
            logger.debug(
                "Rate limited: key={} attempts={} reset_in_ms={}",
                key,
                entry.attempt_count,
                reset_in_ms,
            )
            return RateLimitDecision(allowed=False, remaining=0, reset_in_ms=reset_in_ms)

        entry.attempt_count += 1
        self._store.set(key, entry)
        return RateLimitDecision(
            allowed=True,
            remaining=self.max_attempts - entry.attempt_count,
            reset_in_ms=reset_in_ms,
        )

    def reset(self, key: str) -> None:
        """Forget every attempt recorded for `key`."""
        self._store.delete(key)

    def sweep(self, now: int | None = None) -> int:
        """Delete all entries whose window has elapsed. Returns the number removed."""
        now = int(self._clock()) if now is None else now
        removed = self._store.sweep(lambda entry: self._is_expired(entry, now))
        if removed:
            logger.info("Rate limiter swept {} expired entries, {} left", removed, len(self._store))
        return removed

    def tracked_keys(self) -> int:
        return len(self._store)

    def _is_expired(self, entry: RateLimitEntry, now: int) -> bool:
        return now - entry.window_start_ms > self.window_ms


__all__ = [
    "InMemoryRateLimitStore",
    "RateLimitDecision",
    "RateLimitEntry",
    "RateLimitStore",
    "RateLimiter",
]
