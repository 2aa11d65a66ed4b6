"""
Counterparty Wallet Validation - Sliding-Window Rate Limiter

Throttles secret-storage operations per wallet id. State is owned by the limiter
instance and guarded by a lock, so one instance can be shared across threads.
"""

import logging
import threading
import time
from collections import deque
from typing import Callable, Deque, Dict, Optional

from core.exceptions import ErrorKind, ValidationError
from core.results import ValidationResult

RATE_LIMIT_WINDOW_MS = 60_000
MAX_OPERATIONS_PER_WINDOW = 10
CLEANUP_THRESHOLD = 1000

RATE_LIMIT_MESSAGE = "Rate limit exceeded for secret storage operations"


class RateLimitExceeded(ValidationError):
    """Raised by enforce() when a key has used up its window."""
    kind = ErrorKind.RANGE


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


class SlidingWindowRateLimiter:
    """
    Per-key sliding-window counter.

    Each key keeps the timestamps of its operations within the last ``window_ms``.
    When more than ``cleanup_threshold`` keys are tracked, the half whose latest
    activity is oldest is dropped.
    """

    def __init__(
        self,
        window_ms: int = RATE_LIMIT_WINDOW_MS,
        max_operations: int = MAX_OPERATIONS_PER_WINDOW,
        cleanup_threshold: int = CLEANUP_THRESHOLD,
        clock: Optional[Callable[[], float]] = None
    ):
        if window_ms <= 0 or max_operations <= 0 or cleanup_threshold <= 0:
            raise ValueError("Rate limiter parameters must be positive")

        self.window_ms = window_ms
        self.max_operations = max_operations
        self.cleanup_threshold = cleanup_threshold
        self.clock = clock or _monotonic_ms
        self.logger = logging.getLogger(__name__)

        self._windows: Dict[str, Deque[float]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)

    def _prune(self, timestamps: Deque[float], now: float) -> None:
        cutoff = now - self.window_ms
        while timestamps and timestamps[0] <= cutoff:
            timestamps.popleft()

    def check(self, key: str) -> ValidationResult:
        """
        Record an operation for ``key`` if the window allows it.

        Returns:
            ValidationResult; a rejected operation is not recorded
        """
        with self._lock:
            now = self.clock()
            timestamps = self._windows.get(key)
            if timestamps is None:
                timestamps = self._windows[key] = deque()
            self._prune(timestamps, now)

            if len(timestamps) >= self.max_operations:
                self.logger.warning("Rate limit hit for a wallet (%d ops)", len(timestamps))
                return ValidationResult.fail(RATE_LIMIT_MESSAGE, ErrorKind.RANGE)

            timestamps.append(now)
            if len(self._windows) > self.cleanup_threshold:
                self._evict_oldest_half_locked()
            return ValidationResult.ok()

    def enforce(self, key: str) -> None:
        """
        Like check(), but raise when the operation is not allowed.

        Raises:
            RateLimitExceeded: If the key has no operations left in the window
        """
        result = self.check(key)
        if not result.is_valid:
            raise RateLimitExceeded(result.error)

    def remaining(self, key: str) -> int:
        with self._lock:
            timestamps = self._windows.get(key)
            if not timestamps:
                return self.max_operations
            self._prune(timestamps, self.clock())
            return max(self.max_operations - len(timestamps), 0)

    def clear(self, key: str) -> None:
        with self._lock:
            self._windows.pop(key, None)

    def clear_all(self) -> None:
        with self._lock:
            self._windows.clear()

    def evict_oldest_half(self) -> int:
        """Drop the half of tracked keys with the oldest latest activity."""
        with self._lock:
            return self._evict_oldest_half_locked()

    def _evict_oldest_half_locked(self) -> int:
        by_activity = sorted(
            self._windows,
            key=lambda k: self._windows[k][-1] if self._windows[k] else float("-inf"),
        )
        evicted = by_activity[:len(by_activity) // 2]
        for key in evicted:
            del self._windows[key]
        if evicted:
            self.logger.debug("Evicted %d idle rate-limit entries", len(evicted))
        return len(evicted)
