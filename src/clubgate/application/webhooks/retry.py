"""Application webhooks – per-delivery retry budget."""
from __future__ import annotations

import collections
import threading

__all__ = ["DEFAULT_MAX_RETRY_ATTEMPTS", "RETRY_ID_HEADER", "RetryTracker"]

RETRY_ID_HEADER = "X-Retry-ID"
DEFAULT_MAX_RETRY_ATTEMPTS = 5


class RetryTracker:
    """Counts redelivery attempts per ``X-Retry-ID``.

    Only the *capacity* most recently seen ids are tracked; the oldest is
    forgotten first.
    """

    def __init__(self, max_attempts: int = DEFAULT_MAX_RETRY_ATTEMPTS, capacity: int = 1000) -> None:
        if max_attempts < 1 or capacity < 1:
            raise ValueError("max_attempts and capacity must be positive")
        self._max_attempts = max_attempts
        self._capacity = capacity
        self._counts: collections.OrderedDict[str, int] = collections.OrderedDict()
        self._lock = threading.Lock()

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def attempt(self, retry_id: str) -> bool:
        """Count one attempt; ``False`` once the budget for *retry_id* is spent."""
        with self._lock:
            count = self._counts.get(retry_id, 0)
            if count >= self._max_attempts:
                return False
            self._counts[retry_id] = count + 1
            self._counts.move_to_end(retry_id)
            if len(self._counts) > self._capacity:
                self._counts.popitem(last=False)
            return True

    def attempts(self, retry_id: str) -> int:
        with self._lock:
            return self._counts.get(retry_id, 0)

    def __len__(self) -> int:
        with self._lock:
            return len(self._counts)
