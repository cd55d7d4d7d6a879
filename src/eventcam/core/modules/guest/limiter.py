import time
from collections import defaultdict


class PinAttemptLimiter:
    """In-memory sliding window of failed PIN attempts, per key."""

    def __init__(self, max_failures: int, window_seconds: int) -> None:
        self.max_failures = max_failures
        self.window_seconds = window_seconds
        self._failures: dict[str, list[float]] = defaultdict(list)

    def _prune(self, key: str, current: float) -> list[float]:
        window_start = current - self.window_seconds
        attempts = [ts for ts in self._failures.get(key, []) if ts > window_start]
        if attempts:
            self._failures[key] = attempts
        else:
            self._failures.pop(key, None)
        return attempts

    def is_blocked(self, key: str) -> bool:
        return len(self._prune(key, time.monotonic())) >= self.max_failures

    def record_failure(self, key: str) -> None:
        current = time.monotonic()
        self._sweep(current)
        self._failures[key].append(current)

    def _sweep(self, current: float) -> None:
        """Prune every key, dropping those with no failure left in the window."""
        for key in list(self._failures):
            self._prune(key, current)

    def reset(self, key: str) -> None:
        self._failures.pop(key, None)
