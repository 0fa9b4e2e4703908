"""Shared GitHub rate-limit budget."""

import time
import logging
from threading import Lock
from typing import Callable, Mapping, Optional

# Wait for the reset when fewer calls than this remain
LOW_REMAINING_THRESHOLD = 10
# Readings older than this are considered stale and never trigger a wait
FRESHNESS_WINDOW_SECONDS = 60
MIN_WAIT_SECONDS = 1.0
RESET_BUFFER_SECONDS = 1.0

REMAINING_HEADER = 'X-RateLimit-Remaining'
RESET_HEADER = 'X-RateLimit-Reset'


def _parse_int_header(headers: Mapping[str, str], name: str) -> Optional[int]:
    value = headers.get(name)
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        logging.debug(f"Ignoring non-numeric {name} header: {value!r}")
        return None


class RateBudget:
    """Tracks the remaining GitHub API quota for one analysis run.

    A single instance is shared by every concurrent fetch of the run. The
    budget is advisory: readers may see a slightly stale value, which at worst
    costs one extra throttled call.
    """

    def __init__(self, remaining: int = 5000, reset_at: float = 0.0, last_checked: float = 0.0,
                 clock: Callable[[], float] = time.time):
        """Initialize the budget.

        Args:
            remaining: Calls left in the current rate-limit window
            reset_at: Epoch seconds at which the window resets
            last_checked: Epoch seconds of the last observed response
            clock: Source of the current time in epoch seconds
        """
        self._lock = Lock()
        self._remaining = remaining
        self._reset_at = reset_at
        self._last_checked = last_checked
        self._clock = clock

    @property
    def remaining(self) -> int:
        with self._lock:
            return self._remaining

    @property
    def reset_at(self) -> float:
        with self._lock:
            return self._reset_at

    @property
    def last_checked(self) -> float:
        with self._lock:
            return self._last_checked

    def update_from_headers(self, headers: Mapping[str, str]):
        """Fold the rate-limit headers of a response into the budget.

        Missing or malformed headers leave the previous value untouched.

        Args:
            headers: Response headers (case-insensitive mapping from requests)
        """
        remaining = _parse_int_header(headers, REMAINING_HEADER)
        reset = _parse_int_header(headers, RESET_HEADER)

        with self._lock:
            if remaining is not None:
                self._remaining = max(0, remaining)
            if reset is not None:
                self._reset_at = float(reset)
            self._last_checked = self._clock()

    def wait_time(self) -> float:
        """Return how long a caller should pause before its next request."""
        now = self._clock()
        with self._lock:
            remaining, reset_at, last_checked = self._remaining, self._reset_at, self._last_checked

        if (remaining < LOW_REMAINING_THRESHOLD
                and reset_at > now
                and last_checked > now - FRESHNESS_WINDOW_SECONDS):
            return max(MIN_WAIT_SECONDS, reset_at - now + RESET_BUFFER_SECONDS)
        return 0.0

    def wait_if_needed(self) -> float:
        """Sleep until the rate-limit window resets if the budget is nearly spent.

        Returns:
            Number of seconds slept (0 when no wait was necessary)
        """
        delay = self.wait_time()
        if delay > 0:
            logging.warning(f"Rate limit nearly exhausted ({self.remaining} calls left), "
                            f"waiting {delay:.0f}s for reset")
            time.sleep(delay)
        return delay

