"""Sliding-window admission control for outbound provider calls."""
import logging
import threading
import time
from collections import deque
from typing import Callable, Deque

# OpenWeatherMap free tier allows 60 calls/min and 1M calls/month.
# 20 calls/min over a 31 day month is 892,800 calls, so staying under this
# limit also keeps us under the monthly cap without tracking it.
DEFAULT_MAX_CALLS = 20
# slightly over a minute to absorb whole-second clock boundaries
DEFAULT_WINDOW_SECONDS = 61


class SlidingWindowRateLimiter:
    """
    Allow at most ``max_calls`` admissions in any rolling ``window_seconds``.

    Only outgoing provider calls go through the limiter; nothing limits how
    often callers hit WeatherService itself.

    The lock is held while sleeping. Every other caller waiting for admission
    queues behind the sleeping one, so throughput is capped at exactly
    ``max_calls`` per window and the first waiter gets the first slot that
    frees up.
    """

    def __init__(
        self,
        max_calls: int = DEFAULT_MAX_CALLS,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        time_func: Callable[[], float] = time.time,
        sleep_func: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize rate limiter.

        Args:
            max_calls: Admissions allowed per window (must be positive)
            window_seconds: Length of the rolling window
            time_func: Clock returning epoch seconds
            sleep_func: Blocks the calling thread for the given seconds
        """
        if max_calls < 1:
            raise ValueError(f"max_calls must be positive, got {max_calls}")
        if window_seconds <= 0:
            raise ValueError(f"window_seconds must be positive, got {window_seconds}")
        self.max_calls = max_calls
        self.window_seconds = window_seconds
        self._time = time_func
        self._sleep = sleep_func
        self._pull_times: Deque[float] = deque()
        self._lock = threading.Lock()

    def admit(self) -> float:
        """
        Block until one more provider call fits in the window, then record it.

        A call that had to wait is recorded once it is admitted, so each
        admitted call occupies exactly one slot.

        Returns:
            float: Total seconds spent waiting
        """
        waited = 0.0
        with self._lock:
            while True:
                now = self._time()
                self._prune(now)

                if len(self._pull_times) < self.max_calls:
                    self._pull_times.append(now)
                    logging.debug(f"Rate limiter admitted call ({len(self._pull_times)}/{self.max_calls} in window)")
                    return waited

                # window is full, wait until the oldest call ages out
                oldest = self._pull_times[0]
                wait_seconds = self.window_seconds - (now - oldest)
                logging.warning(f"Rate limit reached, sleeping {wait_seconds:.1f}s")
                self._sleep(wait_seconds)
                waited += wait_seconds

    def recent_calls(self) -> int:
        """Number of admissions still inside the window."""
        with self._lock:
            self._prune(self._time())
            return len(self._pull_times)

    def _prune(self, now: float) -> None:
        while self._pull_times and now - self._pull_times[0] >= self.window_seconds:
            expired = self._pull_times.popleft()
            logging.debug(f"Rate limiter dropping pull from {now - expired:.1f}s ago")
