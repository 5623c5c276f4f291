"""In-memory cache of the last known snapshot per postal code."""
import logging
import threading
from typing import Dict, Optional, Tuple

from weather_data import Snapshot

# Pull whenever data is 29 minutes old or older so a hit is always
# "this hour's" reading.
DEFAULT_FRESHNESS_WINDOW_SECONDS = 60 * 29


class FreshnessCache:
    """
    Thread-safe map of normalized postal code -> Snapshot.

    Entries are only written after a successful pull and are never evicted;
    one entry per postal code ever requested stays resident for the life of
    the process.
    """

    def __init__(self, freshness_window_seconds: int = DEFAULT_FRESHNESS_WINDOW_SECONDS):
        self.freshness_window_seconds = freshness_window_seconds
        self._entries: Dict[str, Snapshot] = {}
        self._lock = threading.Lock()

    def lookup(self, key: str) -> Tuple[Optional[Snapshot], bool]:
        """Return (snapshot, found) for a key without modifying the cache."""
        with self._lock:
            snapshot = self._entries.get(key)
        return snapshot, snapshot is not None

    def is_fresh(self, snapshot: Snapshot, now: float) -> bool:
        """A snapshot is fresh while its age is within the freshness window."""
        return int(now) - snapshot.observed_at <= self.freshness_window_seconds

    def store(self, key: str, snapshot: Snapshot) -> bool:
        """
        Replace the entry for key.

        Returns:
            bool: False if the write was refused because it is older than
            the entry already held for key
        """
        with self._lock:
            current = self._entries.get(key)
            if current is not None and snapshot.observed_at < current.observed_at:
                logging.warning(
                    f"Refusing cache write for {key}: observed_at {snapshot.observed_at} "
                    f"is older than cached {current.observed_at}"
                )
                return False
            self._entries[key] = snapshot
        logging.debug(f"Cache updated for {key}: {snapshot}")
        return True

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries
