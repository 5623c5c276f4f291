"""Weather service with caching and rate limiting."""
import logging
import threading
import time
from typing import Callable, Dict, Optional
from freshness_cache import FreshnessCache
from rate_limiter import SlidingWindowRateLimiter
from weather_provider import WeatherProviderBase, WeatherProviderError
from weather_data import ResultSource, Snapshot, WeatherResult
from zip_validator import INVALID_ZIP_MESSAGE, validate_zip

NO_DATA_MESSAGE = "No data for zip {}"


class WeatherService:
    """
    Service that answers "current weather at this zip" from cache or provider.

    A cached snapshot is served while it is inside the cache's freshness
    window. Otherwise one pull is made through the rate limiter; if that pull
    fails, whatever snapshot is cached for the zip is served instead.

    Like the cache, the per-zip single-flight locks are never dropped: one
    small lock stays resident for every distinct zip ever requested.
    """

    def __init__(
        self,
        provider: WeatherProviderBase,
        cache: Optional[FreshnessCache] = None,
        rate_limiter: Optional[SlidingWindowRateLimiter] = None,
        time_func: Callable[[], float] = time.time,
    ):
        """
        Initialize weather service.

        Args:
            provider: Weather provider to use
            cache: Snapshot cache (default: 29 minute freshness window)
            rate_limiter: Limiter for outbound pulls (default: 20 per 61 seconds)
            time_func: Clock used for freshness checks and data age
        """
        self.provider = provider
        self.cache = cache if cache is not None else FreshnessCache()
        self.rate_limiter = rate_limiter if rate_limiter is not None else SlidingWindowRateLimiter()
        self._time = time_func

        # one lock per zip so concurrent misses for the same zip pull once
        self._zip_locks: Dict[str, threading.Lock] = {}
        self._zip_locks_guard = threading.Lock()

    def get_weather(self, zip_input: str) -> WeatherResult:
        """
        Get the latest weather for a zip code, using cache if still fresh.

        Never raises for bad input or provider failures; check
        ``result.error`` (or ``result.source``) instead.

        Args:
            zip_input: Postal code as typed by the caller

        Returns:
            WeatherResult: Weather data, or an error message with empty data fields
        """
        zip_code, valid = validate_zip(zip_input)
        if not valid:
            logging.info(f"Rejected zip input {zip_input!r}")
            return WeatherResult.failure(INVALID_ZIP_MESSAGE.format(zip_input), ResultSource.INVALID)

        cached, found = self.cache.lookup(zip_code)
        now = self._time()
        if found and self.cache.is_fresh(cached, now):
            logging.debug(f"Using cached weather for {zip_code} (age: {cached.age_seconds(now)}s)")
            return WeatherResult.from_snapshot(cached, now, ResultSource.CACHED)

        with self._lock_for(zip_code):
            # another caller may have refreshed this zip while we waited
            cached, found = self.cache.lookup(zip_code)
            now = self._time()
            if found and self.cache.is_fresh(cached, now):
                logging.debug(f"Cache for {zip_code} refreshed by a concurrent request")
                return WeatherResult.from_snapshot(cached, now, ResultSource.CACHED)

            if found:
                logging.info(f"Cache expired for {zip_code} (age: {cached.age_seconds(now)}s), fetching new data")
            else:
                logging.info(f"No cached data for {zip_code}, fetching from provider")

            snapshot = self._pull(zip_code)

        if snapshot is not None:
            return WeatherResult.from_snapshot(snapshot, self._time(), ResultSource.FRESH)
        return self._fallback(zip_code)

    def _pull(self, zip_code: str) -> Optional[Snapshot]:
        """Make the single provider attempt for this request. None on failure."""
        self.rate_limiter.admit()
        try:
            snapshot = self.provider.get_current(zip_code)
        except WeatherProviderError as e:
            logging.error(f"Weather fetch for {zip_code} failed: {e}")
            return None
        except Exception as e:
            logging.exception(f"Unexpected error fetching weather for {zip_code}: {e}")
            return None

        self.cache.store(zip_code, snapshot)
        logging.info(f"Weather fetch successful for {zip_code}: {snapshot.temperature}")
        return snapshot

    def _fallback(self, zip_code: str) -> WeatherResult:
        cached, found = self.cache.lookup(zip_code)
        if not found:
            logging.error(f"Fetch failed and no cached data for {zip_code}")
            return WeatherResult.failure(NO_DATA_MESSAGE.format(zip_code), ResultSource.NO_DATA)

        now = self._time()
        logging.warning(f"Fetch failed, using stale cache for {zip_code} (age: {cached.age_seconds(now)}s)")
        return WeatherResult.from_snapshot(cached, now, ResultSource.STALE_FALLBACK)

    def _lock_for(self, zip_code: str) -> threading.Lock:
        with self._zip_locks_guard:
            lock = self._zip_locks.get(zip_code)
            if lock is None:
                lock = threading.Lock()
                self._zip_locks[zip_code] = lock
            return lock
