"""Weather domain model - pure data structures independent of any API."""
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class Snapshot:
    """One cached weather reading for a postal code."""
    # display strings as produced by the provider, never parsed back
    temperature: str
    humidity: str
    wind_speed: str
    observed_at: int  # UNIX timestamp (UTC) of the pull

    def age_seconds(self, now: Optional[float] = None) -> int:
        """Seconds elapsed since the reading was taken (never negative)."""
        if now is None:
            now = time.time()
        return max(0, int(now) - self.observed_at)

    def is_stale(self, max_age_seconds: int, now: Optional[float] = None) -> bool:
        """Check if this snapshot is older than max_age_seconds."""
        return self.age_seconds(now) > max_age_seconds


class ResultSource(Enum):
    """Where the data in a WeatherResult came from."""
    FRESH = "fresh"  # pulled from the provider during this call
    CACHED = "cached"  # served from a cache entry inside the freshness window
    STALE_FALLBACK = "stale_fallback"  # provider failed, older entry served
    NO_DATA = "no_data"  # provider failed and nothing was cached
    INVALID = "invalid"  # input rejected before any lookup


@dataclass(frozen=True)
class WeatherResult:
    """
    Response handed back to callers of WeatherService.get_weather().

    Convention: a non-empty ``error`` means the data fields are empty and must
    not be used; an empty ``error`` means they are populated.
    """
    temperature: str = ""
    humidity: str = ""
    wind_speed: str = ""
    data_age_seconds: str = ""
    error: str = ""
    source: ResultSource = ResultSource.FRESH

    @property
    def ok(self) -> bool:
        return self.error == ""

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot, now: float, source: ResultSource) -> "WeatherResult":
        return cls(
            temperature=snapshot.temperature,
            humidity=snapshot.humidity,
            wind_speed=snapshot.wind_speed,
            data_age_seconds=str(snapshot.age_seconds(now)),
            source=source,
        )

    @classmethod
    def failure(cls, message: str, source: ResultSource) -> "WeatherResult":
        return cls(error=message, source=source)

    def to_dict(self) -> dict:
        """Wire shape printed by the command line driver with --json."""
        return {
            "temperature": self.temperature,
            "humidity": self.humidity,
            "windSpeed": self.wind_speed,
            "dataAgeSeconds": self.data_age_seconds,
            "error": self.error,
            "source": self.source.value,
        }
