"""Configuration loading from the environment (and an optional .env file)."""
import logging
import os
import threading
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from freshness_cache import DEFAULT_FRESHNESS_WINDOW_SECONDS
from rate_limiter import DEFAULT_MAX_CALLS, DEFAULT_WINDOW_SECONDS

API_KEY_ENV = "OPENWEATHERMAP_API_KEY"

_api_key: Optional[str] = None
_api_key_lock = threading.Lock()


@dataclass
class WeatherConfig:
    freshness_window_seconds: int = DEFAULT_FRESHNESS_WINDOW_SECONDS
    max_pulls_per_minute: int = DEFAULT_MAX_CALLS
    tracking_window_seconds: int = DEFAULT_WINDOW_SECONDS
    units: str = "standard"
    timeout: int = 10


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise SystemExit(f"Invalid {name}: {exc}") from exc


def load_config() -> WeatherConfig:
    """Build a WeatherConfig from ZIPWEATHER_* overrides, falling back to defaults."""
    load_dotenv()
    config = WeatherConfig(
        freshness_window_seconds=_int_env("ZIPWEATHER_FRESHNESS_SECONDS", DEFAULT_FRESHNESS_WINDOW_SECONDS),
        max_pulls_per_minute=_int_env("ZIPWEATHER_MAX_PULLS_PER_MINUTE", DEFAULT_MAX_CALLS),
        tracking_window_seconds=_int_env("ZIPWEATHER_TRACKING_WINDOW_SECONDS", DEFAULT_WINDOW_SECONDS),
        units=os.getenv("ZIPWEATHER_UNITS", "standard"),
        timeout=_int_env("ZIPWEATHER_TIMEOUT", 10),
    )
    logging.info(
        "Configuration loaded: freshness=%ss max_pulls=%s window=%ss units=%s",
        config.freshness_window_seconds,
        config.max_pulls_per_minute,
        config.tracking_window_seconds,
        config.units,
    )
    return config


def get_api_key() -> str:
    """
    Return the OpenWeatherMap API key, reading it from the environment on first use.

    A missing key is not fatal: requests go out with an empty key and the
    provider's rejection is handled like any other failed pull.
    """
    global _api_key
    with _api_key_lock:
        if _api_key is None:
            _api_key = os.getenv(API_KEY_ENV, "")
            if not _api_key:
                logging.warning(f"{API_KEY_ENV} is not set, provider calls will be unauthenticated")
        return _api_key


def reset_api_key() -> None:
    """Forget the cached key so the next call re-reads the environment."""
    global _api_key
    with _api_key_lock:
        _api_key = None
