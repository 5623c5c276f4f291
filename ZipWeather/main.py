"""Command line lookup of current weather by US zip code."""
import argparse
import json
import logging
import os
import sys
import time
from typing import List, Optional

from config import WeatherConfig, load_config
from freshness_cache import FreshnessCache
from openweather_provider import OpenWeatherProvider
from rate_limiter import SlidingWindowRateLimiter
from weather_data import WeatherResult
from weather_service import WeatherService

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_LOG_FILE = os.path.join(BASE_DIR, "zipweather.log")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser("Current weather by US zip code")
    parser.add_argument("zips", nargs="+", help="Zip codes to look up")
    parser.add_argument("--log-file", default=DEFAULT_LOG_FILE)
    parser.add_argument("--freshness", type=int, default=None, help="Seconds a cached reading stays fresh")
    parser.add_argument("--max-pulls", type=int, default=None, help="Provider calls allowed per window")
    parser.add_argument("--window", type=int, default=None, help="Rate limit window in seconds")
    parser.add_argument("--units", choices=["metric", "imperial", "standard"], default=None)
    parser.add_argument("--timeout", type=int, default=None, help="HTTP timeout in seconds")
    parser.add_argument("--repeat", type=int, default=1, help="Query the whole list this many times")
    parser.add_argument("--json", action="store_true", help="Print one JSON object per lookup")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def setup_logging(log_file: str, verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_file)
        ]
    )


def apply_overrides(config: WeatherConfig, args: argparse.Namespace) -> WeatherConfig:
    if args.freshness is not None:
        config.freshness_window_seconds = args.freshness
    if args.max_pulls is not None:
        config.max_pulls_per_minute = args.max_pulls
    if args.window is not None:
        config.tracking_window_seconds = args.window
    if args.units is not None:
        config.units = args.units
    if args.timeout is not None:
        config.timeout = args.timeout
    if config.max_pulls_per_minute < 1 or config.tracking_window_seconds < 1:
        raise SystemExit("Rate limit settings must be positive")
    return config


def build_weather_service(config: WeatherConfig) -> WeatherService:
    provider = OpenWeatherProvider(units=config.units, timeout=config.timeout)
    service = WeatherService(
        provider=provider,
        cache=FreshnessCache(config.freshness_window_seconds),
        rate_limiter=SlidingWindowRateLimiter(
            max_calls=config.max_pulls_per_minute,
            window_seconds=config.tracking_window_seconds,
        ),
    )
    logging.info(
        "Weather service ready (freshness=%ss, %s pulls per %ss)",
        config.freshness_window_seconds,
        config.max_pulls_per_minute,
        config.tracking_window_seconds,
    )
    return service


def format_result(zip_input: str, result: WeatherResult, as_json: bool = False) -> str:
    if as_json:
        return json.dumps({"zip": zip_input, **result.to_dict()})
    if not result.ok:
        return f"{zip_input}: ERROR {result.error}"
    return (
        f"{zip_input}: temp={result.temperature} humidity={result.humidity} "
        f"wind={result.wind_speed} age={result.data_age_seconds}s ({result.source.value})"
    )


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    setup_logging(args.log_file, args.verbose)
    config = apply_overrides(load_config(), args)
    service = build_weather_service(config)

    start = time.time()
    try:
        for _ in range(max(args.repeat, 1)):
            for zip_input in args.zips:
                print(format_result(zip_input, service.get_weather(zip_input), args.json))
    except KeyboardInterrupt:
        logging.info("Interrupted")
    logging.info("Looked up %s zip codes in %.1fs", len(args.zips) * max(args.repeat, 1), time.time() - start)


if __name__ == "__main__":
    main()
