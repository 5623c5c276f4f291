"""OpenWeather Current Weather API provider implementation."""
import logging
import time
import requests
from typing import Callable, Optional
from config import get_api_key
from weather_provider import WeatherProviderBase, WeatherProviderError
from weather_data import Snapshot


class OpenWeatherProvider(WeatherProviderBase):
    """
    Weather provider using OpenWeather Current Weather API, queried by US zip.

    Uses the free Current Weather API: https://openweathermap.org/current
    Only temperature, humidity and wind speed are read from the response.
    """

    BASE_URL = "https://api.openweathermap.org/data/2.5/weather"
    COUNTRY = "us"

    def __init__(
        self,
        api_key: Optional[str] = None,
        units: str = "standard",
        timeout: int = 10,
        time_func: Callable[[], float] = time.time,
    ):
        """
        Initialize OpenWeather provider.

        Args:
            api_key: OpenWeather API key; if None it is read lazily from
                OPENWEATHERMAP_API_KEY on the first request
            units: Temperature units ("metric", "imperial", or "standard")
            timeout: HTTP request timeout in seconds
            time_func: Clock used to stamp each snapshot
        """
        self._api_key = api_key
        self.units = units
        self.timeout = timeout
        self._time = time_func

    @property
    def api_key(self) -> str:
        if self._api_key is not None:
            return self._api_key
        return get_api_key()

    def get_current(self, zip_code: str) -> Snapshot:
        """
        Fetch current weather for a zip code from OpenWeather.

        Args:
            zip_code: Normalized five digit postal code

        Returns:
            Snapshot: Current weather, observed_at set to the time of the pull

        Raises:
            WeatherProviderError: If the request fails or the response can't be parsed
        """
        params = {
            "zip": f"{zip_code},{self.COUNTRY}",
            "appid": self.api_key,
            "units": self.units,
        }

        try:
            logging.info(f"Making OpenWeather API request for zip {zip_code}: {self.BASE_URL}")

            response = requests.get(self.BASE_URL, params=params, timeout=self.timeout)

            logging.info(f"API response status: {response.status_code}")

            if not response.ok:
                logging.error(f"API request failed with status {response.status_code}")
                self._handle_error_response(response)

            data = response.json()
            logging.debug(f"API response (truncated): {str(data)[:500]}...")

            main_data = data.get("main")
            if not main_data:
                raise WeatherProviderError("Response missing 'main' block")
            wind_data = data.get("wind")
            if not wind_data:
                raise WeatherProviderError("Response missing 'wind' block")

            snapshot = Snapshot(
                temperature=f"{float(main_data['temp']):f}",
                humidity=str(int(main_data["humidity"])),
                wind_speed=f"{float(wind_data['speed']):f}",
                observed_at=int(self._time()),
            )

            logging.info(f"Pull succeeded for {zip_code}: {snapshot}")
            return snapshot

        except requests.exceptions.JSONDecodeError as e:
            logging.error(f"Response body is not JSON: {e}")
            raise WeatherProviderError(f"Failed to parse response: {str(e)}") from e
        except requests.exceptions.RequestException as e:
            logging.error(f"Network error during API request: {e}")
            raise WeatherProviderError(f"Network error: {str(e)}") from e
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logging.error(f"Failed to parse API response: {e}", exc_info=True)
            raise WeatherProviderError(f"Failed to parse response: {str(e)}") from e

    def _handle_error_response(self, response: requests.Response) -> None:
        """Parse and raise error from OpenWeather error response."""
        try:
            error_data = response.json()
            cod = error_data.get("cod", response.status_code)
            message = error_data.get("message", "Unknown error")
            parameters = error_data.get("parameters", [])
        except ValueError:
            # Not JSON, use HTTP status
            logging.error(f"Non-JSON error response: HTTP {response.status_code}, body: {response.text[:500]}")
            raise WeatherProviderError(
                f"HTTP {response.status_code}: {response.text[:200]}"
            )

        logging.error(f"OpenWeather API error response: {error_data}")

        error_msg = f"OpenWeather API error {cod}: {message}"
        if parameters:
            error_msg += f" (parameters: {', '.join(parameters)})"

        raise WeatherProviderError(error_msg)
