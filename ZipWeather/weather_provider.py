"""Weather provider abstraction - allows swapping different weather APIs."""
from abc import ABC, abstractmethod
from weather_data import Snapshot


class WeatherProviderBase(ABC):
    """Abstract base class for weather data providers."""

    @abstractmethod
    def get_current(self, zip_code: str) -> Snapshot:
        """
        Fetch current weather for a postal code.

        Args:
            zip_code: Normalized five digit postal code

        Returns:
            Snapshot: Current weather, stamped with the time of the pull

        Raises:
            WeatherProviderError: If the provider fails to fetch data
        """
        pass


class WeatherProviderError(Exception):
    """Exception raised when a weather provider fails."""
    pass
