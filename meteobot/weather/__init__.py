"""Weather API client and data records."""

from .openweather import OpenWeatherClient
from .models import WeatherSnapshot, ForecastEntry
from .exceptions import WeatherServiceError, ProviderError, NotFoundError, NoDataError

__all__ = [
    "OpenWeatherClient",
    "WeatherSnapshot",
    "ForecastEntry",
    "WeatherServiceError",
    "ProviderError",
    "NotFoundError",
    "NoDataError"
]
