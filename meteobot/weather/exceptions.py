"""Errors raised while fetching or rendering weather data."""


class WeatherServiceError(Exception):
    """Base class for weather lookup failures shown to users as a fixed message."""


class ProviderError(WeatherServiceError):
    """Transport failure, bad status, unparseable JSON or an empty condition list."""


class NotFoundError(WeatherServiceError):
    """Geocoding returned no match for the city name."""


class NoDataError(WeatherServiceError):
    """The forecast series has no entries for the requested day."""
