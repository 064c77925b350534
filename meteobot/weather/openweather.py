"""
OpenWeatherMap API client.
Fetches current conditions, geocodes city names and fetches 5-day/3-hour forecasts.
"""

import asyncio
import aiohttp
import logging
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any, Tuple

from .exceptions import ProviderError, NotFoundError
from .models import WeatherSnapshot, ForecastEntry

logger = logging.getLogger(__name__)


class OpenWeatherClient:
    """Client for OpenWeatherMap API."""

    BASE_URL = "https://api.openweathermap.org/data/2.5"
    GEO_URL = "http://api.openweathermap.org/geo/1.0"

    def __init__(self, api_key: str, lang: str = "ua", units: str = "metric"):
        """
        Initialize OpenWeather client.

        Args:
            api_key: OpenWeatherMap API key
            lang: Language for condition descriptions
            units: Unit system ("metric" gives Celsius)
        """
        self.api_key = api_key
        self.lang = lang
        self.units = units
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self) -> None:
        """Close the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def _get(self, url: str, params: Dict[str, Any]) -> Tuple[int, Any]:
        """
        Issue a GET request and return status and decoded JSON.

        The JSON part is None when the body cannot be decoded.

        Raises:
            ProviderError: If the request fails or times out
        """
        session = await self._get_session()
        logger.debug(f"GET {url} q={params.get('q', '')}")

        try:
            async with session.get(url, params=params) as response:
                try:
                    data = await response.json(content_type=None)
                except ValueError:
                    logger.warning(f"OpenWeather returned a non-JSON body ({response.status}) for {url}")
                    data = None
                return response.status, data
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"OpenWeather request failed: {e!r}")
            raise ProviderError(f"request to {url} failed: {e!r}") from e

    async def fetch_current(self, city: str) -> WeatherSnapshot:
        """
        Get current weather for a city.

        Args:
            city: City name as typed by the user

        Returns:
            Parsed weather snapshot

        Raises:
            ProviderError: On request failure, non-200 status, bad JSON
                or an empty condition list
        """
        status, data = await self._get(
            f"{self.BASE_URL}/weather",
            {
                "q": city,
                "appid": self.api_key,
                "units": self.units,
                "lang": self.lang,
            }
        )

        if status != 200:
            logger.warning(f"OpenWeather current API error: {status} - {data}")
            raise ProviderError(f"current weather for {city!r}: HTTP {status}")

        return self._parse_current_response(data, city)

    def _parse_current_response(self, data: Dict[str, Any], city: str) -> WeatherSnapshot:
        """Parse current weather response."""
        if not isinstance(data, dict):
            raise ProviderError(f"current weather for {city!r}: unexpected payload")

        weather = data.get("weather") or []
        if not weather:
            raise ProviderError(f"current weather for {city!r}: no conditions")

        main = data.get("main") or {}

        try:
            return WeatherSnapshot(
                city=data.get("name") or city,
                temperature=float(main.get("temp", 0)),
                humidity=int(main.get("humidity", 0)),
                condition=weather[0].get("main", ""),
                description=weather[0].get("description", ""),
            )
        except (TypeError, ValueError, AttributeError) as e:
            raise ProviderError(f"current weather for {city!r}: malformed fields") from e

    async def geocode(self, city: str) -> Tuple[float, float]:
        """
        Resolve a city name to coordinates.

        Returns:
            (latitude, longitude) of the best match

        Raises:
            ProviderError: If the request fails
            NotFoundError: If nothing matches
        """
        status, results = await self._get(
            f"{self.GEO_URL}/direct",
            {
                "q": city,
                "limit": 1,
                "appid": self.api_key,
            }
        )

        if status != 200:
            logger.warning(f"OpenWeather geocoding API error: {status} - {results}")

        if not isinstance(results, list) or not results:
            raise NotFoundError(f"city {city!r} not found")

        try:
            return float(results[0]["lat"]), float(results[0]["lon"])
        except (KeyError, TypeError, ValueError) as e:
            raise NotFoundError(f"city {city!r} has no coordinates") from e

    async def fetch_forecast(self, city: str) -> List[ForecastEntry]:
        """
        Get the 5-day/3-hour forecast for a city.

        An unparseable body yields an empty list rather than an error;
        callers treat that as "no data".

        Raises:
            ProviderError: If a request fails or the forecast status is not 200
            NotFoundError: If the city cannot be geocoded
        """
        latitude, longitude = await self.geocode(city)

        status, data = await self._get(
            f"{self.BASE_URL}/forecast",
            {
                "lat": latitude,
                "lon": longitude,
                "appid": self.api_key,
                "units": self.units,
                "lang": self.lang,
            }
        )

        if status != 200:
            logger.warning(f"OpenWeather forecast API error: {status} - {data}")
            raise ProviderError(f"forecast for {city!r}: HTTP {status}")

        return self._parse_forecast_response(data)

    def _parse_forecast_response(self, data: Any) -> List[ForecastEntry]:
        """
        Parse forecast items, skipping any that lack a timestamp or condition.
        """
        if not isinstance(data, dict):
            return []

        entries = []
        for item in data.get("list") or []:
            try:
                weather = item.get("weather") or []
                if not weather:
                    continue
                entries.append(ForecastEntry(
                    timestamp=datetime.fromtimestamp(int(item["dt"]), tz=timezone.utc),
                    temperature=float((item.get("main") or {}).get("temp", 0)),
                    description=weather[0].get("description", ""),
                ))
            except (KeyError, TypeError, ValueError, AttributeError):
                logger.debug(f"Skipping malformed forecast item: {item!r}")

        return entries
