"""
Weather data records.
Produced fresh for every request and never stored.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class WeatherSnapshot:
    """
    Current conditions for a city.

    Attributes:
        city: City name as returned by the provider
            Example: "Київ"
        temperature: Air temperature in Celsius
        humidity: Relative humidity (%)
        condition: Provider's primary condition group
            Example: "Rain", "Clouds", "Clear"
        description: Localized free-text description
            Example: "легкий дощ"
    """
    city: str
    temperature: float
    humidity: int
    condition: str
    description: str


@dataclass
class ForecastEntry:
    """One 3-hour forecast step."""
    timestamp: datetime  # timezone-aware, UTC
    temperature: float
    description: str
