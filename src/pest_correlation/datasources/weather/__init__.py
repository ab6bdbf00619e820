"""OpenWeatherMap current-weather data source.

Public API:
  - current: fetch_current_weather (raw API payload),
    parse_current_weather (payload -> WeatherObservation)
  - client: API URL and unit constants
"""

from pest_correlation.datasources.weather.client import OPENWEATHERMAP_CURRENT
from pest_correlation.datasources.weather.current import (
    fetch_current_weather,
    parse_current_weather,
    weather_id_for,
)

__all__ = [
    "OPENWEATHERMAP_CURRENT",
    "fetch_current_weather",
    "parse_current_weather",
    "weather_id_for",
]
