"""
Weather data operations.

Fetches current conditions from OpenWeatherMap into the weather store and
answers the read/delete queries the API and CLI expose. Observations are
immutable: a fetch in the same hour for the same location replaces the
earlier document, nothing else rewrites one.

Example:
    from pest_correlation.services.weather import WeatherService
    service = WeatherService.from_store(DataStore(Path("data")), get_settings())
    observation = service.fetch_and_store("Singapore")
"""

from __future__ import annotations

import logging
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

import requests
from pydantic import ValidationError as PydanticValidationError

from pest_correlation.analysis.loader import parse_iso_date
from pest_correlation.datasources.weather import fetch_current_weather, parse_current_weather
from pest_correlation.errors import NotFoundError, UpstreamStoreError, ValidationError
from pest_correlation.repositories import JsonWeatherStore
from pest_correlation.services.http import redact_url

if TYPE_CHECKING:
    from collections.abc import Callable

    from pest_correlation.config import Settings
    from pest_correlation.schemas import WeatherObservation
    from pest_correlation.store import DataStore

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 100


def _utcnow() -> datetime:
    return datetime.now(UTC)


class WeatherService:
    """Fetch, query, and prune stored weather observations."""

    def __init__(
        self,
        weather_store: JsonWeatherStore,
        *,
        api_key: str = "",
        default_location: str = "Singapore",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.weather_store = weather_store
        self.api_key = api_key
        self.default_location = default_location
        self.clock = clock

    @classmethod
    def from_store(cls, store: DataStore, settings: Settings) -> WeatherService:
        return cls(
            JsonWeatherStore(store),
            api_key=settings.openweathermap_api_key,
            default_location=settings.default_location,
        )

    def fetch_and_store(self, location: str | None = None) -> WeatherObservation:
        """Fetch current conditions for ``location`` and save them.

        Raises:
            UpstreamStoreError: Missing API key, API failure, or an
                unparseable response.
        """
        location = location or self.default_location
        if not self.api_key:
            msg = "OpenWeatherMap API key is not configured"
            raise UpstreamStoreError(msg)

        try:
            payload = fetch_current_weather(location, self.api_key)
        except requests.RequestException as exc:
            url = exc.request.url if exc.request is not None and exc.request.url else ""
            logger.warning("Weather API request failed: %s %s", redact_url(url), type(exc).__name__)
            status = exc.response.status_code if exc.response is not None else "no response"
            msg = f"OpenWeatherMap API error for {location}: {status}"
            raise UpstreamStoreError(msg) from exc

        try:
            observation = parse_current_weather(payload, location, self.clock())
        except PydanticValidationError as exc:
            msg = f"Unexpected OpenWeatherMap response for {location}"
            raise UpstreamStoreError(msg) from exc

        self.weather_store.add(observation)
        logger.info("Stored weather observation %s", observation.weather_id)
        return observation

    def current(self, location: str | None = None) -> WeatherObservation:
        """Most recent observation whose location contains ``location``."""
        location = location or self.default_location
        matches = [o for o in self.weather_store.list_all() if location in o.location]
        if not matches:
            msg = f"No weather data found for location: {location}"
            raise NotFoundError(msg)
        return max(matches, key=lambda o: o.observed_at)

    def history(
        self,
        start_date: str | None = None,
        end_date: str | None = None,
        location: str | None = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> list[WeatherObservation]:
        """Observations between optional inclusive dates, newest first."""
        if limit < 1:
            msg = f"limit must be a positive integer, got {limit}"
            raise ValidationError(msg)
        start = parse_iso_date(start_date, "startDate") if start_date else date.min
        end = parse_iso_date(end_date, "endDate") if end_date else date.max

        observations = [
            o
            for o in self.weather_store.list_all()
            if start <= o.observed_on <= end and (not location or location in o.location)
        ]
        observations.sort(key=lambda o: o.observed_at, reverse=True)
        return observations[:limit]

    def delete_date(self, day: str) -> int:
        """Delete every observation on ``day`` (ISO date).

        Raises:
            ValidationError: If ``day`` is missing or malformed.
            NotFoundError: If no observation exists for that date.
        """
        if not day:
            msg = "Date parameter is required"
            raise ValidationError(msg)
        removed = self.weather_store.delete_date(parse_iso_date(day))
        if removed == 0:
            msg = f"No weather data found for date: {day}"
            raise NotFoundError(msg)
        logger.info("Deleted %d weather observations for %s", removed, day)
        return removed
