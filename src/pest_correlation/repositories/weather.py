"""File-backed weather observation store."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pest_correlation.repositories.base import document_path, translate_store_errors
from pest_correlation.schemas import WeatherObservation
from pest_correlation.store import WEATHER, DataStore

if TYPE_CHECKING:
    from datetime import date

    from pest_correlation.schemas import DateRange


class JsonWeatherStore:
    """Weather observations stored as one JSON document each."""

    def __init__(self, store: DataStore, source: str = "openweathermap.org") -> None:
        self.store = store
        self.source = source

    def add(self, observation: WeatherObservation) -> None:
        with translate_store_errors(f"saving weather {observation.weather_id}"):
            self.store.write(
                document_path(WEATHER, observation.weather_id),
                observation.model_dump(mode="json"),
                source=self.source,
                location=observation.location,
            )

    def list_all(self) -> list[WeatherObservation]:
        with translate_store_errors("reading weather observations"):
            return [
                WeatherObservation.model_validate(doc)
                for doc in self.store.list_documents(WEATHER)
            ]

    def query(self, date_range: DateRange) -> list[WeatherObservation]:
        """Observations whose calendar date falls inside ``date_range``."""
        return [obs for obs in self.list_all() if date_range.contains(obs.observed_on)]

    def delete(self, weather_id: str) -> bool:
        with translate_store_errors(f"deleting weather {weather_id}"):
            return self.store.delete(document_path(WEATHER, weather_id))

    def delete_date(self, day: date) -> int:
        """Delete every observation recorded on ``day``. Returns the count removed."""
        removed = 0
        for obs in self.list_all():
            if obs.observed_on == day and self.delete(obs.weather_id):
                removed += 1
        return removed
