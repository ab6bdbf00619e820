"""Shared fixtures: a tmp_path-backed store and record factories."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import pytest

from pest_correlation.manager import AnalysisManager
from pest_correlation.repositories import JsonAnalysisStore, JsonDetectionStore, JsonWeatherStore
from pest_correlation.schemas import DetectionRecord, WeatherObservation
from pest_correlation.store import DataStore

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

FIXED_NOW = datetime(2024, 6, 30, 12, 0, tzinfo=UTC)


@pytest.fixture
def make_weather() -> Callable[..., WeatherObservation]:
    """Factory for weather observations; defaults match no condition but Low Humidity."""
    counter = iter(range(1, 10_000))

    def _make(day: str = "2024-06-01", hour: int = 9, **fields: Any) -> WeatherObservation:
        values: dict[str, Any] = {
            "weather_id": f"Singapore-{day}-{hour:02d}-{next(counter)}",
            "location": "Singapore, SG",
            "observed_at": f"{day}T{hour:02d}:00:00+00:00",
            "temperature": 25.0,
            "humidity": 45,
            "rainfall": 0.0,
            "wind_speed": 10.0,
            "cloud_cover": None,
            "conditions": "Unknown",
            "fetched_at": f"{day}T{hour:02d}:00:05+00:00",
        }
        values.update(fields)
        return WeatherObservation.model_validate(values)

    return _make


@pytest.fixture
def make_detection() -> Callable[..., DetectionRecord]:
    """Factory for leaf detections."""
    counter = iter(range(1, 10_000))

    def _make(day: str = "2024-06-01", label: str = "bad", **fields: Any) -> DetectionRecord:
        values: dict[str, Any] = {
            "id": f"det-{next(counter)}",
            "owner": "farmer@example.com",
            "created_at": f"{day}T10:30:00+00:00",
            "label": label,
        }
        values.update(fields)
        return DetectionRecord.model_validate(values)

    return _make


@pytest.fixture
def data_store(tmp_path: Path) -> DataStore:
    return DataStore(tmp_path)


@pytest.fixture
def weather_store(data_store: DataStore) -> JsonWeatherStore:
    return JsonWeatherStore(data_store)


@pytest.fixture
def detection_store(data_store: DataStore) -> JsonDetectionStore:
    return JsonDetectionStore(data_store)


@pytest.fixture
def analysis_store(data_store: DataStore) -> JsonAnalysisStore:
    return JsonAnalysisStore(data_store)


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """Clock starting at 2024-06-30 12:00 UTC that advances one second per call."""
    ticks = iter(range(1_000_000))
    return lambda: FIXED_NOW + timedelta(seconds=next(ticks))


@pytest.fixture
def manager(
    weather_store: JsonWeatherStore,
    detection_store: JsonDetectionStore,
    analysis_store: JsonAnalysisStore,
    clock: Callable[[], datetime],
) -> AnalysisManager:
    return AnalysisManager(weather_store, detection_store, analysis_store, clock=clock)
