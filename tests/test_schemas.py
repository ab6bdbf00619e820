"""Tests for the domain models."""

from __future__ import annotations

from datetime import UTC, date, datetime

import pytest
from pydantic import ValidationError

from pest_correlation.schemas import (
    AnalysisRecord,
    ConditionResult,
    DateRange,
    DetectionRecord,
    NoData,
    SampleCount,
    WeatherObservation,
)


class TestWeatherObservation:
    """Stored weather readings."""

    def test_camel_case_input(self) -> None:
        obs = WeatherObservation.model_validate(
            {
                "weatherId": "Singapore-2024-06-01-09",
                "location": "Singapore, SG",
                "date": "2024-06-01T09:00:00Z",
                "temperature": 29.5,
                "humidity": 80,
                "windSpeed": 7.2,
                "cloudCover": 40,
                "fetchedAt": "2024-06-01T09:00:02Z",
            }
        )
        assert obs.weather_id == "Singapore-2024-06-01-09"
        assert obs.observed_on == date(2024, 6, 1)
        assert obs.rainfall == 0
        assert obs.conditions == "Unknown"

    @pytest.mark.parametrize("humidity", [-1, 101])
    def test_humidity_bounds(self, humidity: int) -> None:
        with pytest.raises(ValidationError):
            WeatherObservation(
                weather_id="w",
                location="x",
                observed_at=datetime(2024, 6, 1, tzinfo=UTC),
                temperature=25,
                humidity=humidity,
                fetched_at=datetime(2024, 6, 1, tzinfo=UTC),
            )

    def test_frozen(self) -> None:
        obs = WeatherObservation(
            weather_id="w",
            location="x",
            observed_at=datetime(2024, 6, 1, tzinfo=UTC),
            temperature=25,
            humidity=50,
            fetched_at=datetime(2024, 6, 1, tzinfo=UTC),
        )
        with pytest.raises(ValidationError):
            obs.humidity = 90  # type: ignore[misc]


class TestDetectionRecord:
    """Leaf detections."""

    def test_calendar_date_ignores_timezone(self) -> None:
        record = DetectionRecord.model_validate(
            {"id": "d1", "createdAt": "2024-06-01T23:30:00-05:00", "label": "bad"}
        )
        assert record.created_on == date(2024, 6, 1)

    def test_unexpected_label_loads(self) -> None:
        record = DetectionRecord(id="d1", created_at=datetime(2024, 6, 1, tzinfo=UTC), label="?")
        assert record.label == "?"

    def test_belongs_to(self) -> None:
        record = DetectionRecord(
            id="d1",
            owner="a@example.com",
            user_email="alias@example.com",
            created_at=datetime(2024, 6, 1, tzinfo=UTC),
            label="good",
        )
        assert record.belongs_to("a@example.com")
        assert record.belongs_to("alias@example.com")
        assert not record.belongs_to("b@example.com")


class TestSampleSize:
    """The sample size is either a count or an explicit "No data"."""

    def test_default_is_no_data(self) -> None:
        result = ConditionResult(condition="Rainy Weather", threshold="Any rain")
        assert result.sample_size == NoData()
        assert result.sample_size.label == "No data"

    def test_count_serialization(self) -> None:
        result = ConditionResult(
            condition="Rainy Weather",
            threshold="Any rain",
            weather_days=2,
            total_detections=0,
            sample_size=SampleCount(value=0),
        )
        dumped = result.model_dump(mode="json", by_alias=True)
        assert dumped["sampleSize"] == {"kind": "count", "value": 0}
        assert dumped["weatherDays"] == 2

    def test_discriminated_parse(self) -> None:
        no_data = ConditionResult.model_validate(
            {"condition": "c", "threshold": "t", "sampleSize": {"kind": "no_data"}}
        )
        counted = ConditionResult.model_validate(
            {"condition": "c", "threshold": "t", "sampleSize": {"kind": "count", "value": 4}}
        )
        assert isinstance(no_data.sample_size, NoData)
        assert counted.sample_size == SampleCount(value=4)
        assert counted.sample_size.label == "4"

    def test_rate_bounds(self) -> None:
        with pytest.raises(ValidationError):
            ConditionResult(condition="c", threshold="t", disease_rate=101)


class TestDateRange:
    """Inclusive windows."""

    def test_label_and_contains(self) -> None:
        window = DateRange(start=date(2024, 6, 1), end=date(2024, 6, 7))
        assert window.label == "2024-06-01 to 2024-06-07"
        assert window.contains(date(2024, 6, 1))
        assert window.contains(date(2024, 6, 7))
        assert not window.contains(date(2024, 6, 8))


class TestAnalysisRecord:
    """Persisted analyses round-trip through their camelCase form."""

    def test_round_trip(self) -> None:
        record = AnalysisRecord(
            id="corr-1",
            date_range="2024-06-01 to 2024-06-30",
            correlations=[ConditionResult(condition="c", threshold="t")],
            created_at=datetime(2024, 6, 30, tzinfo=UTC),
            name="June",
        )
        dumped = record.model_dump(mode="json", by_alias=True)

        assert dumped["ownerFilter"] == "all"
        assert dumped["updatedAt"] is None
        assert AnalysisRecord.model_validate(dumped) == record
