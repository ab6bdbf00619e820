"""Resolve an analysis window and load both time series for it.

Pure data access: no classification or aggregation happens here.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING

from pest_correlation.errors import ValidationError
from pest_correlation.schemas import DateRange

if TYPE_CHECKING:
    from pest_correlation.repositories import DetectionStore, WeatherStore
    from pest_correlation.schemas import DetectionRecord, WeatherObservation

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 30


def parse_iso_date(value: str, field: str = "date") -> date:
    """Parse ``YYYY-MM-DD`` (or the date portion of an ISO date-time).

    Raises:
        ValidationError: If the value is not an ISO date.
    """
    try:
        text = value.strip()
        if "T" in text:
            return datetime.fromisoformat(text).date()
        return date.fromisoformat(text)
    except (AttributeError, ValueError) as exc:
        msg = f"{field} must be an ISO date (YYYY-MM-DD), got {value!r}"
        raise ValidationError(msg) from exc


def resolve_date_range(
    start_date: str | None,
    end_date: str | None,
    *,
    today: date,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> DateRange:
    """
    Turn optional ISO date strings into an inclusive window.

    Args:
        start_date: First day of the window. Defaults to ``window_days``
            before the end date.
        end_date: Last day of the window. Defaults to ``today``.
        today: Reference date for the default end.
        window_days: Default window length.

    Returns:
        The resolved DateRange.

    Raises:
        ValidationError: On malformed dates or a start after the end.
    """
    end = parse_iso_date(end_date, "endDate") if end_date else today
    start = (
        parse_iso_date(start_date, "startDate")
        if start_date
        else end - timedelta(days=window_days)
    )
    if start > end:
        msg = f"startDate {start.isoformat()} is after endDate {end.isoformat()}"
        raise ValidationError(msg)
    return DateRange(start=start, end=end)


def load_observations(
    weather_store: WeatherStore,
    detection_store: DetectionStore,
    date_range: DateRange,
    owner_filter: str | None = None,
) -> tuple[list[WeatherObservation], list[DetectionRecord]]:
    """
    Fetch weather observations and detections for ``date_range``.

    Both stores return their full candidate set for the window; detections are
    further restricted to ``owner_filter`` unless it is empty or ``"all"``.

    Returns:
        ``(weather, detections)``. Either list may be empty.
    """
    weather = weather_store.query(date_range)
    detections = detection_store.query(date_range, owner_filter)
    logger.info(
        "Loaded %d weather observations and %d detections for %s",
        len(weather),
        len(detections),
        date_range.label,
    )
    return weather, detections
