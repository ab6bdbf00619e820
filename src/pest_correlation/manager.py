"""Create, re-run, annotate, and delete stored correlation analyses.

Two update paths exist and never overlap:

  - ``update_metadata`` changes only ``name``/``notes``; analytical fields
    and timestamps are left untouched.
  - ``rerun`` recomputes every analytical field in place, keeping ``id``,
    ``created_at``, ``name`` and ``notes``, and sets ``updated_at``.

A record is written only after the whole pipeline has succeeded. Two re-runs
of the same id at once are not serialized; the last write wins.
"""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from pest_correlation.analysis import (
    correlate_conditions,
    generate_insights,
    load_observations,
    resolve_date_range,
)
from pest_correlation.analysis.loader import DEFAULT_WINDOW_DAYS
from pest_correlation.errors import NoOpError, NotFoundError, ValidationError
from pest_correlation.repositories import (
    JsonAnalysisStore,
    JsonDetectionStore,
    JsonWeatherStore,
)
from pest_correlation.schemas import ALL_OWNERS, AnalysisRecord

if TYPE_CHECKING:
    from collections.abc import Callable

    from pest_correlation.config import Settings
    from pest_correlation.repositories import AnalysisStore, DetectionStore, WeatherStore
    from pest_correlation.store import DataStore

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 10


def _utcnow() -> datetime:
    return datetime.now(UTC)


def new_analysis_id() -> str:
    return f"corr-{uuid.uuid4()}"


class AnalysisManager:
    """Runs the correlation pipeline and manages the resulting records."""

    def __init__(
        self,
        weather_store: WeatherStore,
        detection_store: DetectionStore,
        analysis_store: AnalysisStore,
        *,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = new_analysis_id,
        default_window_days: int = DEFAULT_WINDOW_DAYS,
    ) -> None:
        self.weather_store = weather_store
        self.detection_store = detection_store
        self.analysis_store = analysis_store
        self.clock = clock
        self.id_factory = id_factory
        self.default_window_days = default_window_days

    @classmethod
    def from_store(cls, store: DataStore, settings: Settings | None = None) -> AnalysisManager:
        """Build a manager backed by JSON collections in ``store``."""
        window = settings.default_window_days if settings else DEFAULT_WINDOW_DAYS
        return cls(
            JsonWeatherStore(store),
            JsonDetectionStore(store),
            JsonAnalysisStore(store),
            default_window_days=window,
        )

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------

    def _compute(
        self,
        start_date: str | None,
        end_date: str | None,
        owner_filter: str,
    ) -> dict[str, Any]:
        """Run loader -> aggregator -> insights and return the analytical fields."""
        date_range = resolve_date_range(
            start_date,
            end_date,
            today=self.clock().date(),
            window_days=self.default_window_days,
        )
        weather, detections = load_observations(
            self.weather_store, self.detection_store, date_range, owner_filter
        )
        correlations = correlate_conditions(weather, detections)
        insights = generate_insights(correlations)
        return {
            "date_range": date_range.label,
            "weather_data_points": len(weather),
            "total_detections": len(detections),
            "correlations": correlations,
            "insights": insights,
            "owner_filter": owner_filter,
        }

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def create(
        self,
        start_date: str | None = None,
        end_date: str | None = None,
        owner_filter: str | None = None,
    ) -> AnalysisRecord:
        """
        Run a new analysis and persist it.

        Args:
            start_date: ISO start date (default: window before end date).
            end_date: ISO end date (default: today).
            owner_filter: Restrict detections to one submitter; ``None``,
                ``""`` and ``"all"`` mean every submitter.

        Returns:
            The stored AnalysisRecord.
        """
        fields = self._compute(start_date, end_date, owner_filter or ALL_OWNERS)
        record = AnalysisRecord(id=self.id_factory(), created_at=self.clock(), **fields)
        self.analysis_store.put(record)
        logger.info("Created analysis %s for %s", record.id, record.date_range)
        return record

    def get(self, analysis_id: str) -> AnalysisRecord:
        """Return a stored analysis or raise NotFoundError."""
        _require_id(analysis_id)
        record = self.analysis_store.get(analysis_id)
        if record is None:
            msg = f"Correlation analysis not found: {analysis_id}"
            raise NotFoundError(msg)
        return record

    def list_analyses(
        self,
        owner_filter: str | None = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> list[AnalysisRecord]:
        """Stored analyses, newest first, at most ``limit``."""
        if limit < 1:
            msg = f"limit must be a positive integer, got {limit}"
            raise ValidationError(msg)
        records = self.analysis_store.list_by_owner(owner_filter)
        records.sort(key=lambda r: r.created_at, reverse=True)
        return records[:limit]

    def update_metadata(
        self,
        analysis_id: str,
        *,
        name: str | None = None,
        notes: str | None = None,
    ) -> AnalysisRecord:
        """Overwrite ``name`` and/or ``notes`` only.

        Raises:
            NotFoundError: If the analysis does not exist.
            NoOpError: If neither field was supplied.
        """
        existing = self.get(analysis_id)
        updates = {
            key: value
            for key, value in (("name", name), ("notes", notes))
            if value is not None
        }
        if not updates:
            msg = "No valid updates provided (expected name and/or notes)"
            raise NoOpError(msg)
        record = existing.model_copy(update=updates)
        self.analysis_store.put(record)
        logger.info("Updated metadata of analysis %s: %s", analysis_id, sorted(updates))
        return record

    def rerun(
        self,
        analysis_id: str,
        start_date: str | None = None,
        end_date: str | None = None,
        owner_filter: str | None = None,
    ) -> AnalysisRecord:
        """Recompute an analysis in place.

        The owner filter defaults to the one the analysis was created with.
        """
        existing = self.get(analysis_id)
        fields = self._compute(start_date, end_date, owner_filter or existing.owner_filter)
        record = AnalysisRecord(
            id=existing.id,
            created_at=existing.created_at,
            updated_at=self.clock(),
            name=existing.name,
            notes=existing.notes,
            **fields,
        )
        self.analysis_store.put(record)
        logger.info("Re-ran analysis %s for %s", record.id, record.date_range)
        return record

    def delete(self, analysis_id: str) -> None:
        """Permanently remove an analysis; raises NotFoundError if absent."""
        _require_id(analysis_id)
        if not self.analysis_store.delete(analysis_id):
            msg = f"Correlation analysis not found: {analysis_id}"
            raise NotFoundError(msg)
        logger.info("Deleted analysis %s", analysis_id)


def _require_id(analysis_id: str) -> None:
    if not analysis_id or not analysis_id.strip():
        msg = "correlationId is required"
        raise ValidationError(msg)
