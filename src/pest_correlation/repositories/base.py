"""Collaborator contracts for the correlation engine and shared helpers."""

from __future__ import annotations

import json
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from pydantic import ValidationError as PydanticValidationError

from pest_correlation.errors import UpstreamStoreError

if TYPE_CHECKING:
    from collections.abc import Iterator
    from datetime import date

    from pest_correlation.schemas import (
        AnalysisRecord,
        DateRange,
        DetectionRecord,
        WeatherObservation,
    )


class WeatherStore(Protocol):
    """Source of truth for weather observations."""

    def add(self, observation: WeatherObservation) -> None: ...

    def query(self, date_range: DateRange) -> list[WeatherObservation]: ...

    def delete_date(self, day: date) -> int: ...


class DetectionStore(Protocol):
    """Read-only view of leaf detections."""

    def query(
        self, date_range: DateRange, owner_filter: str | None = None
    ) -> list[DetectionRecord]: ...


class AnalysisStore(Protocol):
    """Key-value sink for analysis records, keyed by analysis id."""

    def put(self, record: AnalysisRecord) -> None: ...

    def get(self, analysis_id: str) -> AnalysisRecord | None: ...

    def delete(self, analysis_id: str) -> bool: ...

    def list_by_owner(self, owner_filter: str | None = None) -> list[AnalysisRecord]: ...


def document_path(collection: str, key: str) -> Path:
    """Relative store path for one document.

    Raises ValueError for keys that would leave the collection directory.
    """
    if not key or "/" in key or "\\" in key or key in (".", ".."):
        msg = f"Invalid document key: {key!r}"
        raise ValueError(msg)
    return Path(collection) / f"{key}.json"


@contextmanager
def translate_store_errors(action: str) -> Iterator[None]:
    """Re-raise I/O, decode, and schema failures as UpstreamStoreError."""
    try:
        yield
    except (OSError, json.JSONDecodeError, PydanticValidationError) as exc:
        msg = f"Store failure while {action}: {exc}"
        raise UpstreamStoreError(msg) from exc
