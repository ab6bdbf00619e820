"""File-backed detection record store."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pest_correlation.errors import ValidationError
from pest_correlation.repositories.base import document_path, translate_store_errors
from pest_correlation.schemas import ALL_OWNERS, DetectionRecord
from pest_correlation.store import DETECTIONS, DataStore

if TYPE_CHECKING:
    from pest_correlation.schemas import DateRange


def filters_by_owner(owner_filter: str | None) -> bool:
    """True when ``owner_filter`` names a specific submitter."""
    return bool(owner_filter) and owner_filter != ALL_OWNERS


class JsonDetectionStore:
    """Detections imported from the upload subsystem, one JSON document each."""

    def __init__(self, store: DataStore, source: str = "leaf-upload") -> None:
        self.store = store
        self.source = source

    def add(self, record: DetectionRecord) -> None:
        try:
            path = document_path(DETECTIONS, record.id)
        except ValueError as exc:
            msg = f"Detection id {record.id!r} cannot be stored"
            raise ValidationError(msg) from exc
        with translate_store_errors(f"saving detection {record.id}"):
            self.store.write(path, record.model_dump(mode="json"), source=self.source)

    def query(
        self, date_range: DateRange, owner_filter: str | None = None
    ) -> list[DetectionRecord]:
        """Detections created inside ``date_range``, optionally for one owner."""
        with translate_store_errors("reading detections"):
            records = [
                DetectionRecord.model_validate(doc)
                for doc in self.store.list_documents(DETECTIONS)
            ]
        records = [r for r in records if date_range.contains(r.created_on)]
        if owner_filter is not None and filters_by_owner(owner_filter):
            records = [r for r in records if r.belongs_to(owner_filter)]
        return records
