"""File-backed analysis record sink."""

from __future__ import annotations

from pest_correlation.repositories.base import document_path, translate_store_errors
from pest_correlation.schemas import AnalysisRecord
from pest_correlation.store import ANALYSES, DataStore


class JsonAnalysisStore:
    """Analysis records keyed by id, one JSON document each.

    ``put`` overwrites an existing document with the same id; concurrent
    writers to one id are not serialized (last write wins).
    """

    def __init__(self, store: DataStore) -> None:
        self.store = store

    def put(self, record: AnalysisRecord) -> None:
        with translate_store_errors(f"saving analysis {record.id}"):
            self.store.write(
                document_path(ANALYSES, record.id),
                record.model_dump(mode="json"),
                source="pest-correlation",
                owner_filter=record.owner_filter,
            )

    def get(self, analysis_id: str) -> AnalysisRecord | None:
        try:
            path = document_path(ANALYSES, analysis_id)
        except ValueError:
            return None
        with translate_store_errors(f"reading analysis {analysis_id}"):
            data = self.store.read(path)
            return AnalysisRecord.model_validate(data) if data is not None else None

    def delete(self, analysis_id: str) -> bool:
        try:
            path = document_path(ANALYSES, analysis_id)
        except ValueError:
            return False
        with translate_store_errors(f"deleting analysis {analysis_id}"):
            return self.store.delete(path)

    def list_by_owner(self, owner_filter: str | None = None) -> list[AnalysisRecord]:
        """All records, or those created with exactly ``owner_filter``."""
        with translate_store_errors("listing analyses"):
            records = [
                AnalysisRecord.model_validate(doc)
                for doc in self.store.list_documents(ANALYSES)
            ]
        if owner_filter:
            records = [r for r in records if r.owner_filter == owner_filter]
        return records
