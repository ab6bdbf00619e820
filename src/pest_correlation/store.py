"""JSON document store with metadata envelopes.

Documents are grouped into collections (one directory each):
  - weather/: Weather observations written by the fetch flow
  - detections/: Leaf detection records imported from the upload subsystem
  - analyses/: Persisted correlation analysis snapshots

Every document is wrapped in a metadata envelope::

    {"meta": {"source": "...", "fetched_at": "..."}, "data": {...}}

Collections never return partial results: ``list_documents`` reads every file
in the collection before callers filter.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path  # noqa: TC003
from typing import Any

WEATHER = "weather"
DETECTIONS = "detections"
ANALYSES = "analyses"


class DataStore:
    """Manages read/write/delete of JSON documents under a base directory."""

    def __init__(self, base_dir: Path) -> None:
        self.base = base_dir

    def read(self, path: Path) -> dict[str, Any] | None:
        """Read data payload from a metadata-enveloped JSON file.

        Returns the ``data`` field, or None if the file doesn't exist.
        """
        full = self._resolve(path)
        if not full.exists():
            return None
        with full.open() as f:
            envelope: dict[str, Any] = json.load(f)
        return envelope.get("data", envelope)

    def write(
        self,
        path: Path,
        data: Any,
        source: str,
        **params: Any,
    ) -> Path:
        """Write data wrapped in a metadata envelope.

        Args:
            path: Relative path under base_dir (e.g. ``analyses/corr-1.json``).
            data: Payload to store under the ``data`` key.
            source: Producer identifier (e.g. ``"openweathermap.org"``).
            **params: Extra metadata fields (location, query params, etc.).

        Returns:
            Absolute path of the written file.
        """
        full = self._resolve(path)
        full.parent.mkdir(parents=True, exist_ok=True)

        meta: dict[str, Any] = {
            "source": source,
            "fetched_at": datetime.now(UTC).isoformat(),
        }
        if params:
            meta.update(params)

        envelope = {"meta": meta, "data": data}
        with full.open("w") as f:
            json.dump(envelope, f, indent=2)

        return full

    def delete(self, path: Path) -> bool:
        """Remove a document. Returns False if it did not exist."""
        full = self._resolve(path)
        if not full.exists():
            return False
        full.unlink()
        return True

    def list_documents(self, collection: str) -> list[dict[str, Any]]:
        """Read the data payload of every document in a collection.

        Returns an empty list if the collection has never been written to.
        """
        directory = self._resolve(Path(collection))
        if not directory.is_dir():
            return []
        documents: list[dict[str, Any]] = []
        for full in sorted(directory.glob("*.json")):
            with full.open() as f:
                envelope: dict[str, Any] = json.load(f)
            documents.append(envelope.get("data", envelope))
        return documents

    def _resolve(self, path: Path) -> Path:
        full = self.base / path if not path.is_absolute() else path
        try:
            full.resolve().relative_to(self.base.resolve())
        except ValueError:
            msg = f"Path escapes store base directory: {path}"
            raise ValueError(msg) from None
        return full
