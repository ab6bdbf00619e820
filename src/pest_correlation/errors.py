"""Error kinds surfaced to callers of the correlation engine.

Every error carries a machine-readable ``kind`` and the HTTP-equivalent
``status_code`` so entry points (API, CLI) can report it without inspecting
exception types.
"""

from __future__ import annotations

from typing import Any


class CorrelationError(Exception):
    """Base class for all errors the engine reports to callers."""

    kind = "error"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.kind, "message": self.message}


class ValidationError(CorrelationError):
    """Missing or malformed input; the operation was not attempted."""

    kind = "validation_error"
    status_code = 400


class NotFoundError(CorrelationError):
    """The targeted record does not exist."""

    kind = "not_found"
    status_code = 404


class NoOpError(CorrelationError):
    """A metadata update was requested with nothing to change."""

    kind = "no_op"
    status_code = 400


class UpstreamStoreError(CorrelationError):
    """A weather, detection, or analysis store (or the weather API) failed.

    Always raised ``from`` the underlying exception so the cause stays
    available for logging.
    """

    kind = "upstream_store_error"
    status_code = 500
