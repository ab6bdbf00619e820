"""HTTP API for weather data and correlation analyses.

Routes live under ``/weather``. Each route maps to one
``AnalysisManager`` or ``WeatherService`` operation; engine errors are
returned as ``{"error": <kind>, "message": <text>}`` with the kind's status.

Run with ``pest-correlation serve`` or ``uvicorn pest_correlation.api:app``.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from pest_correlation import __version__
from pest_correlation.config import get_settings
from pest_correlation.errors import CorrelationError, UpstreamStoreError, ValidationError
from pest_correlation.manager import DEFAULT_LIST_LIMIT, AnalysisManager
from pest_correlation.schemas import CamelModel
from pest_correlation.services.weather import DEFAULT_HISTORY_LIMIT, WeatherService
from pest_correlation.store import DataStore

logger = logging.getLogger(__name__)

app = FastAPI(title="Pest Correlation", version=__version__)


# =============================================================================
# Request Models
# =============================================================================


class CorrelationRequest(CamelModel):
    start_date: str | None = None
    end_date: str | None = None
    user_email: str | None = None


class MetadataUpdate(CamelModel):
    name: str | None = None
    notes: str | None = None


class FetchRequest(CamelModel):
    location: str | None = None


# =============================================================================
# Dependencies
# =============================================================================


def get_store() -> DataStore:
    return DataStore(get_settings().data_dir)


def get_manager(store: DataStore = Depends(get_store)) -> AnalysisManager:  # noqa: B008
    return AnalysisManager.from_store(store, get_settings())


def get_weather_service(store: DataStore = Depends(get_store)) -> WeatherService:  # noqa: B008
    return WeatherService.from_store(store, get_settings())


# =============================================================================
# Error Handling
# =============================================================================


@app.exception_handler(CorrelationError)
async def correlation_error_handler(request: Request, exc: CorrelationError) -> JSONResponse:
    if isinstance(exc, UpstreamStoreError):
        logger.error(
            "%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = ValidationError(f"Invalid request: {exc.errors()[0].get('msg', 'malformed input')}")
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def _dump(model: CamelModel) -> dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# =============================================================================
# Correlation analyses
# =============================================================================


@app.post("/weather/correlations")
def create_correlation(
    body: CorrelationRequest | None = None,
    manager: AnalysisManager = Depends(get_manager),  # noqa: B008
) -> dict[str, Any]:
    body = body or CorrelationRequest()
    record = manager.create(body.start_date, body.end_date, body.user_email)
    return {"message": "Correlation analysis completed", "data": _dump(record)}


@app.get("/weather/correlations")
def list_correlations(
    user_email: str | None = Query(default=None, alias="userEmail"),
    limit: int = Query(default=DEFAULT_LIST_LIMIT),
    manager: AnalysisManager = Depends(get_manager),  # noqa: B008
) -> dict[str, Any]:
    records = manager.list_analyses(user_email, limit)
    return {"data": [_dump(r) for r in records], "count": len(records)}


@app.get("/weather/correlations/{correlation_id}")
def get_correlation(
    correlation_id: str,
    manager: AnalysisManager = Depends(get_manager),  # noqa: B008
) -> dict[str, Any]:
    return {"data": _dump(manager.get(correlation_id))}


@app.put("/weather/correlations/{correlation_id}")
def update_correlation(
    correlation_id: str,
    body: MetadataUpdate,
    manager: AnalysisManager = Depends(get_manager),  # noqa: B008
) -> dict[str, Any]:
    record = manager.update_metadata(correlation_id, name=body.name, notes=body.notes)
    return {"message": "Correlation analysis updated", "data": _dump(record)}


@app.post("/weather/correlations/{correlation_id}/rerun")
def rerun_correlation(
    correlation_id: str,
    body: CorrelationRequest | None = None,
    manager: AnalysisManager = Depends(get_manager),  # noqa: B008
) -> dict[str, Any]:
    body = body or CorrelationRequest()
    record = manager.rerun(correlation_id, body.start_date, body.end_date, body.user_email)
    return {"message": "Correlation analysis re-run and updated", "data": _dump(record)}


@app.delete("/weather/correlations/{correlation_id}")
def delete_correlation(
    correlation_id: str,
    manager: AnalysisManager = Depends(get_manager),  # noqa: B008
) -> dict[str, Any]:
    manager.delete(correlation_id)
    return {"message": "Correlation analysis deleted", "correlationId": correlation_id}


# =============================================================================
# Weather data
# =============================================================================


@app.post("/weather/fetch")
def fetch_weather(
    body: FetchRequest,
    service: WeatherService = Depends(get_weather_service),  # noqa: B008
) -> dict[str, Any]:
    observation = service.fetch_and_store(body.location)
    return {"message": "Weather data fetched successfully", "data": _dump(observation)}


@app.get("/weather/current")
def current_weather(
    location: str | None = None,
    service: WeatherService = Depends(get_weather_service),  # noqa: B008
) -> dict[str, Any]:
    observation = service.current(location)
    return {"data": _dump(observation), "lastUpdated": observation.fetched_at.isoformat()}


@app.get("/weather/history")
def weather_history(
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    location: str | None = None,
    limit: int = Query(default=DEFAULT_HISTORY_LIMIT),
    service: WeatherService = Depends(get_weather_service),  # noqa: B008
) -> dict[str, Any]:
    observations = service.history(start_date, end_date, location, limit)
    return {"data": [_dump(o) for o in observations], "count": len(observations)}


@app.delete("/weather/history/{day}")
def delete_weather(
    day: str,
    service: WeatherService = Depends(get_weather_service),  # noqa: B008
) -> dict[str, Any]:
    removed = service.delete_date(day)
    return {"message": f"Deleted {removed} weather records for {day}", "count": removed}
