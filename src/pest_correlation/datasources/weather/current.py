"""Current conditions from the OpenWeatherMap API."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from pest_correlation.datasources.weather.client import MS_TO_KMH, OPENWEATHERMAP_CURRENT, UNITS
from pest_correlation.schemas import WeatherObservation
from pest_correlation.services.http import session

if TYPE_CHECKING:
    from datetime import datetime


def fetch_current_weather(location: str, api_key: str) -> dict[str, Any]:
    """
    Fetch current weather for a named location.

    Args:
        location: City query, e.g. ``"Singapore"`` or ``"Kuala Lumpur,MY"``.
        api_key: OpenWeatherMap API key.

    Returns:
        Raw API response dict (``main``, ``wind``, ``weather``, ``clouds``...).
    """
    params = {"q": location, "appid": api_key, "units": UNITS}
    resp = session.get(OPENWEATHERMAP_CURRENT, params=params)
    resp.raise_for_status()
    result: dict[str, Any] = resp.json()
    return result


def weather_id_for(location: str, now: datetime) -> str:
    """Hour-granular id, so repeated fetches within an hour overwrite each other."""
    slug = re.sub(r"[^a-zA-Z0-9]", "-", location)
    return f"{slug}-{now.strftime('%Y-%m-%d-%H')}"


def parse_current_weather(
    payload: dict[str, Any],
    location: str,
    now: datetime,
) -> WeatherObservation:
    """
    Normalize an OpenWeatherMap payload into a WeatherObservation.

    Args:
        payload: Response from ``fetch_current_weather``.
        location: The query the payload was fetched for (used for the id).
        now: Fetch time (UTC); becomes both ``observed_at`` and ``fetched_at``.
    """
    main = payload.get("main") or {}
    wind = payload.get("wind") or {}
    rain = payload.get("rain") or {}
    clouds = payload.get("clouds") or {}
    sky = (payload.get("weather") or [{}])[0]

    temp = main.get("temp")
    visibility_m = payload.get("visibility")
    name = payload.get("name") or location
    country = (payload.get("sys") or {}).get("country") or ""

    return WeatherObservation(
        weather_id=weather_id_for(location, now),
        location=f"{name}, {country}".strip().rstrip(","),
        observed_at=now,
        temperature=round(temp, 1) if temp is not None else temp,
        humidity=main.get("humidity"),
        rainfall=rain.get("1h") or rain.get("3h") or 0,
        wind_speed=round((wind.get("speed") or 0) * MS_TO_KMH, 1),
        cloud_cover=clouds.get("all"),
        conditions=sky.get("main") or "Unknown",
        description=sky.get("description") or "",
        pressure=main.get("pressure"),
        visibility=visibility_m / 1000 if visibility_m else None,
        fetched_at=now,
    )
