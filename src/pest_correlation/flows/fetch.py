"""
Prefect flow for fetching current weather into the store.

Run locally:
    python -m pest_correlation.flows.fetch

Run on a schedule (the "default" deployment):
    pest-correlation fetch-weather --schedule

Run with Prefect dashboard:
    prefect server start &
    python -m pest_correlation.flows.fetch
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from prefect import flow, task

from pest_correlation.config import get_settings
from pest_correlation.services.weather import WeatherService
from pest_correlation.store import DataStore


def weather_service() -> WeatherService:
    settings = get_settings()
    return WeatherService.from_store(DataStore(settings.data_dir), settings)


@task(name="fetch-current-weather", retries=2, retry_delay_seconds=5)
def fetch_current(location: str) -> dict[str, Any]:
    """Fetch and store one observation; returns it as JSON-compatible data."""
    observation = weather_service().fetch_and_store(location)
    return observation.model_dump(mode="json")


@flow(name="fetch-weather", log_prints=True)
def fetch_weather(location: str | None = None) -> dict[str, Any]:
    """
    Fetch current weather for ``location`` (default from settings).

    This is the scheduled flow that keeps the weather store populated.
    """
    location = location or get_settings().default_location
    print(f"Fetching current weather for {location}...")
    observation = fetch_current(location)
    print(
        f"Stored {observation['weather_id']}: {observation['temperature']}C, "
        f"{observation['humidity']}% humidity, {observation['conditions']}"
    )
    return {"location": location, "weather_id": observation["weather_id"]}


def serve_schedule() -> None:
    """Serve the fetch flow as the 'default' deployment, every ``fetch_interval_hours``."""
    hours = get_settings().fetch_interval_hours
    print(f"Fetching weather every {hours}h (Ctrl+C to stop)")
    fetch_weather.serve(name="default", interval=timedelta(hours=hours))


if __name__ == "__main__":
    result = fetch_weather()
    print(f"Flow complete: {result}")
