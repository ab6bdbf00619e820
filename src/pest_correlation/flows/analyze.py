"""
Prefect flow for running a correlation analysis.

Run locally:
    python -m pest_correlation.flows.analyze
"""

from __future__ import annotations

from typing import Any

from prefect import flow, task

from pest_correlation.config import get_settings
from pest_correlation.manager import AnalysisManager
from pest_correlation.store import DataStore


def analysis_manager() -> AnalysisManager:
    settings = get_settings()
    return AnalysisManager.from_store(DataStore(settings.data_dir), settings)


@task(name="create-analysis")
def create_analysis(
    start_date: str | None,
    end_date: str | None,
    owner_filter: str | None,
) -> dict[str, Any]:
    """Run the pipeline and persist the record; returns it as JSON-compatible data."""
    record = analysis_manager().create(start_date, end_date, owner_filter)
    return record.model_dump(mode="json")


@flow(name="correlate-weather-pests", log_prints=True)
def analyze(
    start_date: str | None = None,
    end_date: str | None = None,
    owner_filter: str | None = None,
) -> dict[str, Any]:
    """Correlate weather conditions with leaf detections over a date window."""
    print("Running correlation analysis...")
    record = create_analysis(start_date, end_date, owner_filter)
    print(
        f"Analysis {record['id']} ({record['date_range']}): "
        f"{record['weather_data_points']} weather observations, "
        f"{record['total_detections']} detections"
    )
    for insight in record["insights"]:
        print(f"[{insight['type']}] {insight['message']}")
    return {"id": record["id"], "insights": len(record["insights"])}


if __name__ == "__main__":
    result = analyze()
    print(f"Flow complete: {result}")
