"""
Prefect flows for scheduled and on-demand jobs.

Flows:
- fetch: Store current weather for a location (the deployment runs it every
  ``fetch_interval_hours``)
- analyze: Run a correlation analysis and persist the record

Usage (local):
    python -m pest_correlation.flows.fetch
    python -m pest_correlation.flows.analyze

Usage (Prefect):
    prefect server start  # Optional, for dashboard
    prefect deployment run 'fetch-weather/default'
"""
