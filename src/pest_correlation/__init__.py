"""Pest Correlation - weather and leaf-disease correlation engine.

Architecture::

    datasources/   External APIs (OpenWeatherMap current weather)
    store.py       JSON document store (weather/, detections/, analyses/)
    repositories/  Store protocols + JSON-backed implementations
    analysis/      Loader -> condition classifier -> aggregator -> insights
    manager.py     Analysis records: create, get, list, annotate, re-run, delete
    services/      Retrying HTTP session, weather data operations
    flows/         Prefect orchestration (scheduled weather fetch, analysis runs)
    api.py         FastAPI HTTP surface
    cli.py         Command-line interface

Data flow: datasources -> store (weather) + detections -> analysis -> store (analyses)

Extension points (see each package's docstring):
  - New data source:       datasources/__init__.py
  - New weather condition: analysis/__init__.py
  - Another database:      repositories/__init__.py
"""

__version__ = "0.1.0"

from pest_correlation.config import Settings, get_settings

__all__ = ["Settings", "__version__", "get_settings"]
