"""Persistence seams for the correlation engine.

The engine depends only on the protocols in ``base``:

    WeatherStore     query(date_range), delete_date(day), add(observation)
    DetectionStore   query(date_range, owner_filter)
    AnalysisStore    put / get / delete / list_by_owner(owner_filter)

The ``Json*`` classes implement them on top of ``store.DataStore``. To back
the engine with another database, write classes with the same methods and
pass them to ``AnalysisManager``.
"""

from pest_correlation.repositories.analyses import JsonAnalysisStore
from pest_correlation.repositories.base import AnalysisStore, DetectionStore, WeatherStore
from pest_correlation.repositories.detections import JsonDetectionStore, filters_by_owner
from pest_correlation.repositories.weather import JsonWeatherStore

__all__ = [
    "AnalysisStore",
    "DetectionStore",
    "JsonAnalysisStore",
    "JsonDetectionStore",
    "JsonWeatherStore",
    "WeatherStore",
    "filters_by_owner",
]
