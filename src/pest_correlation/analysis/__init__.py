"""Weather/pest correlation pipeline.

Each module is one stage of the pipeline run by ``manager.AnalysisManager``:

  - loader: resolve the date window, read both time series from the stores
  - conditions: fixed table of named weather-condition predicates
  - correlation: condition days x detections -> ranked ConditionResults
  - insights: ranked results -> human-readable findings

Dependency rule: only ``loader`` touches stores, and only through the
protocols in ``repositories``. The other stages are pure functions over
``schemas`` models: no I/O, no Prefect decorators.

Adding a condition
------------------
Append a ``WeatherCondition(name, threshold, predicate)`` to
``conditions.WEATHER_CONDITIONS``. The aggregator picks it up without
changes; add a test in ``tests/test_conditions.py``.
"""

from pest_correlation.analysis.conditions import WEATHER_CONDITIONS, WeatherCondition, classify
from pest_correlation.analysis.correlation import correlate_conditions, disease_rate
from pest_correlation.analysis.insights import generate_insights
from pest_correlation.analysis.loader import load_observations, resolve_date_range

__all__ = [
    "WEATHER_CONDITIONS",
    "WeatherCondition",
    "classify",
    "correlate_conditions",
    "disease_rate",
    "generate_insights",
    "load_observations",
    "resolve_date_range",
]
