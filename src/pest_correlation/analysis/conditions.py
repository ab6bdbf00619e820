"""Named weather conditions used to bucket observations.

The table order is the aggregator's pre-sort order, so ties in disease rate
are reported in this order. Names and thresholds appear verbatim in stored
analyses; changing them changes the output of every re-run.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from pest_correlation.schemas import WeatherObservation

RAIN_LABELS = frozenset({"Rain", "Drizzle", "Thunderstorm"})
CLOUDY_LABELS = frozenset({"Clouds", "Overcast", "Mist", "Fog", "Haze"})
CLEAR_LABELS = frozenset({"Clear", "Sunny"})

HIGH_HUMIDITY = "High Humidity (>55%)"
LOW_HUMIDITY = "Low Humidity (<50%)"
RAINY_WEATHER = "Rainy Weather"
HOT_WEATHER = "Hot Weather (>30C)"
WARM_WEATHER = "Warm Weather (28-30C)"
CLOUDY_CONDITIONS = "Cloudy Conditions"
HIGH_CLOUD_COVER = "High Cloud Cover (>70%)"
CLEAR_CONDITIONS = "Clear Conditions"


@dataclass(frozen=True)
class WeatherCondition:
    """A named predicate over a single weather observation."""

    name: str
    threshold: str
    predicate: Callable[[WeatherObservation], bool]

    def matches(self, observation: WeatherObservation) -> bool:
        return self.predicate(observation)


def _cloud_cover_above(observation: WeatherObservation, percent: int) -> bool:
    # Missing cloud cover never counts as cloudy
    return observation.cloud_cover is not None and observation.cloud_cover > percent


WEATHER_CONDITIONS: tuple[WeatherCondition, ...] = (
    WeatherCondition(HIGH_HUMIDITY, ">55%", lambda w: w.humidity > 55),
    WeatherCondition(LOW_HUMIDITY, "<50%", lambda w: w.humidity < 50),
    WeatherCondition(
        RAINY_WEATHER,
        "Any rain",
        lambda w: w.rainfall > 0 or w.conditions in RAIN_LABELS,
    ),
    WeatherCondition(HOT_WEATHER, ">30C", lambda w: w.temperature > 30),
    WeatherCondition(WARM_WEATHER, "28-30C", lambda w: 28 <= w.temperature <= 30),
    WeatherCondition(
        CLOUDY_CONDITIONS,
        "Cloudy/Overcast",
        lambda w: w.conditions in CLOUDY_LABELS or _cloud_cover_above(w, 50),
    ),
    WeatherCondition(HIGH_CLOUD_COVER, ">70%", lambda w: _cloud_cover_above(w, 70)),
    WeatherCondition(CLEAR_CONDITIONS, "Clear/Sunny", lambda w: w.conditions in CLEAR_LABELS),
)


def classify(
    observation: WeatherObservation,
    conditions: tuple[WeatherCondition, ...] = WEATHER_CONDITIONS,
) -> list[str]:
    """Names of every condition the observation satisfies, in table order."""
    return [c.name for c in conditions if c.matches(observation)]
