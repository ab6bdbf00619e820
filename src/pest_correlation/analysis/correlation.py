"""Join weather conditions with leaf detections and rank by disease rate.

For each named condition, the days on which at least one weather observation
matched are collected, and the detections created on those days are counted
by label. Conditions are then ranked by the share of ``bad`` detections.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from pest_correlation.analysis.conditions import WEATHER_CONDITIONS
from pest_correlation.schemas import ConditionResult, LeafLabel, NoData, SampleCount

if TYPE_CHECKING:
    from datetime import date

    from pest_correlation.analysis.conditions import WeatherCondition
    from pest_correlation.schemas import DetectionRecord, WeatherObservation


def disease_rate(bad: int, total: int) -> int:
    """Percentage of ``bad`` among ``total``, rounded half up; 0 when total is 0."""
    if total <= 0:
        return 0
    # Integer form of floor(bad * 100 / total + 0.5)
    return (bad * 200 + total) // (total * 2)


def matching_days(
    weather: list[WeatherObservation],
    condition: WeatherCondition,
) -> set[date]:
    """Distinct calendar dates with at least one observation matching ``condition``."""
    return {obs.observed_on for obs in weather if condition.matches(obs)}


def summarize_condition(
    condition: WeatherCondition,
    days: set[date],
    detections_by_day: dict[date, Counter[str]],
) -> ConditionResult:
    """Build the result for one condition from its matching days."""
    if not days:
        return ConditionResult(
            condition=condition.name,
            threshold=condition.threshold,
            sample_size=NoData(),
        )

    labels: Counter[str] = Counter()
    for day in days:
        labels.update(detections_by_day.get(day, Counter()))

    bad = labels[LeafLabel.BAD.value]
    good = labels[LeafLabel.GOOD.value]
    total = bad + good
    return ConditionResult(
        condition=condition.name,
        threshold=condition.threshold,
        weather_days=len(days),
        bad_count=bad,
        good_count=good,
        total_detections=total,
        disease_rate=disease_rate(bad, total),
        sample_size=SampleCount(value=total),
    )


def correlate_conditions(
    weather: list[WeatherObservation],
    detections: list[DetectionRecord],
    conditions: tuple[WeatherCondition, ...] = WEATHER_CONDITIONS,
) -> list[ConditionResult]:
    """
    Compute per-condition disease incidence and rank the results.

    Args:
        weather: Weather observations inside the analysis window.
        detections: Detections inside the analysis window.
        conditions: Condition table, in tie-break order.

    Returns:
        One ConditionResult per condition, sorted by disease rate descending.
        Ties keep the table order.
    """
    detections_by_day: dict[date, Counter[str]] = {}
    for detection in detections:
        detections_by_day.setdefault(detection.created_on, Counter())[detection.label] += 1

    results = [
        summarize_condition(condition, matching_days(weather, condition), detections_by_day)
        for condition in conditions
    ]
    # reverse=True keeps ties in table order
    return sorted(results, key=lambda r: r.disease_rate, reverse=True)
