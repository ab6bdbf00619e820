"""Rule-based findings from ranked condition results.

Rules run in a fixed order and each adds at most one insight, so the output
order follows the rules rather than the disease-rate ranking. When no rule
fires, a single informational insight is returned.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pest_correlation.analysis.conditions import (
    HIGH_HUMIDITY,
    HOT_WEATHER,
    LOW_HUMIDITY,
    RAINY_WEATHER,
)
from pest_correlation.schemas import Insight, InsightType

if TYPE_CHECKING:
    from collections.abc import Callable

    from pest_correlation.schemas import ConditionResult

# Minimum labelled detections before a condition is trusted
DOMINANT_MIN_SAMPLES = 5
CONDITION_MIN_SAMPLES = 3

DOMINANT_RATE = 50
HUMIDITY_RATIO = 2.0
RAIN_RATE = 60
HEAT_RATE = 50

FALLBACK_MESSAGE = (
    "Insufficient data to determine strong weather-pest correlations. "
    "Continue collecting detection data for better analysis."
)


def _find(results: list[ConditionResult], name: str) -> ConditionResult | None:
    return next((r for r in results if r.condition == name), None)


def dominant_risk(results: list[ConditionResult]) -> Insight | None:
    """Warn about the top-ranked condition with a meaningful sample."""
    top = next((r for r in results if r.total_detections >= DOMINANT_MIN_SAMPLES), None)
    if top is None or top.disease_rate <= DOMINANT_RATE:
        return None
    return Insight(
        type=InsightType.WARNING,
        message=(
            f"{top.condition} shows {top.disease_rate}% disease rate. "
            "Monitor closely during these conditions."
        ),
    )


def humidity_contrast(results: list[ConditionResult]) -> Insight | None:
    """Compare disease rates on high- versus low-humidity days."""
    high = _find(results, HIGH_HUMIDITY)
    low = _find(results, LOW_HUMIDITY)
    if high is None or low is None:
        return None
    if min(high.total_detections, low.total_detections) < CONDITION_MIN_SAMPLES:
        return None
    ratio = high.disease_rate / max(low.disease_rate, 1)
    if ratio <= HUMIDITY_RATIO:
        return None
    return Insight(
        type=InsightType.INSIGHT,
        message=(
            f"Pests are {ratio:.1f}x more likely during high humidity conditions. "
            "Consider protective measures when humidity exceeds 70%."
        ),
    )


def rain_risk(results: list[ConditionResult]) -> Insight | None:
    rainy = _find(results, RAINY_WEATHER)
    if rainy is None or rainy.total_detections < CONDITION_MIN_SAMPLES:
        return None
    if rainy.disease_rate <= RAIN_RATE:
        return None
    return Insight(
        type=InsightType.WARNING,
        message=(
            f"Rainy conditions correlate with {rainy.disease_rate}% disease rate. "
            "Inspect plants after rainfall."
        ),
    )


def heat_risk(results: list[ConditionResult]) -> Insight | None:
    hot = _find(results, HOT_WEATHER)
    if hot is None or hot.total_detections < CONDITION_MIN_SAMPLES:
        return None
    if hot.disease_rate <= HEAT_RATE:
        return None
    return Insight(
        type=InsightType.INSIGHT,
        message=(
            "Hot weather (>30C) shows elevated pest activity. "
            "Ensure adequate irrigation during heat waves."
        ),
    )


INSIGHT_RULES: tuple[Callable[[list[ConditionResult]], Insight | None], ...] = (
    dominant_risk,
    humidity_contrast,
    rain_risk,
    heat_risk,
)


def generate_insights(results: list[ConditionResult]) -> list[Insight]:
    """
    Apply every rule to the ranked results.

    Args:
        results: Condition results in ranked order (see ``correlate_conditions``).

    Returns:
        Insights in rule order; never empty.
    """
    insights = [insight for rule in INSIGHT_RULES if (insight := rule(results)) is not None]
    if not insights:
        insights.append(Insight(type=InsightType.INFO, message=FALLBACK_MESSAGE))
    return insights
