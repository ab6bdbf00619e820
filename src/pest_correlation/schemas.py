"""
Domain models for the pest correlation engine.

Pydantic models for stored records and derived analysis output. Every model
accepts both snake_case field names and the camelCase names used on the wire
(``weatherId``, ``createdAt``, ``diseaseRate``...).
"""

from __future__ import annotations

from datetime import date, datetime
from enum import StrEnum
from typing import Annotated, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Owner filter meaning "detections from every submitter"
ALL_OWNERS = "all"


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Stored inputs
# =============================================================================


class WeatherObservation(CamelModel):
    """A single weather reading captured by the fetch process."""

    model_config = ConfigDict(frozen=True)

    weather_id: str = Field(..., description="Unique identifier")
    location: str
    observed_at: datetime = Field(
        ...,
        validation_alias=AliasChoices("observed_at", "observedAt", "date"),
    )
    temperature: float = Field(..., description="Degrees Celsius")
    humidity: int = Field(..., ge=0, le=100, description="Relative humidity, percent")
    rainfall: float = Field(default=0.0, ge=0, description="Millimetres")
    wind_speed: float = Field(default=0.0, description="km/h")
    cloud_cover: int | None = Field(default=None, ge=0, le=100)
    conditions: str = Field(default="Unknown", description="Primary sky condition")
    description: str = ""
    pressure: float | None = None
    visibility: float | None = Field(default=None, description="Kilometres")
    fetched_at: datetime

    @property
    def observed_on(self) -> date:
        """Calendar date of the observation, as recorded (no tz conversion)."""
        return self.observed_at.date()


class LeafLabel(StrEnum):
    """Classification assigned to an uploaded leaf photo."""

    GOOD = "good"
    BAD = "bad"


class DetectionRecord(CamelModel):
    """A leaf detection submitted by a field worker.

    ``label`` stays a plain string so records with unexpected labels still
    load; the aggregator only counts ``good`` and ``bad``.
    """

    id: str
    owner: str = ""
    user_email: str | None = None
    created_at: datetime
    label: str
    farmer_name: str | None = None
    location: str | None = None

    @property
    def created_on(self) -> date:
        """Calendar date of the detection, as recorded (no tz conversion)."""
        return self.created_at.date()

    def belongs_to(self, owner: str) -> bool:
        return owner in (self.owner, self.user_email)


# =============================================================================
# Analysis output
# =============================================================================


class NoData(CamelModel):
    """No weather day matched the condition."""

    kind: Literal["no_data"] = "no_data"

    @property
    def label(self) -> str:
        return "No data"


class SampleCount(CamelModel):
    """Number of labelled detections behind a disease rate."""

    kind: Literal["count"] = "count"
    value: int = Field(..., ge=0)

    @property
    def label(self) -> str:
        return str(self.value)


SampleSize = Annotated[NoData | SampleCount, Field(discriminator="kind")]


class ConditionResult(CamelModel):
    """Disease incidence on the days one weather condition held."""

    condition: str
    threshold: str
    weather_days: int = Field(default=0, ge=0)
    bad_count: int = Field(default=0, ge=0)
    good_count: int = Field(default=0, ge=0)
    total_detections: int = Field(default=0, ge=0)
    disease_rate: int = Field(default=0, ge=0, le=100)
    sample_size: SampleSize = Field(default_factory=NoData)


class InsightType(StrEnum):
    """Severity of a generated insight."""

    WARNING = "warning"
    INSIGHT = "insight"
    INFO = "info"


class Insight(CamelModel):
    """A human-readable finding derived from ranked condition results."""

    type: InsightType
    message: str


class DateRange(CamelModel):
    """Inclusive calendar-date window."""

    start: date
    end: date

    @property
    def label(self) -> str:
        return f"{self.start.isoformat()} to {self.end.isoformat()}"

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


class AnalysisRecord(CamelModel):
    """Persisted snapshot of one correlation run."""

    id: str = Field(..., description="Analysis identifier (corr-<uuid>)")
    date_range: str
    weather_data_points: int = Field(default=0, ge=0)
    total_detections: int = Field(default=0, ge=0)
    correlations: list[ConditionResult] = Field(default_factory=list)
    insights: list[Insight] = Field(default_factory=list)
    owner_filter: str = ALL_OWNERS
    created_at: datetime
    updated_at: datetime | None = None
    name: str | None = None
    notes: str | None = None
