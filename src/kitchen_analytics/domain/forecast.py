"""Domain models for guest-count forecasting."""

from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class PaxObservation:
    """One historical guest count for a meal service."""

    date: date
    meal: str
    location_id: int | None
    adults: int
    children: int

    @property
    def total(self) -> int:
        """Total guests served."""
        return self.adults + self.children


@dataclass(frozen=True)
class ConfidenceInterval:
    """Uncertainty band around a prediction."""

    lower: float
    upper: float


@dataclass(frozen=True)
class ForecastResult:
    """One prediction with its uncertainty band."""

    predicted: float
    lower: float
    upper: float
    mape: float | None = None


@dataclass(frozen=True)
class ForecastEntry:
    """Forecast for one day and meal service of a target week.

    ``day_of_week`` counts from Sunday (0) to Saturday (6).
    """

    date: date
    day_of_week: int
    day_name: str
    meal: str
    predicted: int
    lower: int
    upper: int
    last_year: int | None
    avg_4_week: int


@dataclass(frozen=True)
class AccuracyMetrics:
    """Backtested forecast accuracy."""

    mape: float
    data_points: int


@dataclass(frozen=True)
class WeeklyForecast:
    """Forecasts for every day and meal of a week plus accuracy diagnostics."""

    week_start: date
    location_id: int | None
    forecasts: list[ForecastEntry]
    accuracy: AccuracyMetrics


@dataclass(frozen=True)
class PaxDefaults:
    """Default guest counts per location slug.

    Used by production callers when no guest count has been recorded.
    """

    defaults: dict[str, int] = field(default_factory=dict)
    fallback: int = 50

    def resolve(self, location_slug: str | None, observed: int | None = None) -> int:
        """Return the observed count, else the location default, else the fallback."""
        if observed:
            return observed
        if location_slug and self.defaults.get(location_slug):
            return self.defaults[location_slug]
        return self.fallback
