"""Pydantic request and response models for the analytics API."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from kitchen_analytics.domain.forecast import ForecastEntry, WeeklyForecast
from kitchen_analytics.domain.haccp import Anomaly, FleetReport, UnitReport
from kitchen_analytics.domain.scaling import ScaledIngredient, ScaledRecipe


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ScaleRequest(CamelModel):
    """Request to scale a stored recipe."""

    recipe_id: int
    target_servings: int


class ScalePreviewRequest(CamelModel):
    """Request to scale a single ingredient without the recipe store."""

    name: str
    quantity: float
    unit: str
    from_servings: float
    to_servings: float


class ScaledIngredientOut(CamelModel):
    """Scaled ingredient line."""

    name: str
    original_quantity: float
    scaled_quantity: float
    unit: str
    scaling_factor: float
    category: str
    note: str

    @classmethod
    def from_domain(cls, scaled: ScaledIngredient) -> "ScaledIngredientOut":
        """Build from a domain result."""
        return cls(
            name=scaled.name,
            original_quantity=scaled.original_quantity,
            scaled_quantity=scaled.scaled_quantity,
            unit=scaled.unit,
            scaling_factor=scaled.scaling_factor,
            category=scaled.category.value,
            note=scaled.note,
        )


class RecipeOut(CamelModel):
    """Recipe header."""

    id: int
    name: str
    category: str | None


class ScaleResponse(CamelModel):
    """Scaled recipe."""

    recipe: RecipeOut
    original_servings: int
    target_servings: int
    scaled_ingredients: list[ScaledIngredientOut]

    @classmethod
    def from_domain(cls, scaled: ScaledRecipe) -> "ScaleResponse":
        """Build from a domain result."""
        return cls(
            recipe=RecipeOut(
                id=scaled.recipe.id,
                name=scaled.recipe.name,
                category=scaled.recipe.category,
            ),
            original_servings=scaled.original_servings,
            target_servings=scaled.target_servings,
            scaled_ingredients=[
                ScaledIngredientOut.from_domain(item)
                for item in scaled.scaled_ingredients
            ],
        )


class AnomalyOut(CamelModel):
    """Detected anomaly."""

    unit_id: int
    type: str
    severity: str
    timestamp: datetime
    message: str
    value: float | None = None
    expected: str | None = None

    @classmethod
    def from_domain(cls, anomaly: Anomaly) -> "AnomalyOut":
        """Build from a domain anomaly."""
        return cls(
            unit_id=anomaly.unit_id,
            type=anomaly.type.value,
            severity=anomaly.severity.value,
            timestamp=anomaly.timestamp,
            message=anomaly.detail.message,
            value=anomaly.detail.value,
            expected=anomaly.detail.expected,
        )


class ComplianceReportOut(CamelModel):
    """Per-unit compliance figures."""

    checks_expected: int
    checks_total: int
    checks_ok: int
    checks_warning: int
    checks_critical: int
    checks_missed: int
    compliance_percent: float
    health_score: int
    recommendation: str
    anomaly_count: int


class UnitReportOut(CamelModel):
    """Report and anomalies of one refrigeration unit."""

    unit_id: int
    unit_name: str
    report: ComplianceReportOut
    anomalies: list[AnomalyOut]

    @classmethod
    def from_domain(cls, unit_report: UnitReport) -> "UnitReportOut":
        """Build from a domain unit report."""
        report = unit_report.report
        return cls(
            unit_id=unit_report.unit.id,
            unit_name=unit_report.unit.name,
            report=ComplianceReportOut(
                checks_expected=report.checks_expected,
                checks_total=report.checks_total,
                checks_ok=report.checks_ok,
                checks_warning=report.checks_warning,
                checks_critical=report.checks_critical,
                checks_missed=report.checks_missed,
                compliance_percent=report.compliance_percent,
                health_score=report.health_score,
                recommendation=report.recommendation.value,
                anomaly_count=report.anomaly_count,
            ),
            anomalies=[AnomalyOut.from_domain(item) for item in unit_report.anomalies],
        )


class AnomalySummaryOut(CamelModel):
    """Anomaly counts by severity."""

    critical: int
    warning: int
    info: int


class CheckGapOut(CamelModel):
    """Missing checks of one unit on one day."""

    day: date = Field(alias="date")
    unit_id: int
    missing: int


class HaccpReportResponse(CamelModel):
    """Fleet-wide HACCP report."""

    start_date: date
    end_date: date
    units: list[UnitReportOut]
    summary: AnomalySummaryOut
    overall_compliance: float
    gaps: list[CheckGapOut]

    @classmethod
    def from_domain(cls, fleet: FleetReport) -> "HaccpReportResponse":
        """Build from a domain fleet report."""
        return cls(
            start_date=fleet.start,
            end_date=fleet.end,
            units=[UnitReportOut.from_domain(unit) for unit in fleet.units],
            summary=AnomalySummaryOut(
                critical=fleet.summary.critical,
                warning=fleet.summary.warning,
                info=fleet.summary.info,
            ),
            overall_compliance=fleet.overall_compliance_percent,
            gaps=[
                CheckGapOut(day=gap.day, unit_id=gap.unit_id, missing=gap.missing)
                for gap in fleet.gaps
            ],
        )


class ForecastEntryOut(CamelModel):
    """Forecast for one day and meal.

    ``dayOfWeek`` runs from 0 (Sunday) to 6 (Saturday). ``predicted == 0``
    with a zero-width band means no history was available, which the engine
    cannot tell apart from a service that had no guests.
    """

    day: date = Field(alias="date")
    day_of_week: int
    day_name: str
    meal: str
    predicted: int
    lower: int
    upper: int
    last_year: int | None
    avg_4_week: int = Field(alias="avg4Week")

    @classmethod
    def from_domain(cls, entry: ForecastEntry) -> "ForecastEntryOut":
        """Build from a domain forecast entry."""
        return cls(
            day=entry.date,
            day_of_week=entry.day_of_week,
            day_name=entry.day_name,
            meal=entry.meal,
            predicted=entry.predicted,
            lower=entry.lower,
            upper=entry.upper,
            last_year=entry.last_year,
            avg_4_week=entry.avg_4_week,
        )


class AccuracyOut(CamelModel):
    """Backtested MAPE diagnostic."""

    mape: float
    data_points: int


class PaxForecastResponse(CamelModel):
    """Weekly guest-count forecast."""

    week_start: date
    location_id: int | None
    forecasts: list[ForecastEntryOut]
    accuracy: AccuracyOut

    @classmethod
    def from_domain(cls, weekly: WeeklyForecast) -> "PaxForecastResponse":
        """Build from a domain weekly forecast."""
        return cls(
            week_start=weekly.week_start,
            location_id=weekly.location_id,
            forecasts=[ForecastEntryOut.from_domain(e) for e in weekly.forecasts],
            accuracy=AccuracyOut(
                mape=weekly.accuracy.mape,
                data_points=weekly.accuracy.data_points,
            ),
        )
