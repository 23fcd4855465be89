"""Domain models for HACCP temperature monitoring."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum


class Severity(StrEnum):
    """Severity of a detected anomaly."""

    INFO = "INFO"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


class AnomalyType(StrEnum):
    """Failure signature of a detected anomaly."""

    OUT_OF_RANGE = "out_of_range"
    TREND = "trend"
    SPIKE = "spike"
    GAP = "gap"
    STUCK_SENSOR = "stuck_sensor"


class TemperatureStatus(StrEnum):
    """Classification of a single reading against its safe range."""

    OK = "ok"
    CRITICAL_LOW = "critical_low"
    CRITICAL_HIGH = "critical_high"


class Recommendation(StrEnum):
    """Categorical verdict derived from a health score."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    NEEDS_IMPROVEMENT = "Needs improvement"
    CRITICAL = "Critical"


@dataclass(frozen=True)
class SafeRange:
    """Configured inclusive temperature bounds of a unit in degrees Celsius."""

    min: float
    max: float


@dataclass(frozen=True)
class RefrigerationUnit:
    """A fridge, freezer or cold room subject to HACCP checks."""

    id: int
    name: str
    safe_range: SafeRange
    location_id: int | None = None


@dataclass(frozen=True)
class TemperatureReading:
    """One HACCP log entry.

    ``status`` is the verdict recorded by the logging flow (``ok``,
    ``warning`` or ``critical``), if any.
    """

    unit_id: int
    temperature: float
    timestamp: datetime
    status: str | None = None


@dataclass(frozen=True)
class AnomalyDetail:
    """Human readable context for an anomaly."""

    message: str
    value: float | None = None
    expected: str | None = None


@dataclass(frozen=True)
class Anomaly:
    """A detected fault in a unit's reading stream."""

    unit_id: int
    type: AnomalyType
    severity: Severity
    timestamp: datetime
    detail: AnomalyDetail


@dataclass(frozen=True)
class CheckTally:
    """Counts of performed checks by recorded outcome."""

    total: int
    ok: int
    warning: int
    critical: int


@dataclass(frozen=True)
class ComplianceReport:
    """Per-unit rollup for a reporting window."""

    checks_expected: int
    checks_total: int
    checks_ok: int
    checks_warning: int
    checks_critical: int
    checks_missed: int
    compliance_percent: float
    health_score: int
    recommendation: Recommendation
    anomaly_count: int


@dataclass(frozen=True)
class CheckGap:
    """Expected-but-missing checks for one unit on one day."""

    day: date
    unit_id: int
    missing: int


@dataclass(frozen=True)
class AnomalySummary:
    """Anomaly counts by severity."""

    critical: int
    warning: int
    info: int


@dataclass(frozen=True)
class UnitReport:
    """Compliance report and raw anomalies of a single unit."""

    unit: RefrigerationUnit
    report: ComplianceReport
    anomalies: list[Anomaly]


@dataclass(frozen=True)
class FleetReport:
    """Fleet-wide HACCP report for a date range."""

    start: date
    end: date
    units: list[UnitReport]
    summary: AnomalySummary
    overall_compliance_percent: float
    gaps: list[CheckGap]
