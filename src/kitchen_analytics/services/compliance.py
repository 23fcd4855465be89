"""HACCP compliance scoring and fleet reporting."""

import logging
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Protocol
from zoneinfo import ZoneInfo

from kitchen_analytics.domain.haccp import (
    Anomaly,
    AnomalySummary,
    CheckGap,
    CheckTally,
    ComplianceReport,
    FleetReport,
    Recommendation,
    RefrigerationUnit,
    SafeRange,
    Severity,
    TemperatureReading,
    TemperatureStatus,
    UnitReport,
)
from kitchen_analytics.services.anomalies import (
    TemperatureAnomalyDetector,
    get_temperature_status,
)
from kitchen_analytics.services.numeric import round_half_away

SEVERITY_PENALTIES = {
    Severity.CRITICAL: 10,
    Severity.WARNING: 5,
    Severity.INFO: 2,
}

RECOMMENDATION_THRESHOLDS = (
    (90, Recommendation.EXCELLENT),
    (75, Recommendation.GOOD),
    (50, Recommendation.NEEDS_IMPROVEMENT),
)

_RECORDED_STATUSES = {"ok", "warning", "critical"}

_logger = logging.getLogger(__name__)


def tally_checks(
    readings: Iterable[TemperatureReading], safe_range: SafeRange
) -> CheckTally:
    """Count checks by outcome.

    The status recorded by the logging flow wins; readings without one are
    classified against the safe range.
    """
    counts: Counter[str] = Counter()
    for reading in readings:
        counts[_check_status(reading, safe_range)] += 1
    return CheckTally(
        total=sum(counts.values()),
        ok=counts["ok"],
        warning=counts["warning"],
        critical=counts["critical"],
    )


def recommend(health_score: int) -> Recommendation:
    """Map a health score to its recommendation."""
    for threshold, recommendation in RECOMMENDATION_THRESHOLDS:
        if health_score >= threshold:
            return recommendation
    return Recommendation.CRITICAL


@dataclass(frozen=True)
class ComplianceScorer:
    """Turns anomalies and check counts into health and compliance figures."""

    checks_per_day: int = 2

    def health_score(self, anomalies: Iterable[Anomaly]) -> int:
        """Return 100 minus severity penalties, clamped to ``[0, 100]``."""
        score = 100
        for anomaly in anomalies:
            score -= SEVERITY_PENALTIES.get(anomaly.severity, 0)
        return max(0, min(100, score))

    def score(
        self,
        anomalies: Sequence[Anomaly],
        checks_expected: int,
        checks: CheckTally,
    ) -> ComplianceReport:
        """Build the compliance report of one unit for one reporting window.

        ``checks.total`` is the number of checks actually performed.
        """
        health = self.health_score(anomalies)
        if checks.total > 0:
            compliance = round_half_away(checks.ok / checks.total * 100)
        else:
            compliance = 100.0
        return ComplianceReport(
            checks_expected=checks_expected,
            checks_total=checks.total,
            checks_ok=checks.ok,
            checks_warning=checks.warning,
            checks_critical=checks.critical,
            checks_missed=max(0, checks_expected - checks.total),
            compliance_percent=compliance,
            health_score=health,
            recommendation=recommend(health),
            anomaly_count=len(anomalies),
        )

    def expected_checks(self, start: date, end: date) -> int:
        """Return the number of checks due per unit between two dates inclusive."""
        days = (end - start).days + 1
        return max(days, 0) * self.checks_per_day

    def find_gaps(
        self,
        unit_id: int,
        readings: Iterable[TemperatureReading],
        start: date,
        end: date,
        timezone: ZoneInfo | None = None,
    ) -> list[CheckGap]:
        """List the days on which a unit had fewer checks than the cadence."""
        per_day: Counter[date] = Counter()
        for reading in readings:
            timestamp = reading.timestamp
            if timezone is not None and timestamp.tzinfo is not None:
                timestamp = timestamp.astimezone(timezone)
            per_day[timestamp.date()] += 1

        gaps = []
        day = start
        while day <= end:
            missing = self.checks_per_day - per_day[day]
            if missing > 0:
                gaps.append(CheckGap(day=day, unit_id=unit_id, missing=missing))
            day += timedelta(days=1)
        return gaps

    def summarize(self, anomalies: Iterable[Anomaly]) -> AnomalySummary:
        """Count anomalies by severity."""
        counts = Counter(anomaly.severity for anomaly in anomalies)
        return AnomalySummary(
            critical=counts[Severity.CRITICAL],
            warning=counts[Severity.WARNING],
            info=counts[Severity.INFO],
        )


class HaccpRepository(Protocol):
    """Read access to refrigeration units and their temperature logs."""

    def list_units(self, location_id: int | None) -> list[RefrigerationUnit]:
        """Return units, optionally restricted to a location."""

    def list_readings(
        self, unit_id: int, start: datetime, end: datetime
    ) -> list[TemperatureReading]:
        """Return readings of a unit in ``[start, end)``."""


@dataclass
class HaccpReportService:
    """Builds per-unit and fleet-wide HACCP reports for a date range."""

    repository: HaccpRepository
    detector: TemperatureAnomalyDetector = field(
        default_factory=TemperatureAnomalyDetector
    )
    scorer: ComplianceScorer = field(default_factory=ComplianceScorer)
    timezone_name: str = "Europe/Berlin"
    baseline_days: int = 7
    default_range_days: int = 30

    def build_report(
        self,
        start: date | None = None,
        end: date | None = None,
        location_id: int | None = None,
    ) -> FleetReport:
        """Detect anomalies and score compliance for every unit."""
        tz = ZoneInfo(self.timezone_name)
        end = end or datetime.now(tz=tz).date()
        start = start or end - timedelta(days=self.default_range_days)
        window_start = datetime.combine(start, time.min, tzinfo=tz)
        window_end = datetime.combine(end + timedelta(days=1), time.min, tzinfo=tz)
        baseline_start = window_start - timedelta(days=self.baseline_days)
        checks_expected = self.scorer.expected_checks(start, end)

        unit_reports: list[UnitReport] = []
        gaps: list[CheckGap] = []
        total_checks = 0
        total_ok = 0
        for unit in self.repository.list_units(location_id):
            readings = sorted(
                self.repository.list_readings(unit.id, window_start, window_end),
                key=lambda reading: reading.timestamp,
            )
            if not readings:
                _logger.info("No HACCP readings for unit %s (%s)", unit.id, unit.name)
            baseline = [
                reading.temperature
                for reading in self.repository.list_readings(
                    unit.id, baseline_start, window_start
                )
            ]
            anomalies = self.detector.detect(readings, unit.safe_range, baseline)
            anomalies.sort(key=lambda anomaly: anomaly.timestamp, reverse=True)
            checks = tally_checks(readings, unit.safe_range)
            total_checks += checks.total
            total_ok += checks.ok
            unit_reports.append(
                UnitReport(
                    unit=unit,
                    report=self.scorer.score(anomalies, checks_expected, checks),
                    anomalies=anomalies,
                )
            )
            gaps.extend(self.scorer.find_gaps(unit.id, readings, start, end, tz))

        gaps.sort(key=lambda gap: (gap.day, gap.unit_id))
        overall = (
            round_half_away(total_ok / total_checks * 100) if total_checks else 100.0
        )
        return FleetReport(
            start=start,
            end=end,
            units=unit_reports,
            summary=self.scorer.summarize(
                anomaly for unit in unit_reports for anomaly in unit.anomalies
            ),
            overall_compliance_percent=overall,
            gaps=gaps,
        )


def _check_status(reading: TemperatureReading, safe_range: SafeRange) -> str:
    if reading.status and reading.status.lower() in _RECORDED_STATUSES:
        return reading.status.lower()
    status = get_temperature_status(reading.temperature, safe_range.min, safe_range.max)
    return "ok" if status is TemperatureStatus.OK else "critical"
