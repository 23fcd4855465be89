"""Anomaly detection over HACCP temperature reading streams."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from zoneinfo import ZoneInfo

from kitchen_analytics.domain.haccp import (
    Anomaly,
    AnomalyDetail,
    AnomalyType,
    SafeRange,
    Severity,
    TemperatureReading,
    TemperatureStatus,
)
from kitchen_analytics.services.numeric import calculate_stats, round_half_away

BUSINESS_HOURS_START = time(6, 0)
BUSINESS_HOURS_END = time(22, 0)


def is_business_hours(timestamp: datetime) -> bool:
    """Return True between 06:00 (inclusive) and 22:00 (exclusive)."""
    return BUSINESS_HOURS_START.hour <= timestamp.hour < BUSINESS_HOURS_END.hour


def get_temperature_status(
    temperature: float, minimum: float, maximum: float
) -> TemperatureStatus:
    """Classify a reading against inclusive bounds."""
    if temperature < minimum:
        return TemperatureStatus.CRITICAL_LOW
    if temperature > maximum:
        return TemperatureStatus.CRITICAL_HIGH
    return TemperatureStatus.OK


def business_time_between(start: datetime, end: datetime) -> timedelta:
    """Return how much of ``[start, end]`` falls inside business hours."""
    if start.tzinfo is not None and end.tzinfo is not None:
        end = end.astimezone(start.tzinfo)
    total = timedelta(0)
    day = start.date()
    while day <= end.date():
        opens = datetime.combine(day, BUSINESS_HOURS_START, tzinfo=start.tzinfo)
        closes = datetime.combine(day, BUSINESS_HOURS_END, tzinfo=start.tzinfo)
        overlap = min(end, closes) - max(start, opens)
        if overlap > timedelta(0):
            total += overlap
        day += timedelta(days=1)
    return total


@dataclass(frozen=True)
class TemperatureAnomalyDetector:
    """Detects failure signatures in the readings of one refrigeration unit.

    Stateless: every call only looks at the readings it is given. When no
    ``timezone`` is set, timestamps are interpreted in their own (local) time.
    """

    gap_threshold: timedelta = timedelta(hours=8)
    stuck_repeat_threshold: int = 5
    spike_sigma: float = 2.0
    critical_spike_sigma: float = 3.0
    spike_window: int = 10
    timezone: ZoneInfo | None = None

    def detect(
        self,
        readings: Sequence[TemperatureReading],
        safe_range: SafeRange,
        baseline: Sequence[float] | None = None,
    ) -> list[Anomaly]:
        """Run all rules over chronologically ordered readings.

        ``baseline`` holds historical temperatures for spike detection (for
        example the seven days before the window). Without it, each reading is
        compared with the trailing ``spike_window`` readings before it.
        """
        anomalies: list[Anomaly] = []
        anomalies.extend(self._out_of_range(readings, safe_range))
        anomalies.extend(self._trends(readings))
        anomalies.extend(self._spikes(readings, baseline))
        anomalies.extend(self._gaps(readings))
        anomalies.extend(self._stuck_sensor(readings))
        return anomalies

    def _out_of_range(
        self, readings: Sequence[TemperatureReading], safe_range: SafeRange
    ) -> list[Anomaly]:
        found = []
        for reading in readings:
            status = get_temperature_status(
                reading.temperature, safe_range.min, safe_range.max
            )
            if status is TemperatureStatus.OK:
                continue
            found.append(
                Anomaly(
                    unit_id=reading.unit_id,
                    type=AnomalyType.OUT_OF_RANGE,
                    severity=Severity.CRITICAL,
                    timestamp=reading.timestamp,
                    detail=AnomalyDetail(
                        message=(
                            f"Temperatur {reading.temperature:.1f}°C außerhalb "
                            f"des Sollbereichs ({safe_range.min}°C - "
                            f"{safe_range.max}°C)"
                        ),
                        value=reading.temperature,
                        expected=f"{safe_range.min}°C bis {safe_range.max}°C",
                    ),
                )
            )
        return found

    def _trends(self, readings: Sequence[TemperatureReading]) -> list[Anomaly]:
        found = []
        for index in range(2, len(readings)):
            t1 = readings[index - 2].temperature
            t2 = readings[index - 1].temperature
            t3 = readings[index].temperature
            rising = t1 < t2 < t3
            falling = t1 > t2 > t3
            if not (rising or falling):
                continue
            direction = "steigend" if rising else "fallend"
            found.append(
                Anomaly(
                    unit_id=readings[index].unit_id,
                    type=AnomalyType.TREND,
                    severity=Severity.WARNING,
                    timestamp=readings[index].timestamp,
                    detail=AnomalyDetail(
                        message=(
                            f"Temperaturtrend {direction} über 3 "
                            "aufeinanderfolgende Messungen"
                        ),
                        value=t3,
                        expected=f"{t1:.1f}°C → {t2:.1f}°C → {t3:.1f}°C",
                    ),
                )
            )
        return found

    def _spikes(
        self,
        readings: Sequence[TemperatureReading],
        baseline: Sequence[float] | None,
    ) -> list[Anomaly]:
        found = []
        temperatures = [reading.temperature for reading in readings]
        for index, reading in enumerate(readings):
            if baseline is not None:
                history = baseline
            else:
                history = temperatures[max(0, index - self.spike_window) : index]
            if len(history) < 2:  # noqa: PLR2004
                continue
            stats = calculate_stats(history)
            deviation = abs(reading.temperature - stats.mean)
            if deviation <= self.spike_sigma * stats.std_dev:
                continue
            severity = Severity.WARNING
            if stats.std_dev > 0 and deviation > self.critical_spike_sigma * (
                stats.std_dev
            ):
                severity = Severity.CRITICAL
            found.append(
                Anomaly(
                    unit_id=reading.unit_id,
                    type=AnomalyType.SPIKE,
                    severity=severity,
                    timestamp=reading.timestamp,
                    detail=AnomalyDetail(
                        message=(
                            f"Temperaturspitze: {reading.temperature:.1f}°C weicht "
                            f"stark vom Durchschnitt ab ({stats.mean:.1f}°C)"
                        ),
                        value=reading.temperature,
                        expected=(
                            f"{stats.mean:.1f}°C ± "
                            f"{self.spike_sigma * stats.std_dev:.1f}°C"
                        ),
                    ),
                )
            )
        return found

    def _gaps(self, readings: Sequence[TemperatureReading]) -> list[Anomaly]:
        found = []
        for previous, current in zip(readings, readings[1:], strict=False):
            start = self._local(previous.timestamp)
            end = self._local(current.timestamp)
            business_gap = business_time_between(start, end)
            if business_gap <= self.gap_threshold:
                continue
            hours = business_gap.total_seconds() / 3600
            found.append(
                Anomaly(
                    unit_id=current.unit_id,
                    type=AnomalyType.GAP,
                    severity=Severity.WARNING,
                    timestamp=current.timestamp,
                    detail=AnomalyDetail(
                        message=(
                            f"Keine Messung für {hours:.1f} Stunden "
                            "während der Betriebszeit"
                        ),
                        value=round_half_away(hours, 1),
                        expected="Messung alle 8 Stunden",
                    ),
                )
            )
        return found

    def _stuck_sensor(self, readings: Sequence[TemperatureReading]) -> list[Anomaly]:
        groups: dict[float, list[TemperatureReading]] = {}
        for reading in readings:
            key = round_half_away(reading.temperature, 1)
            groups.setdefault(key, []).append(reading)

        found = []
        for value, group in groups.items():
            if len(group) < self.stuck_repeat_threshold:
                continue
            first = group[0]
            found.append(
                Anomaly(
                    unit_id=first.unit_id,
                    type=AnomalyType.STUCK_SENSOR,
                    severity=Severity.WARNING,
                    timestamp=first.timestamp,
                    detail=AnomalyDetail(
                        message=(
                            f"Temperatur {value:.1f}°C wurde {len(group)}x "
                            "identisch gemessen - möglicher Sensor-Fehler"
                        ),
                        value=value,
                    ),
                )
            )
        return found

    def _local(self, timestamp: datetime) -> datetime:
        if self.timezone is None:
            return timestamp
        if timestamp.tzinfo is None:
            return timestamp.replace(tzinfo=self.timezone)
        return timestamp.astimezone(self.timezone)
