"""Guest-count (PAX) forecasting.

A forecast blends three signals: the recent 4-week moving average, the
day-of-week average and the same ISO week last year. A signal of ``0`` means
"no data" (not "no guests"), and its weight is handed to the signals that
are present.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Protocol

from kitchen_analytics.domain.forecast import (
    AccuracyMetrics,
    ConfidenceInterval,
    ForecastEntry,
    ForecastResult,
    PaxObservation,
    WeeklyForecast,
)
from kitchen_analytics.services.numeric import calculate_stats, round_half_away

# (recent, day-of-week, seasonal) presence -> (recent, day-of-week, seasonal)
# weights. Every row sums to 1.0; all signals missing has no row.
SIGNAL_WEIGHTS: dict[tuple[bool, bool, bool], tuple[float, float, float]] = {
    (True, True, True): (0.5, 0.3, 0.2),
    (False, True, True): (0.0, 0.6, 0.4),
    (False, True, False): (0.0, 1.0, 0.0),
    (True, False, True): (0.7, 0.0, 0.3),
    (True, False, False): (1.0, 0.0, 0.0),
    (False, False, True): (0.0, 0.0, 1.0),
    (True, True, False): (0.6, 0.4, 0.0),
}

# Indexed by day_of_week(), Sunday first.
DAY_NAMES_DE = (
    "Sonntag",
    "Montag",
    "Dienstag",
    "Mittwoch",
    "Donnerstag",
    "Freitag",
    "Samstag",
)

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ForecastEngine:
    """Blends forecast signals and reports uncertainty and accuracy."""

    interval_sigmas: float = 1.5
    fallback_spread: float = 0.2

    def weights(
        self, avg_4_week: float, dow_avg: float, seasonal: float
    ) -> tuple[float, float, float]:
        """Return the redistributed weights; all zero when no signal is present."""
        presence = (avg_4_week > 0, dow_avg > 0, seasonal > 0)
        return SIGNAL_WEIGHTS.get(presence, (0.0, 0.0, 0.0))

    def weighted(self, avg_4_week: float, dow_avg: float, seasonal: float) -> float:
        """Return the unrounded weighted guest-count prediction."""
        w_recent, w_dow, w_seasonal = self.weights(avg_4_week, dow_avg, seasonal)
        return w_recent * avg_4_week + w_dow * dow_avg + w_seasonal * seasonal

    def forecast(
        self, avg_4_week: float, dow_avg: float, seasonal: float, places: int = 2
    ) -> float:
        """Return the weighted guest-count prediction rounded to ``places``."""
        return round_half_away(self.weighted(avg_4_week, dow_avg, seasonal), places)

    def confidence_interval(
        self, predicted: float, historical: Sequence[float], places: int = 2
    ) -> ConfidenceInterval:
        """Return ``predicted ± 1.5 sd``, floored at zero and rounded to ``places``.

        The spread falls back to 20% of the prediction when fewer than two
        historical values are available.
        """
        if len(historical) > 1:
            std_dev = calculate_stats(historical).std_dev
        elif predicted > 0:
            std_dev = predicted * self.fallback_spread
        else:
            std_dev = 0.0
        margin = self.interval_sigmas * std_dev
        return ConfidenceInterval(
            lower=round_half_away(max(0.0, predicted - margin), places),
            upper=round_half_away(predicted + margin, places),
        )

    def mape(self, actuals: Sequence[float], predictions: Sequence[float]) -> float:
        """Return the mean absolute percentage error, skipping zero actuals.

        Raises ``ValueError`` when the sequences differ in length.
        """
        if len(actuals) != len(predictions):
            raise ValueError(
                f"Got {len(actuals)} actuals but {len(predictions)} predictions"
            )
        errors = [
            abs(actual - predicted) / actual * 100
            for actual, predicted in zip(actuals, predictions, strict=True)
            if actual != 0
        ]
        if not errors:
            return 0.0
        return round_half_away(sum(errors) / len(errors), 1)

    def predict(  # noqa: PLR0913
        self,
        avg_4_week: float,
        dow_avg: float,
        seasonal: float,
        historical: Sequence[float] = (),
        actuals: Sequence[float] | None = None,
        predictions: Sequence[float] | None = None,
    ) -> ForecastResult:
        """Forecast with interval, plus MAPE when past predictions are given."""
        predicted = self.forecast(avg_4_week, dow_avg, seasonal)
        interval = self.confidence_interval(predicted, historical)
        mape = None
        if actuals is not None and predictions is not None:
            mape = self.mape(actuals, predictions)
        return ForecastResult(
            predicted=predicted,
            lower=interval.lower,
            upper=interval.upper,
            mape=mape,
        )


def day_of_week(day: date) -> int:
    """Return the weekday number with Sunday as 0 and Saturday as 6."""
    return (day.weekday() + 1) % 7


def same_iso_week_last_year(day: date) -> date:
    """Return the Monday of ``day``'s ISO week number one ISO year earlier."""
    iso_year, iso_week, _ = day.isocalendar()
    first_monday = date.fromisocalendar(iso_year - 1, 1, 1)
    return first_monday + timedelta(weeks=iso_week - 1)


class GuestCountRepository(Protocol):
    """Read access to recorded guest counts."""

    def list_observations(
        self, location_id: int | None, start: date, end: date
    ) -> list[PaxObservation]:
        """Return observations between ``start`` and ``end`` inclusive."""


@dataclass
class PaxForecastService:
    """Forecasts every day and meal service of a week from guest-count history."""

    repository: GuestCountRepository
    engine: ForecastEngine = field(default_factory=ForecastEngine)
    meals: tuple[str, ...] = ("mittag", "abend")
    recent_weeks: int = 4
    lookback_weeks: int = 12
    backtest_weeks: int = 4

    def forecast_week(
        self, week_start: date, location_id: int | None = None
    ) -> WeeklyForecast:
        """Forecast the seven days starting at ``week_start``."""
        last_year_start = same_iso_week_last_year(week_start)
        lookback_start = week_start - timedelta(weeks=self.lookback_weeks)
        observations = self.repository.list_observations(
            location_id,
            min(last_year_start, lookback_start),
            week_start - timedelta(days=1),
        )
        totals = _totals_by_service(observations)
        if not totals:
            _logger.info(
                "No guest-count history for location %s before %s",
                location_id,
                week_start,
            )

        forecasts = []
        for offset in range(7):
            target = week_start + timedelta(days=offset)
            last_year_day = last_year_start + timedelta(days=offset)
            for meal in self.meals:
                forecasts.append(
                    self._forecast_entry(target, meal, totals, last_year_day)
                )

        return WeeklyForecast(
            week_start=week_start,
            location_id=location_id,
            forecasts=forecasts,
            accuracy=self._backtest(week_start, totals),
        )

    def _forecast_entry(
        self,
        target: date,
        meal: str,
        totals: dict[tuple[date, str], int],
        last_year_day: date,
    ) -> ForecastEntry:
        recent = self._recent_values(target, meal, totals)
        avg_4_week = _mean(recent)
        dow_values = [
            total
            for (day, service), total in totals.items()
            if service == meal and day.weekday() == target.weekday()
        ]
        dow_avg = _mean(dow_values)
        last_year = totals.get((last_year_day, meal))
        raw = self.engine.weighted(avg_4_week, dow_avg, last_year or 0)
        interval = self.engine.confidence_interval(
            raw, recent + dow_values, places=0
        )
        weekday = day_of_week(target)
        return ForecastEntry(
            date=target,
            day_of_week=weekday,
            day_name=DAY_NAMES_DE[weekday],
            meal=meal,
            predicted=_whole(raw),
            lower=int(interval.lower),
            upper=int(interval.upper),
            last_year=last_year,
            avg_4_week=_whole(avg_4_week),
        )

    def _backtest(
        self, week_start: date, totals: dict[tuple[date, str], int]
    ) -> AccuracyMetrics:
        """Score the moving average against the weeks just before ``week_start``."""
        actuals: list[float] = []
        predictions: list[float] = []
        for weeks_back in range(1, self.backtest_weeks + 1):
            test_monday = week_start - timedelta(weeks=weeks_back)
            for offset in range(7):
                test_day = test_monday + timedelta(days=offset)
                for meal in self.meals:
                    actual = totals.get((test_day, meal))
                    if not actual:
                        continue
                    simulated = self._recent_values(test_day, meal, totals)
                    if not simulated:
                        continue
                    actuals.append(actual)
                    predictions.append(_mean(simulated))
        return AccuracyMetrics(
            mape=self.engine.mape(actuals, predictions),
            data_points=len(actuals),
        )

    def _recent_values(
        self, target: date, meal: str, totals: dict[tuple[date, str], int]
    ) -> list[float]:
        values = []
        for weeks_back in range(1, self.recent_weeks + 1):
            total = totals.get((target - timedelta(weeks=weeks_back), meal))
            if total is not None:
                values.append(float(total))
        return values


def _totals_by_service(
    observations: Sequence[PaxObservation],
) -> dict[tuple[date, str], int]:
    totals: dict[tuple[date, str], int] = {}
    for observation in observations:
        key = (observation.date, observation.meal)
        totals[key] = totals.get(key, 0) + observation.total
    return totals


def _mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def _whole(value: float) -> int:
    return int(round_half_away(value, 0))
