"""Historical failure / flakiness counts and the trend against their rolling average."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
import logging

from .classification import TestStatus
from .history import FLAKY_THRESHOLD
from .schema import HistoryEntryModel, TestRecordModel
from .utils import percent, round_half_up

__all__ = [
    "TREND_WINDOW_DAYS",
    "TREND_TOLERANCE",
    "DAILY_FLAKY_WINDOW",
    "Trend",
    "TrendSummary",
    "collect_dates",
    "failures_by_day",
    "flaky_by_day",
    "rolling_average",
    "classify_trend",
    "compute_trends",
]

LOGGER = logging.getLogger(__name__)

TREND_WINDOW_DAYS = 10
TREND_TOLERANCE = 0.5
DAILY_FLAKY_WINDOW = 5


class Trend(Enum):
    IMPROVING = ("Improving", "↓")
    STABLE = ("Stable", "→")
    REGRESSING = ("Regressing", "↑")

    def __init__(self, label: str, emoji: str) -> None:
        self.label = label
        self.emoji = emoji


@dataclass
class TrendSummary:
    today: str | None
    window_dates: list[str] = field(default_factory=list)
    failures_by_day: dict[str, int] = field(default_factory=dict)
    flaky_by_day: dict[str, int] = field(default_factory=dict)
    ten_day_avg_failed: float = 0.0
    ten_day_avg_flaky: float = 0.0
    failed_delta: float = 0.0
    flaky_delta: float = 0.0
    trend: Trend = Trend.STABLE

    @property
    def baseline_dates(self) -> list[str]:
        return self.window_dates[1:]


def collect_dates(tests: Iterable[TestRecordModel]) -> list[str]:
    """Distinct history dates across all tests, newest first."""

    dates = {
        entry.date
        for test in tests
        for entry in test.weather_history
        if entry.date
    }
    return sorted(dates, reverse=True)


def _first_position_by_date(history: Sequence[HistoryEntryModel]) -> dict[str, int]:
    positions: dict[str, int] = {}
    for position, entry in enumerate(history):
        if entry.date and entry.date not in positions:
            positions[entry.date] = position
    return positions


def failures_by_day(
    tests: Iterable[TestRecordModel], dates: Sequence[str]
) -> dict[str, int]:
    counts = {date: 0 for date in dates}
    for test in tests:
        history = test.weather_history
        positions = _first_position_by_date(history)
        for date in dates:
            position = positions.get(date)
            if position is not None and history[position].status == TestStatus.FAILED.value:
                counts[date] += 1
    return counts


def _window_is_flaky(window: Sequence[HistoryEntryModel]) -> bool:
    changes = 0
    for index in range(1, len(window)):
        if window[index].status != window[index - 1].status:
            changes += 1
    return percent(changes, len(window) - 1) > FLAKY_THRESHOLD


def flaky_by_day(
    tests: Iterable[TestRecordModel], dates: Sequence[str]
) -> dict[str, int]:
    """Number of tests judged flaky on each date.

    Only the ``DAILY_FLAKY_WINDOW`` entries ending at the first entry for that
    date are considered, so this differs from the full-history detector.
    """

    counts = {date: 0 for date in dates}
    for test in tests:
        history = test.weather_history
        positions = _first_position_by_date(history)
        for date in dates:
            position = positions.get(date)
            if position is None or position < DAILY_FLAKY_WINDOW - 1:
                continue
            window = history[position - DAILY_FLAKY_WINDOW + 1 : position + 1]
            if _window_is_flaky(window):
                counts[date] += 1
    return counts


def rolling_average(values: Sequence[int]) -> float:
    if not values:
        return 0.0
    return round_half_up(sum(values) / len(values), 1)


def classify_trend(delta: float) -> Trend:
    if delta < -TREND_TOLERANCE:
        return Trend.IMPROVING
    if delta > TREND_TOLERANCE:
        return Trend.REGRESSING
    return Trend.STABLE


def compute_trends(
    tests: Sequence[TestRecordModel],
    failed_count: int,
    flaky_count: int,
    *,
    window: int = TREND_WINDOW_DAYS,
) -> TrendSummary:
    """Compare today's counts with the average of the preceding days.

    "Today" is the newest date found in the histories; the baseline is made
    of the remaining dates among the ``window`` newest ones.
    """

    dates = collect_dates(tests)
    window_dates = dates[: max(window, 0)]
    baseline = window_dates[1:]

    failed_per_day = failures_by_day(tests, window_dates)
    flaky_per_day = flaky_by_day(tests, baseline)

    avg_failed = rolling_average([failed_per_day[date] for date in baseline])
    avg_flaky = rolling_average([flaky_per_day[date] for date in baseline])
    failed_delta = failed_count - avg_failed
    flaky_delta = flaky_count - avg_flaky

    LOGGER.debug(
        "trend baseline over %d days: failed avg %.1f, flaky avg %.1f",
        len(baseline),
        avg_failed,
        avg_flaky,
    )
    return TrendSummary(
        today=window_dates[0] if window_dates else None,
        window_dates=list(window_dates),
        failures_by_day=failed_per_day,
        flaky_by_day=flaky_per_day,
        ten_day_avg_failed=avg_failed,
        ten_day_avg_flaky=avg_flaky,
        failed_delta=float(failed_delta),
        flaky_delta=float(flaky_delta),
        trend=classify_trend(failed_delta),
    )
