"""Status partitioning and the section-level weather indicator."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass
from enum import Enum

from .schema import TestRecordModel
from .utils import percent

__all__ = [
    "ALL_JOBS_SECTION",
    "TestStatus",
    "NOT_RUN_STATUSES",
    "Weather",
    "StatusCounts",
    "SectionSummary",
    "count_statuses",
    "pass_rate",
    "weather_for",
    "build_section",
]

ALL_JOBS_SECTION = "All Jobs"


class TestStatus(str, Enum):
    """Statuses the dashboard names explicitly."""

    PASSED = "passed"
    FAILED = "failed"
    RUNNING = "running"
    NOT_RUN = "not_run"
    NONE = "none"


# ``none`` is only merged with ``not_run`` for the not-run count.
NOT_RUN_STATUSES = frozenset({TestStatus.NOT_RUN.value, TestStatus.NONE.value})


class Weather(Enum):
    """Five-level health indicator, ordered from best to worst."""

    SUNNY = (95, "☀️")
    MOSTLY_SUNNY = (85, "🌤️")
    PARTLY_CLOUDY = (70, "⛅")
    RAINY = (50, "🌧️")
    STORMY = (0, "⛈️")

    def __init__(self, threshold: int, emoji: str) -> None:
        self.threshold = threshold
        self.emoji = emoji


def weather_for(rate: int) -> Weather:
    for weather in Weather:
        if rate >= weather.threshold:
            return weather
    return Weather.STORMY


@dataclass(frozen=True)
class StatusCounts:
    total: int = 0
    failed: int = 0
    passed: int = 0
    not_run: int = 0
    running: int = 0

    @property
    def pass_rate(self) -> int:
        return pass_rate(self.passed, self.total)


@dataclass(frozen=True)
class SectionSummary:
    name: str
    total: int
    failed: int
    passed: int
    not_run: int
    pass_rate: int
    weather_emoji: str

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


def count_statuses(tests: Iterable[TestRecordModel]) -> StatusCounts:
    total = failed = passed = not_run = running = 0
    for test in tests:
        total += 1
        status = test.status
        if status == TestStatus.FAILED.value:
            failed += 1
        elif status == TestStatus.PASSED.value:
            passed += 1
        elif status == TestStatus.RUNNING.value:
            running += 1
        elif status in NOT_RUN_STATUSES:
            not_run += 1
    return StatusCounts(
        total=total, failed=failed, passed=passed, not_run=not_run, running=running
    )


def pass_rate(passed: int, total: int) -> int:
    """Integer percentage of passing tests; ``0`` for an empty population."""

    return percent(passed, total)


def build_section(counts: StatusCounts, name: str = ALL_JOBS_SECTION) -> SectionSummary:
    rate = counts.pass_rate
    return SectionSummary(
        name=name,
        total=counts.total,
        failed=counts.failed,
        passed=counts.passed,
        not_run=counts.not_run,
        pass_rate=rate,
        weather_emoji=weather_for(rate).emoji,
    )
