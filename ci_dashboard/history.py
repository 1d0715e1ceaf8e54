"""Per-test analysis of weather history: failure streaks, flakiness, arch tags."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import asdict, dataclass, field
import datetime as dt
from enum import Enum
import logging
import re
from typing import Any, Protocol

from .classification import TestStatus
from .contacts import ContactResolver
from .schema import HistoryEntryModel, TestRecordModel
from .utils import percent

__all__ = [
    "Architecture",
    "DEFAULT_ARCH",
    "UNKNOWN_STEP",
    "FLAKY_MIN_HISTORY",
    "FLAKY_THRESHOLD",
    "FailingTest",
    "FlakyTest",
    "parse_history_date",
    "extract_arch",
    "days_failing",
    "count_transitions",
    "flaky_rate",
    "is_flaky",
    "recent_failure",
    "error_step",
    "specific_failures",
    "build_failing_test",
    "analyze_failing",
    "detect_flaky",
    "count_by_arch",
    "format_arch_summary",
]

LOGGER = logging.getLogger(__name__)

UNKNOWN_STEP = "Unknown"
FLAKY_MIN_HISTORY = 5
FLAKY_THRESHOLD = 30

_ISO_DATE_RE = re.compile(r"^(?P<date>\d{4}-\d{2}-\d{2})")
_OLDEST = dt.datetime.min.replace(tzinfo=dt.timezone.utc)


class Architecture(str, Enum):
    """Hardware platforms the CI matrix runs on."""

    S390X = "s390x"
    PPC64LE = "ppc64le"
    AMD64 = "amd64"
    ARM64 = "arm64"


# Most jobs run on amd64 and carry no tag in their name.
DEFAULT_ARCH = Architecture.AMD64

_ARCH_RE = re.compile(
    r"\[(" + "|".join(re.escape(arch.value) for arch in Architecture) + r")\]"
)


class _HasArch(Protocol):
    arch: str


@dataclass
class FailingTest:
    name: str
    error_step: str
    specific_failures: list[str | None]
    days_failing: int
    run_id: Any
    job_id: Any
    arch: str
    maintainers: list[str] = field(default_factory=list)
    slack_mentions: str = ""

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


@dataclass
class FlakyTest:
    name: str
    flaky_rate: int
    transitions: int
    arch: str
    maintainers: list[str] = field(default_factory=list)
    slack_mentions: str = ""

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


def parse_history_date(value: str | None) -> dt.datetime | None:
    if not value:
        return None
    try:
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        parsed = dt.datetime.fromisoformat(value)
    except ValueError:
        match = _ISO_DATE_RE.match(value)
        if not match:
            return None
        try:
            parsed = dt.datetime.fromisoformat(match.group("date"))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.timezone.utc)
    return parsed


def extract_arch(name: str) -> Architecture:
    match = _ARCH_RE.search(name)
    if match is None:
        return DEFAULT_ARCH
    return Architecture(match.group(1))


def days_failing(history: Sequence[HistoryEntryModel]) -> int:
    """Length of the run of ``failed`` entries at the newest end of ``history``."""

    streak = 0
    for entry in reversed(history):
        if entry.status != TestStatus.FAILED.value:
            break
        streak += 1
    return streak


def count_transitions(history: Sequence[HistoryEntryModel]) -> int:
    # Any status change counts, including not_run -> failed.
    return sum(
        1
        for previous, current in zip(history, history[1:])
        if current.status != previous.status
    )


def flaky_rate(history: Sequence[HistoryEntryModel]) -> int | None:
    """Percentage of adjacent entries whose status changed.

    Returns ``None`` when fewer than ``FLAKY_MIN_HISTORY`` entries exist; such
    tests are never judged flaky.
    """

    if len(history) < FLAKY_MIN_HISTORY:
        return None
    return percent(count_transitions(history), len(history) - 1)


def is_flaky(rate: int | None) -> bool:
    return rate is not None and rate > FLAKY_THRESHOLD


def recent_failure(history: Sequence[HistoryEntryModel]) -> HistoryEntryModel | None:
    """Most recently dated ``failed`` entry.

    Entries sharing the newest date resolve to the one appearing last in
    ``history``; entries without a parseable date rank below all dated ones.
    """

    failures = [
        (index, entry)
        for index, entry in enumerate(history)
        if entry.status == TestStatus.FAILED.value
    ]
    if not failures:
        return None
    _, entry = max(
        failures,
        key=lambda item: (parse_history_date(item[1].date) or _OLDEST, item[0]),
    )
    return entry


def error_step(test: TestRecordModel, recent: HistoryEntryModel | None) -> str:
    if test.error is not None and test.error.step:
        return test.error.step
    if recent is not None and recent.failure_step:
        return recent.failure_step
    return UNKNOWN_STEP


def specific_failures(recent: HistoryEntryModel | None) -> list[str | None]:
    if recent is None or recent.failure_details is None:
        return []
    return [failure.name for failure in recent.failure_details.failures]


def build_failing_test(test: TestRecordModel, resolver: ContactResolver) -> FailingTest:
    history = test.weather_history
    recent = recent_failure(history)
    return FailingTest(
        name=test.name,
        error_step=error_step(test, recent),
        specific_failures=specific_failures(recent),
        days_failing=days_failing(history),
        run_id=test.run_id,
        job_id=test.job_id,
        arch=extract_arch(test.name).value,
        maintainers=list(test.maintainers),
        slack_mentions=resolver.resolve(test.maintainers),
    )


def analyze_failing(
    tests: Iterable[TestRecordModel], resolver: ContactResolver
) -> list[FailingTest]:
    """Currently failing tests, longest streak first."""

    failing = [
        build_failing_test(test, resolver)
        for test in tests
        if test.status == TestStatus.FAILED.value
    ]
    failing.sort(key=lambda item: item.days_failing, reverse=True)
    LOGGER.debug("analyzed %d failing tests", len(failing))
    return failing


def detect_flaky(
    tests: Iterable[TestRecordModel], resolver: ContactResolver
) -> list[FlakyTest]:
    """Tests whose full history flips status more than the threshold, worst first."""

    flaky: list[FlakyTest] = []
    for test in tests:
        history = test.weather_history
        rate = flaky_rate(history)
        if rate is None or not is_flaky(rate):
            continue
        flaky.append(
            FlakyTest(
                name=test.name,
                flaky_rate=rate,
                transitions=count_transitions(history),
                arch=extract_arch(test.name).value,
                maintainers=list(test.maintainers),
                slack_mentions=resolver.resolve(test.maintainers),
            )
        )
    flaky.sort(key=lambda item: item.flaky_rate, reverse=True)
    LOGGER.debug("detected %d flaky tests", len(flaky))
    return flaky


def count_by_arch(items: Iterable[_HasArch]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for item in items:
        counts[item.arch] = counts.get(item.arch, 0) + 1
    return counts


def format_arch_summary(counts: Mapping[str, int]) -> str:
    """Render ``{"s390x": 2, "ppc64le": 1}`` as ``"[2x s390x] [1x ppc64le]"``."""

    ordered = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return " ".join(f"[{count}x {arch}]" for arch, count in ordered)
