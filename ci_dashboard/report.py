"""Assemble the daily summary payload from the pipeline stages."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import datetime as dt
import json
import logging
from typing import Any

from .classification import SectionSummary, build_section, count_statuses
from .contacts import ContactResolver
from .history import (
    FailingTest,
    FlakyTest,
    analyze_failing,
    count_by_arch,
    detect_flaky,
    format_arch_summary,
)
from .schema import MaintainerModel, SnapshotModel
from .trends import compute_trends

__all__ = ["DailySummary", "build_summary", "format_timestamp", "render_json"]

LOGGER = logging.getLogger(__name__)


@dataclass
class DailySummary:
    date: str
    overall_pass_rate: int
    total_tests: int
    failed_count: int
    not_run_count: int
    running_count: int
    passed_count: int
    flaky_count: int
    ten_day_avg_failed: float
    ten_day_avg_flaky: float
    flaky_delta: float
    failed_delta: float
    trend: str
    trend_emoji: str
    sections: list[SectionSummary] = field(default_factory=list)
    failing_tests: list[FailingTest] = field(default_factory=list)
    failing_by_arch: dict[str, int] = field(default_factory=dict)
    failing_arch_summary: str = ""
    flaky_tests: list[FlakyTest] = field(default_factory=list)
    flaky_by_arch: dict[str, int] = field(default_factory=dict)
    flaky_arch_summary: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "overall_pass_rate": self.overall_pass_rate,
            "total_tests": self.total_tests,
            "failed_count": self.failed_count,
            "not_run_count": self.not_run_count,
            "running_count": self.running_count,
            "passed_count": self.passed_count,
            "flaky_count": self.flaky_count,
            "ten_day_avg_failed": self.ten_day_avg_failed,
            "ten_day_avg_flaky": self.ten_day_avg_flaky,
            "flaky_delta": self.flaky_delta,
            "failed_delta": self.failed_delta,
            "trend": self.trend,
            "trend_emoji": self.trend_emoji,
            "sections": [section.to_dict() for section in self.sections],
            "failing_tests": [test.to_dict() for test in self.failing_tests],
            "failing_by_arch": dict(self.failing_by_arch),
            "failing_arch_summary": self.failing_arch_summary,
            "flaky_tests": [test.to_dict() for test in self.flaky_tests],
            "flaky_by_arch": dict(self.flaky_by_arch),
            "flaky_arch_summary": self.flaky_arch_summary,
        }


def format_timestamp(value: dt.datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    value = value.astimezone(dt.timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_summary(
    snapshot: SnapshotModel,
    directory: Mapping[str, MaintainerModel] | None = None,
    *,
    generated_at: dt.datetime | None = None,
) -> DailySummary:
    """Run every stage over ``snapshot`` and merge the results."""

    tests = snapshot.tests
    resolver = ContactResolver(directory)
    now = generated_at or dt.datetime.now(dt.timezone.utc)

    counts = count_statuses(tests)
    failing = analyze_failing(tests, resolver)
    flaky = detect_flaky(tests, resolver)
    trends = compute_trends(tests, counts.failed, len(flaky))

    failing_by_arch = count_by_arch(failing)
    flaky_by_arch = count_by_arch(flaky)

    LOGGER.info(
        "summary: %d tests, %d failed, %d flaky, trend %s",
        counts.total,
        counts.failed,
        len(flaky),
        trends.trend.label,
    )
    return DailySummary(
        date=format_timestamp(now),
        overall_pass_rate=counts.pass_rate,
        total_tests=counts.total,
        failed_count=counts.failed,
        not_run_count=counts.not_run,
        running_count=counts.running,
        passed_count=counts.passed,
        flaky_count=len(flaky),
        ten_day_avg_failed=trends.ten_day_avg_failed,
        ten_day_avg_flaky=trends.ten_day_avg_flaky,
        flaky_delta=trends.flaky_delta,
        failed_delta=trends.failed_delta,
        trend=trends.trend.label,
        trend_emoji=trends.trend.emoji,
        sections=[build_section(counts)],
        failing_tests=failing,
        failing_by_arch=failing_by_arch,
        failing_arch_summary=format_arch_summary(failing_by_arch),
        flaky_tests=flaky,
        flaky_by_arch=flaky_by_arch,
        flaky_arch_summary=format_arch_summary(flaky_by_arch),
    )


def render_json(summary: DailySummary) -> str:
    return json.dumps(summary.to_dict(), indent=2, ensure_ascii=False) + "\n"
