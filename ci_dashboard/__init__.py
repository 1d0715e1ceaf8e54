"""Daily health summary for the CI dashboard."""

from __future__ import annotations

from .classification import StatusCounts, Weather, build_section, count_statuses, pass_rate
from .contacts import ContactResolver, parse_mention
from .errors import InputError, InputNotFoundError, InputParseError, SchemaError, SummaryError
from .history import (
    Architecture,
    FailingTest,
    FlakyTest,
    analyze_failing,
    days_failing,
    detect_flaky,
    extract_arch,
    flaky_rate,
)
from .io import load_config, load_snapshot
from .report import DailySummary, build_summary, render_json
from .trends import Trend, TrendSummary, compute_trends

__all__ = [
    "Architecture",
    "ContactResolver",
    "DailySummary",
    "FailingTest",
    "FlakyTest",
    "InputError",
    "InputNotFoundError",
    "InputParseError",
    "SchemaError",
    "StatusCounts",
    "SummaryError",
    "Trend",
    "TrendSummary",
    "Weather",
    "analyze_failing",
    "build_section",
    "build_summary",
    "compute_trends",
    "count_statuses",
    "days_failing",
    "detect_flaky",
    "extract_arch",
    "flaky_rate",
    "load_config",
    "load_snapshot",
    "parse_mention",
    "pass_rate",
    "render_json",
]
