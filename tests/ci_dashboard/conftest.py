from __future__ import annotations

from collections.abc import Callable, Sequence
import datetime as dt
from typing import Any

import pytest

from ci_dashboard.schema import HistoryEntryModel, TestRecordModel

HistoryFactory = Callable[..., list[dict[str, Any]]]
TestFactory = Callable[..., TestRecordModel]


def _history(
    statuses: Sequence[str], *, start: dt.date = dt.date(2024, 1, 1)
) -> list[dict[str, Any]]:
    return [
        {"date": (start + dt.timedelta(days=offset)).isoformat(), "status": status}
        for offset, status in enumerate(statuses)
    ]


@pytest.fixture
def make_history() -> HistoryFactory:
    """Build consecutive daily entries starting at 2024-01-01."""

    return _history


@pytest.fixture
def make_test() -> TestFactory:
    def factory(
        name: str = "job",
        status: str = "passed",
        statuses: Sequence[str] = (),
        *,
        history: list[dict[str, Any]] | None = None,
        **extra: Any,
    ) -> TestRecordModel:
        payload: dict[str, Any] = {
            "name": name,
            "status": status,
            "weatherHistory": history if history is not None else _history(statuses),
        }
        payload.update(extra)
        return TestRecordModel.model_validate(payload)

    return factory


@pytest.fixture
def entries() -> Callable[..., list[HistoryEntryModel]]:
    def factory(*statuses: str) -> list[HistoryEntryModel]:
        return [HistoryEntryModel.model_validate(item) for item in _history(statuses)]

    return factory
