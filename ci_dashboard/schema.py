"""Pydantic models describing the dashboard snapshot and the maintainer config."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = [
    "FailureDetailModel",
    "FailureDetailsModel",
    "HistoryEntryModel",
    "ErrorInfoModel",
    "TestRecordModel",
    "JobsSectionModel",
    "SnapshotModel",
    "MaintainerModel",
    "DashboardConfigModel",
]


def _none_as_list(value: object) -> object:
    return [] if value is None else value


def _none_as_dict(value: object) -> object:
    return {} if value is None else value


class FailureDetailModel(BaseModel):
    """A single named sub-failure (bats / Go test case)."""

    model_config = ConfigDict(extra="allow")

    name: str | None = None


class FailureDetailsModel(BaseModel):
    model_config = ConfigDict(extra="allow")

    failures: list[FailureDetailModel] = Field(default_factory=list)

    @field_validator("failures", mode="before")
    @classmethod
    def _missing_as_empty(cls, value: object) -> object:
        return _none_as_list(value)


class HistoryEntryModel(BaseModel):
    """One daily status snapshot of a test."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    date: str | None = None
    status: str | None = None
    failure_step: str | None = Field(default=None, alias="failureStep")
    failure_details: FailureDetailsModel | None = Field(default=None, alias="failureDetails")


class ErrorInfoModel(BaseModel):
    model_config = ConfigDict(extra="allow")

    step: str | None = None


class TestRecordModel(BaseModel):
    """A monitored test as published in the ``allJobsSection``."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str
    status: str | None = None
    error: ErrorInfoModel | None = None
    weather_history: list[HistoryEntryModel] = Field(default_factory=list, alias="weatherHistory")
    maintainers: list[str] = Field(default_factory=list)
    run_id: Any = Field(default=None, alias="runId")
    job_id: Any = Field(default=None, alias="jobId")

    @field_validator("weather_history", "maintainers", mode="before")
    @classmethod
    def _missing_as_empty(cls, value: object) -> object:
        return _none_as_list(value)

    @field_validator("error", mode="before")
    @classmethod
    def _ignore_non_mapping_error(cls, value: object) -> object:
        # Some jobs publish a bare error string; it carries no step information.
        if value is None or isinstance(value, (dict, ErrorInfoModel)):
            return value
        return None


class JobsSectionModel(BaseModel):
    model_config = ConfigDict(extra="allow")

    tests: list[TestRecordModel] = Field(default_factory=list)

    @field_validator("tests", mode="before")
    @classmethod
    def _missing_as_empty(cls, value: object) -> object:
        return _none_as_list(value)


class SnapshotModel(BaseModel):
    """Top level of ``data.json``."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    all_jobs_section: JobsSectionModel = Field(
        default_factory=JobsSectionModel, alias="allJobsSection"
    )

    @field_validator("all_jobs_section", mode="before")
    @classmethod
    def _missing_as_empty(cls, value: object) -> object:
        return _none_as_dict(value)

    @property
    def tests(self) -> list[TestRecordModel]:
        return self.all_jobs_section.tests


class MaintainerModel(BaseModel):
    """Directory entry for one maintainer handle."""

    # YAML reads unquoted member IDs such as ``12345`` as integers.
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    name: str | None = None
    slack: dict[str, str | None] = Field(default_factory=dict)

    @field_validator("slack", mode="before")
    @classmethod
    def _missing_as_empty(cls, value: object) -> object:
        return _none_as_dict(value)


class DashboardConfigModel(BaseModel):
    """Subset of ``config.yaml`` used by the summary."""

    model_config = ConfigDict(extra="allow")

    maintainers_directory: dict[str, MaintainerModel] = Field(default_factory=dict)

    @field_validator("maintainers_directory", mode="before")
    @classmethod
    def _missing_as_empty(cls, value: object) -> object:
        value = _none_as_dict(value)
        if isinstance(value, dict):
            # A handle listed without any body (``"@x":``) is treated as unknown.
            return {handle: entry for handle, entry in value.items() if entry is not None}
        return value
