"""Loading utilities for the dashboard snapshot and configuration."""

from __future__ import annotations

from collections.abc import Mapping
import json
import logging
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError
import yaml

from .errors import InputNotFoundError, InputParseError, SchemaError
from .schema import DashboardConfigModel, SnapshotModel

__all__ = [
    "load_json_document",
    "load_yaml_document",
    "parse_snapshot",
    "parse_config",
    "load_snapshot",
    "load_config",
]

LOGGER = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise InputNotFoundError(f"input file not found: {path}", path=path) from exc
    except OSError as exc:
        raise InputNotFoundError(f"input file is not readable: {path}: {exc}", path=path) from exc


def _require_mapping(data: object, path: Path) -> Mapping[str, object]:
    if not isinstance(data, Mapping):
        raise SchemaError(f"top level of {path} is not a mapping", path=path)
    return data


def load_json_document(path: str | Path) -> Mapping[str, object]:
    path = Path(path)
    text = _read_text(path)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InputParseError(
            f"invalid JSON in {path}: line {exc.lineno} column {exc.colno}: {exc.msg}",
            path=path,
        ) from exc
    return _require_mapping(data, path)


def load_yaml_document(path: str | Path) -> Mapping[str, object]:
    path = Path(path)
    text = _read_text(path)
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise InputParseError(f"invalid YAML in {path}: {exc}", path=path) from exc
    if data is None:
        # An empty config file is a config without any keys.
        return {}
    return _require_mapping(data, path)


def _format_validation_error(source: Path | str, exc: ValidationError) -> str:
    details = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part is not None)
        message = error.get("msg", "unknown error")
        if location:
            details.append(f"{location}: {message}")
        else:
            details.append(message)
    summary = "; ".join(details)
    return f"schema validation failed ({source}): {summary}"


def _validate(model: type[ModelT], data: Mapping[str, object], source: Path | str) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        path = source if isinstance(source, Path) else None
        raise SchemaError(_format_validation_error(source, exc), path=path) from exc


def parse_snapshot(data: Mapping[str, object], source: Path | str = "<snapshot>") -> SnapshotModel:
    return _validate(SnapshotModel, data, source)


def parse_config(data: Mapping[str, object], source: Path | str = "<config>") -> DashboardConfigModel:
    return _validate(DashboardConfigModel, data, source)


def load_snapshot(path: str | Path) -> SnapshotModel:
    """Read ``data.json`` and validate the ``allJobsSection`` test records."""

    path = Path(path)
    snapshot = parse_snapshot(load_json_document(path), path)
    LOGGER.info("loaded %d tests from %s", len(snapshot.tests), path)
    return snapshot


def load_config(path: str | Path) -> DashboardConfigModel:
    """Read ``config.yaml`` and validate the maintainers directory."""

    path = Path(path)
    config = parse_config(load_yaml_document(path), path)
    LOGGER.info(
        "loaded %d maintainers from %s", len(config.maintainers_directory), path
    )
    return config
