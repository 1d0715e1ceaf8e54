"""Normalized exception hierarchy for the daily summary generator."""

from __future__ import annotations

from pathlib import Path


class SummaryError(Exception):
    """Base class for summary-originated errors."""


class FatalError(SummaryError):
    """Base class for errors that abort the whole run."""


class InputError(FatalError):
    """Raised when an input document cannot be used."""

    def __init__(self, message: str, *, path: Path | str | None = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class InputNotFoundError(InputError):
    """Raised when an input file does not exist or cannot be read."""


class InputParseError(InputError):
    """Raised when an input file is not valid JSON / YAML."""


class SchemaError(InputError):
    """Raised when a parsed document does not match the expected shape."""


__all__ = [
    "SummaryError",
    "FatalError",
    "InputError",
    "InputNotFoundError",
    "InputParseError",
    "SchemaError",
]
