from __future__ import annotations

import json
import logging
import math

LOGGER = logging.getLogger("ci_dashboard")

EXIT_OK = 0
EXIT_INPUT_ERROR = 2


class JsonLogFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload = {
            "level": record.levelname.lower(),
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(as_json: bool = False, level: int = logging.INFO) -> None:
    handler = logging.StreamHandler()
    if as_json:
        handler.setFormatter(JsonLogFormatter())
    else:
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round ``value`` with ties going towards positive infinity.

    The dashboard rounds ``0.5`` up (``2.5 -> 3``) whereas the builtin
    ``round`` rounds half to even.
    """

    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def percent(numerator: int, denominator: int) -> int:
    if denominator <= 0:
        return 0
    return int(round_half_up(numerator / denominator * 100))


__all__ = [
    "LOGGER",
    "EXIT_OK",
    "EXIT_INPUT_ERROR",
    "JsonLogFormatter",
    "configure_logging",
    "round_half_up",
    "percent",
]
