"""CLI entry point for the daily dashboard summary."""

from __future__ import annotations

import argparse
from collections.abc import Iterable
from pathlib import Path
import sys

from .errors import InputError
from .io import load_config, load_snapshot
from .report import build_summary, render_json
from .utils import EXIT_INPUT_ERROR, EXIT_OK, LOGGER, configure_logging

__all__ = ["parse_args", "main"]


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate the daily CI dashboard summary as JSON"
    )
    parser.add_argument(
        "--data", type=Path, default=Path("data.json"), help="Path to the dashboard data.json"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("config.yaml"),
        help="Path to config.yaml holding maintainers_directory",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the summary to this file instead of stdout",
    )
    parser.add_argument(
        "--log-format",
        choices=("text", "json"),
        default="text",
        help="Format of diagnostic logs written to stderr",
    )
    args = None if argv is None else list(argv)
    return parser.parse_args(args)


def main(argv: Iterable[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(as_json=args.log_format == "json")

    try:
        snapshot = load_snapshot(args.data)
        config = load_config(args.config)
    except InputError as exc:
        LOGGER.error("%s", exc)
        return EXIT_INPUT_ERROR

    summary = build_summary(snapshot, config.maintainers_directory)
    text = render_json(summary)
    if args.output is None:
        sys.stdout.write(text)
    else:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(text, encoding="utf-8")
        LOGGER.info("summary written to %s", args.output)
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
