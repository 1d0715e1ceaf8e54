from __future__ import annotations

from collections.abc import Iterator
import json
import logging
from pathlib import Path

import pytest

from ci_dashboard.__main__ import main, parse_args
from ci_dashboard.utils import EXIT_INPUT_ERROR, EXIT_OK


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def inputs(tmp_path: Path) -> tuple[Path, Path]:
    data = tmp_path / "data.json"
    data.write_text(
        json.dumps(
            {
                "allJobsSection": {
                    "tests": [
                        {
                            "name": "kata-clh [s390x]",
                            "status": "failed",
                            "maintainers": ["@alice"],
                            "weatherHistory": [
                                {"date": "2024-01-01", "status": "passed"},
                                {"date": "2024-01-02", "status": "failed"},
                            ],
                        },
                        {"name": "kata-qemu", "status": "passed"},
                    ]
                }
            }
        ),
        encoding="utf-8",
    )
    config = tmp_path / "config.yaml"
    config.write_text(
        'maintainers_directory:\n  "@alice":\n    slack:\n      kata-containers: U123\n',
        encoding="utf-8",
    )
    return data, config


def test_parse_args_defaults() -> None:
    args = parse_args([])

    assert args.data == Path("data.json")
    assert args.config == Path("config.yaml")
    assert args.output is None
    assert args.log_format == "text"


def test_main_prints_summary_to_stdout(
    inputs: tuple[Path, Path], capsys: pytest.CaptureFixture[str]
) -> None:
    data, config = inputs

    code = main(["--data", str(data), "--config", str(config)])

    captured = capsys.readouterr()
    assert code == EXIT_OK
    payload = json.loads(captured.out)
    assert payload["total_tests"] == 2
    assert payload["overall_pass_rate"] == 50
    assert payload["failing_tests"][0]["slack_mentions"] == "<@U123>"
    assert payload["failing_arch_summary"] == "[1x s390x]"
    assert "[INFO]" in captured.err


def test_main_writes_output_file(
    inputs: tuple[Path, Path], tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    data, config = inputs
    out = tmp_path / "reports" / "summary.json"

    code = main(["--data", str(data), "--config", str(config), "--output", str(out)])

    assert code == EXIT_OK
    assert capsys.readouterr().out == ""
    assert json.loads(out.read_text(encoding="utf-8"))["failed_count"] == 1


def test_main_json_logs(inputs: tuple[Path, Path], capsys: pytest.CaptureFixture[str]) -> None:
    data, config = inputs

    main(["--data", str(data), "--config", str(config), "--log-format", "json"])

    records = [json.loads(line) for line in capsys.readouterr().err.splitlines() if line]
    assert records
    assert {record["level"] for record in records} == {"info"}


def test_missing_input_aborts_without_output(
    inputs: tuple[Path, Path], tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _, config = inputs

    code = main(["--data", str(tmp_path / "missing.json"), "--config", str(config)])

    captured = capsys.readouterr()
    assert code == EXIT_INPUT_ERROR
    assert captured.out == ""
    assert "input file not found" in captured.err


def test_invalid_config_aborts(inputs: tuple[Path, Path], capsys: pytest.CaptureFixture[str]) -> None:
    data, config = inputs
    config.write_text("- just\n- a list\n", encoding="utf-8")

    code = main(["--data", str(data), "--config", str(config)])

    assert code == EXIT_INPUT_ERROR
    assert capsys.readouterr().out == ""
