from __future__ import annotations

import io
import json
from pathlib import Path

from connhunt.core.types import Connection, ExtractionError, ExtractionResult
from connhunt.reporting import iter_json_records, render_json_lines, write_json_lines


def _result() -> ExtractionResult:
    return ExtractionResult(
        connections=[Connection("web.config", "db2", "dvrpc", "Oracle")],
        errors=[ExtractionError("legacy.asp", "missing required field: provider")],
    )


def test_records_are_typed_and_ordered() -> None:
    records = list(iter_json_records(_result()))

    assert [record["type"] for record in records] == ["connection", "error"]
    assert records[0]["payload"]["data_source"] == "db2"
    assert records[1]["payload"]["kind"] == "missing-required-field"


def test_summary_record_with_metadata() -> None:
    records = list(iter_json_records(_result(), extra_metadata={"run": "nightly"}))

    assert records[-1] == {
        "type": "summary",
        "payload": {"connections": 1, "errors": 1, "run_metadata": {"run": "nightly"}},
    }


def test_render_and_write_agree(tmp_path: Path) -> None:
    rendered = render_json_lines(_result())
    buffer = io.StringIO()
    count = write_json_lines(_result(), buffer)
    target = tmp_path / "results.jsonl"
    write_json_lines(_result(), target)

    assert count == 2
    assert buffer.getvalue() == rendered == target.read_text(encoding="utf-8")
    assert [json.loads(line)["type"] for line in rendered.splitlines()] == ["connection", "error"]


def test_empty_result_renders_nothing() -> None:
    assert render_json_lines(ExtractionResult()) == ""
