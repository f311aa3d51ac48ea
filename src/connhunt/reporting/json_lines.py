"""Newline-delimited JSON helpers for extraction results.

Every record is wrapped as ``{"type": ..., "payload": ...}`` so connections
and errors can share one stream. Connections are emitted first, then errors,
each in discovery order.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterator, Mapping, TextIO

from ..core.types import ExtractionResult

__all__ = ["iter_json_records", "render_json_lines", "write_json_lines"]


def _prepare_record(kind: str, payload: Mapping[str, Any]) -> dict[str, Any]:
    return {"type": kind, "payload": dict(payload)}


def iter_json_records(
    result: ExtractionResult,
    *,
    extra_metadata: Mapping[str, object] | None = None,
) -> Iterator[dict[str, Any]]:
    """Yield JSON-compatible records for ``result``."""

    for connection in result.connections:
        yield _prepare_record("connection", connection.to_dict())
    for error in result.errors:
        yield _prepare_record("error", error.to_dict())
    if extra_metadata:
        summary = {
            "connections": len(result.connections),
            "errors": len(result.errors),
            "run_metadata": dict(extra_metadata),
        }
        yield _prepare_record("summary", summary)


def render_json_lines(
    result: ExtractionResult,
    *,
    extra_metadata: Mapping[str, object] | None = None,
) -> str:
    lines = [
        json.dumps(record, sort_keys=True)
        for record in iter_json_records(result, extra_metadata=extra_metadata)
    ]
    return "\n".join(lines) + ("\n" if lines else "")


def write_json_lines(
    result: ExtractionResult,
    destination: Path | str | TextIO,
    *,
    extra_metadata: Mapping[str, object] | None = None,
) -> int:
    """Write ``result`` as JSON lines and return the number of records."""

    records = list(iter_json_records(result, extra_metadata=extra_metadata))
    if isinstance(destination, (str, Path)):
        with Path(destination).open("w", encoding="utf-8") as handle:
            for record in records:
                handle.write(json.dumps(record, sort_keys=True) + "\n")
    else:
        for record in records:
            destination.write(json.dumps(record, sort_keys=True) + "\n")
    return len(records)
