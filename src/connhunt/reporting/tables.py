"""Flat table writers for extraction results.

Two delimited files are produced per run:

``connections.csv``
    ``path, data source, user id, provider``

``errors.csv``
    ``path, error``

Rows follow discovery order. Both files are always written, with just the
header row when there is nothing to report.
"""

from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence, TextIO

from ..core.types import Connection, ExtractionError, ExtractionResult

CONNECTION_COLUMNS: Sequence[str] = ("path", "data source", "user id", "provider")
ERROR_COLUMNS: Sequence[str] = ("path", "error")

CONNECTIONS_FILENAME = "connections.csv"
ERRORS_FILENAME = "errors.csv"


@dataclass(frozen=True)
class TablePaths:
    connections: Path
    errors: Path


def render_connections(connections: Iterable[Connection], handle: TextIO) -> int:
    writer = csv.writer(handle, lineterminator="\n")
    writer.writerow(CONNECTION_COLUMNS)
    count = 0
    for connection in connections:
        writer.writerow(connection.to_row())
        count += 1
    return count


def render_errors(errors: Iterable[ExtractionError], handle: TextIO) -> int:
    writer = csv.writer(handle, lineterminator="\n")
    writer.writerow(ERROR_COLUMNS)
    count = 0
    for error in errors:
        writer.writerow(error.to_row())
        count += 1
    return count


def write_connections_csv(connections: Iterable[Connection], path: Path | str) -> int:
    with Path(path).open("w", encoding="utf-8", newline="") as handle:
        return render_connections(connections, handle)


def write_errors_csv(errors: Iterable[ExtractionError], path: Path | str) -> int:
    with Path(path).open("w", encoding="utf-8", newline="") as handle:
        return render_errors(errors, handle)


def write_tables(
    result: ExtractionResult,
    output_dir: Path | str,
    *,
    connections_name: str = CONNECTIONS_FILENAME,
    errors_name: str = ERRORS_FILENAME,
) -> TablePaths:
    """Write both tables for ``result`` into ``output_dir``."""

    directory = Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)
    paths = TablePaths(
        connections=directory / connections_name,
        errors=directory / errors_name,
    )
    write_connections_csv(result.connections, paths.connections)
    write_errors_csv(result.errors, paths.errors)
    return paths


__all__ = [
    "CONNECTIONS_FILENAME",
    "CONNECTION_COLUMNS",
    "ERRORS_FILENAME",
    "ERROR_COLUMNS",
    "TablePaths",
    "render_connections",
    "render_errors",
    "write_connections_csv",
    "write_errors_csv",
    "write_tables",
]
