"""Result writers for connhunt.

Tables are the primary output; JSON lines serve tooling that wants one stream
with typed records.
"""

from .json_lines import iter_json_records, render_json_lines, write_json_lines
from .tables import (
    CONNECTION_COLUMNS,
    ERROR_COLUMNS,
    TablePaths,
    render_connections,
    render_errors,
    write_connections_csv,
    write_errors_csv,
    write_tables,
)

__all__ = [
    "CONNECTION_COLUMNS",
    "ERROR_COLUMNS",
    "TablePaths",
    "iter_json_records",
    "render_connections",
    "render_errors",
    "render_json_lines",
    "write_connections_csv",
    "write_errors_csv",
    "write_json_lines",
    "write_tables",
]
