"""Extract connection strings from JSON ``ConnectionStrings`` sections.

``appsettings.json`` style documents group declarations under one key::

    "ConnectionStrings": {
        "Reporting": "Data Source=db2;User Id=dvrpc;Provider=OraOLEDB.Oracle",
        "Audit": "Data Source=db3;User Id=audit;Provider=OraOLEDB.Oracle"
    }

The section is located textually (marker up to the next ``}``) instead of
parsing the document, so files with comments, trailing commas or other
non-standard syntax still yield their connections. Every non-blank line of the
section is a separate candidate; when a line holds several ``"name": "value"``
entries each entry becomes its own candidate. Candidates pass the same
relevance check as any other format, so comment lines and unrelated entries
such as ``"Redis": "localhost:6379"`` are dropped during resolution.
"""

from __future__ import annotations

import json as json_lib
import re
from dataclasses import dataclass
from typing import Iterator, Tuple

from ..core.types import Candidate
from .format_registry import line_number_at, register

FORMAT_TAG = "json"

_SECTION = re.compile(
    r"""["']?connection_?strings["']?\s*:\s*\{(?P<body>.*?)\}""",
    re.DOTALL | re.IGNORECASE,
)
_ENTRY = re.compile(
    r'"(?P<name>(?:[^"\\]|\\.)*)"\s*:\s*"(?P<value>(?:[^"\\]|\\.)*)"',
    re.DOTALL,
)


def decode_json_string(raw: str) -> str:
    """Decode JSON escapes in ``raw``; undecodable text is returned as-is."""

    try:
        decoded = json_lib.loads(f'"{raw}"')
    except json_lib.JSONDecodeError:
        return raw
    return decoded if isinstance(decoded, str) else raw


@dataclass
class JsonBlockExtractor:
    name: str = "json-block"
    format_tag: str = FORMAT_TAG
    version: str = "0.1.0"
    extensions: Tuple[str, ...] = (".json",)

    def extract(self, text: str) -> Iterator[Candidate]:
        for section in _SECTION.finditer(text):
            position = section.start("body")
            for line in section.group("body").splitlines(keepends=True):
                line_offset = position
                position += len(line)
                if not line.strip():
                    continue
                entries = list(_ENTRY.finditer(line))
                if entries:
                    for entry in entries:
                        offset = line_offset + entry.start()
                        yield Candidate(
                            body=decode_json_string(entry.group("value")),
                            format_tag=self.format_tag,
                            offset=offset,
                            line_number=line_number_at(text, offset),
                            text=entry.group(0),
                        )
                    continue
                stripped = line.strip().rstrip(",").strip()
                if not stripped:
                    continue
                offset = line_offset + (len(line) - len(line.lstrip()))
                yield Candidate(
                    body=stripped,
                    format_tag=self.format_tag,
                    offset=offset,
                    line_number=line_number_at(text, offset),
                    text=stripped,
                )


register(JsonBlockExtractor())


__all__ = ["FORMAT_TAG", "JsonBlockExtractor", "decode_json_string"]
