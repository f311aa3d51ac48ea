"""Extract connection strings written as string literals.

Two shapes show up in legacy script pages:

``parenthesized``
    ``("Provider=OraOLEDB.Oracle;Data Source=db;User ID=app")``, typically the
    argument of ``conn.Open(...)`` inside ``.aspx`` pages and embedded script
    blocks of ``.config`` files.

``quoted``
    any bare ``"..."`` literal in Classic ASP (``.asp``) pages, e.g.
    ``conn.ConnectionString = "Provider=MSDAORA;Data Source=db;User Id=app"``.

Both patterns are non-greedy and span lines, so a literal broken across lines
is still captured up to its closing delimiter.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Pattern, Tuple

from ..core.types import Candidate
from .format_registry import line_number_at, register

PARENTHESIZED_TAG = "parenthesized"
QUOTED_TAG = "quoted"

_PARENTHESIZED = re.compile(r'\("(?P<body>.*?)"\)', re.DOTALL)
_QUOTED = re.compile(r'"(?P<body>.*?)"', re.DOTALL)


def _iter_literals(pattern: Pattern[str], text: str, format_tag: str) -> Iterator[Candidate]:
    for match in pattern.finditer(text):
        yield Candidate(
            body=match.group("body"),
            format_tag=format_tag,
            offset=match.start(),
            line_number=line_number_at(text, match.start()),
            text=match.group(0),
        )


@dataclass
class ParenthesizedLiteralExtractor:
    name: str = "parenthesized-literal"
    format_tag: str = PARENTHESIZED_TAG
    version: str = "0.1.0"
    extensions: Tuple[str, ...] = (".config", ".aspx")

    def extract(self, text: str) -> Iterator[Candidate]:
        return _iter_literals(_PARENTHESIZED, text, self.format_tag)


@dataclass
class QuotedLiteralExtractor:
    name: str = "quoted-literal"
    format_tag: str = QUOTED_TAG
    version: str = "0.1.0"
    extensions: Tuple[str, ...] = (".asp",)

    def extract(self, text: str) -> Iterator[Candidate]:
        return _iter_literals(_QUOTED, text, self.format_tag)


register(ParenthesizedLiteralExtractor())
register(QuotedLiteralExtractor())


__all__ = [
    "PARENTHESIZED_TAG",
    "ParenthesizedLiteralExtractor",
    "QUOTED_TAG",
    "QuotedLiteralExtractor",
]
