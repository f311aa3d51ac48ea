"""Split declaration fragments into raw key/value pairs.

Two shapes are supported:

* connection-string bodies, ``key=value`` segments separated by ``;``
* tag-style attribute lists, ``name="value"`` (or single-quoted) pairs

Neither function raises on malformed input. Segments that cannot be read as a
pair are skipped, because trailing separators and half-edited fragments are
routine in legacy configuration text.
"""

from __future__ import annotations

import re
from typing import List, Tuple

Pair = Tuple[str, str]

_ATTRIBUTE = re.compile(
    r"""(?P<name>[A-Za-z_][\w:.-]*)\s*=\s*(?:"(?P<double>[^"]*)"|'(?P<single>[^']*)')""",
    re.DOTALL,
)


def strip_quotes(value: str) -> str:
    """Trim whitespace and one layer of enclosing double quotes from ``value``.

    A quote without a partner on the other side is part of the value.

    >>> strip_quotes('  "db2" ')
    'db2'
    >>> strip_quotes('abc"')
    'abc"'
    """

    text = value.strip()
    if len(text) >= 2 and text[0] == '"' and text[-1] == '"':
        text = text[1:-1].strip()
    return text


def split_pairs(fragment: str, separator: str = ";") -> List[Pair]:
    """Return ``(key, value)`` pairs from a delimited ``key=value`` fragment.

    Only the first ``=`` of a segment splits key from value. An empty value is
    kept as ``""``.

    >>> split_pairs("Data Source=db2; User Id=dvrpc;Password=a=b;;junk")
    [('Data Source', 'db2'), ('User Id', 'dvrpc'), ('Password', 'a=b')]
    """

    if not separator:
        raise ValueError("separator must be a non-empty string")
    pairs: List[Pair] = []
    for segment in fragment.split(separator):
        key, sep, value = segment.partition("=")
        if not sep:
            continue
        key = strip_quotes(key)
        if not key:
            continue
        pairs.append((key, strip_quotes(value)))
    return pairs


def split_attributes(fragment: str) -> List[Pair]:
    """Return attribute pairs from a tag-style body in document order.

    >>> split_attributes('<add name="nets" providerName=\\'Oracle\\' />')
    [('name', 'nets'), ('providerName', 'Oracle')]
    """

    pairs: List[Pair] = []
    for match in _ATTRIBUTE.finditer(fragment):
        value = match.group("double")
        if value is None:
            value = match.group("single") or ""
        pairs.append((match.group("name"), value.strip()))
    return pairs


__all__ = ["Pair", "split_attributes", "split_pairs", "strip_quotes"]
