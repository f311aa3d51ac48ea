"""Extract XML-attribute style connection declarations.

ASP.NET ``web.config``/``app.config`` files and ``.aspx`` pages declare
connections as ``<add>`` elements::

    <add name="nets"
         connectionString="Data Source=db2; User Id=dvrpc;"
         providerName="System.OracleClient" />

Candidates run from ``<add`` to the next ``>`` and may span lines. In lenient
mode any opening tag qualifies, which picks up bespoke elements such as
``<connection provider=".." />`` at the cost of more noise for the relevance
check.

Attribute lists are read with :mod:`defusedxml` when the tag is well-formed on
its own, so entity references (``&amp;``, ``&quot;``) come back decoded. Tags
that are not well-formed (unbound prefixes, stray characters, unquoted
values) fall back to :func:`connhunt.core.tokenizer.split_attributes`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from defusedxml import ElementTree as DEFUSED_ET
from defusedxml.common import DefusedXmlException

from ..core.tokenizer import Pair, split_attributes
from ..core.types import Candidate
from .format_registry import line_number_at, register

FORMAT_TAG = "attribute"

_ADD_ELEMENT = re.compile(r"<add\s.*?>", re.DOTALL | re.IGNORECASE)
_ANY_OPEN_TAG = re.compile(r"<(?![/!?])[A-Za-z_].*?>", re.DOTALL)


def _as_standalone_element(tag: str) -> str:
    text = tag.strip()
    if text.endswith("/>"):
        return text
    return text[:-1].rstrip() + "/>"


def parse_attribute_block(tag: str) -> Tuple[List[Pair], bool]:
    """Return ``(pairs, well_formed)`` for an element start tag.

    ``well_formed`` reports whether the hardened XML parser accepted the tag.
    When it did not, the pairs come from the regex fallback and may be empty.
    """

    try:
        element = DEFUSED_ET.fromstring(_as_standalone_element(tag))
    except (DEFUSED_ET.ParseError, DefusedXmlException):
        return split_attributes(tag), False
    pairs = [(str(name), str(value).strip()) for name, value in element.attrib.items()]
    return pairs, True


@dataclass
class AttributeBlockExtractor:
    name: str = "attribute-block"
    format_tag: str = FORMAT_TAG
    version: str = "0.1.0"
    extensions: Tuple[str, ...] = (".config", ".aspx")
    lenient: bool = False

    def extract(self, text: str) -> Iterator[Candidate]:
        pattern = _ANY_OPEN_TAG if self.lenient else _ADD_ELEMENT
        for match in pattern.finditer(text):
            block = match.group(0)
            yield Candidate(
                body=block,
                format_tag=self.format_tag,
                offset=match.start(),
                line_number=line_number_at(text, match.start()),
                text=block,
            )


def element_name(tag: str) -> Optional[str]:
    match = re.match(r"<\s*([A-Za-z_][\w:.-]*)", tag)
    return match.group(1) if match else None


register(AttributeBlockExtractor())


__all__ = [
    "AttributeBlockExtractor",
    "FORMAT_TAG",
    "element_name",
    "parse_attribute_block",
]
