"""Turn one candidate into a connection record, a diagnostic, or nothing.

Resolution follows the candidate's format tag:

* ``attribute`` candidates are read as an element attribute list first. The
  value of the ``connectionString`` attribute is then tokenized again as a
  ``;``-delimited payload. Roles found in that payload override the ones
  found on the element itself, since providers are sometimes repeated inside
  the connection string.
* every other tag is a ``;``-delimited payload to begin with.

A candidate is *relevant* when its text mentions one of the configured
keywords, or when tokenization located at least two distinct required roles.
A lone ``User Id=`` cut out of a concatenated string literal is therefore not
a declaration. Irrelevant candidates resolve to ``None`` and are not reported.

Examples
--------
>>> from connhunt.core.types import Candidate
>>> resolver = ConnectionResolver()
>>> resolver.resolve(
...     Candidate(body="Data Source=db2; User Id=dvrpc; Provider=OraOLEDB", format_tag="quoted"),
...     "legacy.asp",
... )
Connection(source_path='legacy.asp', data_source='db2', user_id='dvrpc', provider='OraOLEDB')
>>> resolver.resolve(Candidate(body="Hello world", format_tag="quoted"), "legacy.asp") is None
True
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..formats.attribute import FORMAT_TAG as ATTRIBUTE_TAG
from ..formats.attribute import element_name, parse_attribute_block
from .keys import KeyNormalizer
from .tokenizer import Pair, split_pairs
from .types import (
    REQUIRED_ROLES,
    Candidate,
    Connection,
    ErrorKind,
    ExtractionError,
    KeyRole,
    ValidityPolicy,
)

logger = logging.getLogger(__name__)

DEFAULT_KEYWORDS: Tuple[str, ...] = ("connection", "provider")
# Roles a keyword-free candidate must locate to count as a declaration.
MIN_ROLES_WITHOUT_KEYWORD = 2


def _normalise_keywords(keywords: Iterable[str]) -> Tuple[str, ...]:
    cleaned = tuple(keyword.strip().lower() for keyword in keywords if keyword and keyword.strip())
    if not cleaned:
        raise ValueError("keywords must contain at least one non-empty entry")
    return cleaned


def missing_field_message(roles: Sequence[KeyRole]) -> str:
    return "missing required field: " + ", ".join(role.value for role in roles)


class ConnectionResolver:
    """Resolve candidates under an explicit :class:`ValidityPolicy`."""

    def __init__(
        self,
        policy: ValidityPolicy | str = ValidityPolicy.STRICT,
        *,
        keywords: Iterable[str] = DEFAULT_KEYWORDS,
        normalizer: Optional[KeyNormalizer] = None,
    ) -> None:
        self._policy = ValidityPolicy.coerce(policy)
        self._keywords = _normalise_keywords(keywords)
        self._normalizer = normalizer or KeyNormalizer()

    @property
    def policy(self) -> ValidityPolicy:
        return self._policy

    @property
    def keywords(self) -> Tuple[str, ...]:
        return self._keywords

    def mentions_keyword(self, text: str) -> bool:
        lowered = text.lower()
        return any(keyword in lowered for keyword in self._keywords)

    def locate_roles(self, pairs: Iterable[Pair]) -> Dict[KeyRole, str]:
        """Collect required roles from ``pairs``; later pairs win."""

        located: Dict[KeyRole, str] = {}
        for key, value in pairs:
            role = self._normalizer.normalise(key)
            if role in REQUIRED_ROLES:
                located[role] = value
        return located

    def resolve(
        self,
        candidate: Candidate,
        source_path: str,
    ) -> Connection | ExtractionError | None:
        if candidate.format_tag == ATTRIBUTE_TAG:
            return self._resolve_attribute_block(candidate, source_path)
        pairs = split_pairs(candidate.body)
        located = self.locate_roles(pairs)
        if not self._is_relevant(candidate, located):
            return None
        return self._apply_policy(located, candidate, source_path)

    def _is_relevant(self, candidate: Candidate, located: Dict[KeyRole, str]) -> bool:
        if self.mentions_keyword(candidate.text):
            return True
        return len(located) >= MIN_ROLES_WITHOUT_KEYWORD

    def _resolve_attribute_block(
        self,
        candidate: Candidate,
        source_path: str,
    ) -> Connection | ExtractionError | None:
        attributes, well_formed = parse_attribute_block(candidate.body)
        if not attributes:
            if not self.mentions_keyword(candidate.text):
                return None
            tag = element_name(candidate.body) or "element"
            logger.debug(
                "Unreadable attribute block at %s:%s", source_path, candidate.line_number
            )
            return ExtractionError(
                source_path=source_path,
                message=(
                    f"malformed candidate: could not read attributes of <{tag}> "
                    f"at line {candidate.line_number}"
                ),
                kind=ErrorKind.MALFORMED_CANDIDATE,
            )
        if not well_formed:
            logger.debug(
                "Attribute block at %s:%s is not well-formed XML; using tolerant attribute split",
                source_path,
                candidate.line_number,
            )

        payloads: List[str] = []
        for key, value in attributes:
            if self._normalizer.normalise(key) is KeyRole.CONNECTION_STRING:
                payloads.append(value)
        located = self.locate_roles(attributes)
        for payload in payloads:
            located.update(self.locate_roles(split_pairs(payload)))
        if not self._is_relevant(candidate, located):
            return None
        return self._apply_policy(located, candidate, source_path)

    def _apply_policy(
        self,
        located: Dict[KeyRole, str],
        candidate: Candidate,
        source_path: str,
    ) -> Connection | ExtractionError:
        if self._policy is ValidityPolicy.STRICT:
            missing = [role for role in REQUIRED_ROLES if role not in located]
        else:
            missing = [role for role in REQUIRED_ROLES if not located.get(role)]
            if len(missing) < len(REQUIRED_ROLES):
                missing = []
        if missing:
            logger.debug(
                "Candidate at %s:%s lacks %s",
                source_path,
                candidate.line_number,
                ", ".join(role.value for role in missing),
            )
            return ExtractionError(
                source_path=source_path,
                message=missing_field_message(missing),
                kind=ErrorKind.MISSING_REQUIRED_FIELD,
            )
        return Connection(
            source_path=source_path,
            data_source=located.get(KeyRole.DATA_SOURCE, ""),
            user_id=located.get(KeyRole.USER_ID, ""),
            provider=located.get(KeyRole.PROVIDER, ""),
        )


__all__ = [
    "ConnectionResolver",
    "DEFAULT_KEYWORDS",
    "MIN_ROLES_WITHOUT_KEYWORD",
    "missing_field_message",
]
