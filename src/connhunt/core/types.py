"""Shared data structures for the connhunt extraction engine.

Records produced by the engine are immutable. A scan builds them one file at a
time and appends them to the two collections held by
:class:`ExtractionResult`.

Example
-------
>>> record = Connection(
...     source_path="web.config",
...     data_source="db2",
...     user_id="dvrpc",
...     provider="System.OracleClient",
... )
>>> record.to_row()
['web.config', 'db2', 'dvrpc', 'System.OracleClient']
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, List


class KeyRole(enum.Enum):
    """Semantic role of a raw attribute or connection-string key."""

    DATA_SOURCE = "data source"
    USER_ID = "user id"
    PROVIDER = "provider"
    CONNECTION_STRING = "connection string"
    UNRECOGNIZED = "unrecognized"


REQUIRED_ROLES = (KeyRole.DATA_SOURCE, KeyRole.USER_ID, KeyRole.PROVIDER)


class ErrorKind(enum.Enum):
    UNREADABLE_FILE = "unreadable-file"
    MISSING_REQUIRED_FIELD = "missing-required-field"
    MALFORMED_CANDIDATE = "malformed-candidate"


class ValidityPolicy(enum.Enum):
    """Decides when a tokenized candidate becomes a :class:`Connection`.

    ``STRICT`` requires all three roles to be present (an empty value still
    counts as present). ``LENIENT`` accepts any candidate carrying at least one
    non-empty role and fills the rest with empty strings.
    """

    STRICT = "strict"
    LENIENT = "lenient"

    @classmethod
    def coerce(cls, value: "ValidityPolicy | str") -> "ValidityPolicy":
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for member in cls:
            if member.value == text:
                return member
        raise ValueError(
            f"Unknown validity policy {value!r}; expected one of "
            + ", ".join(member.value for member in cls)
        )


@dataclass(frozen=True)
class Connection:
    source_path: str
    data_source: str
    user_id: str
    provider: str

    def to_row(self) -> List[str]:
        return [self.source_path, self.data_source, self.user_id, self.provider]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.source_path,
            "data_source": self.data_source,
            "user_id": self.user_id,
            "provider": self.provider,
        }


@dataclass(frozen=True)
class ExtractionError:
    """Diagnostic for a relevant candidate or file that could not be resolved."""

    source_path: str
    message: str
    kind: ErrorKind = ErrorKind.MISSING_REQUIRED_FIELD

    def to_row(self) -> List[str]:
        return [self.source_path, self.message]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.source_path,
            "error": self.message,
            "kind": self.kind.value,
        }


@dataclass(frozen=True)
class Candidate:
    """Substring of file content suspected of holding one declaration.

    ``body`` is the fragment handed to the tokenizer, ``text`` the full match
    used for the relevance check. ``offset`` and ``line_number`` locate the
    occurrence inside its file.
    """

    body: str
    format_tag: str
    offset: int = 0
    line_number: int = 1
    text: str = ""

    def __post_init__(self) -> None:
        if not self.text:
            object.__setattr__(self, "text", self.body)


@dataclass
class ExtractionResult:
    connections: List[Connection] = field(default_factory=list)
    errors: List[ExtractionError] = field(default_factory=list)

    def extend(self, other: "ExtractionResult") -> None:
        self.connections.extend(other.connections)
        self.errors.extend(other.errors)

    def append(self, record: Connection | ExtractionError | None) -> None:
        if record is None:
            return
        if isinstance(record, Connection):
            self.connections.append(record)
        else:
            self.errors.append(record)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "connections": [item.to_dict() for item in self.connections],
            "errors": [item.to_dict() for item in self.errors],
        }


__all__ = [
    "Candidate",
    "Connection",
    "ErrorKind",
    "ExtractionError",
    "ExtractionResult",
    "KeyRole",
    "REQUIRED_ROLES",
    "ValidityPolicy",
]
