"""Scan configuration.

Settings are plain data handed to the pipeline at construction time; nothing
in the engine reads environment variables or other process-wide state. A
configuration file is a JSON object whose keys mirror :class:`ScanConfig`::

    {
        "extensions": [".config", ".aspx", ".asp", ".json"],
        "policy": "strict",
        "lenient_tags": false,
        "keywords": ["connection", "provider"],
        "max_file_bytes": 16777216,
        "follow_symlinks": false,
        "on_walk_error": "skip"
    }
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping, Tuple

from .core.resolver import DEFAULT_KEYWORDS
from .core.types import ValidityPolicy

DEFAULT_EXTENSIONS: Tuple[str, ...] = (".config", ".aspx", ".asp", ".json")
DEFAULT_MAX_FILE_BYTES = 16 * 1024 * 1024
WALK_ERROR_POLICIES = ("skip", "raise")

_KNOWN_KEYS = {
    "extensions",
    "policy",
    "lenient_tags",
    "keywords",
    "max_file_bytes",
    "follow_symlinks",
    "on_walk_error",
}


class ConfigError(ValueError):
    """Raised when a configuration payload fails validation."""


def _string_tuple(value: Any, *, key: str) -> Tuple[str, ...]:
    if isinstance(value, str):
        items = (value,)
    elif isinstance(value, (list, tuple)):
        items = tuple(value)
    else:
        raise ConfigError(f"'{key}' must be a string or a list of strings.")
    cleaned = []
    for item in items:
        if not isinstance(item, str):
            raise ConfigError(f"'{key}' entries must be strings, got {item!r}.")
        if item.strip():
            cleaned.append(item.strip())
    if not cleaned:
        raise ConfigError(f"'{key}' must contain at least one non-empty entry.")
    return tuple(cleaned)


def _normalise_extension(ext: str) -> str:
    text = ext.strip().lower()
    return text if text.startswith(".") else f".{text}"


@dataclass(frozen=True)
class ScanConfig:
    extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS
    policy: ValidityPolicy = ValidityPolicy.STRICT
    lenient_tags: bool = False
    keywords: Tuple[str, ...] = field(default=DEFAULT_KEYWORDS)
    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES
    follow_symlinks: bool = False
    on_walk_error: str = "skip"

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "extensions",
            tuple(dict.fromkeys(_normalise_extension(ext) for ext in self.extensions)),
        )
        object.__setattr__(self, "policy", ValidityPolicy.coerce(self.policy))
        if self.max_file_bytes <= 0:
            raise ConfigError("max_file_bytes must be a positive integer.")
        if self.on_walk_error not in WALK_ERROR_POLICIES:
            raise ConfigError(
                "on_walk_error must be one of: " + ", ".join(WALK_ERROR_POLICIES)
            )

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any] | None) -> "ScanConfig":
        if not payload:
            return cls()
        if not isinstance(payload, Mapping):
            raise ConfigError("Config payload must be a mapping.")

        unknown = sorted(set(payload) - _KNOWN_KEYS)
        if unknown:
            raise ConfigError("Unknown config key(s): " + ", ".join(unknown))

        kwargs: dict[str, Any] = {}
        if "extensions" in payload:
            kwargs["extensions"] = _string_tuple(payload["extensions"], key="extensions")
        if "keywords" in payload:
            kwargs["keywords"] = tuple(
                keyword.lower() for keyword in _string_tuple(payload["keywords"], key="keywords")
            )
        if "policy" in payload:
            try:
                kwargs["policy"] = ValidityPolicy.coerce(payload["policy"])
            except ValueError as exc:
                raise ConfigError(str(exc)) from exc
        if "max_file_bytes" in payload:
            try:
                kwargs["max_file_bytes"] = int(payload["max_file_bytes"])
            except (TypeError, ValueError) as exc:
                raise ConfigError("max_file_bytes must be an integer.") from exc
        for flag in ("lenient_tags", "follow_symlinks"):
            if flag in payload:
                kwargs[flag] = bool(payload[flag])
        if "on_walk_error" in payload:
            kwargs["on_walk_error"] = str(payload["on_walk_error"]).strip().lower()
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "extensions": list(self.extensions),
            "policy": self.policy.value,
            "lenient_tags": self.lenient_tags,
            "keywords": list(self.keywords),
            "max_file_bytes": self.max_file_bytes,
            "follow_symlinks": self.follow_symlinks,
            "on_walk_error": self.on_walk_error,
        }

    def with_overrides(self, **changes: Any) -> "ScanConfig":
        """Return a copy with ``changes`` applied, ignoring ``None`` values."""

        applied = {key: value for key, value in changes.items() if value is not None}
        if not applied:
            return self
        return replace(self, **applied)


def load_config(path: Path | str) -> ScanConfig:
    path = Path(path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{path}: invalid JSON ({exc})") from exc
    return ScanConfig.from_dict(payload)


__all__ = [
    "ConfigError",
    "DEFAULT_EXTENSIONS",
    "DEFAULT_MAX_FILE_BYTES",
    "ScanConfig",
    "WALK_ERROR_POLICIES",
    "load_config",
]
