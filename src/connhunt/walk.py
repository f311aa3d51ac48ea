"""Breadth-first discovery of candidate configuration files.

The walk is iterative: a queue of pending directories is drained one entry at
a time, and every file or traversal failure is reported as a
:class:`WalkEntry`. Callers decide what a failure means through ``on_error``:

``"skip"``
    yield the failure as an entry carrying ``error`` and keep walking.

``"raise"``
    stop the walk with :class:`WalkError`.

Directory listings are sorted so repeated walks over an unchanged tree yield
the same order.
"""

from __future__ import annotations

import logging
import os
from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import Deque, Iterable, Iterator, List, Optional, Sequence, Set

from .config import DEFAULT_EXTENSIONS, WALK_ERROR_POLICIES

logger = logging.getLogger(__name__)


class WalkError(OSError):
    """Raised when traversal fails and the walk policy is ``"raise"``."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {self.reason}")


@dataclass(frozen=True)
class WalkEntry:
    path: Path
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _normalise_extensions(extensions: Iterable[str]) -> Set[str]:
    normalised = set()
    for ext in extensions:
        text = ext.strip().lower()
        if not text:
            continue
        normalised.add(text if text.startswith(".") else f".{text}")
    return normalised


def matches_extension(path: Path, extensions: Iterable[str]) -> bool:
    return path.suffix.lower() in _normalise_extensions(extensions)


def walk_files(
    roots: Sequence[Path | str],
    *,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    follow_symlinks: bool = False,
    on_error: str = "skip",
) -> Iterator[WalkEntry]:
    """Yield allow-listed files below ``roots`` plus any traversal failures.

    A root that is itself a file is yielded when its extension is allowed.
    """

    if on_error not in WALK_ERROR_POLICIES:
        raise ValueError("on_error must be one of: " + ", ".join(WALK_ERROR_POLICIES))
    allowed = _normalise_extensions(extensions)

    def _failure(path: Path, reason: str) -> WalkEntry:
        if on_error == "raise":
            raise WalkError(path, reason)
        logger.debug("Skipping %s: %s", path, reason)
        return WalkEntry(path=path, error=reason)

    pending: Deque[Path] = deque()
    visited: Set[str] = set()
    for raw_root in roots:
        root = Path(raw_root)
        if root.is_file():
            if root.suffix.lower() in allowed:
                yield WalkEntry(path=root)
            continue
        if not root.is_dir():
            yield _failure(root, "not a directory")
            continue
        pending.append(root)

    while pending:
        directory = pending.popleft()
        try:
            key = os.path.realpath(directory)
        except OSError as exc:
            yield _failure(directory, str(exc))
            continue
        if key in visited:
            continue
        visited.add(key)

        try:
            with os.scandir(directory) as handle:
                entries = sorted(handle, key=lambda entry: entry.name)
        except OSError as exc:
            yield _failure(directory, f"could not list directory ({exc.strerror or exc})")
            continue

        subdirectories: List[Path] = []
        for entry in entries:
            path = Path(entry.path)
            try:
                if entry.is_dir(follow_symlinks=follow_symlinks):
                    subdirectories.append(path)
                    continue
                if not entry.is_file(follow_symlinks=follow_symlinks):
                    continue
            except OSError as exc:
                yield _failure(path, str(exc))
                continue
            if path.suffix.lower() in allowed:
                yield WalkEntry(path=path)
        pending.extend(subdirectories)


def iter_files(
    roots: Sequence[Path | str],
    *,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    follow_symlinks: bool = False,
    on_error: str = "skip",
) -> List[Path]:
    """Return the allow-listed files below ``roots``, dropping failures."""

    return [
        entry.path
        for entry in walk_files(
            roots,
            extensions=extensions,
            follow_symlinks=follow_symlinks,
            on_error=on_error,
        )
        if entry.ok
    ]


__all__ = ["WalkEntry", "WalkError", "iter_files", "matches_extension", "walk_files"]
