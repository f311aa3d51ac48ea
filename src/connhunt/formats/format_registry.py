"""Candidate extractor registry utilities.

The registry keeps extractor records in insertion order and hands out
immutable snapshots, so callers can reason about routing without mutating the
backing store. Routing is by file extension: every extractor declares the
suffixes it understands and :func:`extractors_for` returns the matching subset
in registration order.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Protocol, Sequence, Tuple

from ..core.types import Candidate


class CandidateExtractor(Protocol):
    """Protocol implemented by candidate extractors."""

    name: str
    format_tag: str
    version: str
    extensions: Tuple[str, ...]

    def extract(self, text: str) -> Iterable[Candidate]:
        ...


@dataclass
class ExtractorRecord:
    extractor: CandidateExtractor


_EXTRACTORS: List[ExtractorRecord] = []


def register(extractor: CandidateExtractor) -> None:
    """Register an extractor while keeping names unique.

    Registering the same instance twice is a no-op. A different extractor
    reusing an existing ``name`` raises :class:`ValueError` so collisions
    surface during import.
    """

    if not _ensure_unique(extractor):
        return
    _EXTRACTORS.append(ExtractorRecord(extractor=extractor))


def get_extractors() -> Tuple[CandidateExtractor, ...]:
    """Return a tuple snapshot of registered extractors."""

    # Ensure registration side effects have run.
    from . import attribute, json_block, literal  # noqa: F401

    return tuple(record.extractor for record in _EXTRACTORS)


def normalise_suffix(suffix: str) -> str:
    text = suffix.strip().lower()
    if text and not text.startswith("."):
        text = f".{text}"
    return text


def extractors_for(
    path: Path | str,
    extractors: Optional[Sequence[CandidateExtractor]] = None,
) -> Tuple[CandidateExtractor, ...]:
    """Return the extractors routed to ``path`` by its extension."""

    suffix = normalise_suffix(Path(path).suffix)
    if not suffix:
        return ()
    pool = get_extractors() if extractors is None else tuple(extractors)
    return tuple(
        extractor
        for extractor in pool
        if suffix in {normalise_suffix(ext) for ext in extractor.extensions}
    )


def routed_extensions(
    extractors: Optional[Sequence[CandidateExtractor]] = None,
) -> Tuple[str, ...]:
    """Return every extension handled by ``extractors`` in first-seen order."""

    pool = get_extractors() if extractors is None else tuple(extractors)
    seen: Dict[str, None] = {}
    for extractor in pool:
        for ext in extractor.extensions:
            seen.setdefault(normalise_suffix(ext), None)
    return tuple(seen)


def registry_summary() -> Tuple[Mapping[str, object], ...]:
    """Return an ordered summary of registered extractors for manual auditing."""

    summary = []
    for index, extractor in enumerate(get_extractors()):
        summary.append(
            {
                "name": extractor.name,
                "format_tag": extractor.format_tag,
                "version": getattr(extractor, "version", "0.0.0"),
                "extensions": tuple(extractor.extensions),
                "order": index,
                "module": extractor.__class__.__module__,
                "qualname": extractor.__class__.__qualname__,
            }
        )
    return tuple(summary)


def _ensure_unique(extractor: CandidateExtractor) -> bool:
    for record in _EXTRACTORS:
        existing = record.extractor
        if existing is extractor:
            return False
        if existing.name == extractor.name:
            raise ValueError(
                f"An extractor named {extractor.name!r} is already registered: {existing!r}"
            )
    return True


def line_number_at(text: str, offset: int) -> int:
    """Return the 1-based line number of ``offset`` within ``text``."""

    return text.count("\n", 0, max(offset, 0)) + 1


__all__ = [
    "CandidateExtractor",
    "extractors_for",
    "get_extractors",
    "line_number_at",
    "normalise_suffix",
    "register",
    "registry_summary",
    "routed_extensions",
]
