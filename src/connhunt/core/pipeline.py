"""Extraction orchestration for connhunt.

The pipeline reads every file once, routes it to the extractors registered for
its extension, resolves each candidate, and appends the outcome to the two
collections of an :class:`~connhunt.core.types.ExtractionResult`. Per-file and
per-candidate failures become :class:`~connhunt.core.types.ExtractionError`
records. None of them stop the batch.

Examples
--------
>>> from pathlib import Path
>>> pipeline = ExtractionPipeline()
>>> result = pipeline.extract_text(
...     Path("web.config"),
...     '<add name="nets" connectionString="Data Source=db2; User Id=dvrpc;" '
...     'providerName="System.OracleClient"/>',
... )
>>> [(c.data_source, c.user_id, c.provider) for c in result.connections]
[('db2', 'dvrpc', 'System.OracleClient')]
>>> result.errors
[]
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence

from ..config import ScanConfig
from ..formats import format_registry as registry
from ..formats.attribute import AttributeBlockExtractor
from ..walk import walk_files
from ._text import decode_text, looks_text
from .resolver import ConnectionResolver
from .types import Candidate, ErrorKind, ExtractionError, ExtractionResult

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[Path, ExtractionError], None]


def _unreadable(path: Path, reason: str) -> ExtractionError:
    return ExtractionError(
        source_path=str(path),
        message=reason,
        kind=ErrorKind.UNREADABLE_FILE,
    )


class ExtractionPipeline:
    """Coordinates extractors and the resolver over a sequence of files."""

    def __init__(
        self,
        config: Optional[ScanConfig] = None,
        *,
        extractors: Optional[Sequence[registry.CandidateExtractor]] = None,
        resolver: Optional[ConnectionResolver] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        """Create a pipeline.

        Args:
            config: Scan settings. ``None`` uses :class:`ScanConfig` defaults.
            extractors: Optional explicit extractor sequence. When omitted the
                registered extractors are used. With ``config.lenient_tags``
                every :class:`AttributeBlockExtractor` is switched to lenient
                tag matching.
            resolver: Optional resolver; by default one is built from the
                config's policy and keywords.
            on_error: Optional callback invoked with ``(path, error)`` when a
                file cannot be read. Exceptions raised by the callback are
                logged and otherwise ignored.
        """

        self._config = config or ScanConfig()
        selected = list(extractors) if extractors is not None else list(
            registry.get_extractors()
        )
        if self._config.lenient_tags:
            selected = [
                replace(extractor, lenient=True)
                if isinstance(extractor, AttributeBlockExtractor)
                else extractor
                for extractor in selected
            ]
        self._extractors = tuple(selected)
        self._resolver = resolver or ConnectionResolver(
            self._config.policy,
            keywords=self._config.keywords,
        )
        self._on_error = on_error

    @property
    def config(self) -> ScanConfig:
        return self._config

    @property
    def extractors(self) -> tuple:
        return self._extractors

    def _report(self, path: Path, error: ExtractionError) -> None:
        if self._on_error is None:
            return
        try:
            self._on_error(path, error)
        except Exception:  # pragma: no cover - defensive
            logger.exception("on_error handler raised while processing %s", path)

    def read_text(self, path: Path) -> str | ExtractionError:
        """Return the decoded content of ``path`` or an unreadable-file error."""

        limit = self._config.max_file_bytes
        try:
            with path.open("rb") as handle:
                raw = handle.read(limit + 1)
        except OSError as exc:
            return _unreadable(path, f"could not read file ({exc.strerror or exc})")
        if len(raw) > limit:
            return _unreadable(path, f"could not read file (exceeds {limit} byte limit)")
        if not looks_text(raw):
            return _unreadable(path, "could not read file (binary content)")
        text, encoding = decode_text(raw)
        logger.debug("Decoded %s using %s", path, encoding)
        return text

    def candidates_for(self, path: Path, text: str) -> List[Candidate]:
        """Return every candidate of ``text`` in document order."""

        ordered: List[tuple[int, int, Candidate]] = []
        for rank, extractor in enumerate(registry.extractors_for(path, self._extractors)):
            for candidate in extractor.extract(text):
                ordered.append((candidate.offset, rank, candidate))
        ordered.sort(key=lambda item: (item[0], item[1]))
        return [candidate for _, _, candidate in ordered]

    def extract_text(self, path: Path | str, text: str) -> ExtractionResult:
        path = Path(path)
        result = ExtractionResult()
        source_path = str(path)
        for candidate in self.candidates_for(path, text):
            result.append(self._resolver.resolve(candidate, source_path))
        return result

    def extract_file(self, path: Path | str) -> ExtractionResult:
        path = Path(path)
        content = self.read_text(path)
        if isinstance(content, ExtractionError):
            logger.debug("Unreadable file %s: %s", path, content.message)
            self._report(path, content)
            return ExtractionResult(errors=[content])
        return self.extract_text(path, content)

    def run(self, paths: Iterable[Path | str]) -> ExtractionResult:
        """Process ``paths`` in order and aggregate their records."""

        result = ExtractionResult()
        for path in paths:
            result.extend(self.extract_file(path))
        return result

    def scan(self, roots: Sequence[Path | str]) -> ExtractionResult:
        """Walk ``roots`` with the configured allow-list and process the files."""

        files: List[Path] = []
        for entry in walk_files(
            roots,
            extensions=self._config.extensions,
            follow_symlinks=self._config.follow_symlinks,
            on_error=self._config.on_walk_error,
        ):
            if entry.ok:
                files.append(entry.path)
            else:
                logger.warning("Skipping %s: %s", entry.path, entry.error)
        return self.run(files)


def extract_connections(
    paths: Iterable[Path | str],
    *,
    config: Optional[ScanConfig] = None,
    extractors: Optional[Sequence[registry.CandidateExtractor]] = None,
    on_error: Optional[ErrorCallback] = None,
) -> ExtractionResult:
    """Convenience wrapper mirroring :meth:`ExtractionPipeline.run`."""

    pipeline = ExtractionPipeline(config, extractors=extractors, on_error=on_error)
    return pipeline.run(paths)


def scan_paths(
    roots: Sequence[Path | str],
    *,
    config: Optional[ScanConfig] = None,
    extractors: Optional[Sequence[registry.CandidateExtractor]] = None,
    on_error: Optional[ErrorCallback] = None,
) -> ExtractionResult:
    """Convenience wrapper mirroring :meth:`ExtractionPipeline.scan`."""

    pipeline = ExtractionPipeline(config, extractors=extractors, on_error=on_error)
    return pipeline.scan(roots)


__all__ = [
    "ErrorCallback",
    "ExtractionPipeline",
    "extract_connections",
    "scan_paths",
]
