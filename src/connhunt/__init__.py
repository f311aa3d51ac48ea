"""connhunt: locate database connection declarations in configuration files.

The package exposes the extraction engine (key normalisation, tokenizing,
candidate extractors, resolver and pipeline) together with the directory walk,
configuration loader and table writers used by the command-line tool.
"""

from __future__ import annotations

from . import log as _log  # noqa: F401  (installs the package NullHandler)
from .core import (
    Candidate,
    Connection,
    ConnectionResolver,
    ErrorKind,
    ExtractionError,
    ExtractionPipeline,
    ExtractionResult,
    KeyNormalizer,
    KeyRole,
    ValidityPolicy,
    extract_connections,
    normalise_key,
    scan_paths,
)
from .config import ConfigError, ScanConfig, load_config
from .formats import CandidateExtractor, get_extractors, register, registry_summary
from .walk import WalkEntry, WalkError, iter_files, walk_files

__version__ = "0.1.0"

__all__ = [
    "Candidate",
    "CandidateExtractor",
    "ConfigError",
    "Connection",
    "ConnectionResolver",
    "ErrorKind",
    "ExtractionError",
    "ExtractionPipeline",
    "ExtractionResult",
    "KeyNormalizer",
    "KeyRole",
    "ScanConfig",
    "ValidityPolicy",
    "WalkEntry",
    "WalkError",
    "extract_connections",
    "get_extractors",
    "iter_files",
    "load_config",
    "normalise_key",
    "register",
    "registry_summary",
    "scan_paths",
    "walk_files",
]
