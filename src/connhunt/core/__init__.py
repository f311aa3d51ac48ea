"""connhunt core module exports."""

from .types import (
    REQUIRED_ROLES,
    Candidate,
    Connection,
    ErrorKind,
    ExtractionError,
    ExtractionResult,
    KeyRole,
    ValidityPolicy,
)
from .keys import KeyNormalizer, normalise_key
from .tokenizer import split_attributes, split_pairs, strip_quotes
from .resolver import ConnectionResolver
from .pipeline import ExtractionPipeline, extract_connections, scan_paths

__all__ = [
    "Candidate",
    "Connection",
    "ConnectionResolver",
    "ErrorKind",
    "ExtractionError",
    "ExtractionPipeline",
    "ExtractionResult",
    "KeyNormalizer",
    "KeyRole",
    "REQUIRED_ROLES",
    "ValidityPolicy",
    "extract_connections",
    "normalise_key",
    "scan_paths",
    "split_attributes",
    "split_pairs",
    "strip_quotes",
]
