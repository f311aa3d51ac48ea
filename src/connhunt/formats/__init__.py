"""Candidate extractor package."""

from . import format_registry as registry
from .format_registry import (
    CandidateExtractor,
    extractors_for,
    get_extractors,
    register,
    registry_summary,
    routed_extensions,
)

# Ensure built-in extractors register on import, in routing order.
from . import attribute as _attribute  # noqa: F401
from . import literal as _literal  # noqa: F401
from . import json_block as _json_block  # noqa: F401
from .attribute import AttributeBlockExtractor
from .json_block import JsonBlockExtractor
from .literal import ParenthesizedLiteralExtractor, QuotedLiteralExtractor

__all__ = [
    "AttributeBlockExtractor",
    "CandidateExtractor",
    "JsonBlockExtractor",
    "ParenthesizedLiteralExtractor",
    "QuotedLiteralExtractor",
    "extractors_for",
    "get_extractors",
    "register",
    "registry",
    "registry_summary",
    "routed_extensions",
]
