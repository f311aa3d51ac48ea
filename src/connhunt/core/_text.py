"""Byte sniffing and decoding for scanned files.

Legacy web applications mix encodings freely: UTF-8 with and without a BOM,
UTF-16 ``web.config`` files written by IIS tooling, and Windows-1252 pages.
:func:`looks_text` decides whether a file is worth decoding at all and
:func:`decode_text` picks the first codec that accepts the bytes.
"""

from __future__ import annotations

import codecs
from typing import Iterator, Tuple

_BOMS = (
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)
_PRINTABLE = frozenset(range(32, 127)) | {9, 10, 13}
_FALLBACK_CODECS = ("utf-8", "cp1252", "latin-1")


def _bom_codec(data: bytes) -> str | None:
    for bom, codec in _BOMS:
        if data.startswith(bom):
            return codec
    return None


def _printable_share(data: bytes) -> float:
    if not data:
        return 1.0
    return sum(byte in _PRINTABLE for byte in data) / len(data)


def _mostly_nul(data: bytes) -> bool:
    return bool(data) and data.count(0) >= len(data) // 4


def _is_bomless_utf16(data: bytes, threshold: float) -> bool:
    # ASCII text in UTF-16 puts a NUL in every other byte.
    for text_bytes, zero_bytes in ((data[::2], data[1::2]), (data[1::2], data[::2])):
        if not zero_bytes:
            continue
        if _printable_share(text_bytes) >= threshold and zero_bytes.count(0) / len(zero_bytes) >= 0.6:
            return True
    return False


def looks_text(sample: bytes, threshold: float = 0.90) -> bool:
    """Return ``True`` when ``sample`` should be decoded as text."""

    if not sample or _bom_codec(sample) is not None:
        return True
    if _printable_share(sample) >= threshold:
        return True
    if _mostly_nul(sample) and _is_bomless_utf16(sample, threshold):
        return True
    try:
        sample.decode("utf-8")
    except UnicodeDecodeError:
        # Single-byte legacy encodings never contain NUL.
        return 0 not in sample
    return True


def _codecs_for(data: bytes) -> Iterator[str]:
    seen = set()
    bom = _bom_codec(data)
    preferred: Tuple[str, ...]
    if bom is not None:
        preferred = (bom,)
    elif _mostly_nul(data):
        preferred = ("utf-16-le", "utf-16-be")
    else:
        preferred = ()
    for codec in preferred + _FALLBACK_CODECS:
        if codec not in seen:
            seen.add(codec)
            yield codec


def decode_text(data: bytes) -> Tuple[str, str]:
    """Decode ``data`` and return the text together with the codec used."""

    for codec in _codecs_for(data):
        try:
            text = data.decode(codec)
        except UnicodeDecodeError:
            continue
        return text.lstrip("\ufeff"), codec
    return data.decode("latin-1", errors="replace"), "latin-1"


__all__ = ["decode_text", "looks_text"]
