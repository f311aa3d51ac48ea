"""Key normalisation for connection declarations.

Raw keys arrive in arbitrary case and spelling (``Provider``, ``providerName``,
``Data Source``). They are trimmed, casefolded and looked up in a synonym
table. Matching is exact after casefolding so ``user id 2`` never resolves to
``user id``.
"""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional

from .types import KeyRole

DEFAULT_SYNONYMS: Mapping[KeyRole, tuple[str, ...]] = {
    KeyRole.DATA_SOURCE: ("data source",),
    KeyRole.USER_ID: ("user id",),
    KeyRole.PROVIDER: ("provider", "providername"),
    KeyRole.CONNECTION_STRING: ("connectionstring",),
}


def _fold(raw: str) -> str:
    return raw.strip().casefold()


class KeyNormalizer:
    """Map raw key strings to :class:`KeyRole` members.

    Example
    -------
    >>> KeyNormalizer().normalise("  ProviderName ")
    <KeyRole.PROVIDER: 'provider'>
    >>> KeyNormalizer().normalise("Password")
    <KeyRole.UNRECOGNIZED: 'unrecognized'>
    """

    def __init__(self, synonyms: Optional[Mapping[KeyRole, Iterable[str]]] = None) -> None:
        table = DEFAULT_SYNONYMS if synonyms is None else synonyms
        lookup: Dict[str, KeyRole] = {}
        for role, spellings in table.items():
            if role is KeyRole.UNRECOGNIZED:
                raise ValueError("UNRECOGNIZED cannot carry synonyms")
            for spelling in spellings:
                folded = _fold(spelling)
                if not folded:
                    continue
                existing = lookup.get(folded)
                if existing is not None and existing is not role:
                    raise ValueError(
                        f"Synonym {spelling!r} is declared for both {existing.name} and {role.name}"
                    )
                lookup[folded] = role
        self._lookup = lookup

    def normalise(self, raw: str) -> KeyRole:
        return self._lookup.get(_fold(raw), KeyRole.UNRECOGNIZED)

    def is_recognised(self, raw: str) -> bool:
        return self.normalise(raw) is not KeyRole.UNRECOGNIZED


_DEFAULT = KeyNormalizer()


def normalise_key(raw: str) -> KeyRole:
    """Normalise ``raw`` with the default synonym table."""

    return _DEFAULT.normalise(raw)


__all__ = ["DEFAULT_SYNONYMS", "KeyNormalizer", "normalise_key"]
