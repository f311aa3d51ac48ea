from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Tuple

import pytest

from connhunt.core.types import Candidate
from connhunt.formats import format_registry as registry
from connhunt.formats import get_extractors, registry_summary


def test_builtin_extractors_are_registered_in_order() -> None:
    names = [extractor.name for extractor in get_extractors()]

    assert names[:4] == ["attribute-block", "parenthesized-literal", "quoted-literal", "json-block"]


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("web.config", ["attribute-block", "parenthesized-literal"]),
        ("Default.ASPX", ["attribute-block", "parenthesized-literal"]),
        ("legacy.asp", ["quoted-literal"]),
        ("appsettings.json", ["json-block"]),
        ("readme.txt", []),
        ("Makefile", []),
    ],
)
def test_extension_routing(filename: str, expected: list[str]) -> None:
    assert [e.name for e in registry.extractors_for(Path(filename))] == expected


def test_routed_extensions() -> None:
    assert set(registry.routed_extensions()) >= {".config", ".aspx", ".asp", ".json"}


def test_registry_summary_lists_extensions() -> None:
    summary = {entry["name"]: entry for entry in registry_summary()}

    assert summary["quoted-literal"]["extensions"] == (".asp",)
    assert summary["json-block"]["format_tag"] == "json"


def test_register_rejects_duplicate_names() -> None:
    @dataclass
    class Impostor:
        name: str = "json-block"
        format_tag: str = "json"
        version: str = "9.9.9"
        extensions: Tuple[str, ...] = (".json",)

        def extract(self, text: str) -> Iterator[Candidate]:
            return iter(())

    with pytest.raises(ValueError, match="already registered"):
        registry.register(Impostor())


def test_register_same_instance_is_idempotent() -> None:
    existing = get_extractors()[0]
    registry.register(existing)

    assert get_extractors().count(existing) == 1


def test_line_number_at() -> None:
    assert registry.line_number_at("a\nb\nc", 0) == 1
    assert registry.line_number_at("a\nb\nc", 4) == 3
