from __future__ import annotations

import dataclasses

import pytest

from connhunt.core.types import (
    Candidate,
    Connection,
    ErrorKind,
    ExtractionError,
    ExtractionResult,
    ValidityPolicy,
)


def test_records_are_immutable() -> None:
    connection = Connection("web.config", "db", "u", "p")

    with pytest.raises(dataclasses.FrozenInstanceError):
        connection.provider = "other"  # type: ignore[misc]


def test_rows_follow_table_columns() -> None:
    assert Connection("web.config", "db", "u", "p").to_row() == ["web.config", "db", "u", "p"]
    assert ExtractionError("legacy.asp", "missing required field: provider").to_row() == [
        "legacy.asp",
        "missing required field: provider",
    ]


def test_candidate_text_defaults_to_body() -> None:
    candidate = Candidate(body="Provider=P", format_tag="quoted")

    assert candidate.text == "Provider=P"


def test_result_append_routes_records() -> None:
    result = ExtractionResult()
    result.append(Connection("a", "db", "u", "p"))
    result.append(ExtractionError("b", "oops", ErrorKind.MALFORMED_CANDIDATE))
    result.append(None)

    assert len(result.connections) == 1
    assert len(result.errors) == 1
    assert result.to_dict()["errors"][0]["kind"] == "malformed-candidate"


@pytest.mark.parametrize("raw", ["strict", "STRICT", " Strict ", ValidityPolicy.STRICT])
def test_policy_coercion(raw: object) -> None:
    assert ValidityPolicy.coerce(raw) is ValidityPolicy.STRICT  # type: ignore[arg-type]
