from __future__ import annotations

import json
from pathlib import Path

import pytest

from connhunt.config import ConfigError, ScanConfig, load_config
from connhunt.core.types import ValidityPolicy


def test_defaults() -> None:
    config = ScanConfig()

    assert config.extensions == (".config", ".aspx", ".asp", ".json")
    assert config.policy is ValidityPolicy.STRICT
    assert config.keywords == ("connection", "provider")
    assert config.lenient_tags is False
    assert config.on_walk_error == "skip"


def test_from_dict_normalises_values() -> None:
    config = ScanConfig.from_dict(
        {
            "extensions": ["CONFIG", ".Json", "config"],
            "policy": "Lenient",
            "keywords": ["DSN", " provider "],
            "lenient_tags": 1,
            "max_file_bytes": "1024",
            "on_walk_error": "RAISE",
        }
    )

    assert config.extensions == (".config", ".json")
    assert config.policy is ValidityPolicy.LENIENT
    assert config.keywords == ("dsn", "provider")
    assert config.lenient_tags is True
    assert config.max_file_bytes == 1024
    assert config.on_walk_error == "raise"


@pytest.mark.parametrize(
    "payload",
    [
        {"unknown": True},
        {"policy": "maybe"},
        {"extensions": []},
        {"extensions": 5},
        {"keywords": [1]},
        {"max_file_bytes": 0},
        {"max_file_bytes": "lots"},
        {"on_walk_error": "ignore"},
    ],
)
def test_invalid_payloads_raise_config_error(payload: dict) -> None:
    with pytest.raises(ConfigError):
        ScanConfig.from_dict(payload)


def test_non_mapping_payload_is_rejected() -> None:
    with pytest.raises(ConfigError):
        ScanConfig.from_dict(["policy"])  # type: ignore[arg-type]


def test_empty_payload_uses_defaults() -> None:
    assert ScanConfig.from_dict(None) == ScanConfig()
    assert ScanConfig.from_dict({}) == ScanConfig()


def test_round_trip_through_file(tmp_path: Path) -> None:
    original = ScanConfig(extensions=(".asp",), policy=ValidityPolicy.LENIENT)
    path = tmp_path / "connhunt.json"
    path.write_text(json.dumps(original.to_dict()), encoding="utf-8")

    assert load_config(path) == original


def test_load_config_reports_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigError, match="invalid JSON"):
        load_config(path)


def test_with_overrides_ignores_none() -> None:
    config = ScanConfig()

    assert config.with_overrides(policy=None, lenient_tags=None) is config
    assert config.with_overrides(policy="lenient").policy is ValidityPolicy.LENIENT
    assert config.with_overrides(extensions=("XML",)).extensions == (".xml",)
