from pathlib import Path

import pytest

from pg_cookbook.config import AppConfig, KeyDefaults, dump_default_config, load_config


def test_defaults() -> None:
    config = AppConfig()
    assert config.keys.rsa_key_length == 2048
    assert config.keys.curve == "prime256v1"
    assert config.keys.cipher == "aes-256-cbc"
    assert config.dhparam.generator == 2


def test_load_config_from_explicit_path(tmp_path: Path) -> None:
    target = tmp_path / "config.yaml"
    target.write_text("keys:\n  rsa_key_length: 4096\n  curve: secp384r1\nlogging:\n  level: debug\n", encoding="utf-8")
    config = load_config(target)
    assert config.keys.rsa_key_length == 4096
    assert config.keys.curve == "secp384r1"
    assert config.logging.normalized_level() == "DEBUG"


def test_load_config_rejects_invalid_values(tmp_path: Path) -> None:
    target = tmp_path / "config.yaml"
    target.write_text("dhparam:\n  key_length: 1536\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Invalid configuration"):
        load_config(target)


def test_key_defaults_reject_unknown_curve() -> None:
    with pytest.raises(ValueError):
        KeyDefaults(curve="secp256k1")


def test_dump_default_config_round_trip(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "config.yaml"
    dump_default_config(target)
    assert load_config(target) == AppConfig()


def test_load_config_rejects_malformed_yaml(tmp_path: Path) -> None:
    target = tmp_path / "config.yaml"
    target.write_text("keys: [unclosed\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Invalid configuration"):
        load_config(target)
