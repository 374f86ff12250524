"""Configuration loading utilities."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .crypto.keys import EC_CURVES, key_length_valid
from .paths import runtime_config_dir


def _check_key_length(value: int) -> int:
    if not key_length_valid(value):
        raise ValueError("Key length must be a power of 2 greater than or equal to 1024")
    return value


class KeyDefaults(BaseModel):
    rsa_key_length: int = Field(default=2048, description="RSA modulus size in bits")
    curve: str = Field(default="prime256v1", description="EC curve: prime256v1|secp384r1|secp521r1")
    cipher: str = Field(default="aes-256-cbc", description="OpenSSL cipher protecting private keys")

    @field_validator("rsa_key_length")
    @classmethod
    def _validate_key_length(cls, value: int) -> int:
        return _check_key_length(value)

    @field_validator("curve")
    @classmethod
    def _validate_curve(cls, value: str) -> str:
        if value not in EC_CURVES:
            raise ValueError(f"Unsupported curve {value!r}; expected one of {', '.join(EC_CURVES)}")
        return value


class DhParamDefaults(BaseModel):
    key_length: int = Field(default=2048)
    generator: int = Field(default=2)

    @field_validator("key_length")
    @classmethod
    def _validate_key_length(cls, value: int) -> int:
        return _check_key_length(value)


class LoggingConfig(BaseModel):
    level: str = Field(default="WARNING", description="Logging verbosity level")
    json_output: bool = Field(default=True, description="JSON lines; false for console output")

    def normalized_level(self) -> str:
        return self.level.upper()


class AppConfig(BaseModel):
    keys: KeyDefaults = Field(default_factory=KeyDefaults)
    dhparam: DhParamDefaults = Field(default_factory=DhParamDefaults)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


DEFAULT_CONFIG = AppConfig()


def config_search_paths(explicit: Optional[Path] = None) -> Iterable[Path]:
    if explicit:
        yield explicit
    yield Path.cwd() / ".pg_cookbook" / "config.yaml"
    yield runtime_config_dir() / "config.yaml"


def load_config(path: Optional[Path] = None) -> AppConfig:
    for candidate in config_search_paths(path):
        if candidate.is_file():
            try:
                with candidate.open("r", encoding="utf-8") as handle:
                    data = yaml.safe_load(handle) or {}
                return AppConfig.model_validate(data)
            except (yaml.YAMLError, ValidationError) as exc:
                raise ValueError(f"Invalid configuration in {candidate}: {exc}") from exc
    return DEFAULT_CONFIG.model_copy(deep=True)


def dump_default_config(target: Path) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(DEFAULT_CONFIG.model_dump(mode="json"), handle, sort_keys=False)


__all__ = [
    "AppConfig",
    "DEFAULT_CONFIG",
    "DhParamDefaults",
    "KeyDefaults",
    "LoggingConfig",
    "config_search_paths",
    "dump_default_config",
    "load_config",
]
