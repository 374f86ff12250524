"""Diffie-Hellman parameter generation and validation."""

from __future__ import annotations

import os
from pathlib import Path

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import dh

from pg_cookbook.exceptions import InvalidKeyLengthError, KeyTypeError
from pg_cookbook.logging import get_logger

from .keys import key_length_valid

log = get_logger("pg_cookbook.crypto")


def gen_dhparam(key_length: int, generator: int) -> dh.DHParameters:
    if isinstance(key_length, bool) or not isinstance(key_length, int) or not key_length_valid(key_length):
        raise InvalidKeyLengthError("Key length must be a power of 2 greater than or equal to 1024")
    if isinstance(generator, bool) or not isinstance(generator, int):
        raise KeyTypeError("Generator must be an integer")
    log.debug("dhparam_generate", key_length=key_length, generator=generator)
    return dh.generate_parameters(generator=generator, key_size=key_length)


def dhparam_pem(parameters: dh.DHParameters) -> str:
    """PKCS#3 PEM text of ``parameters``."""
    return parameters.parameter_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.ParameterFormat.PKCS3,
    ).decode("ascii")


def dhparam_pem_valid(dhparam_pem_path: str | os.PathLike[str]) -> bool:
    """Return True when the file at ``dhparam_pem_path`` holds usable DH parameters.

    Loading runs OpenSSL's DH parameter check, so a composite modulus or an
    out-of-range generator fails here like unparsable content does.
    """
    path = Path(dhparam_pem_path)
    if not path.is_file():
        return False
    try:
        parameters = serialization.load_pem_parameters(path.read_bytes())
    except (ValueError, UnsupportedAlgorithm):
        log.debug("dhparam_unreadable", path=str(path))
        return False
    return isinstance(parameters, dh.DHParameters)


__all__ = ["dhparam_pem", "dhparam_pem_valid", "gen_dhparam"]
