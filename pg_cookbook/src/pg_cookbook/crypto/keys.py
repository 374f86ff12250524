"""Key helpers used while provisioning PostgreSQL TLS material.

Each helper validates its arguments and delegates the cryptographic work to
``cryptography``. Arguments documented as "path or content" are read from disk
when they name an existing file and used as PEM text otherwise.
"""

from __future__ import annotations

import os
from pathlib import PurePath
from typing import Final, Optional

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes

from pg_cookbook.exceptions import InvalidKeyLengthError, KeyTypeError, UnsupportedCurveError
from pg_cookbook.logging import get_logger
from pg_cookbook.utils.sources import KeySource, read_key_source

from .ciphers import OpenSSLError, pem_encrypt, pem_load

MIN_KEY_LENGTH: Final[int] = 1024
RSA_PUBLIC_EXPONENT: Final[int] = 65537
KEY_SUFFIX: Final[str] = ".key"

# OpenSSL short names accepted for EC keys
EC_CURVES: Final[dict[str, type[ec.EllipticCurve]]] = {
    "prime256v1": ec.SECP256R1,
    "secp384r1": ec.SECP384R1,
    "secp521r1": ec.SECP521R1,
}

_KEY_LENGTH_MESSAGE = f"Key length must be a power of 2 greater than or equal to {MIN_KEY_LENGTH}"

log = get_logger("pg_cookbook.crypto")


def get_key_filename(cert_filename: str | os.PathLike[str]) -> str:
    """Return the key file path matching a certificate file path.

    ``/etc/ssl/server.crt`` becomes ``/etc/ssl/server.key``; a bare file name
    is placed in ``.``. A trailing separator is dropped before splitting, so
    ``/etc/ssl/`` becomes ``/etc/ssl.key``.
    """
    path = os.fspath(cert_filename)
    directory, name = os.path.split(path.rstrip(os.sep) or os.sep)
    return f"{directory or '.'}{os.sep}{PurePath(name).stem}{KEY_SUFFIX}"


def key_length_valid(number: int) -> bool:
    return number >= MIN_KEY_LENGTH and number & (number - 1) == 0


def _check_key_length(key_length: int) -> None:
    if isinstance(key_length, bool) or not isinstance(key_length, int):
        raise KeyTypeError("Key length must be an integer")
    if not key_length_valid(key_length):
        raise InvalidKeyLengthError(_KEY_LENGTH_MESSAGE)


def _password_bytes(password: Optional[str | bytes]) -> Optional[bytes]:
    if password is None or isinstance(password, bytes):
        return password
    return password.encode("utf-8")


def load_private_key(source: KeySource, password: Optional[str | bytes] = None) -> PrivateKeyTypes:
    """Load a PEM private key from a path or from its content.

    A password supplied for an unencrypted key is ignored. Encrypted keys that
    ``cryptography`` cannot decrypt are handed to the host OpenSSL, which reads
    anything ``encrypt_*_key`` writes. Parse errors from ``cryptography``
    propagate.
    """
    data = read_key_source(source)
    secret = _password_bytes(password)
    try:
        return serialization.load_pem_private_key(data, password=secret)
    except TypeError:
        if secret is None:
            raise
        return serialization.load_pem_private_key(data, password=None)
    except (ValueError, UnsupportedAlgorithm) as exc:
        if secret is None:
            raise
        try:
            return pem_load(data, secret)
        except OpenSSLError:
            raise exc from None


def priv_key_file_valid(key_file: KeySource, key_password: Optional[str | bytes] = None) -> bool:
    """Return True when ``key_file`` (a path or the key content) is a private key."""
    try:
        load_private_key(key_file, key_password)
    except (ValueError, TypeError, UnsupportedAlgorithm):
        return False
    return True


def _public_pem(private_key: rsa.RSAPrivateKey | ec.EllipticCurvePrivateKey) -> str:
    return private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("ascii")


def _check_encrypt_args(key_password: str, key_cipher: str) -> None:
    if not isinstance(key_password, str):
        raise KeyTypeError("key_password must be a string")
    if not isinstance(key_cipher, str):
        raise KeyTypeError("key_cipher must be a string")


# ---------- RSA ----------
def gen_rsa_priv_key(key_length: int) -> rsa.RSAPrivateKey:
    _check_key_length(key_length)
    log.debug("rsa_key_generate", key_length=key_length)
    return rsa.generate_private_key(public_exponent=RSA_PUBLIC_EXPONENT, key_size=key_length)


def gen_rsa_pub_key(priv_key: KeySource, priv_key_password: Optional[str | bytes] = None) -> str:
    """PEM public key of an RSA private key given as a path or as content."""
    key = load_private_key(priv_key, priv_key_password)
    if not isinstance(key, rsa.RSAPrivateKey):
        raise KeyTypeError("Expected an RSA private key")
    return _public_pem(key)


def encrypt_rsa_key(rsa_key: rsa.RSAPrivateKey, key_password: str, key_cipher: str) -> str:
    if not isinstance(rsa_key, rsa.RSAPrivateKey):
        raise KeyTypeError("rsa_key must be an RSAPrivateKey object")
    _check_encrypt_args(key_password, key_cipher)
    log.debug("rsa_key_encrypt", cipher=key_cipher)
    return pem_encrypt(rsa_key, key_password, key_cipher)


# ---------- EC ----------
def gen_ec_priv_key(curve: str) -> ec.EllipticCurvePrivateKey:
    if not isinstance(curve, str):
        raise KeyTypeError("curve must be a string")
    curve_cls = EC_CURVES.get(curve)
    if curve_cls is None:
        raise UnsupportedCurveError("Specified curve is not available on this system")
    log.debug("ec_key_generate", curve=curve)
    return ec.generate_private_key(curve_cls())


def gen_ec_pub_key(priv_key: KeySource, priv_key_password: Optional[str | bytes] = None) -> str:
    """PEM public key of an EC private key given as a path or as content."""
    key = load_private_key(priv_key, priv_key_password)
    if not isinstance(key, ec.EllipticCurvePrivateKey):
        raise KeyTypeError("Expected an EC private key")
    return _public_pem(key)


def encrypt_ec_key(ec_key: ec.EllipticCurvePrivateKey, key_password: str, key_cipher: str) -> str:
    if not isinstance(ec_key, ec.EllipticCurvePrivateKey):
        raise KeyTypeError("ec_key must be an EllipticCurvePrivateKey object")
    _check_encrypt_args(key_password, key_cipher)
    log.debug("ec_key_encrypt", cipher=key_cipher)
    return pem_encrypt(ec_key, key_password, key_cipher)


def private_pem(private_key: rsa.RSAPrivateKey | ec.EllipticCurvePrivateKey) -> str:
    """Unencrypted PKCS#8 PEM text of a private key."""
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


__all__ = [
    "EC_CURVES",
    "MIN_KEY_LENGTH",
    "encrypt_ec_key",
    "encrypt_rsa_key",
    "gen_ec_priv_key",
    "gen_ec_pub_key",
    "gen_rsa_priv_key",
    "gen_rsa_pub_key",
    "get_key_filename",
    "key_length_valid",
    "load_private_key",
    "priv_key_file_valid",
    "private_pem",
]
