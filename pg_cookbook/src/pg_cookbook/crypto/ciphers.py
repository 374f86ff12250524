"""PEM encryption of private keys with a named OpenSSL cipher.

``cryptography`` only lets callers pick "best available" encryption for PEM
output, while provisioning code names the cipher explicitly (``aes-256-cbc``,
``des-ede3-cbc``...). The cipher lookup and the PEM writer therefore go through
pyOpenSSL, which hands the name to the host's OpenSSL.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Union

from cryptography.hazmat.primitives.asymmetric import ec, rsa
from OpenSSL import crypto

from pg_cookbook.exceptions import KeyTypeError, UnsupportedCipherError

PrivateKey = Union[rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey]

_PROBE_PASSWORD = b"cipher-probe"

OpenSSLError = crypto.Error


@lru_cache(maxsize=1)
def _probe_key() -> crypto.PKey:
    return crypto.PKey.from_cryptography_key(ec.generate_private_key(ec.SECP256R1()))


@lru_cache(maxsize=None)
def cipher_available(name: str) -> bool:
    """True when the host OpenSSL can protect a PEM private key with ``name``.

    The name is resolved by OpenSSL itself. Ciphers it knows but refuses to use
    for PEM output (AEAD and XTS modes) count as unavailable.
    """
    if not isinstance(name, str) or not name:
        return False
    try:
        crypto.dump_privatekey(crypto.FILETYPE_PEM, _probe_key(), name, _PROBE_PASSWORD)
    except (ValueError, crypto.Error):
        return False
    return True


def pem_load(data: bytes, password: bytes):
    """Read a password-protected PEM private key through the host OpenSSL.

    Covers ciphers OpenSSL writes but ``cryptography`` cannot decrypt
    (Camellia, ARIA, CFB/OFB modes...). Raises ``crypto.Error`` on a wrong
    password or unreadable content.
    """
    return crypto.load_privatekey(crypto.FILETYPE_PEM, data, password).to_cryptography_key()


def pem_encrypt(private_key: PrivateKey, password: str, cipher: str) -> str:
    """Serialize ``private_key`` as PEM protected by ``password`` and ``cipher``."""
    if not isinstance(private_key, (rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey)):
        raise KeyTypeError("private_key must be an RSA or EC private key")
    if not password:
        raise ValueError("key_password must not be empty")
    if not cipher_available(cipher):
        raise UnsupportedCipherError("Specified key_cipher is not available on this system")
    pkey = crypto.PKey.from_cryptography_key(private_key)
    pem = crypto.dump_privatekey(crypto.FILETYPE_PEM, pkey, cipher, password.encode("utf-8"))
    return pem.decode("ascii")


__all__ = ["OpenSSLError", "PrivateKey", "cipher_available", "pem_encrypt", "pem_load"]
