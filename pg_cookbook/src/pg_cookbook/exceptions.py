from __future__ import annotations

"""Central exception hierarchy"""
class CookbookError(Exception):
    """Base exception for all failures"""


class InvalidKeyLengthError(CookbookError, ValueError):
    """Raised when a key length is not a power of 2 of at least 1024 bits"""


class UnsupportedCurveError(CookbookError, ValueError):
    """Raised when an EC curve name is not one of the accepted named curves"""


class UnsupportedCipherError(CookbookError, ValueError):
    """Raised when the host OpenSSL cannot protect a PEM key with a cipher"""


class KeyTypeError(CookbookError, TypeError):
    """Raised when an argument has the wrong type or the key is of the wrong kind"""


class RoleError(CookbookError, ValueError):
    """Raised when a role document is malformed"""


__all__ = [
    "CookbookError",
    "InvalidKeyLengthError",
    "UnsupportedCurveError",
    "UnsupportedCipherError",
    "KeyTypeError",
    "RoleError",
]
