"""PostgreSQL cookbook: role declaration and OpenSSL helpers."""
from .version import __version__

__all__ = ["__version__"]
