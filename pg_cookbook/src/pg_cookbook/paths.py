"""Shared filesystem path helpers."""
from __future__ import annotations

import sys
from pathlib import Path

from platformdirs import PlatformDirs

_APP_NAME = "PostgreSQL Cookbook"
_LINUX_APP_NAME = "pg-cookbook"


def runtime_config_dir() -> Path:
    """Return the per-user configuration directory."""
    if sys.platform in ("win32", "darwin"):
        dirs = PlatformDirs(appname=_APP_NAME, appauthor=None, roaming=True)
    else:
        dirs = PlatformDirs(appname=_LINUX_APP_NAME, appauthor=None, roaming=False)
    return Path(dirs.user_config_path)


def bundled_roles_dir() -> Path:
    """Directory holding the role documents shipped with the package."""
    return Path(__file__).resolve().parent / "roles"
