"""Utilities for resolving filesystem locations used by wisshrd."""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_config_path

from wisshrd.errors import ConfigurationError

__all__ = ["config_dir", "history_path", "home_dir", "ssh_config_path"]

_APP_NAME = "wisshrd"
_HISTORY_FILENAME = "history.json"


def home_dir() -> Path:
    """Return the current user's home directory.

    Raises :class:`ConfigurationError` when the platform cannot report one.
    """

    try:
        return Path.home()
    except (KeyError, RuntimeError) as exc:
        msg = f"could not get home directory: {exc}"
        raise ConfigurationError(msg) from exc


def config_dir() -> Path:
    """Return the per-user configuration directory, creating it if needed.

    The path defaults to the platform-specific user config directory exposed
    by :mod:`platformdirs`. When the ``WISSHRD_CONFIG_DIR`` environment variable
    is set the value is treated as an override, allowing tests or alternative
    deployments to isolate their state. The directory is restricted to its
    owner.
    """

    override = os.getenv("WISSHRD_CONFIG_DIR")
    path = Path(override).expanduser() if override else user_config_path(_APP_NAME)

    try:
        path.mkdir(mode=0o700, parents=True, exist_ok=True)
    except OSError as exc:
        msg = f"could not create config directory: {exc}"
        raise ConfigurationError(msg) from exc
    return path


def history_path() -> Path:
    """Return the location of the persisted selection history."""

    return config_dir() / _HISTORY_FILENAME


def ssh_config_path() -> Path:
    """Return the ssh client configuration file scanned for candidates.

    ``WISSHRD_SSH_CONFIG`` overrides the default ``~/.ssh/config``.
    """

    override = os.getenv("WISSHRD_SSH_CONFIG")
    if override:
        return Path(override).expanduser()
    return home_dir() / ".ssh" / "config"
