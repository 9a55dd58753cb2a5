"""Merge the sources of selectable values for each category."""

from __future__ import annotations

import getpass
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from wisshrd.core.history import StoredData, StoredEntry
from wisshrd.core.ssh_config import SSHConfigValues, read_ssh_config
from wisshrd.paths import ssh_config_path

__all__ = ["Candidates", "current_username", "load_candidates"]


@dataclass(slots=True)
class Candidates:
    """Ordered candidate entries for every category.

    ``default_key`` is the synthetic current-user entry placed first in
    ``keys``; it is offered on every run but never written to history.
    """

    keys: list[StoredEntry] = field(default_factory=list)
    accounts: list[StoredEntry] = field(default_factory=list)
    hosts: list[StoredEntry] = field(default_factory=list)
    jumps: list[StoredEntry] = field(default_factory=list)
    default_key: str | None = None
    warnings: list[str] = field(default_factory=list)

    @staticmethod
    def values(entries: Iterable[StoredEntry]) -> list[str]:
        """Project entries onto the plain strings shown in the picker."""

        return [entry.value for entry in entries]


def current_username() -> str | None:
    """Return the OS-reported user name, or ``None`` when unavailable."""

    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return None


def load_candidates(
    history: StoredData,
    *,
    ssh_config: Path | None = None,
    username: str | None = None,
    now: datetime | None = None,
) -> Candidates:
    """Build candidate lists from the current user, ssh config and history.

    Sources are concatenated in that order without de-duplication. Resolving
    the default ssh config path requires the home directory, so a
    :class:`~wisshrd.errors.ConfigurationError` propagates when it is unknown.
    """

    timestamp = now if now is not None else datetime.now(UTC)
    config_path = ssh_config if ssh_config is not None else ssh_config_path()
    user = username if username is not None else current_username()

    candidates = Candidates()
    if user:
        candidates.default_key = user
        candidates.keys.append(StoredEntry.fresh(user, timestamp))

    try:
        parsed = read_ssh_config(config_path)
    except OSError as exc:
        candidates.warnings.append(f"could not read ssh config {config_path}: {exc}")
        parsed = SSHConfigValues()

    candidates.hosts.extend(StoredEntry.fresh(value, timestamp) for value in parsed.hosts)
    candidates.accounts.extend(StoredEntry.fresh(value, timestamp) for value in parsed.accounts)
    candidates.jumps.extend(StoredEntry.fresh(value, timestamp) for value in parsed.jumps)

    candidates.keys.extend(history.keys)
    candidates.accounts.extend(history.accounts)
    candidates.hosts.extend(history.hosts)
    candidates.jumps.extend(history.jumps)
    return candidates
