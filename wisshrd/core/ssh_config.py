"""Extract candidate values from the ssh client's configuration file.

Only three directives are recognised, each by a leading keyword followed by a
space: ``Host``, ``User`` and ``ProxyJump``. Anything else, including
directives written as ``Keyword=value`` or in a different case, is ignored.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

__all__ = ["SSHConfigValues", "parse_ssh_config", "read_ssh_config"]

_HOST_PREFIX = "Host "
_USER_PREFIX = "User "
_JUMP_PREFIX = "ProxyJump "
_WILDCARDS = ("*", "?")


@dataclass(slots=True)
class SSHConfigValues:
    """Values collected from an ssh config file, in file order."""

    hosts: list[str] = field(default_factory=list)
    accounts: list[str] = field(default_factory=list)
    jumps: list[str] = field(default_factory=list)


def parse_ssh_config(lines: Iterable[str]) -> SSHConfigValues:
    """Scan config lines for host names, user names and jump hosts."""

    values = SSHConfigValues()
    for raw_line in lines:
        line = raw_line.strip()
        if line.startswith(_HOST_PREFIX):
            values.hosts.extend(
                token
                for token in line[len(_HOST_PREFIX) :].split()
                if not any(wildcard in token for wildcard in _WILDCARDS)
            )
        elif line.startswith(_USER_PREFIX):
            values.accounts.append(line[len(_USER_PREFIX) :])
        elif line.startswith(_JUMP_PREFIX):
            values.jumps.append(line[len(_JUMP_PREFIX) :])
    return values


def read_ssh_config(path: Path) -> SSHConfigValues:
    """Parse the config file at ``path``; a missing file yields no values.

    Other read failures propagate as :class:`OSError`.
    """

    try:
        with path.open("r", encoding="utf-8", errors="replace") as handle:
            return parse_ssh_config(handle)
    except FileNotFoundError:
        return SSHConfigValues()
