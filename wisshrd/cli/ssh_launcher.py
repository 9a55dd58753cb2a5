"""Helpers for composing, confirming and launching SSH sessions."""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Callable

import typer

__all__ = ["build_connection_string", "build_ssh_command", "confirm", "run_ssh"]

PromptFn = Callable[[str], str]
OutputFn = Callable[[str], None]


def build_connection_string(key: str, account: str, host: str, jump: str = "") -> str:
    """Join the selections as ``key@account@host`` plus ``@jump`` when set.

    Components are passed through verbatim; ssh rejects malformed input.
    """

    target = f"{key}@{account}@{host}"
    if jump:
        target = f"{target}@{jump}"
    return target


def build_ssh_command(connection: str) -> list[str]:
    """Construct the argv list for invoking the system ssh binary."""

    return ["ssh", connection]


def _default_prompt(message: str) -> str:
    """Prompt the user for input using Typer's utilities."""

    return typer.prompt(message, default="", show_default=False)


def _default_output(message: str) -> None:
    """Emit a single line of output to the terminal."""

    typer.echo(message)


def confirm(
    connection: str,
    *,
    prompt: PromptFn | None = None,
    output: OutputFn | None = None,
) -> bool:
    """Show the composed command and ask whether to proceed.

    Only an answer of ``y`` (any case, surrounding whitespace ignored) accepts.
    """

    prompt = prompt if prompt is not None else _default_prompt
    output = output if output is not None else _default_output

    output("")
    output(f"Connect using: {connection}")
    try:
        response = prompt("Proceed? [y/N]")
    except (EOFError, KeyboardInterrupt, typer.Abort):
        output("")
        return False
    return response.strip().lower() == "y"


def _normalize_returncode(returncode: int) -> int:
    """Map signal terminations (negative codes) to the shell's 128+N form."""

    if returncode < 0:
        return 128 - returncode
    return returncode


def _spawn_ssh(argv: list[str]) -> int:
    """Invoke ssh attached to this process's terminal streams."""

    return subprocess.call(argv)


def run_ssh(connection: str) -> int:
    """Execute an SSH connection and block until the session ends."""

    command = build_ssh_command(connection)
    ssh_path = shutil.which(command[0])
    if ssh_path is None:
        typer.echo("ssh command not found", err=True)
        return 1

    argv = [ssh_path, *command[1:]]
    try:
        status = _spawn_ssh(argv)
    except OSError as exc:
        typer.echo(str(exc), err=True)
        return 1
    return _normalize_returncode(status)
