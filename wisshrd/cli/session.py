"""Interactive flow that selects each part of the connection and launches ssh."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Protocol

import typer

from wisshrd.cli.picker import select
from wisshrd.cli.ssh_launcher import build_connection_string, confirm, run_ssh
from wisshrd.core.candidates import Candidates, load_candidates
from wisshrd.core.history import HistoryStore, StoredData
from wisshrd.errors import PickerError, WisshrdError

__all__ = ["ConnectionSession", "launch_session"]

OutputFn = Callable[[str], None]
ConfirmFn = Callable[[str], bool]
LauncherFn = Callable[[str], int]

# (category, picker label, name used in error messages)
_STEPS = (
    ("keys", "key", "key"),
    ("accounts", "account", "account"),
    ("hosts", "host", "host"),
    ("jumps", "jump", "jump host"),
)


class SelectorFn(Protocol):
    def __call__(self, items: Sequence[str], label: str, *, allow_empty: bool = ...) -> str: ...


def _default_output(message: str) -> None:
    typer.echo(message)


def _default_error(message: str) -> None:
    typer.echo(message, err=True)


class ConnectionSession:
    """Walk the user through key, account, host and jump selection."""

    def __init__(
        self,
        store: HistoryStore | None = None,
        *,
        selector: SelectorFn | None = None,
        confirmer: ConfirmFn | None = None,
        launcher: LauncherFn | None = None,
        output: OutputFn | None = None,
        error: OutputFn | None = None,
        ssh_config: Path | None = None,
        username: str | None = None,
    ) -> None:
        self._store = store if store is not None else HistoryStore()
        self._selector = selector if selector is not None else select
        self._confirmer = confirmer if confirmer is not None else confirm
        self._launcher = launcher if launcher is not None else run_ssh
        self._output = output if output is not None else _default_output
        self._error = error if error is not None else _default_error
        self._ssh_config = ssh_config
        self._username = username

    def run(self) -> int:
        """Run the full interactive flow and return the process exit code."""

        history, load_error = self._store.load()
        if load_error is not None:
            self._error(f"Warning: ignoring saved history: {load_error}")

        try:
            candidates = load_candidates(
                history,
                ssh_config=self._ssh_config,
                username=self._username,
                now=self._store.now(),
            )
        except WisshrdError as exc:
            self._error(f"Error loading SSH config: {exc}")
            return 1
        for warning in candidates.warnings:
            self._error(f"Warning: {warning}")

        selections: dict[str, str] = {}
        for category, label, noun in _STEPS:
            entries = getattr(candidates, category)
            try:
                value = self._selector(
                    Candidates.values(entries),
                    label,
                    allow_empty=category == "jumps",
                )
            except PickerError as exc:
                self._error(f"Error selecting {noun}: {exc}")
                return 1
            self._remember(history, candidates, category, value)
            selections[category] = value

        try:
            self._store.save(history)
        except WisshrdError as exc:
            self._error(f"Warning: could not save history: {exc}")

        connection = build_connection_string(
            selections["keys"],
            selections["accounts"],
            selections["hosts"],
            selections["jumps"],
        )
        if not self._confirmer(connection):
            self._output("Connection cancelled")
            return 0

        status = self._launcher(connection)
        if status != 0:
            self._error(f"Error executing SSH command: exit status {status}")
            return 1
        return 0

    def _remember(
        self,
        history: StoredData,
        candidates: Candidates,
        category: str,
        value: str,
    ) -> None:
        """Record ``value`` unless it is the synthetic key or an empty jump."""

        if category == "keys" and value == candidates.default_key:
            return
        if category == "jumps" and not value:
            return
        self._store.add_or_update(getattr(history, category), value)


def launch_session() -> int:
    """Convenience wrapper to instantiate and run a connection session."""

    return ConnectionSession().run()
