"""Adapter around the external ``fzf`` fuzzy picker."""

from __future__ import annotations

import shutil
import subprocess
import threading
from collections.abc import Iterable, Sequence
from contextlib import suppress
from typing import IO

from wisshrd.errors import PickerError

__all__ = ["build_picker_command", "select"]

_PICKER = "fzf"
# fzf exits with 1 when nothing matched the query.
_EXIT_NO_MATCH = 1


def build_picker_command(label: str, count: int) -> list[str]:
    """Construct the fzf argv for a prompt showing ``count`` options."""

    return [
        _PICKER,
        "--height",
        "20%",
        "--min-height",
        "1",
        "--print-query",
        "--no-margin",
        "--no-padding",
        "--prompt",
        f"{label} ({count} options) > ",
    ]


def _feed(stream: IO[str], items: Iterable[str]) -> None:
    """Write one candidate per line, then close the stream to signal EOF."""

    # The picker may exit before consuming everything.
    with suppress(BrokenPipeError):
        try:
            for item in items:
                stream.write(f"{item}\n")
        finally:
            stream.close()


def _run_picker(argv: Sequence[str], items: Sequence[str]) -> tuple[int, str]:
    """Run the picker, feeding ``items`` while its output is read."""

    with subprocess.Popen(
        list(argv),
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        encoding="utf-8",
        errors="replace",
    ) as process:
        assert process.stdin is not None and process.stdout is not None

        writer = threading.Thread(target=_feed, args=(process.stdin, items), daemon=True)
        writer.start()
        try:
            output = process.stdout.read()
            returncode = process.wait()
        except BaseException:
            process.kill()
            process.wait()
            raise
        finally:
            writer.join()
    return returncode, output


def _resolve(returncode: int, output: str, *, allow_empty: bool) -> str:
    """Interpret the picker's exit status and ``--print-query`` output."""

    lines = output.split("\n")
    if returncode == _EXIT_NO_MATCH:
        if lines[0]:
            return lines[0]
        if allow_empty:
            return ""
        msg = "no selection made"
        raise PickerError(msg)
    if returncode != 0:
        msg = f"picker exited with status {returncode}"
        raise PickerError(msg)

    if len(lines) >= 2:
        selection = lines[1].strip()
        if selection:
            return selection
        return lines[0].strip()
    return output.strip()


def select(items: Sequence[str], label: str, *, allow_empty: bool = False) -> str:
    """Let the user pick one of ``items`` or type a new value.

    A typed query that matches nothing is accepted as the chosen value. When
    ``allow_empty`` is true an empty query with no match yields ``""``;
    otherwise it, like any other abnormal exit, raises :class:`PickerError`.
    """

    command = build_picker_command(label, len(items))
    picker_path = shutil.which(command[0])
    if picker_path is None:
        msg = f"{_PICKER} command not found"
        raise PickerError(msg)

    argv = [picker_path, *command[1:]]
    try:
        returncode, output = _run_picker(argv, items)
    except OSError as exc:
        msg = f"could not launch {_PICKER}: {exc}"
        raise PickerError(msg) from exc
    return _resolve(returncode, output, allow_empty=allow_empty)
