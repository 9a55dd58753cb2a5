"""Command-line entry point for the wisshrd application."""

from __future__ import annotations

import sys
from collections.abc import Sequence

import typer

from wisshrd import __version__
from wisshrd.cli.session import launch_session

app = typer.Typer(
    help="Pick a key, account, host and optional jump host, then connect with ssh.",
    add_completion=False,
)


@app.callback(invoke_without_command=True)
def cli(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show the application's version and exit.",
        is_eager=True,
    ),
) -> None:
    """Run the interactive connection builder."""
    if version:
        typer.echo(f"wisshrd version {__version__}")
        raise typer.Exit()

    if ctx.resilient_parsing:
        return

    exit_code = launch_session()
    raise typer.Exit(exit_code)


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the wisshrd CLI."""

    args = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        result = app(args=args, standalone_mode=False)
    except typer.Exit as exc:  # exit path already handled by Typer
        return exc.exit_code
    except typer.Abort:
        typer.echo("Aborted!", err=True)
        return 1
    except Exception as exc:  # pragma: no cover - unexpected errors bubble to the shell
        typer.echo(str(exc), err=True)
        return 1
    return result if isinstance(result, int) else 0


if __name__ == "__main__":  # pragma: no cover - manual execution only
    raise SystemExit(main())
