"""Typer application and CLI entry point for jsonreq.

This module wires the top-level Typer application: the root callback that
configures output and transport overrides, the ``get`` / ``post`` / ``load``
request commands, and the ``config`` group.

:func:`main` is the console-script entry point declared in
``pyproject.toml``. It installs a SIGINT handler and invokes the app.
Unhandled exceptions are written to a crash log under the data directory.

See Also:
    :mod:`jsonreq.config`: Settings resolution used by the request commands.
    :mod:`jsonreq.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, NoReturn, Optional

import typer

from jsonreq import __version__
from jsonreq.commands.config import config_app
from jsonreq.commands.request import get_command, load_command, post_command
from jsonreq.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INTERRUPTED


app = typer.Typer(
    name="jsonreq",
    help="Send JSON-over-HTTP requests and optionally save the responses.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("get")(get_command)
app.command("post")(post_command)
app.command("load")(load_command)
app.add_typer(config_app, name="config", help="Stored transport settings.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"jsonreq {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Print responses as indented JSON."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Print responses as tab-separated text."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show request and response lines."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", "-t", help="Transport timeout in seconds."
    ),
    insecure: bool = typer.Option(
        False, "--insecure", "-k", help="Skip TLS certificate verification."
    ),
    follow_redirects: bool = typer.Option(
        False, "--follow-redirects", "-L", help="Follow 3xx redirects."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~jsonreq.output.OutputManager` from the
    output flags and stores transport overrides in ``ctx.obj["settings"]``
    for :func:`~jsonreq.config.resolve_settings`. Flags left at their
    defaults do not override the settings file or environment.
    """
    from jsonreq.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["settings"] = {
        "timeout": timeout,
        "verify_ssl": False if insecure else None,
        "follow_redirects": True if follow_redirects else None,
    }


def _exit_interrupted(*_: Any) -> NoReturn:
    sys.stderr.write("\nCancelled.\n")
    sys.exit(EXIT_INTERRUPTED)


def _write_crash_log() -> Path:
    """Save the active traceback with the version and argv that produced it."""
    from jsonreq.config import get_data_dir

    crash_dir = get_data_dir() / "crashes"
    crash_dir.mkdir(parents=True, exist_ok=True)
    crash_path = crash_dir / f"jsonreq-{datetime.now():%Y%m%d-%H%M%S}.log"
    header = f"jsonreq {__version__}\nargv: {' '.join(sys.argv)}\n\n"
    crash_path.write_text(header + traceback.format_exc(), encoding="utf-8")
    return crash_path


def main() -> None:
    """CLI entry point invoked by the ``jsonreq`` console script.

    A :class:`~jsonreq.exceptions.JsonreqError` that escapes a command
    exits with the error's ``exit_code``. Anything else leaves a crash log
    behind and exits with a generic failure.
    """
    from jsonreq.exceptions import JsonreqError
    from jsonreq.output import error

    signal.signal(signal.SIGINT, _exit_interrupted)
    try:
        app()
    except KeyboardInterrupt:
        _exit_interrupted()
    except JsonreqError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception:
        error(f"Unexpected error. Crash log: {_write_crash_log()}")
        sys.exit(EXIT_GENERIC_FAILURE)
