"""Console output for jsonreq with strict stdout/stderr discipline.

* **stdout** -- response data only, so ``jsonreq get ... | jq`` works.
* **stderr** -- diagnostics: request lines in verbose mode, warnings about
  failed calls or failed persistence, and errors.
* **TTY detection** -- Rich syntax highlighting when stdout is an
  interactive terminal, plain JSON when piped.
* **Colour control** -- ``NO_COLOR``, ``TERM=dumb`` and ``--no-color``
  all switch Rich off.

The pipeline never prints data itself; it reports through the global
:class:`OutputManager` returned by :func:`get_output`, which the CLI
replaces at startup via :func:`set_output`.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, NamedTuple, Optional

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax


class OutputFormat(str, Enum):
    """Rendering used for response data on stdout.

    ``AUTO`` resolves to ``RICH`` on an interactive, colour-capable TTY and
    to ``JSON`` otherwise.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class _Channel(NamedTuple):
    """How one kind of diagnostic is labelled and when it is shown."""

    label: str
    style: str
    quiet_hides: bool
    verbose_only: bool = False


_CHANNELS = {
    "info": _Channel("", "", quiet_hides=True),
    "success": _Channel("", "green", quiet_hides=True),
    "warning": _Channel("Warning: ", "yellow", quiet_hides=False),
    "error": _Channel("Error: ", "bold red", quiet_hides=False),
    "debug": _Channel("[debug] ", "dim", quiet_hides=False, verbose_only=True),
}


class OutputManager:
    """Routes response data to stdout and diagnostics to stderr.

    Args:
        format: Desired data format. ``AUTO`` resolves based on TTY
            detection.
        no_color: Disable all colour and Rich markup.
        quiet: Hide info and success messages. Warnings and errors are
            still shown.
        verbose: Show debug messages (request and response lines).
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._plain_text = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._format = _resolve_format(format, self._plain_text)

        self._data_console = Console(
            file=sys.stdout,
            no_color=self._plain_text,
            force_terminal=self._format == OutputFormat.RICH,
        )
        self._diag_console = Console(file=sys.stderr, no_color=self._plain_text, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # -- response data (stdout) ---------------------------------------- #

    def format_response(self, data: Any) -> None:
        """Render a parsed JSON value to stdout in the active format.

        * **JSON** -- indented JSON text.
        * **Plain** -- ``key<TAB>value`` lines for objects, one line per
          item for arrays, the bare value for scalars.
        * **Rich** -- syntax-highlighted JSON.
        """
        if self._format == OutputFormat.RICH:
            self._data_console.print(
                Syntax(_to_json(data), "json", theme="monokai", word_wrap=True)
            )
        elif self._format == OutputFormat.PLAIN:
            for line in _plain_lines(data):
                self.print_data(line)
        else:
            self.print_data(_to_json(data))

    def print_data(self, text: str) -> None:
        """Write one line of raw text to stdout."""
        sys.stdout.write(text + "\n")
        sys.stdout.flush()

    # -- diagnostics (stderr) ------------------------------------------ #

    def info(self, message: str) -> None:
        self._emit("info", message)

    def success(self, message: str) -> None:
        self._emit("success", message)

    def warning(self, message: str) -> None:
        """Warnings survive ``--quiet``."""
        self._emit("warning", message)

    def error(self, message: str) -> None:
        self._emit("error", message)

    def debug(self, message: str) -> None:
        """Only shown with ``--verbose``."""
        self._emit("debug", message)

    def _emit(self, channel_name: str, message: str) -> None:
        channel = _CHANNELS[channel_name]
        if channel.verbose_only and not self._verbose:
            return
        if channel.quiet_hides and self._quiet:
            return

        if self._plain_text:
            sys.stderr.write(f"{channel.label}{message}\n")
            sys.stderr.flush()
            return

        if not channel.style:
            self._diag_console.print(message, markup=False)
        elif channel.verbose_only:
            self._diag_console.print(
                f"[{channel.style}]{escape(channel.label)}{escape(message)}[/]"
            )
        elif channel.label:
            self._diag_console.print(
                f"[{channel.style}]{channel.label.rstrip()}[/] {escape(message)}"
            )
        else:
            self._diag_console.print(f"[{channel.style}]{escape(message)}[/]")


def _resolve_format(requested: OutputFormat, plain_text: bool) -> OutputFormat:
    if requested != OutputFormat.AUTO:
        return requested
    if _is_tty() and not plain_text:
        return OutputFormat.RICH
    return OutputFormat.JSON


def _to_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def _plain_lines(data: Any) -> list[str]:
    if isinstance(data, dict):
        return [f"{key}\t{_scalar_text(value)}" for key, value in data.items()]
    if isinstance(data, list):
        return [_scalar_text(item) for item in data]
    return [_scalar_text(data)]


def _scalar_text(value: Any) -> str:
    """Nested containers stay JSON so plain output remains unambiguous."""
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, default=str)
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _is_tty() -> bool:
    isatty = getattr(sys.stdout, "isatty", None)
    return bool(isatty and isatty())


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


# -- global instance, installed by the CLI callback -------------------- #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Drop the global :class:`OutputManager` (used between tests)."""
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
