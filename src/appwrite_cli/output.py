"""Output formatting system with strict stdout/stderr discipline.

Follows `clig.dev <https://clig.dev/>`_ conventions:

* **stdout** -- primary data only (API responses as JSON or tables). This is
  what downstream tools pipe and parse.
* **stderr** -- all diagnostics (status, success, warnings, hints, errors).
  Never contaminates the data stream.
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb``, and the
  ``--no-color`` CLI flag. Styling is only emitted when the stream is a
  terminal.

The module exposes two layers:

1. :class:`OutputManager` -- a stateful object holding the render mode,
   Rich consoles, and quiet/verbose flags. Created once in
   :func:`~appwrite_cli.app.main_callback` and installed via
   :func:`set_output`.
2. Module-level convenience functions (:func:`info`, :func:`error`,
   :func:`debug`, etc.) that delegate to the global ``OutputManager``
   instance so callers do not need to pass the manager around.

Rendering itself lives in :mod:`appwrite_cli.render`; the manager only
decides *where* output goes and passes its mode along explicitly.
"""

from __future__ import annotations

import os
import sys
from typing import Any, Optional

from rich.console import Console
from rich.text import Text

from appwrite_cli.render import OutputFormat, render_response

__all__ = [
    "OutputFormat",
    "OutputManager",
    "get_output",
    "set_output",
    "reset_output",
]


class OutputManager:
    """Central manager for all CLI output with stdout/stderr discipline.

    Maintains two Rich :class:`~rich.console.Console` instances -- one for
    stdout (data) and one for stderr (diagnostics) -- and routes every
    output call to the correct stream.

    Args:
        format: Render mode for response data.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential informational messages on stderr.
        verbose: Enable debug-level messages on stderr.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.TABLE,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._format = format
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        # Console for stdout (data output)
        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
        )

        # Console for stderr (diagnostics)
        self._stderr = Console(
            file=sys.stderr,
            no_color=self._no_color,
            stderr=True,
        )

    @property
    def format(self) -> OutputFormat:
        """The active render mode."""
        return self._format

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def format_response(self, data: Any) -> None:
        """Render an API response body to stdout in the active mode.

        Args:
            data: Decoded response payload -- usually a dict, sometimes a
                list, string or bytes.
        """
        if isinstance(data, bytes):
            sys.stdout.buffer.write(data)
            sys.stdout.flush()
            return
        render_response(data, self._format, self._stdout)

    def print_data(self, text: str) -> None:
        """Print raw text to stdout."""
        print(text, file=sys.stdout, flush=True)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Print an informational message to stderr. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._diagnostic("ℹ Info:", message, "cyan")

    def success(self, message: str = "") -> None:
        """Print a green success line to stderr. Suppressed by ``--quiet``.

        Every API command ends with a bare ``success()`` once the response
        has been rendered.
        """
        if not self._quiet:
            self._diagnostic("✓ Success:", message, "green")

    def warning(self, message: str) -> None:
        """Print a yellow warning to stderr. NOT suppressed by ``--quiet``."""
        self._diagnostic("ℹ Warning:", message, "yellow")

    def hint(self, message: str) -> None:
        """Print a next-step hint to stderr. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._diagnostic("♥ Hint:", message, "cyan")

    def error(self, message: str) -> None:
        """Print a bold-red error to stderr. Never suppressed."""
        self._diagnostic("✗ Error:", message, "red")

    def debug(self, message: str) -> None:
        """Print a debug message to stderr. Only shown when ``--verbose`` is active."""
        if self._verbose:
            if self._no_color:
                print(f"[debug] {message}", file=sys.stderr, flush=True)
            else:
                self._stderr.print(f"[debug] {message}", style="dim", markup=False, highlight=False)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _diagnostic(self, label: str, message: str, color: str) -> None:
        if self._no_color:
            text = f"{label} {message}" if message else label
            print(text, file=sys.stderr, flush=True)
            return
        line = Text(label, style=f"bold {color}")
        if message:
            line.append(" ")
            line.append(message, style=color)
        self._stderr.print(line, highlight=False)


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _should_disable_color() -> bool:
    """Check if color should be disabled per clig.dev.

    Returns True when NO_COLOR env var is set (any value) or TERM=dumb.
    """
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False


# ------------------------------------------------------------------ #
# Global output instance (set during app startup)
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager` instance.

    If no instance has been installed via :func:`set_output`, a default
    table-mode ``OutputManager`` is created lazily.
    """
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager` instance.

    Called once during CLI startup from :func:`~appwrite_cli.app.main_callback`.
    """
    global _output
    _output = output


def reset_output() -> None:
    """Reset the global :class:`OutputManager` to ``None``.

    Primarily useful in test suites to ensure a clean state between tests.
    """
    global _output
    _output = None


# ------------------------------------------------------------------ #
# Convenience functions that use the global instance
# ------------------------------------------------------------------ #


def format_response(data: Any) -> None:
    """Render response data to stdout via the global :class:`OutputManager`."""
    get_output().format_response(data)


def print_data(text: str) -> None:
    """Print raw data to stdout via the global OutputManager."""
    get_output().print_data(text)


def info(message: str) -> None:
    """Print info message to stderr via the global OutputManager."""
    get_output().info(message)


def error(message: str) -> None:
    """Print error to stderr via the global OutputManager."""
    get_output().error(message)


def success(message: str = "") -> None:
    """Print success message to stderr via the global OutputManager."""
    get_output().success(message)


def hint(message: str) -> None:
    """Print a hint to stderr via the global OutputManager."""
    get_output().hint(message)


def debug(message: str) -> None:
    """Print debug message to stderr via the global OutputManager."""
    get_output().debug(message)
