"""Terminal output for the plugspec commands.

Data goes to stdout: the ``plan`` listing and the ``inspect`` tables,
rendered as a Rich table on a terminal, tab-separated text when piped, or
JSON with ``--json``. Everything else (progress, the generation report,
errors, next-step hints, and library log records) goes to stderr, so a
piped ``plugspec plan --json`` stays parseable.

Colour is off with ``--no-color``, a set ``NO_COLOR``, or ``TERM=dumb``.

The commands reach the :class:`OutputManager` installed by
:func:`~plugspec.app.main_callback` through :func:`get_output` or the
module-level :func:`info`, :func:`error` and friends.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

if TYPE_CHECKING:
    from plugspec.generator.orchestrator import GenerationResult, OutputFile


PLAN_HEADERS = ["Path", "Policy", "Action"]


class OutputFormat(str, Enum):
    """Format of the data written to stdout.

    ``AUTO`` becomes ``RICH`` on a colour terminal and ``PLAIN`` otherwise.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Writes command results to stdout and diagnostics to stderr.

    Args:
        format: Format of stdout data.
        no_color: Disable colour and Rich markup.
        quiet: Hide progress and success messages. Errors are always shown.
        verbose: Show debug messages and debug log records.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _color_disabled_by_env()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            format = OutputFormat.RICH if _is_tty() and not self._no_color else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    # stdout

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Write rows to stdout.

        JSON mode writes a list of objects keyed by header, plain mode a
        header line and one tab-separated line per row. The title is only
        shown in Rich mode.
        """
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            print(json.dumps(records, indent=2, ensure_ascii=False), flush=True)
        elif self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                print("\t".join(line), flush=True)
        else:
            table = Table(title=title, header_style="bold cyan")
            for header in headers:
                table.add_column(header)
            for row in rows:
                table.add_row(*row)
            self._stdout.print(table)

    def print_plan(self, root: Path, outputs: list[OutputFile]) -> None:
        """List planned files with their write policy and whether they would be written."""
        rows = [
            [
                output.path.as_posix(),
                output.policy.value,
                "write" if output.will_write(root) else "keep",
            ]
            for output in outputs
        ]
        self.print_table(PLAN_HEADERS, rows, title=f"{root} ({len(rows)} files)")

    # stderr

    def report_generation(self, result: GenerationResult, plugin_name: str) -> None:
        """Summarise a generate run; kept stubs are listed with ``--verbose``."""
        for path in result.kept:
            self.debug(f"Kept existing {path.as_posix()}")
        self.success(
            f"Generated {plugin_name or 'plugin'} in {result.output_root} "
            f"({len(result.written)} written, {len(result.kept)} kept)."
        )

    def info(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic(message, message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic(message, f"[green]{message}[/green]")

    def error(self, message: str) -> None:
        """Never suppressed, not even by ``--quiet``."""
        self._diagnostic(f"Error: {message}", f"[bold red]Error:[/bold red] {message}", highlight=False)

    def suggest(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic(f"→ {message}", f"[dim]→ {message}[/dim]")

    def debug(self, message: str) -> None:
        if self._verbose:
            self._diagnostic(f"[debug] {message}", f"[dim]\\[debug] {message}[/dim]")

    def _diagnostic(self, plain: str, markup: str, highlight: bool = True) -> None:
        if self._no_color:
            print(plain, file=sys.stderr, flush=True)
        else:
            self._stderr.print(markup, highlight=highlight)

    def configure_logging(self) -> None:
        """Send ``plugspec.*`` log records to stderr.

        Debug records are shown with ``--verbose``, otherwise warnings and
        above. Records do not propagate to the root logger.
        """
        handler: logging.Handler
        if self._no_color:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        else:
            handler = RichHandler(console=self._stderr, show_time=False, show_path=False)
        package_logger = logging.getLogger("plugspec")
        package_logger.handlers[:] = [handler]
        package_logger.setLevel(logging.DEBUG if self._verbose else logging.WARNING)
        package_logger.propagate = False


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _color_disabled_by_env() -> bool:
    """``NO_COLOR`` set to anything, or ``TERM=dumb``."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager; the next :func:`get_output` creates a new one."""
    global _output
    _output = None


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def error(message: str) -> None:
    get_output().error(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def debug(message: str) -> None:
    get_output().debug(message)
