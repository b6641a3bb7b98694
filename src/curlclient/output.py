"""Terminal output for response bodies and transfer diagnostics.

Two streams, never mixed:

* **stdout** carries payload only: a response body, or a config dump.  It
  is what ``curlclient request ... | jq`` sees.
* **stderr** carries everything about the exchange: the status line,
  response headers (``--include``), warnings, errors, and the session's
  ``--verbose`` trace.

Bodies are rendered according to the resolved :class:`OutputFormat`.  In
``RICH`` mode the response ``Content-Type`` picks a syntax lexer, so JSON,
XML and HTML bodies are highlighted on a terminal; when piped the same body
is printed verbatim.  ``NO_COLOR``, ``TERM=dumb`` and ``--no-color`` turn
colour off.

The client and the session do not receive an :class:`OutputManager`; they
call :func:`get_output` (or the module-level shortcuts such as
:func:`debug`), which returns the instance installed by
:func:`~curlclient.app.main_callback`.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Iterable, Optional

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax

# Content-Type fragment -> Pygments lexer used in RICH mode.
_LEXERS = (
    ("json", "json"),
    ("xml", "xml"),
    ("html", "html"),
    ("javascript", "javascript"),
    ("css", "css"),
    ("yaml", "yaml"),
)

# Status class -> Rich style of the status line.
_STATUS_STYLES = {1: "cyan", 2: "green", 3: "cyan", 4: "yellow", 5: "bold red"}


class OutputFormat(str, Enum):
    """How response bodies are written to stdout.

    ``AUTO`` becomes ``RICH`` on an interactive, colour-capable terminal
    and ``PLAIN`` otherwise.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Routes bodies to stdout and exchange diagnostics to stderr.

    Args:
        format: Body format; ``AUTO`` is resolved at construction.
        no_color: Disable colour and markup on both streams.
        quiet: Hide the status line, headers, and info/success messages.
            Warnings and errors are always shown.
        verbose: Show ``debug`` messages (session lifecycle, option
            rejections, transfer start and result).
        output_file: Write bodies to this path instead of stdout.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
        output_file: Optional[str] = None,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._output_file = output_file

        if format == OutputFormat.AUTO:
            interactive = _is_tty() and not self._no_color
            self._format = OutputFormat.RICH if interactive else OutputFormat.PLAIN
        else:
            self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # ------------------------------------------------------------------ #
    # Payload (stdout)
    # ------------------------------------------------------------------ #

    def format_response(self, data: Any, content_type: str = "application/json") -> None:
        """Write a decoded body (or any JSON-able value) to stdout.

        Args:
            data: Parsed JSON (dict/list/scalar) or body text.
            content_type: The response ``Content-Type``; selects the lexer
                in ``RICH`` mode.
        """
        if self._output_file:
            self._save(_as_text(data), mode="w")
            return
        render = {
            OutputFormat.JSON: self._print_json,
            OutputFormat.PLAIN: self._print_plain,
        }.get(self._format)
        if render is None:
            self._print_rich(data, content_type)
        else:
            render(data)

    def print_data(self, text: str) -> None:
        """Write one line of payload to stdout, or append it to the output file."""
        if self._output_file:
            self._save(text, mode="a")
        else:
            print(text, file=sys.stdout, flush=True)

    # ------------------------------------------------------------------ #
    # Exchange diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def _diag(self, text: str, style: Optional[str] = None, prefix: str = "") -> None:
        """One stderr line; *prefix* is styled, *text* is always literal."""
        if self._no_color:
            sys.stderr.write(f"{prefix}{text}\n")
            sys.stderr.flush()
            return
        head = f"[{style}]{escape(prefix)}[/{style}]" if style and prefix else escape(prefix)
        body = escape(text)
        if style and not prefix:
            body = f"[{style}]{body}[/{style}]"
        self._stderr.print(head + body, highlight=False)

    def status_line(self, status_code: int, reason_phrase: str = "") -> None:
        """Print ``HTTP <code> <reason>``, coloured by status class."""
        if not self._quiet:
            line = f"HTTP {status_code} {reason_phrase}".rstrip()
            self._diag(line, _STATUS_STYLES.get(status_code // 100, "bold"))

    def headers(self, items: Iterable[tuple[str, str]]) -> None:
        """Print response header pairs, one ``Name: value`` per line."""
        if self._quiet:
            return
        for name, value in items:
            self._diag(value, "bold", prefix=f"{name}: ")

    def info(self, message: str) -> None:
        """Informational line on stderr; hidden by ``--quiet``."""
        if not self._quiet:
            self._diag(message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._diag(message, "green")

    def warning(self, message: str) -> None:
        """Warning on stderr; shown even with ``--quiet``."""
        self._diag(message, "yellow", prefix="Warning: ")

    def error(self, message: str) -> None:
        """Error on stderr; never suppressed."""
        self._diag(message, "bold red", prefix="Error: ")

    def debug(self, message: str) -> None:
        """Trace line on stderr, prefixed ``[debug]``; only with ``--verbose``."""
        if self._verbose:
            self._diag(message, "dim", prefix="[debug] ")

    # ------------------------------------------------------------------ #
    # Renderers
    # ------------------------------------------------------------------ #

    def _print_json(self, data: Any) -> None:
        if isinstance(data, str):
            try:
                data = json.loads(data)
            except ValueError:
                self.print_data(data)
                return
        self.print_data(_dump_json(data))

    def _print_plain(self, data: Any) -> None:
        """Tab-separated rows for dicts and lists of dicts, ``str()`` otherwise."""
        if isinstance(data, dict):
            rows = [f"{key}\t{value}" for key, value in data.items()]
        elif isinstance(data, list):
            rows = [
                "\t".join(map(str, row.values())) if isinstance(row, dict) else str(row)
                for row in data
            ]
        else:
            rows = [str(data)]
        for row in rows:
            self.print_data(row)

    def _print_rich(self, data: Any, content_type: str) -> None:
        lexer = "json" if isinstance(data, (dict, list)) else _lexer_for(content_type)
        text = _as_text(data)
        if lexer is None:
            self._stdout.print(text, markup=False, highlight=False)
        else:
            self._stdout.print(Syntax(text, lexer, theme="monokai", word_wrap=True))

    def _save(self, text: str, mode: str) -> None:
        assert self._output_file is not None
        with open(self._output_file, mode, encoding="utf-8") as fh:
            fh.write(text if text.endswith("\n") else text + "\n")


def _dump_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def _as_text(data: Any) -> str:
    return _dump_json(data) if isinstance(data, (dict, list)) else str(data)


def _lexer_for(content_type: str) -> Optional[str]:
    """Return the lexer for a ``Content-Type``, or ``None`` for unhighlighted text."""
    media_type = content_type.split(";", 1)[0].strip().lower()
    for fragment, lexer in _LEXERS:
        if fragment in media_type:
            return lexer
    return None


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# ------------------------------------------------------------------ #
# Process-wide instance
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed instance (tests call this between cases)."""
    global _output
    _output = None


def format_response(data: Any, content_type: str = "application/json") -> None:
    get_output().format_response(data, content_type)


def print_data(text: str) -> None:
    get_output().print_data(text)


def info(message: str) -> None:
    get_output().info(message)


def error(message: str) -> None:
    get_output().error(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def debug(message: str) -> None:
    get_output().debug(message)
