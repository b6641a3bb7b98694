"""The ``curlclient`` command line.

Sub-commands:

* ``request URL`` -- send one request through
  :class:`~curlclient.client.CurlClient` and print the response.
* ``version`` -- package and libcurl binding versions.
* ``config show|set|reset`` -- manage the user config file.

The root callback installs the process-wide
:class:`~curlclient.output.OutputManager`.  The body format comes from
``--json``/``--plain`` when given, otherwise from ``output.format`` in the
resolved configuration.

:func:`main` is the console-script entry point.  A
:class:`~curlclient.exceptions.CurlClientError` escaping a command exits
with that error's ``exit_code``; any other exception leaves a traceback in
the data directory and exits with ``1``.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import typer

from curlclient import __version__
from curlclient.exit_codes import EXIT_GENERIC_FAILURE
from curlclient.output import OutputFormat

_EXIT_INTERRUPTED = 130

app = typer.Typer(
    name="curlclient",
    help="Send HTTP requests through a reusable libcurl session.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"curlclient {__version__}")
        raise typer.Exit()


def _configured_format() -> OutputFormat:
    """``output.format`` from the resolved config, ``AUTO`` if it cannot be read.

    An unreadable config is reported by the command that needs it.
    """
    from curlclient.config import resolve_config
    from curlclient.exceptions import CurlClientError

    try:
        return OutputFormat(resolve_config().output.format)
    except (CurlClientError, ValueError):
        return OutputFormat.AUTO


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_print_version,
        is_eager=True,
        help="Print the curlclient version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="Print bodies as JSON."),
    plain_output: bool = typer.Option(False, "--plain", help="Print bodies verbatim."),
    no_color: bool = typer.Option(False, "--no-color", help="Never use colour."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Hide the status line and headers."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Trace the cURL session on stderr."
    ),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Save the response body to this file."
    ),
) -> None:
    """Install the output manager shared by every sub-command."""
    from curlclient.output import OutputManager, set_output

    if json_output:
        body_format = OutputFormat.JSON
    elif plain_output:
        body_format = OutputFormat.PLAIN
    else:
        body_format = _configured_format()

    set_output(
        OutputManager(
            format=body_format,
            no_color=no_color,
            quiet=quiet,
            verbose=verbose,
            output_file=output_file,
        )
    )
    ctx.obj = {"verbose": verbose, "format": body_format}


@app.command("version")
def version_command() -> None:
    """Show the curlclient and libcurl binding versions."""
    from curlclient.output import format_response
    from curlclient.transport import TransportSession

    format_response(
        {
            "curlclient": __version__,
            "engine": TransportSession.version() or "unavailable",
        }
    )


# ------------------------------------------------------------------ #
# Sub-command registration
# ------------------------------------------------------------------ #

from curlclient.commands.config import config_app  # noqa: E402
from curlclient.commands.request import request_command  # noqa: E402

app.command("request")(request_command)
app.add_typer(config_app, name="config", help="Show or change saved settings.")


# ------------------------------------------------------------------ #
# Entry point
# ------------------------------------------------------------------ #


def _on_sigint(signum: int, frame: Any) -> None:  # noqa: ANN401
    sys.stderr.write("\nCancelled.\n")
    sys.exit(_EXIT_INTERRUPTED)


def _setup_signal_handlers() -> None:
    signal.signal(signal.SIGINT, _on_sigint)


def _write_crash_log() -> Path:
    """Save the traceback being handled to ``<data dir>/crash-<timestamp>.log``."""
    from curlclient.config import get_data_dir

    stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    path = get_data_dir() / f"crash-{stamp}.log"
    path.write_text(traceback.format_exc(), encoding="utf-8")
    return path


def main() -> None:
    """Console-script entry point; always ends in ``SystemExit``."""
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(_EXIT_INTERRUPTED)
    except Exception as exc:
        from curlclient.exceptions import CurlClientError
        from curlclient.output import error

        if isinstance(exc, CurlClientError):
            error(str(exc))
            sys.exit(exc.exit_code)
        error(f"Unexpected error. Traceback saved to {_write_crash_log()}")
        sys.exit(EXIT_GENERIC_FAILURE)
