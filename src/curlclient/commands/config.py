"""``curlclient config`` -- inspect and edit the saved settings.

Only the user file is written; ``./curlclient.json`` and ``CURLCLIENT_*``
variables are read by ``show`` but never modified.
"""

from __future__ import annotations

from typing import Any

import typer

from curlclient.output import error, format_response, info, success

_NULL = "null"
_TRUE_WORDS = ("true", "1", "yes", "on")

config_app = typer.Typer(no_args_is_help=True)


def _fail(message: str) -> typer.Exit:
    error(message)
    return typer.Exit(code=2)


def _coerce(key: str, current: Any, raw: str) -> Any:
    """Convert *raw* to the type of the value it replaces.

    Unset optional settings keep the raw string; validation converts it.
    """
    if raw.lower() == _NULL:
        return None
    if isinstance(current, bool):
        return raw.lower() in _TRUE_WORDS
    if isinstance(current, int):
        try:
            return int(raw)
        except ValueError:
            raise _fail(f"{key} takes a whole number, not {raw!r}") from None
    return raw


@config_app.command("show")
def config_show() -> None:
    """Print the effective settings (files plus environment).

    Example::

        curlclient --json config show
    """
    from curlclient.config import get_config_dir, resolve_config

    effective = resolve_config()
    info(f"Reading settings from {get_config_dir()}")
    format_response(effective.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Dotted setting name, e.g. client.timeout."),
    value: str = typer.Argument(help="New value; 'null' clears an optional setting."),
) -> None:
    """Change one setting in the user file.

    Exits with ``2`` when the key does not exist or the new value does not
    validate; the file is left untouched in both cases.

    Example::

        curlclient config set client.connect_timeout 5
        curlclient config set output.format json
    """
    from curlclient.config import load_global_config, save_global_config
    from curlclient.models import GlobalConfig

    data = load_global_config().model_dump(mode="json")
    *parents, leaf = key.split(".")

    section = data
    for part in parents:
        section = section.get(part)
        if not isinstance(section, dict):
            raise _fail(f"No such setting: {key}")
    if leaf not in section or isinstance(section[leaf], dict):
        raise _fail(f"No such setting: {key}")

    section[leaf] = _coerce(key, section[leaf], value)
    try:
        updated = GlobalConfig.model_validate(data)
    except ValueError as exc:
        raise _fail(f"Rejected value for {key}: {exc}") from None

    save_global_config(updated)
    success(f"{key} = {section[leaf]}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Do not ask first."),
) -> None:
    """Overwrite the user file with the default settings."""
    from curlclient.config import save_global_config
    from curlclient.models import GlobalConfig

    if not force:
        typer.confirm("Discard all saved settings?", abort=True)
    save_global_config(GlobalConfig())
    success("Saved settings restored to defaults.")
