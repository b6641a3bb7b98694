"""Persistent client settings: where they live and how layers combine.

* **Location** -- ``$XDG_CONFIG_HOME/curlclient/config.json`` on Linux and
  the BSDs (``~/.config`` when unset), ``~/.curlclient/config.json`` on
  macOS and Windows.  Crash logs go to the matching data directory.
* **Layers** -- :func:`resolve_config` builds one
  :class:`~curlclient.models.GlobalConfig` from, lowest to highest:
  model defaults, the user file, ``./curlclient.json`` in the working
  directory, ``CURLCLIENT_*`` environment variables, and command-line
  flags.
* **Writes** -- :func:`save_global_config` goes through
  :func:`_atomic_write`, so an interrupted save never leaves a truncated
  file behind.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from curlclient.exceptions import ConfigError
from curlclient.models import GlobalConfig

_APP_NAME = "curlclient"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "curlclient.json"

# Environment variable -> ClientConfig field.
_ENV_OVERRIDES = {
    "CURLCLIENT_TIMEOUT": "timeout",
    "CURLCLIENT_CONNECT_TIMEOUT": "connect_timeout",
    "CURLCLIENT_VERIFY_SSL": "verify_ssl",
    "CURLCLIENT_USER_AGENT": "user_agent",
    "CURLCLIENT_DEFAULT_CONTENT_TYPE": "default_content_type",
}

_TRUTHY = ("true", "1", "yes")

# Optional text settings, and the words that clear them from env or flags.
_CLEARABLE = ("default_content_type", "user_agent")
_NONE_WORDS = ("none", "null")


# --- Directories ---


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(xdg_var: str, *home_default: str) -> Path:
    """``$<xdg_var>/curlclient``, or ``~/<home_default...>/curlclient`` when unset."""
    root = os.environ.get(xdg_var) or str(Path.home().joinpath(*home_default))
    return Path(root) / _APP_NAME


def get_config_dir() -> Path:
    """Directory holding ``config.json``; created on first use."""
    if _is_xdg_platform():
        path = _app_dir("XDG_CONFIG_HOME", ".config")
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Directory for crash logs; created on first use."""
    if _is_xdg_platform():
        path = _app_dir("XDG_DATA_HOME", ".local", "share")
    else:
        path = Path.home() / f".{_APP_NAME}" / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Writing ---


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* via a sibling temp file and ``os.replace``.

    The temp file is removed if anything fails before the rename.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    )
    try:
        with tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp.name, path)
    except BaseException:
        try:
            os.unlink(tmp.name)
        except OSError:
            pass
        raise


# --- Files ---


def _read_json(path: Path, label: str) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid {label} at {path}: {exc}") from exc


def load_global_config() -> GlobalConfig:
    """Read the user file, or return defaults when there is none.

    Raises:
        ConfigError: If the file is not valid JSON or fails validation.
    """
    path = get_config_dir() / _CONFIG_FILENAME
    if not path.is_file():
        return GlobalConfig()
    data = _read_json(path, "global config")
    try:
        return GlobalConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    path = get_config_dir() / _CONFIG_FILENAME
    _atomic_write(path, json.dumps(config.model_dump(mode="json"), indent=2) + "\n")


def load_project_config() -> Optional[dict[str, Any]]:
    """Read ``./curlclient.json`` (any subset of the user file's shape).

    Returns:
        The parsed object, or ``None`` when the file does not exist.

    Raises:
        ConfigError: If the file is not valid JSON or not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    data = _read_json(path, "project config")
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Layering ---


def _merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Return *base* with *overlay* applied; nested dicts merge key by key."""
    merged = dict(base)
    for key, value in overlay.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _env_client_overrides() -> dict[str, Any]:
    """``ClientConfig`` fields set through ``CURLCLIENT_*``.

    Empty values are skipped; ``none`` clears an optional text setting.
    """
    overrides: dict[str, Any] = {}
    for env_var, field in _ENV_OVERRIDES.items():
        raw = os.environ.get(env_var)
        if not raw:
            continue
        if field == "verify_ssl":
            overrides[field] = raw.lower() in _TRUTHY
        else:
            overrides[field] = _clearable(field, raw)
    return overrides


def _clearable(field: str, value: Any) -> Any:
    """``None`` for ``none``/``null`` given to an optional text setting, else *value*."""
    if field in _CLEARABLE and isinstance(value, str) and value.strip().lower() in _NONE_WORDS:
        return None
    return value


def resolve_config(
    cli_client: Optional[dict[str, Any]] = None,
    cli_format: Optional[str] = None,
) -> GlobalConfig:
    """Combine every configuration layer into the effective settings.

    Args:
        cli_client: ``ClientConfig`` field overrides from flags; ``None``
            values mean "flag not given" and are dropped, while the string
            ``none`` clears an optional text setting.
        cli_format: Output format from ``--json``/``--plain``.

    Raises:
        ConfigError: If a file is invalid or the merged result fails
            validation (e.g. ``CURLCLIENT_TIMEOUT=soon``).
    """
    data = load_global_config().model_dump(mode="json")

    project = load_project_config()
    if project is not None:
        data = _merge(data, project)

    data = _merge(data, {"client": _env_client_overrides()})

    if cli_client:
        flags = {
            key: _clearable(key, value) for key, value in cli_client.items() if value is not None
        }
        data = _merge(data, {"client": flags})
    if cli_format is not None:
        data = _merge(data, {"output": {"format": cli_format}})

    try:
        return GlobalConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
