from __future__ import annotations

import json
from typing import Any

from result import Err, Ok, Result

from dirsize.config.defaults import default_config
from dirsize.config.schema import AppConfig
from dirsize.services.fs import DEFAULT_FS, FileSystem

CONFIG_PATH = "~/.config/dirsize/config.json"


def _read_payload(resolved: str, fs: FileSystem) -> Result[dict[str, Any], str]:
    try:
        text = fs.read_text(resolved)
    except OSError as exc:
        return Err(f"Failed reading config at {resolved}: {exc.strerror or exc}.")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        return Err(f"Failed reading config at {resolved}: invalid JSON ({exc.msg}, line {exc.lineno}).")
    if not isinstance(payload, dict):
        return Err(f"Config at {resolved} must be a JSON object.")
    return Ok(payload)


def load_config(path: str | None = None, fs: FileSystem = DEFAULT_FS) -> Result[AppConfig, str]:
    """Load the JSON config, falling back to defaults when no file exists.

    ``Err`` carries a one-line message for the CLI to show as a warning.
    """
    resolved = fs.expanduser(path or CONFIG_PATH)
    if not fs.exists(resolved):
        return Ok(default_config())

    payload = _read_payload(resolved, fs)
    if isinstance(payload, Err):
        return payload
    try:
        return Ok(AppConfig.from_dict(payload.unwrap(), default_config()))
    except (TypeError, ValueError) as exc:
        return Err(f"Invalid value in config at {resolved}: {exc}.")


def sample_config_json() -> str:
    return json.dumps(default_config().to_dict(), indent=2, sort_keys=True)
