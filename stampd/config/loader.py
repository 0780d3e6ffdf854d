"""Config file loading and merging over the default configuration."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml

from stampd.config.errors import ConfigFileError
from stampd.config.schema import FILE_OPTIONS, OptionSpec, ResolvedConfig, parse_int


_ENV_TOKEN_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-(.*?))?\}")
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}
_KIND_NAMES = {"bool": "boolean", "int": "integer", "str": "string"}


def load_file_values(path: Path) -> dict[str, Any]:
    """Read the YAML mapping at ``path``.

    Scalars are loaded as text (``yaml.BaseLoader``) and typed per option by
    ``merge_config_file``, so values such as ``off`` or ``0777`` reach string
    options unchanged.

    ``FileNotFoundError`` propagates untouched so callers can treat a missing
    file as optional; every other problem becomes ``ConfigFileError``.
    """
    try:
        with path.open("r", encoding="utf-8") as handle:
            raw = yaml.load(handle, Loader=yaml.BaseLoader)
    except FileNotFoundError:
        raise
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigFileError(f"error reading config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigFileError(f"error parsing config file {path}: {exc}") from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigFileError(f"error parsing config file {path}: top level must be a mapping")
    try:
        return _interpolate_env(raw)
    except ValueError as exc:
        raise ConfigFileError(f"error parsing config file {path}: {exc}") from exc


def merge_config_file(cfg: ResolvedConfig, path: Path) -> FileNotFoundError | None:
    """Overlay the config file at ``path`` onto ``cfg``.

    Returns the ``FileNotFoundError`` when the file is absent so the caller can
    report it once resolution has succeeded.
    """
    try:
        values = load_file_values(path)
    except FileNotFoundError as exc:
        return exc
    for key, raw in values.items():
        option = FILE_OPTIONS.get(str(key))
        if option is None:
            raise ConfigFileError(f"error parsing config file {path}: unknown option '{key}'")
        try:
            value = _coerce_value(option, raw)
        except ValueError as exc:
            raise ConfigFileError(f"error parsing config file {path}: {exc}") from exc
        setattr(cfg, option.attr, value)
    return None


def _coerce_value(option: OptionSpec, raw: Any) -> Any:
    if option.kind == "list":
        if raw == "":
            return []
        if isinstance(raw, str):
            return [raw]
        if not isinstance(raw, list):
            raise ValueError(f"'{option.name}' must be a list")
        if any(not isinstance(item, str) for item in raw):
            raise ValueError(f"'{option.name}' entries must be scalar values")
        return list(raw)
    if not isinstance(raw, str):
        raise ValueError(f"'{option.name}' must be a {_KIND_NAMES[option.kind]}")
    if option.kind == "bool":
        normalized = raw.strip().lower()
        if normalized in _TRUE_VALUES:
            return True
        if normalized in _FALSE_VALUES:
            return False
        raise ValueError(f"'{option.name}' must be a boolean")
    if option.kind == "int":
        try:
            return parse_int(raw)
        except ValueError:
            raise ValueError(f"'{option.name}' must be an integer") from None
    return raw


def _interpolate_env(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _interpolate_env(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    if isinstance(value, str):
        return _interpolate_string(value)
    return value


def _interpolate_string(value: str) -> str:
    if "${" not in value:
        return value

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        default = match.group(2)
        resolved = os.environ.get(name)
        if resolved is not None:
            return resolved
        if default is not None:
            return default
        token = match.group(0)
        raise ValueError(f"missing required environment variable '{name}' referenced by '{token}'")

    return _ENV_TOKEN_RE.sub(_replace, value)
