"""Config directory discovery and format-agnostic file loading.

The config directory defaults to ``${XDG_CONFIG_HOME:-$HOME/.config}/informant``.
Inside it, the first of ``informant.toml``, ``informant.yaml``,
``informant.yml`` or ``informant.json`` wins.  Failing that, a sibling file
next to the directory is used (``~/.config/informant.toml``).  The
``INFORMANT_CONFIG`` env var names a file explicitly.
"""

from __future__ import annotations

import json
import os
import tomllib
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

APP_NAME = "informant"
CONFIG_ENV_VAR = "INFORMANT_CONFIG"
CONFIG_SUFFIXES: tuple[str, ...] = (".toml", ".yaml", ".yml", ".json")


class ConfigFileError(ValueError):
    """A config file exists but cannot be parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Invalid config in {path}: {reason}")
        self.path = path
        self.reason = reason


def default_config_dir() -> Path | None:
    """Return ``$XDG_CONFIG_HOME/informant`` or ``$HOME/.config/informant``.

    Returns None when neither variable is set.
    """
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    home = os.environ.get("HOME")
    if home:
        return Path(home) / ".config" / APP_NAME
    return None


def find_config(config_dir: Path | None) -> Path | None:
    """Locate the config file for *config_dir*.

    Checks ``INFORMANT_CONFIG`` first, then ``informant.<ext>`` inside the
    directory, then ``<config_dir>.<ext>`` beside it.  Returns None if
    nothing is found.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path).expanduser()
        if p.is_file():
            return p
        return None

    if config_dir is None:
        return None
    candidates = [config_dir / f"{APP_NAME}{suffix}" for suffix in CONFIG_SUFFIXES]
    candidates += [config_dir.parent / f"{config_dir.name}{suffix}" for suffix in CONFIG_SUFFIXES]
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def load_document(path: Path) -> dict[str, Any]:
    """Parse *path* into a plain dict, picking the parser from the suffix.

    Files without a recognised suffix are read as TOML.  Raises
    :class:`ConfigFileError` on syntax errors or a non-table top level.
    """
    raw = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    try:
        if suffix in (".yaml", ".yml"):
            data = YAML(typ="safe").load(raw)
        elif suffix == ".json":
            data = json.loads(raw) if raw.strip() else {}
        else:
            data = tomllib.loads(raw)
    except (tomllib.TOMLDecodeError, json.JSONDecodeError, YAMLError) as exc:
        raise ConfigFileError(path, str(exc)) from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFileError(path, f"top level must be a table, got {type(data).__name__}")
    return data
