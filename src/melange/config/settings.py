"""Unified settings — CLI flags, env vars, and the informant config file in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags / explicit overrides
  2. Env vars     — ``INFORMANT_*`` prefix, ``__`` for nested fields
  3. Config file  — ``informant.{toml,yaml,yml,json}`` in the config dir
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`FileSettingsSource` that
reuses :func:`melange.config.discovery.find_config` to locate the file.
Resolution either yields a complete frozen :class:`MelangeSettings` or
raises :class:`ConfigError`; there is no partially applied state.
"""

from __future__ import annotations

import logging
import threading
from functools import cached_property
from pathlib import Path
from typing import Any

import click
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    SettingsError,
)

from melange.config.discovery import ConfigFileError, default_config_dir, find_config, load_document
from melange.config.keymap import Keymap
from melange.config.models import (
    AnimConfig,
    ButtonConfig,
    DebugConfig,
    FontConfig,
    KeymapEntry,
    RouterConfig,
    WindowConfig,
)

logger = logging.getLogger(__name__)

DEV_SERVER_PREFIXES = ("http://", "https://")


class ConfigError(click.ClickException):
    """The settings source is malformed; startup cannot continue."""


class FileSettingsSource(PydanticBaseSettingsSource):
    """Read settings from the discovered informant config file."""

    def __init__(self, settings_cls: type[BaseSettings], config_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if config_path and config_path.is_file():
            try:
                self._data = load_document(config_path)
            except ConfigFileError as exc:
                raise ConfigError(str(exc)) from exc
            except OSError as exc:
                msg = f"Cannot read config {config_path}: {exc}"
                raise ConfigError(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full file data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for the config path during construction.
_tls = threading.local()


class MelangeSettings(BaseSettings):
    """Resolved, immutable settings for one process lifetime.

    Attributes:
        base_directory: Confinement root for file requests (absolute, not
            symlink-resolved).
        dev_server_url: Set when started against an ``http(s)`` dev server.
        config_path: The config file that was loaded, or None.
        commands: Named commands. A list is an argv run as-is; a string is
            run through :attr:`shell` with ``-c``.
        keymap: Raw ``[[keymap]]`` entries in declaration order.  Use
            :attr:`bindings` for lookups.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        env_prefix="INFORMANT_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # --- Resolved paths (not in the file — derived from the config dir) ---
    base_directory: Path
    dev_server_url: str | None = None
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- Config file ---
    fullscreen: bool = True
    shell: str = "sh"
    anim: AnimConfig = Field(default_factory=AnimConfig)
    font: FontConfig = Field(default_factory=FontConfig)
    buttons: tuple[ButtonConfig, ...] = Field(default_factory=lambda: (ButtonConfig(),))
    window: WindowConfig = Field(default_factory=WindowConfig)
    debug: DebugConfig = Field(default_factory=DebugConfig)
    router: RouterConfig = Field(default_factory=RouterConfig)
    commands: dict[str, tuple[str, ...] | str] = Field(default_factory=dict)
    keymap: tuple[KeymapEntry, ...] = ()

    @field_validator("commands")
    @classmethod
    def _commands_not_empty(
        cls, value: dict[str, tuple[str, ...] | str]
    ) -> dict[str, tuple[str, ...] | str]:
        for name, argv in value.items():
            if isinstance(argv, str):
                if not argv.strip():
                    msg = f"command {name!r} is an empty string"
                    raise ValueError(msg)
            elif not argv or not argv[0]:
                msg = f"command {name!r} needs at least a program name"
                raise ValueError(msg)
        return value

    @field_validator("shell")
    @classmethod
    def _shell_not_blank(cls, value: str) -> str:
        if not value.strip():
            msg = "shell must not be empty"
            raise ValueError(msg)
        return value

    @cached_property
    def bindings(self) -> Keymap:
        """Keybinding table built from :attr:`keymap`."""
        return Keymap.from_entries(self.keymap)

    def command_argv(self, name: str) -> list[str] | None:
        """Return the argv for the named command, or None if it is not configured."""
        value = self.commands.get(name)
        if value is None:
            return None
        if isinstance(value, str):
            return [self.shell, "-c", value]
        return list(value)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the config file source between env vars and defaults."""
        config_path = getattr(_tls, "config_path", None)
        return (
            init_settings,
            env_settings,
            FileSettingsSource(settings_cls, config_path),
        )


def resolve_settings(config_dir: str | Path | None = None, **overrides: Any) -> MelangeSettings:
    """Resolve settings for a config directory.

    *config_dir* defaults to ``${XDG_CONFIG_HOME:-$HOME/.config}/informant``.
    An ``http(s)://`` value selects dev-server mode: the URL is recorded in
    ``dev_server_url`` and the default directory stays the confinement root.
    Keyword *overrides* take priority over every other source.

    Raises:
        ConfigError: The config file is unreadable or invalid, a value fails
            validation, or no config directory can be determined.
    """
    dev_server_url: str | None = None
    base: Path | None
    if isinstance(config_dir, str) and config_dir.startswith(DEV_SERVER_PREFIXES):
        dev_server_url = config_dir
        base = default_config_dir()
    elif config_dir is not None:
        base = Path(config_dir).expanduser()
    else:
        base = default_config_dir()

    if base is None:
        msg = "Cannot locate a config directory: neither $XDG_CONFIG_HOME nor $HOME is set"
        raise ConfigError(msg)
    base = base.absolute()

    config_path = find_config(base)
    _tls.config_path = config_path
    try:
        settings = MelangeSettings(
            base_directory=base,
            dev_server_url=dev_server_url,
            config_path=config_path,
            **overrides,
        )
    except ValidationError as exc:
        source = config_path or "defaults/environment"
        msg = f"Invalid settings ({source}):\n{exc}"
        raise ConfigError(msg) from exc
    except SettingsError as exc:
        # Raised while reading a source, e.g. malformed JSON in INFORMANT_COMMANDS.
        msg = f"Invalid settings: {exc}"
        raise ConfigError(msg) from exc
    finally:
        _tls.config_path = None

    logger.debug(
        "Resolved settings: base=%s config=%s commands=%d bindings=%d",
        settings.base_directory,
        config_path,
        len(settings.commands),
        len(settings.bindings),
    )
    return settings
