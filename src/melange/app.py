"""Melange — the collaborator surface handed to the UI layer.

Composes the resolved settings and the router.  The UI layer (window,
webview, event loop) lives outside this package and calls in through
:meth:`Melange.route`, :meth:`Melange.on_key_event` and
:attr:`Melange.entry_url`.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

from melange.config.keymap import Modifiers
from melange.config.settings import ConfigError, MelangeSettings, resolve_settings
from melange.services.response import Response
from melange.services.router import SCHEME_PREFIX, Router


class Melange:
    """Settings plus router, constructed once at startup."""

    def __init__(self, settings: MelangeSettings) -> None:
        self.settings = settings
        self.router = Router(settings)

    @classmethod
    def from_config_dir(cls, config_dir: str | Path | None = None, **overrides: Any) -> Melange:
        """Resolve settings for *config_dir*; raises :class:`ConfigError` on bad config."""
        return cls(resolve_settings(config_dir, **overrides))

    @property
    def entry_url(self) -> str:
        """The URL the webview should load first.

        Dev-server mode only applies when ``debug.allow_dev_server`` is set,
        so a production config can never be pointed at a remote host by a
        stray argument.
        """
        if self.settings.dev_server_url:
            if not self.settings.debug.allow_dev_server:
                msg = (
                    f"Dev server {self.settings.dev_server_url} requested but "
                    "debug.allow_dev_server is disabled"
                )
                raise ConfigError(msg)
            return self.settings.dev_server_url
        return f"{SCHEME_PREFIX}{self.settings.base_directory}/index.html"

    def route(self, uri: str) -> Response:
        return self.router.route(uri)

    def on_key_event(
        self, key: str, mods: Modifiers | Iterable[Modifiers] = Modifiers.NONE
    ) -> str | None:
        """Command name bound to a keypress, or None. Pure lookup."""
        return self.settings.bindings.lookup(key, mods)
