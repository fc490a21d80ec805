"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  The :class:`Melange` facade is built lazily so
``--help`` never spawns anything.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from melange.output.formatters import format_response_json, format_response_summary

if TYPE_CHECKING:
    from melange.app import Melange
    from melange.config.settings import MelangeSettings
    from melange.services.response import Response


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: MelangeSettings) -> None:
        self.settings = settings
        self._app: Melange | None = None

        from melange.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from melange.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def app(self) -> Melange:
        """The Melange facade (created lazily on first access)."""
        if self._app is None:
            from melange.app import Melange

            self._app = Melange(self.settings)
        return self._app

    def emit_response(self, response: Response) -> None:
        """Write a routed response with correct exit semantics.

        * ``--json``: the whole response (body base64) goes to stdout.
        * Otherwise the raw body goes to stdout and a status line to stderr.
        * Non-2xx status exits with code 1 after writing.
        """
        if self.settings.json_output:
            click.echo(format_response_json(response))
        else:
            if response.body:
                click.echo(response.body, nl=False)
            click.echo(format_response_summary(response), err=True)
        if not response.ok:
            raise SystemExit(1)
