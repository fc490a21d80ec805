"""config — show the resolved settings."""

from __future__ import annotations

import click

from melange.commands._context import AppContext
from melange.commands._options import examples_option
from melange.output.formatters import format_settings


@click.command("config")
@examples_option("""\
  # Show effective settings after file + env merging
  melange config

  # Same, as JSON
  INFORMANT_SHELL=bash melange --json config""")
@click.pass_obj
def config_cmd(app: AppContext) -> None:
    """Show the resolved settings (defaults, file and env merged)."""
    click.echo(format_settings(app.settings, json_output=app.settings.json_output))
