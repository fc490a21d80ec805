"""route — resolve one request URI the way the UI layer would."""

from __future__ import annotations

import click

from melange.commands._context import AppContext
from melange.commands._options import examples_option


@click.command()
@examples_option("""\
  # Run the command configured as "lock"
  melange route melange://lock

  # Fetch a page from the config directory
  melange route melange://$HOME/.config/informant/index.html

  # Inspect status, headers and timing
  melange --json -v route melange://suspend""")
@click.argument("uri")
@click.pass_obj
def route(app: AppContext, uri: str) -> None:
    """Route URI to a file under the base directory or a named command."""
    app.emit_response(app.app.route(uri))
