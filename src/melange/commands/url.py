"""url — print the entry URL the webview should load."""

from __future__ import annotations

import click

from melange.commands._context import AppContext


@click.command()
@click.pass_obj
def url(app: AppContext) -> None:
    """Print the entry URL (melange:// index page or the dev server)."""
    click.echo(app.app.entry_url)
