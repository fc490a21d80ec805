"""keys — inspect the keybinding table."""

from __future__ import annotations

import click

from melange.commands._context import AppContext
from melange.commands._options import examples_option, modifiers_option
from melange.config.keymap import Modifiers
from melange.output.formatters import format_keymap


@click.group(invoke_without_command=True)
@examples_option("""\
  # List every binding
  melange keys

  # Which command does Ctrl+Shift+L run?
  melange keys lookup L -m ctrl -m shift""")
@click.pass_context
def keys(ctx: click.Context) -> None:
    """List keybindings (key + modifiers -> command name)."""
    if ctx.invoked_subcommand is None:
        app = ctx.find_object(AppContext)
        assert app is not None
        click.echo(format_keymap(app.settings.bindings, json_output=app.settings.json_output))


@keys.command()
@click.argument("key")
@modifiers_option
@click.pass_obj
def lookup(app: AppContext, key: str, mods: Modifiers) -> None:
    """Print the command bound to KEY, or exit 1 if unbound."""
    command = app.app.on_key_event(key, mods)
    if command is None:
        click.echo(f"No binding for {key}", err=True)
        raise SystemExit(1)
    click.echo(command)
