"""Subcommand modules for melange.

Provides register_commands() which uses deferred imports to keep
``melange --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all commands on the root CLI group."""
    from melange.commands.config_cmd import config_cmd
    from melange.commands.keys import keys
    from melange.commands.route import route
    from melange.commands.url import url

    cli.add_command(config_cmd)
    cli.add_command(keys)
    cli.add_command(route)
    cli.add_command(url)
