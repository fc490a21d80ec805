"""Root CLI group for melange with global flags and command registration."""

from __future__ import annotations

import click

from melange import __version__
from melange.commands import register_commands
from melange.commands._context import AppContext
from melange.config.logging import configure_logging
from melange.config.settings import resolve_settings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="melange")
@click.option(
    "-c",
    "--config-dir",
    default=None,
    help="Config directory (or http(s) dev-server URL). "
    "Defaults to $XDG_CONFIG_HOME/informant.",
)
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging and request timing.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.pass_context
def cli(
    ctx: click.Context,
    config_dir: str | None,
    json_output: bool,
    verbose: bool,
    log_json: bool,
) -> None:
    """melange — session overlay request router."""
    configure_logging(verbose=verbose, log_json=log_json)
    settings = resolve_settings(
        config_dir,
        json_output=json_output,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
