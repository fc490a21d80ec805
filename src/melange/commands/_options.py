"""Shared option decorators for melange subcommands."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

import click

from melange.config.keymap import MODIFIER_ALIASES, Modifiers, fold_modifiers, parse_modifier

F = TypeVar("F", bound=Callable[..., object])

MODIFIER_NAMES = [
    name.lower() for name in [*Modifiers.__members__, *MODIFIER_ALIASES] if name != "NONE"
]


def examples_option(examples: str) -> Callable[[F], F]:
    """Add an eager ``--examples`` flag that prints *examples* and exits.

    Eager so it wins over missing arguments (``melange route --examples``).
    """

    def show(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    return click.option(
        "--examples",
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=show,
        help="Show usage examples.",
    )


def _fold_mods(_ctx: click.Context, _param: click.Parameter, value: tuple[str, ...]) -> Modifiers:
    return fold_modifiers(parse_modifier(name) for name in value)


def modifiers_option(func: F) -> F:
    """Repeatable ``-m/--mod`` folded into a single :class:`Modifiers` flag."""
    return click.option(
        "-m",
        "--mod",
        "mods",
        multiple=True,
        type=click.Choice(MODIFIER_NAMES, case_sensitive=False),
        callback=_fold_mods,
        help="Modifier held with KEY (repeatable).",
    )(func)
