"""Rich/JSON output helpers for the melange CLI.

Human output renders through a StringIO-backed Rich Console so every
formatter keeps a plain ``-> str`` contract; in non-TTY environments
(tests, pipes) Rich emits no color codes.
"""

from __future__ import annotations

import json as _json
from io import StringIO
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from melange.config.keymap import Keymap
    from melange.config.settings import MelangeSettings
    from melange.services.response import Response


def create_console(*, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(file=StringIO(), highlight=False, width=width or 120)


def get_output(console: Console) -> str:
    assert isinstance(console.file, StringIO)
    return console.file.getvalue().rstrip("\n")


def format_response_summary(response: Response) -> str:
    """One-line status summary (written to stderr alongside a raw body)."""
    if response.error is not None:
        return f"ERROR: {response.status} {response.error.code} — {response.error.message}"
    mime = response.mime_type or "unknown type"
    return f"OK: {response.status} {mime}, {len(response.body)} bytes"


def format_response_json(response: Response) -> str:
    return response.model_dump_json(indent=2)


def format_keymap(keymap: Keymap, *, json_output: bool = False) -> str:
    """Render the binding table, one row per (key, mods) pair."""
    rows = [
        (binding.key, binding.mods.name if binding.mods else "", command)
        for binding, command in keymap.items()
    ]
    if json_output:
        return _json.dumps(
            [{"key": key, "mods": mods, "command": command} for key, mods, command in rows],
            indent=2,
        )
    if not rows:
        return "No keybindings configured."

    table = Table(show_header=True, header_style="bold")
    table.add_column("Key")
    table.add_column("Modifiers", style="dim")
    table.add_column("Command", style="bold cyan")
    for key, mods, command in rows:
        table.add_row(key, mods, command or "-")
    console = create_console()
    console.print(table)
    return get_output(console)


def format_settings(settings: MelangeSettings, *, json_output: bool = False) -> str:
    """Render resolved settings as JSON or a key/value table."""
    data = settings.model_dump(mode="json", exclude={"json_output", "verbose", "log_json"})
    if json_output:
        return _json.dumps(data, indent=2)

    table = Table(show_header=False, box=None)
    table.add_column("Setting", style="dim")
    table.add_column("Value")
    for key, value in data.items():
        if isinstance(value, (dict, list)):
            value = _json.dumps(value, separators=(",", ":"))
        table.add_row(key, str(value))
    console = create_console()
    console.print(table)
    return get_output(console)
