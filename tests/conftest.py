"""Shared pytest fixtures and test helpers for melange tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from melange.config.logging import LOGGER_LEVELS
from melange.config.settings import MelangeSettings, resolve_settings
from melange.services.telemetry import disable_telemetry


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Strip ``INFORMANT_*`` vars and point XDG_CONFIG_HOME at a temp dir.

    Keeps the developer's real ``~/.config/informant`` out of every test.
    """
    for name in list(os.environ):
        if name.upper().startswith("INFORMANT_"):
            monkeypatch.delenv(name, raising=False)
    xdg = tmp_path / "xdg"
    xdg.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg))


@pytest.fixture(autouse=True)
def _restore_global_state() -> Generator[None]:
    """Undo logging and telemetry changes made by the CLI under test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    levels = {name: logging.getLogger(name).level for name in LOGGER_LEVELS}
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    for name, level in levels.items():
        logging.getLogger(name).setLevel(level)
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Empty config directory (the confinement root)."""
    path = tmp_path / "informant"
    path.mkdir()
    return path


def write_config(config_dir: Path, body: str, *, name: str = "informant.toml") -> Path:
    """Write a config file into *config_dir* and return its path."""
    path = config_dir / name
    path.write_text(body, encoding="utf-8")
    return path


SAMPLE_CONFIG = """\
shell = "sh"

[commands]
hello = ["printf", "hello"]
greet = "printf 'hi from %s' sh"
fail = ["sh", "-c", "printf partial; exit 3"]

[[keymap]]
key = "Escape"
mods = []

[[keymap]]
key = "l"
mods = ["CTRL", "ALT"]
command = "hello"
"""


@pytest.fixture
def settings(config_dir: Path) -> MelangeSettings:
    """Settings resolved from :data:`SAMPLE_CONFIG` in a temp config dir."""
    write_config(config_dir, SAMPLE_CONFIG)
    (config_dir / "index.html").write_text("<h1>bye</h1>", encoding="utf-8")
    return resolve_settings(config_dir)
