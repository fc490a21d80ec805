"""Pydantic configuration models with code-baked defaults.

Sparse config contract: defaults baked here, the ``informant`` file only
contains overrides.  An empty (or absent) file yields a working overlay
with one placeholder button and no commands.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import AliasChoices, BaseModel, Field, field_validator

from melange.config.keymap import Modifiers, parse_modifier


class FullscreenType(StrEnum):
    """How the overlay window occupies the screen."""

    WINDOWED = "Windowed"
    BORDERLESS = "Borderless"
    FULL = "Full"


# --- informant sections ---


class AnimConfig(BaseModel):
    """[anim] section."""

    model_config = {"frozen": True}

    duration: float = 1.0
    delay: float = 0.2


class FontConfig(BaseModel):
    """[font] section."""

    model_config = {"frozen": True}

    family: str = "sans"
    style: str | None = None
    size: float = 24.0


class ButtonConfig(BaseModel):
    """[[buttons]] entry."""

    model_config = {"frozen": True}

    label: str = "I'm a Button! :D"
    command: str = ""
    thickness: float = 1.5


class WindowConfig(BaseModel):
    """[window] section — read only by the UI layer."""

    model_config = {"frozen": True}

    title: str = "melange"
    decorated: bool = False
    always_on_top: bool = True
    transparent: bool = True
    mode: FullscreenType = FullscreenType.FULL
    size: tuple[int, int] | None = None
    position: tuple[int, int] | None = None


class DebugConfig(BaseModel):
    """[debug] section."""

    model_config = {"frozen": True}

    devtools: bool = False
    allow_dev_server: bool = False


class RouterConfig(BaseModel):
    """[router] section.

    Attributes:
        command_timeout: Seconds before a running command is killed.
            ``None`` waits indefinitely.
        strict_exit_status: Report a non-zero exit as a failed response
            instead of passing stdout through with status 200.
    """

    model_config = {"frozen": True}

    command_timeout: float | None = Field(default=None, gt=0)
    strict_exit_status: bool = False


class KeymapEntry(BaseModel):
    """[[keymap]] entry: a key plus zero or more modifiers bound to a command name.

    The modifier list may be spelled ``mods`` or ``modifiers``.  Unknown keys
    are rejected so a misspelled modifier list cannot silently bind the bare key.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    key: str
    mods: tuple[Modifiers, ...] = Field(
        default=(), validation_alias=AliasChoices("mods", "modifiers")
    )
    command: str = ""

    @field_validator("key")
    @classmethod
    def _key_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            msg = "keymap key must not be empty"
            raise ValueError(msg)
        return value

    @field_validator("mods", mode="before")
    @classmethod
    def _parse_mods(cls, value: object) -> object:
        if isinstance(value, str):
            value = [value]
        if isinstance(value, (list, tuple)):
            return tuple(parse_modifier(m) for m in value)
        return value
