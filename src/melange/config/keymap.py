"""Keybinding table: (key, modifier set) -> command name.

Modifiers form a set, not a sequence.  Each entry's modifier list is folded
into a single :class:`Modifiers` flag with bitwise OR, so ``[CTRL, SHIFT]``,
``[SHIFT, CTRL]`` and ``[CTRL, SHIFT, CTRL]`` all index the same binding.
Duplicate ``(key, mods)`` pairs resolve last-write-wins in declaration order.
"""

from __future__ import annotations

import functools
import logging
import operator
from collections.abc import Iterable, Iterator, Mapping
from enum import IntFlag
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from melange.config.models import KeymapEntry

logger = logging.getLogger(__name__)


class Modifiers(IntFlag):
    """Keyboard modifier flags."""

    NONE = 0
    SHIFT = 1
    CTRL = 2
    ALT = 4
    HYPER = 8


# Config spellings accepted in addition to the member names.
MODIFIER_ALIASES: dict[str, Modifiers] = {
    "CONTROL": Modifiers.CTRL,
    "META": Modifiers.HYPER,
    "LOGO": Modifiers.HYPER,
    "SUPER": Modifiers.HYPER,
}


def parse_modifier(value: object) -> Modifiers:
    """Coerce a config value (name or int flag) into a :class:`Modifiers` member."""
    if isinstance(value, Modifiers):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return Modifiers(value)
    if isinstance(value, str):
        name = value.strip().upper()
        if name in Modifiers.__members__:
            return Modifiers[name]
        if name in MODIFIER_ALIASES:
            return MODIFIER_ALIASES[name]
    msg = f"Unknown modifier: {value!r}"
    raise ValueError(msg)


def fold_modifiers(mods: Iterable[Modifiers]) -> Modifiers:
    """Merge a modifier list into one set. The empty list folds to ``NONE``."""
    return functools.reduce(operator.or_, mods, Modifiers.NONE)


class Input(NamedTuple):
    """Lookup key for a binding."""

    key: str
    mods: Modifiers


class Keymap(Mapping[Input, str]):
    """Read-only binding table built once from config entries."""

    def __init__(self, bindings: Mapping[Input, str] | None = None) -> None:
        self._bindings: dict[Input, str] = dict(bindings or {})

    @classmethod
    def from_entries(cls, entries: Iterable[KeymapEntry]) -> Keymap:
        """Build the table from raw ``[[keymap]]`` entries."""
        table: dict[Input, str] = {}
        for entry in entries:
            binding = Input(entry.key, fold_modifiers(entry.mods))
            if binding in table and table[binding] != entry.command:
                logger.debug(
                    "Keymap entry %s+%s rebinds %r to %r",
                    binding.key,
                    binding.mods.name,
                    table[binding],
                    entry.command,
                )
            table[binding] = entry.command
        return cls(table)

    def lookup(
        self, key: str, mods: Modifiers | Iterable[Modifiers] = Modifiers.NONE
    ) -> str | None:
        """Return the command bound to *key* + *mods*, or None.

        *mods* may be a folded flag or any iterable of flags.  Blank command
        names count as "no binding".
        """
        if not isinstance(mods, Modifiers):
            mods = fold_modifiers(mods)
        command = self._bindings.get(Input(key, mods))
        return command or None

    def __getitem__(self, item: Input) -> str:
        return self._bindings[item]

    def __iter__(self) -> Iterator[Input]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def __repr__(self) -> str:
        return f"Keymap({self._bindings!r})"
