# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import enum
import platform
import typing

import msgspec

from ..device.keyboard_consts import KeyCode

if typing.TYPE_CHECKING:
    from ..device.hwtypes import AnnotatedKeyEvent


class ShortcutModifier(enum.Enum):
    CTRL = "ctrl"
    META = "meta"

    @classmethod
    def for_platform(cls, system: typing.Optional[str] = None):
        if system is None:
            system = platform.system()
        return cls.META if system == "Darwin" else cls.CTRL


class KeyChord(msgspec.Struct, frozen=True):
    """A key plus the exact set of modifiers that must be held with it.

    Matching is exact rather than a subset test: holding a modifier the chord
    doesn't ask for means the chord does not match. Caps Lock is ignored.
    """

    key: KeyCode
    ctrl: bool = False
    meta: bool = False
    shift: bool = False
    alt: bool = False

    @classmethod
    def new(cls, key: KeyCode):
        return cls(key=key)

    def with_ctrl(self):
        return msgspec.structs.replace(self, ctrl=True)

    def with_meta(self):
        return msgspec.structs.replace(self, meta=True)

    def with_shift(self):
        return msgspec.structs.replace(self, shift=True)

    def with_alt(self):
        return msgspec.structs.replace(self, alt=True)

    def with_shortcut(self, modifier: ShortcutModifier):
        match modifier:
            case ShortcutModifier.CTRL:
                return self.with_ctrl()
            case ShortcutModifier.META:
                return self.with_meta()

    def describe(self):
        parts = [
            name
            for name, held in (("Ctrl", self.ctrl), ("Meta", self.meta), ("Shift", self.shift), ("Alt", self.alt))
            if held
        ]
        parts.append(self.key.name.removeprefix("KEY_").capitalize())
        return "+".join(parts)


def matches(chord: KeyChord, event: AnnotatedKeyEvent) -> bool:
    annotation = event.annotation
    return (
        event.key == chord.key
        and annotation.ctrl == chord.ctrl
        and annotation.meta == chord.meta
        and annotation.shift == chord.shift
        and annotation.alt == chord.alt
    )


class Command(enum.Enum):
    BACKSPACE = enum.auto()
    COMMIT = enum.auto()
    NEWLINE = enum.auto()
    TOGGLE_INPUT = enum.auto()
    TOGGLE_LOOKUP = enum.auto()
    PASTE = enum.auto()
    COPY_ALL = enum.auto()


class Keybindings:
    """The fixed chord table, checked in order; the first matching chord wins."""

    bindings: tuple[tuple[KeyChord, Command], ...]

    def __init__(self, shortcut: ShortcutModifier):
        self.shortcut = shortcut
        self.bindings = (
            (KeyChord.new(KeyCode.KEY_BACKSPACE), Command.BACKSPACE),
            (KeyChord.new(KeyCode.KEY_ENTER), Command.COMMIT),
            (KeyChord.new(KeyCode.KEY_ENTER).with_shift(), Command.NEWLINE),
            (KeyChord.new(KeyCode.KEY_I).with_shortcut(shortcut).with_shift(), Command.TOGGLE_INPUT),
            (KeyChord.new(KeyCode.KEY_L).with_shortcut(shortcut).with_shift(), Command.TOGGLE_LOOKUP),
            (KeyChord.new(KeyCode.KEY_V).with_shortcut(shortcut), Command.PASTE),
            (KeyChord.new(KeyCode.KEY_A).with_shortcut(shortcut), Command.COPY_ALL),
        )

    def match(self, event: AnnotatedKeyEvent) -> typing.Optional[Command]:
        for chord, command in self.bindings:
            if matches(chord, event):
                return command
        return None
