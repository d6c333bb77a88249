from __future__ import annotations

import enum
import typing

import msgspec

if typing.TYPE_CHECKING:
    from .keyboard_consts import KeyCode


class KeyPress(enum.IntEnum):
    RELEASED = 0
    PRESSED = 1
    REPEATED = 2


class KeyEvent(msgspec.Struct, frozen=True):
    key: KeyCode
    press: KeyPress

    @classmethod
    def pressed(cls, key: KeyCode):
        return cls(key=key, press=KeyPress.PRESSED)

    @classmethod
    def released(cls, key: KeyCode):
        return cls(key=key, press=KeyPress.RELEASED)

    @classmethod
    def repeated(cls, key: KeyCode):
        return cls(key=key, press=KeyPress.REPEATED)


# meta is the GUI key: Command on macOS, Super/Windows elsewhere.
class ModifierAnnotation(msgspec.Struct, frozen=True):
    alt: bool = False
    ctrl: bool = False
    meta: bool = False
    shift: bool = False
    capslock: bool = False

    @property
    def has_command_modifier(self):
        # ctrl, meta and alt all turn a keystroke into a command rather than text
        return self.alt or self.ctrl or self.meta


class AnnotatedKeyEvent(msgspec.Struct, frozen=True):
    key: KeyCode
    press: KeyPress
    annotation: ModifierAnnotation
    character: typing.Optional[str] = None
    is_modifier: bool = False
