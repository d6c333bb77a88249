# SPDX-FileCopyrightText: 2023 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import enum
import logging
import typing

from ..commontypes import Mode
from .chords import Command

if typing.TYPE_CHECKING:
    from ..device.clipboard import Clipboard
    from ..device.hwtypes import AnnotatedKeyEvent
    from .boundary import ConversionView
    from .chords import Keybindings


logger = logging.getLogger(__name__)


# Switching straight from one non-default mode to the other is allowed; it never
# passes through DEFAULT on the way.
MODE_TRANSITIONS: dict[tuple[Mode, Command], Mode] = {
    (Mode.DEFAULT, Command.TOGGLE_INPUT): Mode.INPUT,
    (Mode.INPUT, Command.TOGGLE_INPUT): Mode.DEFAULT,
    (Mode.LOOKUP, Command.TOGGLE_INPUT): Mode.INPUT,
    (Mode.DEFAULT, Command.TOGGLE_LOOKUP): Mode.LOOKUP,
    (Mode.LOOKUP, Command.TOGGLE_LOOKUP): Mode.DEFAULT,
    (Mode.INPUT, Command.TOGGLE_LOOKUP): Mode.LOOKUP,
}


class CommitAction(enum.Enum):
    NEWLINE = enum.auto()
    COPY = enum.auto()
    LOOK_UP_AND_COPY = enum.auto()


COMMIT_ACTIONS: dict[Mode, CommitAction] = {
    Mode.DEFAULT: CommitAction.NEWLINE,
    Mode.INPUT: CommitAction.COPY,
    Mode.LOOKUP: CommitAction.LOOK_UP_AND_COPY,
}


# The buffer always holds the raw romanized text; the converted text is only ever a
# projection of it. That way backspace removes exactly the last typed scalar, no matter
# what the converter made of it.
class InputSession:
    def __init__(
        self,
        *,
        keybindings: Keybindings,
        project: typing.Callable[[str], ConversionView],
        clipboard: Clipboard,
        mode: Mode = Mode.DEFAULT,
    ):
        self.keybindings = keybindings
        self.project = project
        self.clipboard = clipboard
        self._mode = mode
        self._buffer = ""
        self._dirty = True

    @property
    def buffer(self):
        return self._buffer

    @property
    def current_mode(self):
        return self._mode

    def is_dirty(self):
        return self._dirty

    def mark_dirty(self):
        self._dirty = True

    def clear_dirty(self):
        self._dirty = False

    def render_view(self) -> ConversionView:
        return self.project(self._buffer)

    def handle_text_input(self, text: str):
        if not text:
            return
        self._buffer += text
        self._dirty = True

    def handle_key_event(self, event: AnnotatedKeyEvent) -> typing.Optional[Command]:
        command = self.keybindings.match(event)
        if command is not None:
            logger.debug("%s -> %s", event.key.name, command.name)
            self.execute(command)
        return command

    def handle_keystroke(self, event: AnnotatedKeyEvent) -> typing.Optional[Command]:
        """Run the command bound to the keystroke, or else type the character it produces.

        A keystroke held with ctrl, meta or alt is never text, even when nothing is bound to it.
        """
        command = self.handle_key_event(event)
        if command is None and event.character is not None and not event.annotation.has_command_modifier:
            self.handle_text_input(event.character)
        return command

    def execute(self, command: Command):
        match command:
            case Command.BACKSPACE:
                self.backspace()
            case Command.COMMIT:
                self.commit()
            case Command.NEWLINE:
                self._buffer += "\n"
                self._dirty = True
            case Command.TOGGLE_INPUT | Command.TOGGLE_LOOKUP:
                self.toggle_mode(command)
            case Command.PASTE:
                self.paste()
            case Command.COPY_ALL:
                self.copy_all()

    def backspace(self):
        if len(self._buffer) == 0:
            return
        self._buffer = self._buffer[:-1]
        self._dirty = True

    def toggle_mode(self, command: Command):
        new_mode = MODE_TRANSITIONS[(self._mode, command)]
        logger.info("mode %s -> %s", self._mode.value, new_mode.value)
        self._mode = new_mode
        self._dirty = True

    def commit(self):
        match COMMIT_ACTIONS[self._mode]:
            case CommitAction.NEWLINE:
                self._buffer += "\n"
            case CommitAction.COPY:
                self.clipboard.copy(self._take_converted())
            case CommitAction.LOOK_UP_AND_COPY:
                converted = self._take_converted()
                self.clipboard.look_up(converted)
                self.clipboard.copy(converted)
        self._dirty = True

    def paste(self):
        clip = self.clipboard.paste()
        if not clip:
            return
        self._buffer += clip
        self._dirty = True

    def copy_all(self):
        if not self._buffer:
            return
        self.clipboard.copy(self._take_converted())
        self._dirty = True

    def _take_converted(self):
        converted = self.render_view().committed_text
        self._buffer = ""
        return converted
