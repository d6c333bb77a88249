# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import abc
from contextlib import aclosing, asynccontextmanager
from typing import TYPE_CHECKING, Any, AsyncIterable, Optional, cast

import msgspec
import trio

from .hwtypes import AnnotatedKeyEvent, KeyEvent, KeyPress, ModifierAnnotation
from .keyboard_consts import KeyCode

if TYPE_CHECKING:
    from ..settings import Settings

MODIFIER_FIELDS = {
    KeyCode.KEY_LEFTALT: "alt",
    KeyCode.KEY_RIGHTALT: "alt",
    KeyCode.KEY_LEFTCTRL: "ctrl",
    KeyCode.KEY_RIGHTCTRL: "ctrl",
    KeyCode.KEY_LEFTMETA: "meta",
    KeyCode.KEY_RIGHTMETA: "meta",
    KeyCode.KEY_LEFTSHIFT: "shift",
    KeyCode.KEY_RIGHTSHIFT: "shift",
}

# Held-down keys that keep firing. Typing repeats as well; Enter and the shortcuts fire once.
REPEATABLE = frozenset({KeyCode.KEY_BACKSPACE})


class Section(abc.ABC):
    @abc.abstractmethod
    async def pump(self, source: trio.MemoryReceiveChannel[Any], sink: trio.MemorySendChannel[Any]): ...


# stage 1: annotate every event with the modifiers held at that moment
class ModifierTracking(Section):
    def __init__(self):
        self.held: set[KeyCode] = set()
        self.capslock = False

    def annotation(self):
        held = dict.fromkeys((MODIFIER_FIELDS[key] for key in self.held), True)
        return ModifierAnnotation(capslock=self.capslock, **held)

    def track(self, event: KeyEvent) -> AnnotatedKeyEvent:
        if event.key in MODIFIER_FIELDS:
            if event.press is KeyPress.RELEASED:
                self.held.discard(event.key)
            else:
                self.held.add(event.key)
        elif event.key is KeyCode.KEY_CAPSLOCK and event.press is KeyPress.PRESSED:
            self.capslock = not self.capslock
        return AnnotatedKeyEvent(
            key=event.key,
            press=event.press,
            annotation=self.annotation(),
            is_modifier=event.key in MODIFIER_FIELDS or event.key is KeyCode.KEY_CAPSLOCK,
        )

    async def pump(self, source: trio.MemoryReceiveChannel[KeyEvent], sink: trio.MemorySendChannel[AnnotatedKeyEvent]):
        async with aclosing(source), aclosing(sink):
            async for event in source:
                await sink.send(self.track(event))


# stage 2: keep the keystrokes the session cares about and attach the character each one types
class Keystrokes(Section):
    def __init__(self, keymaps: dict[KeyCode, list[str]]):
        self.keymaps = keymaps

    def character(self, event: AnnotatedKeyEvent) -> Optional[str]:
        levels = self.keymaps.get(event.key)
        if levels is None:
            return None
        shifted = event.annotation.shift
        if levels[0].isalpha():
            shifted ^= event.annotation.capslock
        return levels[1] if shifted else levels[0]

    def keeps(self, event: AnnotatedKeyEvent, character: Optional[str]) -> bool:
        if event.is_modifier or event.press is KeyPress.RELEASED:
            return False
        if event.press is KeyPress.REPEATED:
            typing_repeat = character is not None and not event.annotation.has_command_modifier
            return typing_repeat or event.key in REPEATABLE
        return True

    async def pump(self, source: trio.MemoryReceiveChannel[AnnotatedKeyEvent], sink: trio.MemorySendChannel[AnnotatedKeyEvent]):
        async with aclosing(source), aclosing(sink):
            async for event in source:
                character = self.character(event)
                if self.keeps(event, character):
                    await sink.send(msgspec.structs.replace(event, character=character))


@asynccontextmanager
async def pump_all(first_source: AsyncIterable[Any], *sections: Section):
    async with trio.open_nursery() as nursery:
        section_input = first_source
        for section in sections:
            section_send_channel, section_receive_channel = trio.open_memory_channel(0)
            nursery.start_soon(section.pump, section_input, section_send_channel)
            section_input = section_receive_channel
        yield section_input
        nursery.cancel_scope.cancel()


@asynccontextmanager
async def make_keystream(
    key_event_channel: trio.MemoryReceiveChannel[KeyEvent],
    settings: Settings,
):
    async with pump_all(key_event_channel, ModifierTracking(), Keystrokes(settings.keymaps)) as keystream:
        yield cast(trio.MemoryReceiveChannel[AnnotatedKeyEvent], keystream)
