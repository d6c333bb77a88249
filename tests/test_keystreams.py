# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from contextlib import aclosing

import pytest
import trio
from dero.device.hwtypes import AnnotatedKeyEvent, KeyEvent, KeyPress, ModifierAnnotation
from dero.device.keyboard_consts import KeyCode
from dero.device.keystreams import Keystrokes, ModifierTracking, make_keystream, pump_all
from dero.settings import Settings, default_keymaps
from trio.lowlevel import checkpoint


async def run_sections(events, *sections):
    async def source():
        for event in events:
            await checkpoint()
            yield event

    async with aclosing(source()) as keysource, pump_all(keysource, *sections) as results:
        return [event async for event in results]


def test_annotation_follows_held_modifiers():
    tracking = ModifierTracking()
    annotations = [
        tracking.track(event).annotation
        for event in (
            KeyEvent.pressed(KeyCode.KEY_LEFTSHIFT),
            KeyEvent.pressed(KeyCode.KEY_RIGHTSHIFT),
            KeyEvent.released(KeyCode.KEY_LEFTSHIFT),
            KeyEvent.pressed(KeyCode.KEY_RIGHTMETA),
            KeyEvent.released(KeyCode.KEY_RIGHTSHIFT),
            KeyEvent.pressed(KeyCode.KEY_LEFTALT),
            KeyEvent.pressed(KeyCode.KEY_RIGHTCTRL),
            KeyEvent.released(KeyCode.KEY_RIGHTMETA),
            KeyEvent.released(KeyCode.KEY_LEFTALT),
            KeyEvent.released(KeyCode.KEY_RIGHTCTRL),
        )
    ]
    assert annotations == [
        ModifierAnnotation(shift=True),
        ModifierAnnotation(shift=True),
        # the other shift key is still down
        ModifierAnnotation(shift=True),
        ModifierAnnotation(shift=True, meta=True),
        ModifierAnnotation(meta=True),
        ModifierAnnotation(meta=True, alt=True),
        ModifierAnnotation(meta=True, alt=True, ctrl=True),
        ModifierAnnotation(alt=True, ctrl=True),
        ModifierAnnotation(ctrl=True),
        ModifierAnnotation(),
    ]


def test_capslock_toggles_on_press():
    tracking = ModifierTracking()
    events = [
        tracking.track(event)
        for event in (
            KeyEvent.pressed(KeyCode.KEY_CAPSLOCK),
            KeyEvent.released(KeyCode.KEY_CAPSLOCK),
            KeyEvent.pressed(KeyCode.KEY_G),
            KeyEvent.pressed(KeyCode.KEY_CAPSLOCK),
            KeyEvent.pressed(KeyCode.KEY_G),
        )
    ]
    assert [event.annotation.capslock for event in events] == [True, True, True, False, False]
    assert [event.is_modifier for event in events] == [True, True, False, True, False]


async def test_modifier_tracking_section():
    results = await run_sections(
        [
            KeyEvent.pressed(KeyCode.KEY_LEFTCTRL),
            KeyEvent.pressed(KeyCode.KEY_V),
            KeyEvent.released(KeyCode.KEY_V),
        ],
        ModifierTracking(),
    )
    assert results == [
        AnnotatedKeyEvent(
            key=KeyCode.KEY_LEFTCTRL,
            press=KeyPress.PRESSED,
            annotation=ModifierAnnotation(ctrl=True),
            is_modifier=True,
        ),
        AnnotatedKeyEvent(key=KeyCode.KEY_V, press=KeyPress.PRESSED, annotation=ModifierAnnotation(ctrl=True)),
        AnnotatedKeyEvent(key=KeyCode.KEY_V, press=KeyPress.RELEASED, annotation=ModifierAnnotation(ctrl=True)),
    ]


async def test_keystrokes_and_characters():
    results = await run_sections(
        [
            KeyEvent.pressed(KeyCode.KEY_G),
            KeyEvent.released(KeyCode.KEY_G),
            KeyEvent.pressed(KeyCode.KEY_LEFTSHIFT),
            KeyEvent.pressed(KeyCode.KEY_A),
            KeyEvent.pressed(KeyCode.KEY_1),
            KeyEvent.released(KeyCode.KEY_LEFTSHIFT),
            KeyEvent.pressed(KeyCode.KEY_CAPSLOCK),
            KeyEvent.released(KeyCode.KEY_CAPSLOCK),
            KeyEvent.pressed(KeyCode.KEY_N),
            KeyEvent.pressed(KeyCode.KEY_EQUAL),
            KeyEvent.pressed(KeyCode.KEY_ENTER),
            KeyEvent.pressed(KeyCode.KEY_SPACE),
        ],
        ModifierTracking(),
        Keystrokes(default_keymaps()),
    )
    assert [(event.key, event.character) for event in results] == [
        (KeyCode.KEY_G, "g"),
        (KeyCode.KEY_A, "A"),
        (KeyCode.KEY_1, "!"),
        # capslock shifts letters only
        (KeyCode.KEY_N, "N"),
        (KeyCode.KEY_EQUAL, "="),
        (KeyCode.KEY_ENTER, None),
        (KeyCode.KEY_SPACE, " "),
    ]


@pytest.mark.parametrize(
    "held,key,repeats",
    [
        ((), KeyCode.KEY_BACKSPACE, True),
        ((), KeyCode.KEY_G, True),
        ((KeyCode.KEY_LEFTSHIFT,), KeyCode.KEY_G, True),
        ((), KeyCode.KEY_ENTER, False),
        ((KeyCode.KEY_LEFTSHIFT,), KeyCode.KEY_ENTER, False),
        ((KeyCode.KEY_LEFTCTRL,), KeyCode.KEY_V, False),
        ((KeyCode.KEY_LEFTMETA, KeyCode.KEY_LEFTSHIFT), KeyCode.KEY_I, False),
        ((KeyCode.KEY_LEFTCTRL,), KeyCode.KEY_BACKSPACE, True),
    ],
)
async def test_autorepeat(held, key, repeats):
    events = [KeyEvent.pressed(modifier) for modifier in held]
    events += [KeyEvent.pressed(key), KeyEvent.repeated(key), KeyEvent.repeated(key), KeyEvent.released(key)]
    results = await run_sections(events, ModifierTracking(), Keystrokes(default_keymaps()))
    expected = [KeyPress.PRESSED] + ([KeyPress.REPEATED] * 2 if repeats else [])
    assert [event.press for event in results] == expected
    assert all(event.key == key for event in results)


async def test_keystream_factory():
    settings = Settings.for_test()
    send_channel, receive_channel = trio.open_memory_channel(10)
    async with make_keystream(receive_channel, settings) as keystream:
        await send_channel.send(KeyEvent.pressed(KeyCode.KEY_LEFTCTRL))
        await send_channel.send(KeyEvent.pressed(KeyCode.KEY_V))
        event = await keystream.receive()
        assert event == AnnotatedKeyEvent(
            key=KeyCode.KEY_V,
            press=KeyPress.PRESSED,
            annotation=ModifierAnnotation(ctrl=True),
            character="v",
        )
        assert event.annotation.has_command_modifier
