# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import contextlib
import logging
import re
import tkinter
import typing

import _tkinter
import PIL.ImageTk
import trio
import trio_util

from ..commontypes import Mode, Size
from .hwtypes import KeyEvent
from .keyboard_consts import KeyCode

if typing.TYPE_CHECKING:
    import PIL.Image

    from ..settings import Settings

logger = logging.getLogger(__name__)

KEY_CHANNEL_SIZE = 64

MISC_KEYS = {
    "space": KeyCode.KEY_SPACE,
    "BackSpace": KeyCode.KEY_BACKSPACE,
    "Return": KeyCode.KEY_ENTER,
    "KP_Enter": KeyCode.KEY_ENTER,
    "Tab": KeyCode.KEY_TAB,
    "Escape": KeyCode.KEY_ESC,
    "Delete": KeyCode.KEY_DELETE,
    "Home": KeyCode.KEY_HOME,
    "End": KeyCode.KEY_END,
    "minus": KeyCode.KEY_MINUS,
    "equal": KeyCode.KEY_EQUAL,
    "quoteleft": KeyCode.KEY_GRAVE,
    "grave": KeyCode.KEY_GRAVE,
    "asciitilde": KeyCode.KEY_GRAVE,
    "exclam": KeyCode.KEY_1,
    "at": KeyCode.KEY_2,
    "numbersign": KeyCode.KEY_3,
    "dollar": KeyCode.KEY_4,
    "percent": KeyCode.KEY_5,
    "asciicircum": KeyCode.KEY_6,
    "ampersand": KeyCode.KEY_7,
    "asterisk": KeyCode.KEY_8,
    "parenleft": KeyCode.KEY_9,
    "parenright": KeyCode.KEY_0,
    "underscore": KeyCode.KEY_MINUS,
    "plus": KeyCode.KEY_EQUAL,
    "bracketleft": KeyCode.KEY_LEFTBRACE,
    "bracketright": KeyCode.KEY_RIGHTBRACE,
    "backslash": KeyCode.KEY_BACKSLASH,
    "braceleft": KeyCode.KEY_LEFTBRACE,
    "braceright": KeyCode.KEY_RIGHTBRACE,
    "bar": KeyCode.KEY_BACKSLASH,
    "semicolon": KeyCode.KEY_SEMICOLON,
    "quoteright": KeyCode.KEY_APOSTROPHE,
    "colon": KeyCode.KEY_SEMICOLON,
    "quotedbl": KeyCode.KEY_APOSTROPHE,
    "apostrophe": KeyCode.KEY_APOSTROPHE,
    "comma": KeyCode.KEY_COMMA,
    "period": KeyCode.KEY_DOT,
    "slash": KeyCode.KEY_SLASH,
    "less": KeyCode.KEY_COMMA,
    "greater": KeyCode.KEY_DOT,
    "question": KeyCode.KEY_SLASH,
    "Left": KeyCode.KEY_LEFT,
    "Right": KeyCode.KEY_RIGHT,
    "Up": KeyCode.KEY_UP,
    "Down": KeyCode.KEY_DOWN,
}

# On macOS, Tk reports the Command key as Meta and Option as Alt (Option in newer Tk).
MODIFIER_KEYS = {
    "Meta_L": KeyCode.KEY_LEFTMETA,
    "Super_L": KeyCode.KEY_LEFTMETA,
    "Alt_L": KeyCode.KEY_LEFTALT,
    "Option_L": KeyCode.KEY_LEFTALT,
    "Control_L": KeyCode.KEY_LEFTCTRL,
    "Shift_L": KeyCode.KEY_LEFTSHIFT,
    "Meta_R": KeyCode.KEY_RIGHTMETA,
    "Super_R": KeyCode.KEY_RIGHTMETA,
    "Alt_R": KeyCode.KEY_RIGHTALT,
    "Option_R": KeyCode.KEY_RIGHTALT,
    "Control_R": KeyCode.KEY_RIGHTCTRL,
    "Shift_R": KeyCode.KEY_RIGHTSHIFT,
}


# Lock bit of the X11-style modifier mask Tk passes along with every key event
LOCK_MASK = 0x2


def keycode_for(keysym: str) -> typing.Optional[KeyCode]:
    # key mapping in Tk is kind of a mess, but it's close enough for a US layout.
    if re.match("^[a-zA-Z0-9]$", keysym):
        return KeyCode[f"KEY_{keysym.upper()}"]
    if keysym in MISC_KEYS:
        return MISC_KEYS[keysym]
    return MODIFIER_KEYS.get(keysym)


class KeyMapper:
    """Turns Tk key events into KeyEvents.

    Tk has no notion of autorepeat. X11 sends a release and a press with the same
    timestamp for each repeat, and macOS sends presses without releases; both come out
    as ``KeyPress.REPEATED``. To spot the X11 pairs a release is held back until the
    next event arrives, or until `flush` is called once the Tk queue is empty.

    Caps lock is read from the Lock bit that comes with every key event rather than from
    the Caps_Lock key itself, since X11 and macOS report that key in different ways.
    """

    def __init__(self):
        self.held: set[KeyCode] = set()
        self.capslock = False
        self._pending_release: typing.Optional[tuple[KeyCode, int]] = None

    def feed(self, event) -> list[KeyEvent]:
        # somehow keycode 0 happens when switching windows sometimes?
        key = keycode_for(event.keysym) if event.keycode != 0 else None
        is_press = event.type.name == "KeyPress"
        if self._pending_release is not None:
            pending_key, pending_time = self._pending_release
            if is_press and key is pending_key and event.time == pending_time:
                self._pending_release = None
                return [KeyEvent.repeated(key)]
        events = self.flush()
        if event.keysym == "Caps_Lock":
            return events
        if key is None:
            logger.debug("Unhandled key event %r", event)
            return events
        capslock = bool(event.state & LOCK_MASK)
        if capslock != self.capslock:
            self.capslock = capslock
            events += [KeyEvent.pressed(KeyCode.KEY_CAPSLOCK), KeyEvent.released(KeyCode.KEY_CAPSLOCK)]
        if not is_press:
            self._pending_release = (key, event.time)
        elif key in self.held:
            events.append(KeyEvent.repeated(key))
        else:
            self.held.add(key)
            events.append(KeyEvent.pressed(key))
        return events

    def flush(self) -> list[KeyEvent]:
        if self._pending_release is None:
            return []
        key, _ = self._pending_release
        self._pending_release = None
        self.held.discard(key)
        return [KeyEvent.released(key)]

    def release_all(self) -> list[KeyEvent]:
        events = self.flush()
        events += [KeyEvent.released(key) for key in sorted(self.held)]
        self.held.clear()
        return events


class TkWindow(contextlib.AbstractContextManager):
    def __init__(self, settings: Settings):
        self.settings = settings
        self.root: typing.Optional[tkinter.Tk] = None
        self.label: typing.Optional[tkinter.Label] = None
        self._tk_img = None
        self.keymapper = KeyMapper()
        self.closed = trio_util.AsyncBool(value=False)
        self.exposed = trio_util.AsyncBool(value=True)
        self.key_send_channel, self.key_event_receive_channel = trio.open_memory_channel(KEY_CHANNEL_SIZE)

    def _queue(self, events: list[KeyEvent]):
        for event in events:
            try:
                self.key_send_channel.send_nowait(event)
            except trio.WouldBlock:
                logger.warning("Key event queue is full; dropping %r", event)

    def key_handler(self, event):
        self._queue(self.keymapper.feed(event))

    def focus_out_handler(self, event):
        # we never hear about keys released while another window had focus
        self._queue(self.keymapper.release_all())

    def configure_handler(self, event):
        self.exposed.value = True

    def close_handler(self):
        self.closed.value = True

    def __enter__(self):
        self.root = tkinter.Tk()
        self.root.title(self.settings.window_title)
        self.root.resizable(True, True)
        self.root.attributes("-topmost", self.settings.always_on_top)
        width, height = self.settings.window_width, self.settings.window_height
        x = (self.root.winfo_screenwidth() - width) // 2
        y = (self.root.winfo_screenheight() - height) // 2
        self.root.geometry(f"{width}x{height}+{x}+{y}")
        self.root.bind("<KeyPress>", self.key_handler)
        self.root.bind("<KeyRelease>", self.key_handler)
        self.root.bind("<FocusOut>", self.focus_out_handler)
        self.root.bind("<Configure>", self.configure_handler)
        self.root.protocol("WM_DELETE_WINDOW", self.close_handler)
        self.label = tkinter.Label(self.root, borderwidth=0, highlightthickness=0)
        self.label.pack(fill="both", expand=True)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.key_send_channel.close()
        self.root.destroy()
        self.root = None
        self.label = None

    @property
    def size(self) -> Size:
        self.root.update_idletasks()
        return Size(width=max(self.root.winfo_width(), 1), height=max(self.root.winfo_height(), 1))

    def set_mode(self, mode: Mode):
        self.root.title(f"{self.settings.window_title}{mode.title_suffix}")

    def display(self, image: PIL.Image.Image):
        self._tk_img = PIL.ImageTk.PhotoImage(image)
        self.label.configure(image=self._tk_img)

    async def run(self, *, task_status=trio.TASK_STATUS_IGNORED):
        task_status.started()
        while not self.closed.value:
            # do all pending things right away, but let other tasks run too
            while self.root.tk.dooneevent(_tkinter.DONT_WAIT):
                await trio.sleep(0)
            # an X11 autorepeat press always arrives in the same batch as its release
            self._queue(self.keymapper.flush())

            # sleep just a little bit
            await trio.sleep(1 / self.settings.max_fps)
