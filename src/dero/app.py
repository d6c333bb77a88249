from __future__ import annotations

import argparse
import logging
import pathlib
import sys

import trio
import trio_util

from . import romaja
from .commontypes import Mode
from .device.clipboard import make_clipboard
from .device.keystreams import make_keystream
from .device.tk_window import TkWindow
from .editor.boundary import make_projection
from .editor.chords import Keybindings
from .editor.session import InputSession
from .rendering.textview import TextView
from .settings import Settings

logger = logging.getLogger(__name__)


class Dero:
    def __init__(self, settings: Settings, window: TkWindow, session: InputSession):
        self.settings = settings
        self.window = window
        self.session = session
        self.textview = TextView(settings)
        self._shown_mode = None

    @classmethod
    def build(cls, settings: Settings, window: TkWindow, mode: Mode):
        clipboard = make_clipboard(
            settings.clipboard_backend,
            lookup_url_template=settings.lookup_url_template,
            root=window.root,
        )
        session = InputSession(
            keybindings=Keybindings(settings.shortcut_modifier),
            project=make_projection(settings.conversion_policy, romaja.convert, romaja.convert_escaped),
            clipboard=clipboard,
            mode=mode,
        )
        return cls(settings, window, session)

    async def run(self):
        for chord, command in self.session.keybindings.bindings:
            logger.debug("%s: %s", chord.describe(), command.name)
        async with trio.open_nursery() as nursery:
            await nursery.start(self.window.run)
            async with make_keystream(self.window.key_event_receive_channel, self.settings) as keystream:
                nursery.start_soon(self.dispatch_events, keystream)
                nursery.start_soon(self.render_frames)
                await self.window.closed.wait_value(True)
                nursery.cancel_scope.cancel()
        logger.debug("goodbye")

    async def dispatch_events(self, keystream):
        async for event in keystream:
            self.session.handle_keystroke(event)

    async def render_frames(self):
        async for _ in trio_util.periodic(1 / self.settings.max_fps):
            self.render_if_needed()

    def render_if_needed(self):
        mode = self.session.current_mode
        if mode is not self._shown_mode:
            self.window.set_mode(mode)
            self._shown_mode = mode
        if self.window.exposed.value:
            self.window.exposed.value = False
            self.session.mark_dirty()
        if not self.session.is_dirty():
            return
        # no checkpoints between reading the view and clearing the flag
        image = self.textview.render(self.session.render_view(), self.window.size)
        self.window.display(image)
        self.session.clear_dirty()


async def start_dero(settings: Settings, mode: Mode):
    with TkWindow(settings) as window:
        app = Dero.build(settings, window, mode)
        await app.run()


parser = argparse.ArgumentParser(prog="dero")
parser.add_argument("mode", nargs="?", default=None, help="start in 'input' or 'lookup' mode")
parser.add_argument("--settings", type=pathlib.Path, default=None)
parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])


def main(argv=sys.argv):
    parsed = parser.parse_args(argv[1:])
    logging.basicConfig(level=getattr(logging, parsed.log_level))
    logging.getLogger("PIL").setLevel(logging.ERROR)
    settings = Settings.load_or_default(parsed.settings)
    trio.run(start_dero, settings, Mode.from_argument(parsed.mode))
    return 0
