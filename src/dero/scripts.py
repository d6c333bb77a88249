import argparse
import logging
import pathlib
import sys

import trio

from .device.keystreams import make_keystream
from .device.tk_window import TkWindow
from .editor.chords import Keybindings
from .romaja import convert_escaped
from .settings import Settings

convert_parser = argparse.ArgumentParser(prog="dero-convert")
convert_parser.add_argument("text", nargs="*", help="romanized text; read from stdin when omitted")


def convert_cli():
    args = convert_parser.parse_args()
    if args.text:
        print(convert_escaped(" ".join(args.text)))
        return
    for line in sys.stdin:
        print(convert_escaped(line.rstrip("\n")))


key_events_parser = argparse.ArgumentParser(prog="dero-keys")
key_events_parser.add_argument("--settings", type=pathlib.Path, default=None)


def print_key_events():
    settings = Settings.load_or_default(key_events_parser.parse_args().settings)
    keybindings = Keybindings(settings.shortcut_modifier)

    async def runner():
        with TkWindow(settings) as window:
            async with trio.open_nursery() as nursery:
                await nursery.start(window.run)
                async with make_keystream(window.key_event_receive_channel, settings) as keystream:

                    async def report():
                        async for event in keystream:
                            command = keybindings.match(event)
                            print([event, command.name if command is not None else None])

                    nursery.start_soon(report)
                    await window.closed.wait_value(True)
                    nursery.cancel_scope.cancel()

    logging.basicConfig(level=logging.DEBUG)
    trio.run(runner)
