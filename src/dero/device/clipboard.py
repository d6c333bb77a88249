from __future__ import annotations

import abc
import enum
import logging
import platform
import subprocess
import typing

if typing.TYPE_CHECKING:
    import tkinter

logger = logging.getLogger(__name__)


@enum.unique
class ClipboardBackend(enum.Enum):
    AUTO = "auto"
    PASTEBOARD = "pasteboard"
    TK = "tk"
    NONE = "none"


class Clipboard(abc.ABC):
    """Clipboard and dictionary access. Everything here is best-effort."""

    @abc.abstractmethod
    def copy(self, text: str) -> None: ...

    @abc.abstractmethod
    def paste(self) -> str: ...

    @abc.abstractmethod
    def look_up(self, text: str) -> None: ...


class NullClipboard(Clipboard):
    def copy(self, text: str) -> None:
        logger.info("Copy (no clipboard available): %s", text)

    def paste(self) -> str:
        return ""

    def look_up(self, text: str) -> None:
        pass


class PasteboardClipboard(Clipboard):
    # macOS only: pbcopy and pbpaste for the pasteboard, and the Dictionary app
    # answers dict:// URLs handed to open(1).
    def __init__(self, lookup_url_template: str = "dict://{}"):
        self.lookup_url_template = lookup_url_template

    def copy(self, text: str) -> None:
        logger.info("Copying %s", text)
        try:
            subprocess.run(["pbcopy"], input=text.encode("utf-8"), check=True)
        except (OSError, subprocess.CalledProcessError):
            logger.warning("Could not run pbcopy", exc_info=True)

    def paste(self) -> str:
        try:
            proc = subprocess.run(["pbpaste"], stdout=subprocess.PIPE, check=True)
        except (OSError, subprocess.CalledProcessError):
            logger.warning("Could not run pbpaste", exc_info=True)
            return ""
        return proc.stdout.decode("utf-8", errors="replace")

    def look_up(self, text: str) -> None:
        url = self.lookup_url_template.format(text)
        try:
            subprocess.run(["open", url], check=True)
        except (OSError, subprocess.CalledProcessError):
            logger.warning("Could not open dictionary app for %r", url, exc_info=True)


class TkClipboard(Clipboard):
    def __init__(self, root: tkinter.Misc):
        self.root = root

    def copy(self, text: str) -> None:
        logger.info("Copying %s", text)
        self.root.clipboard_clear()
        self.root.clipboard_append(text)

    def paste(self) -> str:
        import tkinter

        try:
            return self.root.clipboard_get()
        except tkinter.TclError:
            # raised when the clipboard is empty or holds something other than text
            return ""

    def look_up(self, text: str) -> None:
        logger.debug("No dictionary available on this platform; not looking up %r", text)


def make_clipboard(
    backend: ClipboardBackend,
    *,
    lookup_url_template: str,
    root: typing.Optional[tkinter.Misc] = None,
    system: typing.Optional[str] = None,
) -> Clipboard:
    if backend is ClipboardBackend.AUTO:
        if system is None:
            system = platform.system()
        backend = ClipboardBackend.PASTEBOARD if system == "Darwin" else ClipboardBackend.TK
    match backend:
        case ClipboardBackend.PASTEBOARD:
            return PasteboardClipboard(lookup_url_template)
        case ClipboardBackend.TK if root is not None:
            return TkClipboard(root)
        case _:
            return NullClipboard()
