import subprocess

import pytest
from dero.device.clipboard import (
    ClipboardBackend,
    NullClipboard,
    PasteboardClipboard,
    TkClipboard,
    make_clipboard,
)


class FakeRoot:
    def __init__(self):
        self.contents = None

    def clipboard_clear(self):
        self.contents = ""

    def clipboard_append(self, text):
        self.contents += text

    def clipboard_get(self):
        return self.contents


@pytest.mark.parametrize(
    "backend,system,expected",
    [
        (ClipboardBackend.AUTO, "Darwin", PasteboardClipboard),
        (ClipboardBackend.AUTO, "Linux", TkClipboard),
        (ClipboardBackend.PASTEBOARD, "Linux", PasteboardClipboard),
        (ClipboardBackend.TK, "Darwin", TkClipboard),
        (ClipboardBackend.NONE, "Darwin", NullClipboard),
    ],
)
def test_make_clipboard(backend, system, expected):
    clipboard = make_clipboard(backend, lookup_url_template="dict://{}", root=FakeRoot(), system=system)
    assert isinstance(clipboard, expected)


def test_tk_without_window_is_null():
    clipboard = make_clipboard(ClipboardBackend.TK, lookup_url_template="dict://{}")
    assert isinstance(clipboard, NullClipboard)


def test_null_clipboard():
    clipboard = NullClipboard()
    clipboard.copy("간")
    clipboard.look_up("간")
    assert clipboard.paste() == ""


def test_tk_clipboard():
    root = FakeRoot()
    clipboard = TkClipboard(root)
    clipboard.copy("안녕")
    assert root.contents == "안녕"
    assert clipboard.paste() == "안녕"


class RecordingRun:
    def __init__(self, stdout=b"", error=None):
        self.stdout = stdout
        self.error = error
        self.calls = []

    def __call__(self, args, **kwargs):
        self.calls.append((args, kwargs))
        if self.error is not None:
            raise self.error
        return subprocess.CompletedProcess(args, 0, stdout=self.stdout)


def test_pasteboard_commands(monkeypatch):
    run = RecordingRun(stdout="사람".encode("utf-8"))
    monkeypatch.setattr(subprocess, "run", run)
    clipboard = PasteboardClipboard("dict://{}")
    clipboard.copy("사람")
    assert clipboard.paste() == "사람"
    clipboard.look_up("사람")
    assert [args for args, _ in run.calls] == [["pbcopy"], ["pbpaste"], ["open", "dict://사람"]]
    assert run.calls[0][1]["input"] == "사람".encode("utf-8")


def test_pasteboard_replaces_bad_bytes(monkeypatch):
    monkeypatch.setattr(subprocess, "run", RecordingRun(stdout=b"ga\xff"))
    assert PasteboardClipboard().paste() == "ga�"


@pytest.mark.parametrize(
    "error",
    [FileNotFoundError("pbcopy"), subprocess.CalledProcessError(1, ["pbcopy"])],
)
def test_pasteboard_failures_are_logged(monkeypatch, caplog, error):
    monkeypatch.setattr(subprocess, "run", RecordingRun(error=error))
    clipboard = PasteboardClipboard()
    clipboard.copy("간")
    clipboard.look_up("간")
    assert clipboard.paste() == ""
    assert len([r for r in caplog.records if r.levelname == "WARNING"]) == 3
