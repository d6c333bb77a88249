import dataclasses
import json
import logging
import operator
import pathlib
import typing

import cattrs
from cattrs.gen import make_dict_structure_fn
from cattrs.errors import BaseValidationError

from .commontypes import SettingsError
from .device.clipboard import ClipboardBackend
from .device.keyboard_consts import KeyCode
from .editor.boundary import ConversionPolicy
from .editor.chords import ShortcutModifier
from .util import default_settings_path

logger = logging.getLogger(__name__)

KEYMAPS = {
    "KEY_GRAVE": ["`", "~"],
    "KEY_1": ["1", "!"],
    "KEY_2": ["2", "@"],
    "KEY_3": ["3", "#"],
    "KEY_4": ["4", "$"],
    "KEY_5": ["5", "%"],
    "KEY_6": ["6", "^"],
    "KEY_7": ["7", "&"],
    "KEY_8": ["8", "*"],
    "KEY_9": ["9", "("],
    "KEY_0": ["0", ")"],
    "KEY_MINUS": ["-", "_"],
    "KEY_EQUAL": ["=", "+"],
    "KEY_Q": ["q", "Q"],
    "KEY_W": ["w", "W"],
    "KEY_E": ["e", "E"],
    "KEY_R": ["r", "R"],
    "KEY_T": ["t", "T"],
    "KEY_Y": ["y", "Y"],
    "KEY_U": ["u", "U"],
    "KEY_I": ["i", "I"],
    "KEY_O": ["o", "O"],
    "KEY_P": ["p", "P"],
    "KEY_LEFTBRACE": ["[", "{"],
    "KEY_RIGHTBRACE": ["]", "}"],
    "KEY_BACKSLASH": ["\\", "|"],
    "KEY_A": ["a", "A"],
    "KEY_S": ["s", "S"],
    "KEY_D": ["d", "D"],
    "KEY_F": ["f", "F"],
    "KEY_G": ["g", "G"],
    "KEY_H": ["h", "H"],
    "KEY_J": ["j", "J"],
    "KEY_K": ["k", "K"],
    "KEY_L": ["l", "L"],
    "KEY_SEMICOLON": [";", ":"],
    "KEY_APOSTROPHE": ["'", '"'],
    "KEY_Z": ["z", "Z"],
    "KEY_X": ["x", "X"],
    "KEY_C": ["c", "C"],
    "KEY_V": ["v", "V"],
    "KEY_B": ["b", "B"],
    "KEY_N": ["n", "N"],
    "KEY_M": ["m", "M"],
    "KEY_COMMA": [",", "<"],
    "KEY_DOT": [".", ">"],
    "KEY_SLASH": ["/", "?"],
    "KEY_SPACE": [" ", " "],
}


settings_converter = cattrs.Converter()
settings_converter.register_unstructure_hook(KeyCode, operator.attrgetter("name"))
settings_converter.register_structure_hook(KeyCode, lambda v, _: KeyCode[v])
settings_converter.register_unstructure_hook(pathlib.Path, str)
settings_converter.register_structure_hook(pathlib.Path, lambda v, _: pathlib.Path(v).expanduser())


def default_keymaps():
    return settings_converter.structure(KEYMAPS, dict[KeyCode, list[str]])


@dataclasses.dataclass(kw_only=True)
class Settings:
    _path: pathlib.Path
    window_title: str = "Dero"
    window_width: int = 300
    window_height: int = 40
    always_on_top: bool = True
    max_fps: int = 60
    text_margin: int = 10
    font_path: typing.Optional[pathlib.Path] = None
    font_size: float = 18.0
    text_color: str = "black"
    residual_color: str = "#808080"
    background_color: str = "white"
    shortcut_modifier: ShortcutModifier = dataclasses.field(default_factory=ShortcutModifier.for_platform)
    conversion_policy: ConversionPolicy = ConversionPolicy.INCREMENTAL
    clipboard_backend: ClipboardBackend = ClipboardBackend.AUTO
    lookup_url_template: str = "dict://{}"
    keymaps: dict[KeyCode, list[str]] = dataclasses.field(default_factory=default_keymaps)

    def save(self, dest: typing.Optional[pathlib.Path] = None):
        if dest is None:
            dest = self._path
        raw = settings_converter.unstructure(self)
        del raw["_path"]
        dest.parent.mkdir(parents=True, exist_ok=True)
        with dest.open("w", encoding="utf-8") as out:
            json.dump(raw, out, indent=2, ensure_ascii=False)

    @classmethod
    def load(cls, src: pathlib.Path):
        try:
            with src.open(encoding="utf-8") as f:
                raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise SettingsError(f"{src} is not valid JSON") from exc
        if not isinstance(raw, dict):
            raise SettingsError(f"{src} must contain a JSON object")
        raw["_path"] = src
        try:
            return settings_converter.structure(raw, cls)
        except BaseValidationError as exc:
            raise SettingsError(f"{src} has invalid settings") from exc

    @classmethod
    def load_or_default(cls, src: typing.Optional[pathlib.Path] = None):
        if src is None:
            src = default_settings_path()
        if not src.exists():
            logger.info("No settings at %s; using defaults", src)
            return cls(_path=src)
        return cls.load(src)

    @classmethod
    def for_test(cls):
        return settings_converter.structure(
            {
                "_path": "test.settings.json",
                "shortcut_modifier": "ctrl",
                "clipboard_backend": "none",
                "keymaps": KEYMAPS,
            },
            cls,
        )


settings_converter.register_structure_hook(Settings, make_dict_structure_fn(Settings, settings_converter))
