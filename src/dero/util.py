import os
import pathlib


def dero_config_dir() -> pathlib.Path:
    base = os.environ.get("XDG_CONFIG_HOME")
    config_home = pathlib.Path(base) if base else pathlib.Path.home() / ".config"
    return config_home / "dero"


def default_settings_path() -> pathlib.Path:
    return dero_config_dir() / "settings.json"
