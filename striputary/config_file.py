"""The user's configuration file."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from striputary import config

_APP_NAME = "striputary"


class ConfigFileError(Exception):
    """The configuration file is missing or cannot be used."""


@dataclass
class ConfigFile:
    output_dir: Path
    service: str | None = None
    monitor: bool | None = None

    @classmethod
    def read(cls) -> ConfigFile:
        """Find the configuration file in the XDG config directories and load it."""
        path = _find_config_file()
        if path is None:
            raise ConfigFileError("No config file found")
        return cls.from_file(path)

    @classmethod
    def from_file(cls, file: str | os.PathLike[str]) -> ConfigFile:
        path = Path(file)
        try:
            text = path.read_text()
        except OSError as exc:
            raise ConfigFileError(f"While reading config file at {str(path)!r}") from exc
        try:
            raw = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigFileError("Reading config file contents") from exc
        if not isinstance(raw, dict) or not isinstance(raw.get("output_dir"), str):
            raise ConfigFileError("Reading config file contents: output_dir is required")
        service = raw.get("service")
        if service is not None and not isinstance(service, str):
            raise ConfigFileError("Reading config file contents: service must be a string")
        monitor = raw.get("monitor")
        if monitor is not None and not isinstance(monitor, bool):
            raise ConfigFileError("Reading config file contents: monitor must be a boolean")
        return cls(output_dir=expanduser(raw["output_dir"]), service=service, monitor=monitor)


def _config_dirs() -> list[Path]:
    home_value = os.environ.get("XDG_CONFIG_HOME", "")
    home = Path(home_value) if os.path.isabs(home_value) else Path.home() / ".config"
    others = os.environ.get("XDG_CONFIG_DIRS") or "/etc/xdg"
    return [home] + [Path(d) for d in others.split(":") if os.path.isabs(d)]


def _find_config_file() -> Path | None:
    for directory in _config_dirs():
        candidate = directory / _APP_NAME / config.CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def expanduser(path: str | os.PathLike[str]) -> Path:
    """Expand a leading ``~`` and resolve the path, which must exist."""
    text = os.fspath(path)
    if text == "~" or text.startswith("~/"):
        text = str(Path.home()) + text[1:]
    try:
        return Path(text).resolve(strict=True)
    except OSError as exc:
        raise ConfigFileError(f"While reading {text}") from exc