"""Song metadata and the file names derived from it."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any


@dataclass
class Song:
    artist: str | None
    album: str | None
    title: str | None
    track_number: int | None
    length: float

    def target_file(self, music_dir: Path, num_in_recording: int) -> Path:
        """Path of the cut file for this song below the music directory."""
        if self.track_number is not None:
            track = f"{self.track_number:02}"
        else:
            track = f"recording_{num_in_recording}"
        return self.album_folder(music_dir) / f"{track}_{format_title(self.title)}.opus"

    def album_folder(self, music_dir: Path) -> Path:
        return Path(music_dir) / format_artist(self.artist) / format_album(self.album)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Any) -> Song:
        if not isinstance(data, dict):
            raise ValueError(f"song entry must be a mapping, got {data!r}")
        length = data.get("length")
        if isinstance(length, bool) or not isinstance(length, (int, float)):
            raise ValueError(f"song length must be a number, got {length!r}")
        fields: dict[str, Any] = {}
        for key in ("artist", "album", "title"):
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"song {key} must be a string, got {value!r}")
            fields[key] = value
        track_number = data.get("track_number")
        if track_number is not None and (
            isinstance(track_number, bool) or not isinstance(track_number, int)
        ):
            raise ValueError(f"track number must be an integer, got {track_number!r}")
        return cls(track_number=track_number, length=float(length), **fields)

    def __str__(self) -> str:
        return (
            f"{format_artist(self.artist)} - {format_album(self.album)} - "
            f"{format_title(self.title)} ({_format_rounded(self.length)}s)"
        )


def _format_rounded(value: float) -> str:
    """Round half away from zero and print without a fractional part."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    sign = "-" if math.copysign(1.0, value) < 0 else ""
    return f"{sign}{math.floor(abs(value) + 0.5)}"


def _sanitize(text: str) -> str:
    first_item = text.split(",", 1)[0]
    return first_item.replace("/", "").replace(" ", "")


def _sanitize_or_default(text: str | None, default: str) -> str:
    if text is None:
        return default
    return _sanitize(text) or default


def format_title(title: str | None) -> str:
    return _sanitize_or_default(title, "unknown_title")


def format_album(album: str | None) -> str:
    return _sanitize_or_default(album, "unknown_album")


def format_artist(artist: str | None) -> str:
    return _sanitize_or_default(artist, "unknown_artist")