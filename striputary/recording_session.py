"""A recording session: the songs recorded into one buffer file."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from striputary import config
from striputary.song import Song


@dataclass
class RecordingSession:
    filename: Path
    estimated_time_first_song: float
    songs: list[Song] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.filename = Path(self.filename)

    def buffer_file(self) -> Path:
        return self.filename.parent / config.DEFAULT_BUFFER_FILE

    def music_dir(self) -> Path:
        return self.filename.parent / config.DEFAULT_MUSIC_DIR

    def save(self) -> None:
        """Write the session as YAML to its file."""
        data = {
            "songs": [song.to_dict() for song in self.songs],
            "estimated_time_first_song": self.estimated_time_first_song,
        }
        self.filename.write_text(yaml.safe_dump(data, sort_keys=False))

    @classmethod
    def from_file(cls, filename: str | os.PathLike[str]) -> RecordingSession:
        path = Path(filename)
        text = path.read_text()
        try:
            raw = yaml.safe_load(text)
            if not isinstance(raw, dict):
                raise ValueError("session file does not hold a mapping")
            songs = [Song.from_dict(entry) for entry in raw["songs"]]
            estimated = raw["estimated_time_first_song"]
            if isinstance(estimated, bool) or not isinstance(estimated, (int, float)):
                raise ValueError("estimated_time_first_song must be a number")
        except (yaml.YAMLError, KeyError, TypeError, ValueError) as exc:
            raise ValueError("Unable to load session file content.") from exc
        return cls(filename=path, estimated_time_first_song=float(estimated), songs=songs)

    @classmethod
    def from_parent_dir(cls, dirname: str | os.PathLike[str]) -> RecordingSession:
        return cls.from_file(Path(dirname) / config.DEFAULT_SESSION_FILE)