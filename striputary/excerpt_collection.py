"""The excerpts around every cut of a recording session."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from striputary.audio_excerpt import AudioExcerpt
from striputary.recording_session import RecordingSession
from striputary.song import Song


@dataclass
class NamedExcerpt:
    excerpt: AudioExcerpt
    song_before: Song | None
    song_after: Song | None
    num: int


def _quote(text: str) -> str:
    escaped = (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )
    return f'"{escaped}"'


def _describe_optional(text: str | None) -> str:
    return "None" if text is None else f"Some({_quote(text)})"


@dataclass
class ExcerptCollection:
    session: RecordingSession
    excerpts: list[NamedExcerpt]
    offset_guess: float

    def __iter__(self) -> Iterator[NamedExcerpt]:
        return iter(self.excerpts)

    def excerpt(self, num: int) -> NamedExcerpt:
        return self.excerpts[num]

    def name(self) -> str:
        """Artist and album of the first song, or an empty string."""
        if not self.session.songs:
            return ""
        first = self.session.songs[0]
        return f"{_describe_optional(first.artist)} - {_describe_optional(first.album)}"