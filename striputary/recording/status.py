"""Outcome of polling a running recording."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RecordingExitStatus(Enum):
    FINISHED_OR_INTERRUPTED = "finished_or_interrupted"
    ALBUM_FINISHED = "album_finished"
    NO_NEW_SONG_FOR_TOO_LONG = "no_new_song_for_too_long"


@dataclass(frozen=True)
class RecordingStatus:
    """Either still running (no exit status) or finished with an exit status."""

    exit_status: RecordingExitStatus | None = None

    @property
    def finished(self) -> bool:
        return self.exit_status is not None


RUNNING = RecordingStatus()