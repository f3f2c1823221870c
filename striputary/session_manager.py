"""Choosing between earlier recording sessions and a new one."""

from __future__ import annotations

import os
from collections.abc import Iterator
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Union

from striputary.cut import get_excerpt_collection
from striputary.excerpt_collection import ExcerptCollection
from striputary.recording_session import RecordingSession


class _NewSession(Enum):
    NEW = "new"


NEW_SESSION = _NewSession.NEW
"""Identifies the session that has not been recorded yet."""

# An earlier session is identified by its index in the manager's directory list.
SessionIdentifier = Union[int, _NewSession]


def get_dirs(directory: str | os.PathLike[str]) -> list[Path]:
    """The sub-directories of a directory."""
    return [entry for entry in Path(directory).iterdir() if entry.is_dir()]


def new_session_dir(output_dir: str | os.PathLike[str]) -> Path:
    """A directory for a new session named after the current local time."""
    return Path(output_dir) / datetime.now().strftime("%Y-%m-%d-%H-%M-%S")


class SessionManager:
    def __init__(self, output_dir: str | os.PathLike[str]) -> None:
        self.output_dir = Path(output_dir)
        self.dirs = sorted(get_dirs(self.output_dir), reverse=True)
        self.new_dir = new_session_dir(self.output_dir)
        self.selected: SessionIdentifier | None = None
        self.select_latest()

    def select(self, identifier: SessionIdentifier) -> None:
        self.selected = identifier

    def select_latest(self) -> None:
        """Select the most recently modified session directory, if there is one."""
        latest: tuple[int, float] | None = None
        for index, directory in enumerate(self.dirs):
            modified = directory.stat().st_mtime
            if latest is None or modified >= latest[1]:
                latest = (index, modified)
        self.selected = None if latest is None else latest[0]

    def select_new(self) -> None:
        self.selected = NEW_SESSION

    def is_currently_selected(self, identifier: SessionIdentifier) -> bool:
        return self.selected is not None and self.selected == identifier

    def currently_selected(self) -> Path | None:
        if self.selected is None:
            return None
        if self.selected is NEW_SESSION:
            return self.new_dir
        return self.dirs[self.selected]

    def currently_selected_collection(self) -> ExcerptCollection | None:
        """Excerpts of the selected session, or None if it cannot be loaded."""
        session_dir = self.currently_selected()
        if session_dir is None or not session_dir.is_dir():
            return None
        try:
            session = RecordingSession.from_parent_dir(session_dir)
        except (OSError, ValueError) as exc:
            print(exc)
            return None
        return get_excerpt_collection(session)

    def iter_relative_paths_with_indices(self) -> Iterator[tuple[int, str]]:
        for index, directory in enumerate(self.dirs):
            yield index, directory.stem