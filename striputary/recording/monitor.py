"""The state of the background recording as seen by the user interface."""

from __future__ import annotations

from striputary.recording.thread import RecordingThreadHandle
from striputary.run_args import RunArgs
from striputary.song import Song


class RecordingMonitor:
    """Running (with a thread handle), failed (with an error) or stopped."""

    def __init__(
        self, handle: RecordingThreadHandle | None = None, error: Exception | None = None
    ) -> None:
        self.handle = handle
        self.error = error

    @classmethod
    def stopped(cls) -> RecordingMonitor:
        return cls()

    @classmethod
    def running(cls, run_args: RunArgs) -> RecordingMonitor:
        return cls(handle=RecordingThreadHandle(run_args))

    def update(self) -> None:
        """Notice a finished recording and collect newly recorded songs."""
        if self.handle is not None and not self.handle.is_still_running():
            handle, self.handle = self.handle, None
            try:
                handle.result()
            except Exception as exc:
                self.error = exc
            else:
                self.error = None
        if self.handle is not None:
            self.handle.update()

    def is_running(self) -> bool:
        return self.handle is not None

    def songs(self) -> list[Song]:
        if self.handle is None:
            return []
        return list(self.handle.songs.data)