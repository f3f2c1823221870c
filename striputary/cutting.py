"""Cutting songs in a background thread."""

from __future__ import annotations

import queue
import threading
from collections.abc import Callable, Iterable

from striputary import config
from striputary.cut import CutInfo, cut_song
from striputary.data_stream import DataStream
from striputary.song import Song

_STOP = object()


class CuttingWorker:
    """Cuts songs one after another and reports which ones are done.

    If cutting fails the worker stops and the error is raised by the next
    call to ``send_cut_infos`` or ``cut_songs``.
    """

    def __init__(self, cut: Callable[[CutInfo], None] = cut_song) -> None:
        self._cut = cut
        self._to_cut: queue.Queue[object] = queue.Queue()
        done: queue.Queue[Song] = queue.Queue()
        self._done = done
        self._cut_songs: DataStream[Song] = DataStream(done)
        self._error: BaseException | None = None
        self._thread = threading.Thread(target=self._loop, daemon=True)
        self._thread.start()

    def _loop(self) -> None:
        while True:
            info = self._to_cut.get()
            if info is _STOP:
                return
            assert isinstance(info, CutInfo)
            try:
                self._cut(info)
            except Exception as exc:
                self._error = exc
                return
            self._done.put(info.song)

    def _raise_error(self) -> None:
        if self._error is not None:
            raise self._error

    def send_cut_infos(self, cut_infos: Iterable[CutInfo]) -> None:
        self._raise_error()
        for info in cut_infos:
            self._to_cut.put(info)

    def cut_songs(self) -> list[Song]:
        """All songs cut so far, after waiting briefly for one more."""
        self._cut_songs.update(config.RECV_CUT_SONG_TIMEOUT)
        self._raise_error()
        return list(self._cut_songs.data)

    def close(self) -> None:
        self._to_cut.put(_STOP)
        self._thread.join()

    def __enter__(self) -> CuttingWorker:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()