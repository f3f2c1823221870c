"""Application state: sessions, cut plots, cutting and recording."""

from __future__ import annotations

import os

from striputary.audio_time import AudioTime
from striputary.cut import CutInfo
from striputary.cutting import CuttingWorker
from striputary.excerpt_collection import ExcerptCollection
from striputary.plot import CUT_LABEL_COLOR, MIN_NUM_PLOTS_SHOWN, UNCUT_LABEL_COLOR, ExcerptPlot
from striputary.recording.monitor import RecordingMonitor
from striputary.run_args import RunArgs, SinkType
from striputary.service_config import Service, ServiceConfig
from striputary.session_manager import SessionIdentifier, SessionManager


def label_color(finished_cutting: bool) -> str:
    return CUT_LABEL_COLOR if finished_cutting else UNCUT_LABEL_COLOR


def _plots_for(collection: ExcerptCollection) -> list[ExcerptPlot]:
    return [
        ExcerptPlot(
            excerpt,
            excerpt.excerpt.absolute_time_from_time_offset(collection.offset_guess),
        )
        for excerpt in collection.excerpts
    ]


class Striputary:
    """Holds the selected session, its cut plots and the background workers."""

    def __init__(
        self,
        output_dir: str | os.PathLike[str],
        service: Service,
        sink_type: SinkType = SinkType.NORMAL,
        cutter: CuttingWorker | None = None,
    ) -> None:
        self.service = service
        self.sink_type = sink_type
        self.session_manager = SessionManager(output_dir)
        self.cutter = cutter if cutter is not None else CuttingWorker()
        self.recording = RecordingMonitor.stopped()
        self.collection: ExcerptCollection | None = None
        self.plots: list[ExcerptPlot] = []
        self.scroll_position = 0
        self.last_touched_song: int | None = None
        self.load_selected_session()

    def cut_infos(self) -> list[CutInfo]:
        """One cut for every song, between the markers of neighbouring plots."""
        if self.collection is None:
            return []
        infos = []
        for num, (start, end) in enumerate(zip(self.plots, self.plots[1:])):
            song = start.excerpt.song_after
            if song is None:
                raise ValueError(f"plot {num} has no song after its cut")
            infos.append(
                CutInfo.from_session(
                    self.collection.session, song, start.cut_time, end.cut_time, num
                )
            )
        return infos

    def cut_songs(self) -> None:
        if self.collection is not None:
            self.cutter.send_cut_infos(self.cut_infos())

    def mark_cut_songs(self) -> None:
        for song in self.cutter.cut_songs():
            for plot in self.plots:
                plot.mark_cut(song)

    def start_recording(self) -> None:
        """Select a new session and start recording into it unless already recording."""
        self.session_manager.select_new()
        self.load_selected_session()
        if not self.recording.is_running():
            run_args = self.run_args()
            if run_args is not None:
                self.recording = RecordingMonitor.running(run_args)

    def run_args(self) -> RunArgs | None:
        service_config = ServiceConfig.from_service(self.service)
        session_dir = self.session_manager.currently_selected()
        if session_dir is None:
            return None
        return RunArgs(session_dir, service_config, self.sink_type)

    def select_session(self, identifier: SessionIdentifier) -> None:
        self.session_manager.select(identifier)
        self.load_selected_session()

    def load_selected_session(self) -> None:
        self.collection = self.session_manager.currently_selected_collection()
        if self.collection is not None:
            self.plots = _plots_for(self.collection)

    def scroll(self, diff: int) -> None:
        num_plots = len(self.collection.excerpts) if self.collection is not None else 0
        position = min(self.scroll_position + diff, num_plots - MIN_NUM_PLOTS_SHOWN)
        self.scroll_position = max(position, 0)

    def visible_plots(self, num_shown: int) -> list[tuple[int, ExcerptPlot]]:
        """The plots on screen, with their indices."""
        low = min(self.scroll_position, len(self.plots))
        high = min(self.scroll_position + num_shown, len(self.plots))
        return list(enumerate(self.plots[low:high], start=self.scroll_position))

    def move_all_markers_after(self, song_index: int, offset: AudioTime) -> None:
        """Move the marker of the touched plot and of every plot after it."""
        self.last_touched_song = song_index
        for plot in self.plots:
            if plot.excerpt.num >= song_index:
                plot.move_marker_to_offset(offset)