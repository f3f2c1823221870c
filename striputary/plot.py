"""Volume plots around a cut, with the cut marker the user can move."""

from __future__ import annotations

from dataclasses import dataclass

from striputary.audio_time import AudioTime
from striputary.excerpt_collection import NamedExcerpt
from striputary.song import Song

PLOT_HEIGHT = 50.0
CUT_LINE_COLOR = "green"
UNCUT_LINE_COLOR = "red"

CUT_LABEL_COLOR = "green"
UNCUT_LABEL_COLOR = "white"

SELECTED_FILL_COLOR = "gray"
SELECTED_TEXT_COLOR = "black"

CUT_KEY = "Enter"
PLAYBACK_KEY = "Space"
SCROLL_DOWN_KEY = "ArrowDown"
SCROLL_UP_KEY = "ArrowUp"

CUT_BUTTON_SIZE_X = 200.0
CUT_BUTTON_SIZE_Y = 50.0

MIN_SIDE_BAR_WIDTH = 200.0

MIN_NUM_PLOTS_SHOWN = 5

CUT_MARKER_WIDTH = 2.0
CUT_MARKER_COLOR = "yellow"

Point = tuple[float, float]


@dataclass
class ExcerptPlot:
    """The excerpt around one cut together with the chosen cut time."""

    excerpt: NamedExcerpt
    cut_time: AudioTime
    finished_cutting_song_before: bool = False
    finished_cutting_song_after: bool = False
    playback_marker: AudioTime | None = None

    def lines(self) -> tuple[list[Point], list[Point]]:
        """Volume curve split into the parts before and after the cut."""
        audio = self.excerpt.excerpt
        points = list(zip(audio.sample_times(), audio.volume_plot_data()))
        cut = self.cut_time.time
        before = [point for point in points if point[0] < cut]
        after = [point for point in points if not point[0] < cut]
        return before, after

    def line_color(self, finished_cutting: bool) -> str:
        return CUT_LINE_COLOR if finished_cutting else UNCUT_LINE_COLOR

    def show_playback_marker_at(self, audio_time: AudioTime) -> None:
        self.playback_marker = audio_time

    def hide_playback_marker(self) -> None:
        self.playback_marker = None

    def mark_cut(self, song: Song) -> None:
        """Record that a song on either side of this cut has been cut."""
        if self.excerpt.song_before is not None and self.excerpt.song_before == song:
            self.finished_cutting_song_before = True
        if self.excerpt.song_after is not None and self.excerpt.song_after == song:
            self.finished_cutting_song_after = True

    def move_marker_to_offset(self, offset: AudioTime) -> None:
        """Place the cut at an offset from the start of the excerpt."""
        self.cut_time = self.excerpt.excerpt.start + offset

    def offset_from_plot_x(self, x: float) -> AudioTime:
        """The offset from the excerpt start of an absolute time on the plot's axis."""
        audio = self.excerpt.excerpt
        absolute_time = AudioTime.from_time_same_spec(x, audio.start)
        return audio.relative_time(absolute_time)