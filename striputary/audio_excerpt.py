"""A stretch of recorded audio with volume analysis helpers."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from itertools import islice

from striputary.audio_time import AudioTime, WavSpec
from striputary.config import NUM_PLOT_DATA_POINTS, NUM_SAMPLES_PER_AVERAGE_VOLUME

_I16_MAX = 32767


@dataclass
class AudioExcerpt:
    """Interleaved 16-bit samples between two points of a recording."""

    samples: list[int]
    start: AudioTime
    end: AudioTime
    spec: WavSpec

    def volume_at(self, time: float) -> float:
        """Average normalised amplitude around an absolute time."""
        at = AudioTime.from_time_same_spec(time, self.start)
        position = (at - self.start).interleaved_sample_num
        begin = max(position - NUM_SAMPLES_PER_AVERAGE_VOLUME, 0)
        end = min(len(self.samples), position + NUM_SAMPLES_PER_AVERAGE_VOLUME)
        if end < begin:
            raise IndexError(f"time {time} lies outside of the excerpt")
        if end == begin:
            return 0.0
        total = sum(abs(sample) for sample in islice(self.samples, begin, end))
        return total / ((end - begin) * _I16_MAX)

    def sample_times(self) -> list[float]:
        """Evenly spaced absolute times strictly inside the excerpt."""
        width = self.end.time - self.start.time
        step = width / NUM_PLOT_DATA_POINTS
        return [self.start.time + x * step for x in range(1, NUM_PLOT_DATA_POINTS)]

    def volume_plot_data(self) -> list[float]:
        return [self.volume_at(time) for time in self.sample_times()]

    def absolute_time_by_relative_progress(self, pos: float) -> AudioTime:
        return AudioTime.from_time_and_spec(
            self.start.time + (self.end.time - self.start.time) * pos, self.spec
        )

    def relative_time_by_relative_progress(self, pos: float) -> AudioTime:
        return AudioTime.from_time_and_spec((self.end.time - self.start.time) * pos, self.spec)

    def relative_time(self, absolute_time: AudioTime) -> AudioTime:
        return absolute_time - self.start

    def relative_progress_from_time_offset(self, time_offset: float) -> float:
        """Progress through the excerpt for an offset measured from its centre."""
        return 0.5 + time_offset / (self.end.time - self.start.time)

    def absolute_time_from_time_offset(self, time_offset: float) -> AudioTime:
        return self.absolute_time_by_relative_progress(
            self.relative_progress_from_time_offset(time_offset)
        )

    def iter_samples(self, start_time: AudioTime) -> Iterator[int]:
        """Yield the samples from a time relative to the excerpt start onwards."""
        yield from islice(self.samples, start_time.interleaved_sample_num, None)