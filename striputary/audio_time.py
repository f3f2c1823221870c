"""Points in time within an audio stream, with their sample positions."""

from __future__ import annotations

import math
from dataclasses import dataclass

_U32_MAX = 2**32 - 1


def _saturating_u32(value: float) -> int:
    """Truncate towards zero and clamp into the unsigned 32-bit range."""
    if math.isnan(value) or value <= 0:
        return 0
    if value >= _U32_MAX:
        return _U32_MAX
    return int(value)


@dataclass(frozen=True)
class WavSpec:
    """Format of a WAV stream."""

    channels: int
    sample_rate: int
    bits_per_sample: int = 16


@dataclass(frozen=True)
class AudioTime:
    """A time in seconds together with the sample and frame it falls on."""

    time: float
    interleaved_sample_num: int
    frame_num: int
    channels: int
    sample_rate: int

    @classmethod
    def _build(cls, time: float, channels: int, sample_rate: int) -> AudioTime:
        return cls(
            time=time,
            interleaved_sample_num=_saturating_u32(time * float(channels * sample_rate)),
            frame_num=_saturating_u32(time * float(sample_rate)),
            channels=channels,
            sample_rate=sample_rate,
        )

    @classmethod
    def from_time_and_spec(cls, time: float, spec: WavSpec) -> AudioTime:
        return cls._build(time, spec.channels, spec.sample_rate)

    @classmethod
    def from_time_same_spec(cls, time: float, audio_time: AudioTime) -> AudioTime:
        return cls._build(time, audio_time.channels, audio_time.sample_rate)

    def _check_same_spec(self, other: AudioTime) -> None:
        if self.sample_rate != other.sample_rate:
            raise ValueError(
                f"sample rates differ: {self.sample_rate} != {other.sample_rate}"
            )
        if self.channels != other.channels:
            raise ValueError(f"channel counts differ: {self.channels} != {other.channels}")

    def __add__(self, other: AudioTime) -> AudioTime:
        if not isinstance(other, AudioTime):
            return NotImplemented
        self._check_same_spec(other)
        return AudioTime.from_time_same_spec(self.time + other.time, self)

    def __sub__(self, other: AudioTime) -> AudioTime:
        if not isinstance(other, AudioTime):
            return NotImplemented
        self._check_same_spec(other)
        return AudioTime.from_time_same_spec(self.time - other.time, self)

    def __lt__(self, other: AudioTime) -> bool:
        if not isinstance(other, AudioTime):
            return NotImplemented
        return self.time < other.time

    def __le__(self, other: AudioTime) -> bool:
        if not isinstance(other, AudioTime):
            return NotImplemented
        return self.time <= other.time

    def __gt__(self, other: AudioTime) -> bool:
        if not isinstance(other, AudioTime):
            return NotImplemented
        return self.time > other.time

    def __ge__(self, other: AudioTime) -> bool:
        if not isinstance(other, AudioTime):
            return NotImplemented
        return self.time >= other.time