"""Reading stretches of a WAV recording."""

from __future__ import annotations

import os
import struct
import wave

from striputary.audio_excerpt import AudioExcerpt
from striputary.audio_time import AudioTime, WavSpec


class MissingSongError(Exception):
    """The requested stretch of audio is not (fully) present in the recording."""

    def __init__(self, message: str = "Oh no, something bad went down") -> None:
        super().__init__(message)


def _half(value: int) -> int:
    return value // 2 if value >= 0 else -((-value) // 2)


def volume_average_over_channels(samples: list[int]) -> list[int]:
    """Average interleaved stereo samples into one channel, dropping a trailing odd sample."""
    pairs = zip(samples[0::2], samples[1::2])
    return [_half(left) + _half(right) for left, right in pairs]


def _decode(raw: bytes, sample_width: int) -> list[int]:
    if sample_width == 1:
        return [byte - 128 for byte in raw]
    count = len(raw) // 2
    return list(struct.unpack(f"<{count}h", raw[: count * 2]))


def extract_audio(
    file_path: str | os.PathLike[str], start_time: float, end_time: float
) -> AudioExcerpt:
    """Read the interleaved samples between two times of a WAV file.

    Raises MissingSongError when the file ends before the end time or holds
    samples too wide for 16 bits.
    """
    with wave.open(os.fspath(file_path), "rb") as reader:
        sample_width = reader.getsampwidth()
        spec = WavSpec(
            channels=reader.getnchannels(),
            sample_rate=reader.getframerate(),
            bits_per_sample=sample_width * 8,
        )
        if sample_width not in (1, 2):
            raise MissingSongError()
        start = AudioTime.from_time_and_spec(start_time, spec)
        end = AudioTime.from_time_and_spec(end_time, spec)
        num_samples = (end - start).interleaved_sample_num
        reader.setpos(min(start.frame_num, reader.getnframes()))
        frames_needed = -(-num_samples // spec.channels)
        raw = reader.readframes(frames_needed)
    samples = _decode(raw, sample_width)[:num_samples]
    if len(samples) != num_samples:
        raise MissingSongError()
    return AudioExcerpt(samples=samples, start=start, end=end, spec=spec)