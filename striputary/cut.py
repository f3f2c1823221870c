"""Finding the cut positions in a recording and cutting songs with ffmpeg."""

from __future__ import annotations

import math
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path

from striputary import config
from striputary.audio_excerpt import AudioExcerpt
from striputary.audio_time import AudioTime
from striputary.config import MAX_OFFSET, MIN_OFFSET, NUM_OFFSETS_TO_TRY, READ_BUFFER
from striputary.excerpt_collection import ExcerptCollection, NamedExcerpt
from striputary.recording_session import RecordingSession
from striputary.song import Song
from striputary.wav import MissingSongError, extract_audio


@dataclass
class CutInfo:
    song: Song
    buffer_file: Path
    music_dir: Path
    start_time: AudioTime
    end_time: AudioTime
    num_in_recording: int

    @classmethod
    def from_session(
        cls,
        session: RecordingSession,
        song: Song,
        start_time: AudioTime,
        end_time: AudioTime,
        num_in_recording: int,
    ) -> CutInfo:
        return cls(
            song=song,
            buffer_file=session.buffer_file(),
            music_dir=session.music_dir(),
            start_time=start_time,
            end_time=end_time,
            num_in_recording=num_in_recording,
        )


def _excerpt(buffer_file: Path, cut_time: float) -> AudioExcerpt | None:
    try:
        return extract_audio(
            buffer_file, cut_time + MIN_OFFSET - READ_BUFFER, cut_time + MAX_OFFSET + READ_BUFFER
        )
    except MissingSongError:
        return None


def cut_timestamps_from_song_lengths(
    songs: list[Song], estimated_time_first_song: float
) -> list[float]:
    """The start time of every song, assuming they follow each other directly."""
    timestamps = []
    current = estimated_time_first_song
    for song in songs:
        timestamps.append(current)
        current += song.length
    return timestamps


def determine_cut_offset(audio_excerpts: list[AudioExcerpt], cut_timestamps: list[float]) -> float:
    """The offset that puts the cuts where the recording is quietest overall."""
    best: tuple[float, float] | None = None
    for i in range(NUM_OFFSETS_TO_TRY):
        offset = i / NUM_OFFSETS_TO_TRY * (MAX_OFFSET - MIN_OFFSET) + MIN_OFFSET
        total = sum(
            excerpt.volume_at(cut_time + offset)
            for cut_time, excerpt in zip(cut_timestamps, audio_excerpts)
        )
        if best is None or total < best[0]:
            best = (total, offset)
    assert best is not None
    quality = best[0] / len(audio_excerpts) if audio_excerpts else math.nan
    print(f"Av. volume at cuts: {quality:.3f}")
    return best[1]


def all_valid_excerpts_and_songs(
    session: RecordingSession,
) -> tuple[list[AudioExcerpt], list[Song]]:
    """Excerpts around each cut that lies within the recording, and their songs."""
    excerpts: list[AudioExcerpt] = []
    songs: list[Song] = []
    cut_time = session.estimated_time_first_song
    for song in session.songs:
        excerpt = _excerpt(session.buffer_file(), cut_time)
        if excerpt is None:
            break
        excerpts.append(excerpt)
        songs.append(song)
        cut_time += song.length
    after_last = _excerpt(session.buffer_file(), cut_time)
    if after_last is not None:
        excerpts.append(after_last)
    return excerpts, songs


def get_excerpt_collection(session: RecordingSession) -> ExcerptCollection:
    excerpts, songs = all_valid_excerpts_and_songs(session)
    timestamps = cut_timestamps_from_song_lengths(songs, session.estimated_time_first_song)
    offset_guess = determine_cut_offset(excerpts, timestamps)

    def song_at(num: int) -> Song | None:
        return songs[num] if num < len(songs) else None

    named = [
        NamedExcerpt(
            excerpt=excerpt,
            song_before=None if num == 0 else song_at(num),
            song_after=song_at(num),
            num=num,
        )
        for num, excerpt in enumerate(excerpts)
    ]
    return ExcerptCollection(session=session, excerpts=named, offset_guess=offset_guess)


def _format_number(value: float) -> str:
    if math.isfinite(value) and float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def ffmpeg_command(info: CutInfo) -> list[str]:
    """The ffmpeg invocation that cuts one song out of the buffer file."""
    difference = info.end_time.time - info.start_time.time
    target = info.song.target_file(info.music_dir, info.num_in_recording)
    command = [
        "ffmpeg",
        "-ss", _format_number(info.start_time.time),
        "-t", _format_number(difference),
        "-i", os.fspath(info.buffer_file),
        "-c:a", "libopus",
        "-b:a", str(config.BITRATE),
    ]
    song = info.song
    metadata = [
        ("title", song.title),
        ("album", song.album),
        ("artist", song.artist),
        ("albumartist", song.artist),
        ("track", song.track_number),
    ]
    for key, value in metadata:
        if value is not None:
            command += ["-metadata", f"{key}={value}"]
    return command + ["-y", os.fspath(target)]


def cut_song(info: CutInfo) -> None:
    difference = info.end_time.time - info.start_time.time
    target = info.song.target_file(info.music_dir, info.num_in_recording)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OSError("Failed to create subfolders of target file") from exc
    print(
        f"Cutting song: {info.start_time.time:.2f}+{difference:.2f}: {info.song} to {target}"
    )
    try:
        subprocess.run(ffmpeg_command(info), capture_output=True)
    except OSError as exc:
        song = info.song
        raise OSError(
            f"Failed to cut song: {song.title!r} {song.album!r} {song.artist!r} "
            f"({info.start_time.time!r}+{difference!r}) (is ffmpeg installed?)"
        ) from exc