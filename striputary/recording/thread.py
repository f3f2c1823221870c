"""Running a recording session in a background thread."""

from __future__ import annotations

import contextlib
import queue
import threading
import time
from pathlib import Path

from striputary import config
from striputary.data_stream import DataStream
from striputary.recording import recorder
from striputary.recording.mpris import (
    PropertiesMonitor,
    collect_dbus_info,
    next_song,
    previous_song,
    start_playback,
    stop_playback,
)
from striputary.recording.status import RecordingExitStatus
from striputary.recording_session import RecordingSession
from striputary.run_args import RunArgs
from striputary.song import Song


class RecordingError(Exception):
    """A recording session could not be recorded."""


class RecordingThread:
    """Records one session: controls playback, collects songs and records audio."""

    def __init__(
        self, run_args: RunArgs, is_running: threading.Event, song_queue: queue.Queue[Song]
    ) -> None:
        self.run_args = run_args
        self.is_running = is_running
        self.song_queue = song_queue

    def record_new_session(self) -> tuple[RecordingExitStatus, RecordingSession]:
        """Record a whole session; ``is_running`` is cleared when done, even on error."""
        try:
            return self._record()
        finally:
            self.is_running.clear()

    def _record(self) -> tuple[RecordingExitStatus, RecordingSession]:
        try:
            self.run_args.session_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise RecordingError("Failed to create session directory") from exc
        buffer_file = self.run_args.buffer_file()
        if buffer_file.exists():
            raise RecordingError("Buffer file already exists, not recording a new session.")
        process = recorder.start_recording(
            buffer_file, self.run_args.service_config, self.run_args.sink_type
        )
        record_start_time = time.monotonic()
        try:
            status, session = self._polling_loop(self.run_args.yaml_file(), record_start_time)
        except BaseException:
            with contextlib.suppress(recorder.RecorderError):
                recorder.stop_recording(process)
            raise
        recorder.stop_recording(process)
        session.save()
        return status, session

    def _polling_loop(
        self, session_file: Path, record_start_time: float
    ) -> tuple[RecordingExitStatus, RecordingSession]:
        self._initial_buffer_phase()
        result = self._recording_phase(session_file, record_start_time)
        self._final_buffer_phase()
        return result

    def _initial_buffer_phase(self) -> None:
        service_config = self.run_args.service_config
        # Going to the next song and back helps with missing metadata for the first track.
        next_song(service_config)
        time.sleep(config.TIME_BETWEEN_SUBSEQUENT_DBUS_COMMANDS)
        previous_song(service_config)
        # Play briefly so that the sink gets registered and the first cut has room before it.
        print("Begin pre-session phase")
        start_playback(service_config)
        time.sleep(config.TIME_BEFORE_SESSION_START)
        stop_playback(service_config)
        print("Go to beginning of song")
        previous_song(service_config)
        time.sleep(config.WAIT_TIME_BEFORE_FIRST_SONG)

    def _recording_phase(
        self, session_file: Path, record_start_time: float
    ) -> tuple[RecordingExitStatus, RecordingSession]:
        service_config = self.run_args.service_config
        session = RecordingSession(session_file, time.monotonic() - record_start_time)
        with PropertiesMonitor(service_config.dbus_bus_name) as monitor:
            print("Start playback.")
            start_playback(service_config)
            time_last_signal = time.monotonic()
            while True:
                num_songs_before = len(session.songs)
                status = collect_dbus_info(session, monitor)
                if status.exit_status is not None:
                    return status.exit_status, session
                for song in session.songs[num_songs_before:]:
                    self.song_queue.put(song)
                    time_last_signal = time.monotonic()
                if session.songs:
                    overdue = time.monotonic() - time_last_signal - session.songs[-1].length
                    if overdue > config.TIME_WITHOUT_DBUS_SIGNAL_BEFORE_STOPPING:
                        return RecordingExitStatus.NO_NEW_SONG_FOR_TOO_LONG, session

    def _final_buffer_phase(self) -> None:
        print("Recording finished. Record final buffer for a few seconds")
        time.sleep(config.TIME_AFTER_SESSION_END)


class RecordingThreadHandle:
    """Starts a recording thread and collects the songs it reports."""

    def __init__(self, run_args: RunArgs) -> None:
        self._is_running = threading.Event()
        self._is_running.set()
        song_queue: queue.Queue[Song] = queue.Queue()
        self.songs: DataStream[Song] = DataStream(song_queue)
        self._recording = RecordingThread(run_args, self._is_running, song_queue)
        self._value: tuple[RecordingExitStatus, RecordingSession] | None = None
        self._error: BaseException | None = None
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def _run(self) -> None:
        try:
            self._value = self._recording.record_new_session()
        except Exception as exc:
            self._error = exc

    def update(self) -> None:
        self.songs.update(config.RECV_RECORDED_SONG_TIMEOUT)

    def is_still_running(self) -> bool:
        return self._is_running.is_set()

    def result(self) -> tuple[RecordingExitStatus, RecordingSession]:
        """Wait for the recording to end; re-raise its error if it failed."""
        self._thread.join()
        if self._error is not None:
            raise self._error
        assert self._value is not None
        return self._value