import io
import queue
import subprocess
import threading
from unittest.mock import MagicMock, patch

import pytest

from striputary.recording.recorder import RecorderError
from striputary.recording.status import RecordingExitStatus
from striputary.recording.thread import RecordingError, RecordingThread, RecordingThreadHandle
from striputary.recording_session import RecordingSession
from striputary.run_args import RunArgs
from striputary.service_config import ServiceConfig

SERVICE = ServiceConfig(sink_name="Spotify", dbus_bus_name="org.mpris.MediaPlayer2.spotify")

LISTING = 'Sink Input #42\n\tProperties:\n\t\tmedia.name = "Spotify"\n'

HEADER = (
    "signal time=1.0 sender=:1.5 -> destination=(null destination) serial=10 "
    "path=/org/mpris/MediaPlayer2; interface=org.freedesktop.DBus.Properties; "
    "member=PropertiesChanged\n"
)

SIGNALS = (
    HEADER
    + '   string "org.mpris.MediaPlayer2.Player"\n'
    "   array [\n"
    "      dict entry(\n"
    '         string "Metadata"\n'
    "         variant             array [\n"
    "               dict entry(\n"
    '                  string "mpris:length"\n'
    "                  variant                      uint64 240000000\n"
    "               )\n"
    "               dict entry(\n"
    '                  string "xesam:album"\n'
    '                  variant                      string "Album"\n'
    "               )\n"
    "               dict entry(\n"
    '                  string "xesam:artist"\n'
    "                  variant                      array [\n"
    '                        string "Artist"\n'
    "                     ]\n"
    "               )\n"
    "               dict entry(\n"
    '                  string "xesam:title"\n'
    '                  variant                      string "Title"\n'
    "               )\n"
    "               dict entry(\n"
    '                  string "xesam:trackNumber"\n'
    "                  variant                      int32 3\n"
    "               )\n"
    "            ]\n"
    "      )\n"
    "   ]\n"
    "   array [\n"
    "   ]\n"
    + HEADER
    + '   string "org.mpris.MediaPlayer2.Player"\n'
    "   array [\n"
    "      dict entry(\n"
    '         string "PlaybackStatus"\n'
    '         variant             string "Paused"\n'
    "      )\n"
    "   ]\n"
    "   array [\n"
    "   ]\n"
)


def fake_run(args, **kwargs):
    stdout = LISTING.encode() if list(args[:3]) == ["pactl", "list", "sink-inputs"] else b""
    return subprocess.CompletedProcess(args, 0, stdout=stdout, stderr=b"")


def failing_run(args, **kwargs):
    return subprocess.CompletedProcess(args, 1, stdout=b"", stderr=b"")


def fake_popen(args, **kwargs):
    process = MagicMock()
    if args[0] == "dbus-monitor":
        process.stdout = io.StringIO(SIGNALS)
    return process


def make_thread(run_args):
    running = threading.Event()
    running.set()
    songs = queue.Queue()
    return RecordingThread(run_args, running, songs), running, songs


def test_existing_buffer_file_refuses_to_record(tmp_path):
    run_args = RunArgs(tmp_path, SERVICE)
    run_args.buffer_file().write_bytes(b"")
    thread, running, _ = make_thread(run_args)
    with pytest.raises(RecordingError, match="Buffer file already exists"):
        thread.record_new_session()
    assert not running.is_set()


def test_session_dir_cannot_be_created(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    thread, running, _ = make_thread(RunArgs(blocker / "session", SERVICE))
    with pytest.raises(RecordingError, match="Failed to create session directory"):
        thread.record_new_session()
    assert not running.is_set()


def test_recorder_failure_propagates(tmp_path):
    run_args = RunArgs(tmp_path / "session", SERVICE)
    thread, running, _ = make_thread(run_args)
    with patch("subprocess.run", side_effect=failing_run):
        with pytest.raises(RecorderError):
            thread.record_new_session()
    assert run_args.session_dir.is_dir()
    assert not running.is_set()


def test_records_songs_until_paused(tmp_path):
    run_args = RunArgs(tmp_path / "session", SERVICE)
    thread, running, songs = make_thread(run_args)
    with patch("subprocess.run", side_effect=fake_run), patch(
        "subprocess.Popen", side_effect=fake_popen
    ), patch("time.sleep"):
        status, session = thread.record_new_session()
    assert status is RecordingExitStatus.FINISHED_OR_INTERRUPTED
    assert len(session.songs) == 1
    song = session.songs[0]
    assert (song.artist, song.album, song.title, song.track_number) == (
        "Artist", "Album", "Title", 3
    )
    assert song.length == pytest.approx(240.0)
    assert songs.get_nowait() == song
    assert not running.is_set()
    assert RecordingSession.from_file(run_args.yaml_file()).songs == session.songs


def test_handle_reports_failure(tmp_path):
    run_args = RunArgs(tmp_path, SERVICE)
    run_args.buffer_file().write_bytes(b"")
    handle = RecordingThreadHandle(run_args)
    with pytest.raises(RecordingError):
        handle.result()
    assert handle.is_still_running() is False
    handle.update()
    assert handle.songs.data == []


def test_handle_collects_songs(tmp_path):
    run_args = RunArgs(tmp_path / "session", SERVICE)
    with patch("subprocess.run", side_effect=fake_run), patch(
        "subprocess.Popen", side_effect=fake_popen
    ), patch("time.sleep"):
        handle = RecordingThreadHandle(run_args)
        status, session = handle.result()
    assert status is RecordingExitStatus.FINISHED_OR_INTERRUPTED
    assert handle.is_still_running() is False
    handle.update()
    assert handle.songs.data == session.songs