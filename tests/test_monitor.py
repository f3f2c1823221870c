import subprocess
import time
from unittest.mock import patch

from striputary.recording.monitor import RecordingMonitor
from striputary.recording.recorder import RecorderError
from striputary.recording.thread import RecordingError
from striputary.run_args import RunArgs
from striputary.service_config import ServiceConfig

SERVICE = ServiceConfig(sink_name="Spotify", dbus_bus_name="org.mpris.MediaPlayer2.spotify")


def wait_until_stopped(monitor, seconds=5.0):
    deadline = time.monotonic() + seconds
    while monitor.is_running() and time.monotonic() < deadline:
        monitor.update()
        time.sleep(0.005)


def test_stopped_monitor():
    monitor = RecordingMonitor.stopped()
    monitor.update()
    assert monitor.is_running() is False
    assert monitor.songs() == []
    assert monitor.error is None


def test_running_monitor_is_running_until_updated(tmp_path):
    run_args = RunArgs(tmp_path, SERVICE)
    run_args.buffer_file().write_bytes(b"")
    monitor = RecordingMonitor.running(run_args)
    assert monitor.is_running() is True
    assert monitor.songs() == []
    wait_until_stopped(monitor)


def test_failed_recording_is_reported(tmp_path):
    run_args = RunArgs(tmp_path, SERVICE)
    run_args.buffer_file().write_bytes(b"")
    monitor = RecordingMonitor.running(run_args)
    wait_until_stopped(monitor)
    assert monitor.is_running() is False
    assert isinstance(monitor.error, RecordingError)
    assert monitor.songs() == []


def test_recorder_error_is_reported(tmp_path):
    run_args = RunArgs(tmp_path / "session", SERVICE)

    def failing_run(args, **kwargs):
        return subprocess.CompletedProcess(args, 1, stdout=b"", stderr=b"")

    with patch("subprocess.run", side_effect=failing_run):
        monitor = RecordingMonitor.running(run_args)
        wait_until_stopped(monitor)
    assert monitor.is_running() is False
    assert monitor.songs() == []
    assert isinstance(monitor.error, RecorderError)