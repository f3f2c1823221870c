from unittest.mock import patch

import pytest

from striputary.recording.mpris import (
    DbusError,
    find_instance_in_listing,
    handle_properties_changed,
    is_playback_stopped,
    parse_signal_block,
    song_from_properties,
    start_playback,
)
from striputary.recording.status import RecordingExitStatus
from striputary.recording_session import RecordingSession

SIGNAL = """signal time=1.0 sender=:1.5 -> destination=(null destination) serial=9 path=/org/mpris/MediaPlayer2; interface=org.freedesktop.DBus.Properties; member=PropertiesChanged
   string "org.mpris.MediaPlayer2.Player"
   array [
      dict entry(
         string "Metadata"
         variant             array [
               dict entry(
                  string "mpris:length"
                  variant                      uint64 200000000
               )
               dict entry(
                  string "xesam:artist"
                  variant                      array [
                        string "The Band"
                     ]
               )
               dict entry(
                  string "xesam:album"
                  variant                      string "Live, Again"
               )
               dict entry(
                  string "xesam:title"
                  variant                      string "First Song"
               )
               dict entry(
                  string "xesam:trackNumber"
                  variant                      int32 3
               )
            ]
      )
   ]
   array [
   ]""".splitlines()


def test_parse_signal_block_metadata():
    changed = parse_signal_block(SIGNAL)
    metadata = changed["Metadata"]
    assert metadata["xesam:title"] == "First Song"
    assert metadata["xesam:artist"] == ["The Band"]
    assert metadata["xesam:trackNumber"] == 3


def test_parse_other_signal_is_none():
    assert parse_signal_block(["signal member=NameAcquired", '   string ":1.2"']) is None


def test_song_from_properties():
    song = song_from_properties(parse_signal_block(SIGNAL))
    assert song.artist == "The Band"
    assert song.album == "Live, Again"
    assert song.track_number == 3
    assert song.length == pytest.approx(200.0)


def test_zero_length_song_is_ignored():
    props = {"Metadata": {"xesam:artist": ["a"], "xesam:title": "t", "mpris:length": 0}}
    assert song_from_properties(props) is None


def test_string_length():
    props = {"Metadata": {"xesam:artist": ["a"], "xesam:title": "t", "mpris:length": "5000000"}}
    assert song_from_properties(props).length == pytest.approx(5.0)


def test_missing_title_raises():
    with pytest.raises(DbusError):
        song_from_properties({"Metadata": {"xesam:artist": ["a"], "mpris:length": 1}})


def test_playback_stopped():
    assert is_playback_stopped({"PlaybackStatus": "Paused"}) is True
    assert is_playback_stopped({"PlaybackStatus": "Playing"}) is False
    assert is_playback_stopped({}) is False


def test_handle_records_song_once(tmp_path):
    session = RecordingSession(tmp_path / "session.yaml", 1.0)
    changed = parse_signal_block(SIGNAL)
    status = handle_properties_changed(session, changed)
    handle_properties_changed(session, changed)
    assert not status.finished
    assert len(session.songs) == 1
    assert RecordingSession.from_file(tmp_path / "session.yaml").songs == session.songs


def test_handle_paused_finishes(tmp_path):
    session = RecordingSession(tmp_path / "session.yaml", 1.0)
    status = handle_properties_changed(session, {"PlaybackStatus": "Paused"})
    assert status.exit_status is RecordingExitStatus.FINISHED_OR_INTERRUPTED
    assert session.songs == []


def test_find_instance():
    listing = " org.a\n org.mpris.MediaPlayer2.chromium.instance42\n"
    assert (
        find_instance_in_listing(listing, "org.mpris.MediaPlayer2.chromium")
        == "org.mpris.MediaPlayer2.chromium.instance42"
    )


def test_find_instance_errors():
    with pytest.raises(DbusError):
        find_instance_in_listing("org.x1\norg.x2\n", "org.x")
    with pytest.raises(DbusError):
        find_instance_in_listing("org.y\n", "org.x")


def test_playback_command():
    class Cfg:
        dbus_bus_name = "org.mpris.MediaPlayer2.spotify"

    with patch("striputary.recording.mpris.subprocess.run") as run:
        result = start_playback(Cfg())
    assert result is None
    assert run.call_count == 1
    args = run.call_args.args[0]
    assert args[0] == "dbus-send"
    assert "--dest=org.mpris.MediaPlayer2.spotify" in args
    assert args[-1] == "org.mpris.MediaPlayer2.Player.Play"