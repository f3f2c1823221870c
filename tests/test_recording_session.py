from pathlib import Path

import pytest
import yaml

from striputary.config import DEFAULT_BUFFER_FILE, DEFAULT_MUSIC_DIR, DEFAULT_SESSION_FILE
from striputary.recording_session import RecordingSession
from striputary.song import Song


def make_session(directory):
    session = RecordingSession(directory / DEFAULT_SESSION_FILE, 6.25)
    session.songs.append(Song("Artist", "Album", "One", 1, 200.0))
    session.songs.append(Song("Artist", None, "Two", None, 150.5))
    return session


def test_new_session_has_no_songs():
    session = RecordingSession(Path("/tmp/s/session.yaml"), 1.0)
    assert session.songs == []


def test_derived_paths():
    session = RecordingSession(Path("/data/session1/session.yaml"), 0.0)
    assert session.buffer_file() == Path("/data/session1") / DEFAULT_BUFFER_FILE
    assert session.music_dir() == Path("/data/session1") / DEFAULT_MUSIC_DIR


def test_save_and_load_round_trip(tmp_path):
    session = make_session(tmp_path)
    session.save()
    loaded = RecordingSession.from_file(session.filename)
    assert loaded == session


def test_saved_file_omits_filename(tmp_path):
    session = make_session(tmp_path)
    session.save()
    raw = yaml.safe_load(session.filename.read_text())
    assert list(raw) == ["songs", "estimated_time_first_song"]
    assert raw["estimated_time_first_song"] == session.estimated_time_first_song


def test_from_parent_dir(tmp_path):
    session = make_session(tmp_path)
    session.save()
    loaded = RecordingSession.from_parent_dir(tmp_path)
    assert loaded.filename == tmp_path / DEFAULT_SESSION_FILE
    assert loaded.songs == session.songs


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        RecordingSession.from_parent_dir(tmp_path)


@pytest.mark.parametrize(
    "content",
    ["just text", "songs: []\n", "songs: [{title: x}]\nestimated_time_first_song: 1.0\n", ": :"],
)
def test_bad_content_raises(tmp_path, content):
    path = tmp_path / DEFAULT_SESSION_FILE
    path.write_text(content)
    with pytest.raises(ValueError):
        RecordingSession.from_file(path)