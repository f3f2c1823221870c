import io
from pathlib import Path

import pytest

from striputary.cli import main, parse_args, resolve_settings
from striputary.config_file import ConfigFile
from striputary.run_args import SinkType
from striputary.service_config import Service


@pytest.fixture
def no_config(tmp_path, monkeypatch):
    config_home = tmp_path / "xdg"
    config_home.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.setenv("XDG_CONFIG_DIRS", str(config_home))


def test_parse_all_args(tmp_path):
    args = parse_args([str(tmp_path), "spotify_chromium", "-m"])
    assert args.output_dir == tmp_path
    assert args.service is Service.SPOTIFY_CHROMIUM
    assert args.monitor is True


def test_parse_no_args():
    args = parse_args([])
    assert args.output_dir is None
    assert args.service is None
    assert args.monitor is False


def test_parse_unknown_service(tmp_path):
    with pytest.raises(SystemExit):
        parse_args([str(tmp_path), "no_such_service"])


def test_command_line_wins_over_config(tmp_path):
    args = parse_args([str(tmp_path), "spotify_native"])
    config_file = ConfigFile(output_dir=Path("/elsewhere"), service="spotify_chromium", monitor=True)
    output_dir, service, sink_type = resolve_settings(args, config_file)
    assert output_dir == tmp_path
    assert service is Service.SPOTIFY_NATIVE
    assert sink_type is SinkType.MONITOR


def test_config_file_fills_in(tmp_path):
    args = parse_args([])
    config_file = ConfigFile(output_dir=tmp_path, service="spotify_chromium", monitor=None)
    output_dir, service, sink_type = resolve_settings(args, config_file)
    assert output_dir == tmp_path
    assert service is Service.SPOTIFY_CHROMIUM
    assert sink_type is SinkType.NORMAL


def test_default_service(tmp_path, capsys):
    output_dir, service, sink_type = resolve_settings(parse_args([str(tmp_path)]), None)
    assert service is Service.SPOTIFY_NATIVE
    assert sink_type is SinkType.NORMAL
    assert "Using default" in capsys.readouterr().out


def test_missing_output_dir():
    with pytest.raises(ValueError, match="Need an output folder"):
        resolve_settings(parse_args([]), None)


def test_main_without_output_dir(no_config):
    with pytest.raises(SystemExit, match="Need an output folder"):
        main([])


def test_main_runs_console(tmp_path, no_config, monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("sessions\nbogus\nquit\n"))
    assert main([str(tmp_path), "-m"]) == 0
    out = capsys.readouterr().out
    assert "Using service: spotify_native" in out
    assert "No config file found" in out
    assert "Commands:" in out