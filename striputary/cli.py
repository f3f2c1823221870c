"""Command line entry point and a small interactive console."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from pathlib import Path

from striputary.app import Striputary
from striputary.config_file import ConfigFile, ConfigFileError
from striputary.run_args import SinkType
from striputary.service_config import Service
from striputary.session_manager import NEW_SESSION

_VERSION = "0.1.0"

_HELP = """Commands:
  sessions          list recorded sessions
  select N|new      select a session
  show              show the cuts on screen
  up / down         scroll through the cuts
  move N TIME       move the cut of plot N and all later ones to TIME (seconds)
  cut               cut all songs of the selected session
  record            record a new session
  songs             list songs recorded so far
  quit              leave"""

_NUM_SHOWN = 10


def _service(text: str) -> Service:
    try:
        return Service.parse(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="striputary")
    parser.add_argument("output_dir", nargs="?", type=Path, default=None)
    parser.add_argument("service", nargs="?", type=_service, default=None)
    parser.add_argument("-m", "--monitor", action="store_true")
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {_VERSION}")
    return parser.parse_args(argv)


def resolve_settings(
    args: argparse.Namespace, config_file: ConfigFile | None
) -> tuple[Path, Service, SinkType]:
    """Combine command line and config file; the command line wins."""
    output_dir = args.output_dir
    if output_dir is None and config_file is not None:
        output_dir = config_file.output_dir
    if output_dir is None:
        raise ValueError(
            "Need an output folder - either pass it as a command line argument or specify "
            "it in the config file (probably ~/.config/striputary/config.yaml"
        )
    service = args.service
    if service is None and config_file is not None and config_file.service is not None:
        service = Service.parse(config_file.service)
    if service is None:
        service = Service.SPOTIFY_NATIVE
        print("No service specified in command line args or config file. Using default.")
    monitor = args.monitor or bool(config_file is not None and config_file.monitor)
    sink_type = SinkType.MONITOR if monitor else SinkType.NORMAL
    return Path(output_dir), service, sink_type


def _show(app: Striputary) -> None:
    for index, plot in app.visible_plots(_NUM_SHOWN):
        before = plot.excerpt.song_before
        after = plot.excerpt.song_after
        before_text = before.title if before is not None else "-"
        after_text = after.title if after is not None else "-"
        done = "x" if plot.finished_cutting_song_after else " "
        print(f"[{done}] {index}: {before_text} | {plot.cut_time.time:.3f}s | {after_text}")


def _handle(app: Striputary, words: list[str]) -> bool:
    """Run one command; return False to leave."""
    command, rest = words[0], words[1:]
    if command == "quit":
        return False
    if command == "sessions":
        for index, name in app.session_manager.iter_relative_paths_with_indices():
            mark = "*" if app.session_manager.is_currently_selected(index) else " "
            print(f"{mark} {index}: {name}")
    elif command == "select" and len(rest) == 1:
        app.select_session(NEW_SESSION if rest[0] == "new" else int(rest[0]))
    elif command == "show":
        _show(app)
    elif command == "up":
        app.scroll(-1)
    elif command == "down":
        app.scroll(1)
    elif command == "move" and len(rest) == 2:
        index = int(rest[0])
        app.move_all_markers_after(index, app.plots[index].offset_from_plot_x(float(rest[1])))
    elif command == "cut":
        app.cut_songs()
    elif command == "record":
        app.start_recording()
    elif command == "songs":
        for song in app.recording.songs():
            print(song)
    else:
        print(_HELP)
    return True


def _run_console(app: Striputary) -> None:
    while True:
        app.recording.update()
        app.mark_cut_songs()
        if app.recording.error is not None:
            print(app.recording.error)
        try:
            line = input("> ")
        except EOFError:
            return
        words = line.split()
        if not words:
            continue
        try:
            if not _handle(app, words):
                return
        except (ValueError, IndexError, OSError) as exc:
            print(exc)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        config_file: ConfigFile | None = ConfigFile.read()
    except ConfigFileError as exc:
        print(exc)
        config_file = None
    try:
        output_dir, service, sink_type = resolve_settings(args, config_file)
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc
    print(f"Using service: {service}")
    app = Striputary(output_dir, service, sink_type)
    try:
        _run_console(app)
    finally:
        app.cutter.close()
    return 0