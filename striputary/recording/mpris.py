"""Talking to an MPRIS media player over the session bus."""

from __future__ import annotations

import queue
import re
import subprocess
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from striputary.recording.status import RUNNING, RecordingExitStatus, RecordingStatus
from striputary.recording_session import RecordingSession
from striputary.song import Song


class DbusError(Exception):
    """Communication with the bus or a player failed."""


@dataclass
class _Entry:
    key: Any
    value: Any


_VALUE_PATTERNS = [
    (re.compile(r'string "(.*)"?$'), lambda m: m.group(1).removesuffix('"')),
    (re.compile(r'object path "(.*)"?$'), lambda m: m.group(1).removesuffix('"')),
    (re.compile(r'signature "(.*)"?$'), lambda m: m.group(1).removesuffix('"')),
    (re.compile(r"(?:u?int16|u?int32|u?int64|byte)\s+(-?\d+)"), lambda m: int(m.group(1))),
    (re.compile(r"double\s+(\S+)"), lambda m: float(m.group(1))),
    (re.compile(r"boolean\s+(true|false)"), lambda m: m.group(1) == "true"),
]

_STRUCTURE_PATTERNS = [
    (re.compile(r"variant"), ("variant", None)),
    (re.compile(r"array\s*\["), ("open", "array")),
    (re.compile(r"dict entry\("), ("open", "entry")),
    (re.compile(r"struct\s*\{"), ("open", "struct")),
    (re.compile(r"[\]\)\}]"), None),
]

_CLOSERS = {"array": "]", "entry": ")", "struct": "}"}


def _tokenize(lines: Iterable[str]) -> list[tuple[str, Any]]:
    tokens: list[tuple[str, Any]] = []
    for line in lines:
        rest = line.strip()
        while rest:
            for pattern, convert in _VALUE_PATTERNS:
                match = pattern.match(rest)
                if match:
                    tokens.append(("value", convert(match)))
                    break
            else:
                for pattern, token in _STRUCTURE_PATTERNS:
                    match = pattern.match(rest)
                    if match:
                        tokens.append(token or ("close", match.group(0)))
                        break
                else:
                    raise DbusError(f"cannot parse bus message line: {line!r}")
            rest = rest[match.end():].lstrip()
    return tokens


def _parse(tokens: list[tuple[str, Any]], pos: int) -> tuple[Any, int]:
    if pos >= len(tokens):
        raise DbusError("bus message ended unexpectedly")
    kind, value = tokens[pos]
    pos += 1
    if kind == "value":
        return value, pos
    if kind == "variant":
        return _parse(tokens, pos)
    if kind == "close":
        raise DbusError(f"unexpected {value!r} in bus message")
    items = []
    while True:
        if pos >= len(tokens):
            raise DbusError("bus message ended unexpectedly")
        if tokens[pos][0] == "close":
            if tokens[pos][1] != _CLOSERS[value]:
                raise DbusError(f"mismatched {tokens[pos][1]!r} in bus message")
            pos += 1
            break
        item, pos = _parse(tokens, pos)
        items.append(item)
    if value == "struct":
        return tuple(items), pos
    if value == "entry":
        if len(items) != 2:
            raise DbusError("dict entry must hold a key and a value")
        return _Entry(items[0], items[1]), pos
    if items and all(isinstance(item, _Entry) for item in items):
        return {item.key: item.value for item in items}, pos
    return items, pos


def parse_signal_block(lines: list[str]) -> dict[str, Any] | None:
    """Changed properties of one PropertiesChanged signal as printed by dbus-monitor.

    Returns None for any other message.
    """
    if not lines or "member=PropertiesChanged" not in lines[0]:
        return None
    tokens = _tokenize(lines[1:])
    values = []
    pos = 0
    while pos < len(tokens):
        value, pos = _parse(tokens, pos)
        values.append(value)
    if len(values) < 2:
        return None
    changed = values[1]
    if isinstance(changed, list) and not changed:
        return {}
    return changed if isinstance(changed, dict) else None


class PropertiesMonitor:
    """Watches PropertiesChanged signals sent by one bus name."""

    def __init__(self, bus_name: str) -> None:
        rule = (
            f"type='signal',sender='{bus_name}',"
            "interface='org.freedesktop.DBus.Properties',member='PropertiesChanged'"
        )
        try:
            self._process = subprocess.Popen(
                ["dbus-monitor", "--session", rule],
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
            )
        except OSError as exc:
            raise DbusError("Failed to start dbus-monitor - is it installed?") from exc
        self._queue: queue.Queue[dict[str, Any]] = queue.Queue()
        self._reader = threading.Thread(target=self._read, daemon=True)
        self._reader.start()

    def _emit(self, block: list[str]) -> None:
        try:
            changed = parse_signal_block(block)
        except DbusError:
            return
        if changed is not None:
            self._queue.put(changed)

    def _read(self) -> None:
        block: list[str] = []
        assert self._process.stdout is not None
        for raw in self._process.stdout:
            line = raw.rstrip("\n")
            if line and not line[0].isspace():
                self._emit(block)
                block = [line]
            elif block:
                block.append(line)
        self._emit(block)

    def next_changed_properties(self, timeout: float) -> dict[str, Any] | None:
        """Wait up to ``timeout`` seconds for the next changed-properties dict."""
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def close(self) -> None:
        self._process.terminate()
        self._process.wait()

    def __enter__(self) -> PropertiesMonitor:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def collect_dbus_info(session: RecordingSession, monitor: PropertiesMonitor) -> RecordingStatus:
    """Handle the next signal, if one arrives within a tenth of a second."""
    changed = monitor.next_changed_properties(0.1)
    if changed is None:
        return RUNNING
    return handle_properties_changed(session, changed)


def handle_properties_changed(
    session: RecordingSession, changed_properties: dict[str, Any]
) -> RecordingStatus:
    stopped = is_playback_stopped(changed_properties)
    if not stopped:
        song = song_from_properties(changed_properties)
        # Every song change produces several signals; only record real changes.
        if song is not None and (not session.songs or session.songs[-1] != song):
            print(f"Now recording song: {song}")
            session.songs.append(song)
            session.save()
    if stopped:
        return RecordingStatus(RecordingExitStatus.FINISHED_OR_INTERRUPTED)
    return RUNNING


def is_playback_stopped(changed_properties: dict[str, Any]) -> bool:
    status = changed_properties.get("PlaybackStatus")
    if status is None:
        return False
    if not isinstance(status, str):
        raise DbusError(f"PlaybackStatus is not a string: {status!r}")
    return status == "Paused"


def _first_string(value: Any) -> str:
    while isinstance(value, (list, tuple)):
        if not value:
            raise DbusError("empty artist list")
        value = value[0]
    if not isinstance(value, str):
        raise DbusError(f"expected a string, got {value!r}")
    return value


def _string(metadata: dict[str, Any], key: str) -> str:
    value = metadata[key]
    if not isinstance(value, str):
        raise DbusError(f"{key} is not a string: {value!r}")
    return value


def _length(value: Any) -> float:
    if isinstance(value, int) and not isinstance(value, bool):
        microseconds = value
    elif isinstance(value, str):
        try:
            microseconds = int(value)
        except ValueError as exc:
            raise DbusError("Failed to parse song length string as integer") from exc
    else:
        raise DbusError(f"Failed to parse song length: {value!r}")
    return microseconds * 1e-6


def song_from_properties(changed_properties: dict[str, Any]) -> Song | None:
    """The song described by a Metadata change, or None if there is none or it is bogus."""
    metadata = changed_properties.get("Metadata")
    if metadata is None:
        return None
    if not isinstance(metadata, dict):
        raise DbusError("Metadata is not a dictionary")
    try:
        track_number = metadata.get("xesam:trackNumber")
        if track_number is not None and (
            isinstance(track_number, bool) or not isinstance(track_number, int)
        ):
            raise DbusError(f"track number is not an integer: {track_number!r}")
        song = Song(
            artist=_first_string(metadata["xesam:artist"]),
            album=_string(metadata, "xesam:album") if "xesam:album" in metadata else None,
            title=_string(metadata, "xesam:title"),
            track_number=track_number,
            length=_length(metadata["mpris:length"]),
        )
    except KeyError as exc:
        raise DbusError(f"Metadata lacks {exc.args[0]}") from exc
    # Some services send entries with zero length that are not actual songs.
    return song if song.length != 0.0 else None


def send_playback_command(service_config: Any, command: str) -> None:
    try:
        subprocess.run(
            [
                "dbus-send",
                "--print-reply",
                f"--dest={service_config.dbus_bus_name}",
                "/org/mpris/MediaPlayer2",
                f"org.mpris.MediaPlayer2.Player.{command}",
            ],
            capture_output=True,
        )
    except OSError as exc:
        raise DbusError("Failed to send dbus command to control playback") from exc


def previous_song(service_config: Any) -> None:
    send_playback_command(service_config, "Previous")


def next_song(service_config: Any) -> None:
    send_playback_command(service_config, "Next")


def start_playback(service_config: Any) -> None:
    send_playback_command(service_config, "Play")


def stop_playback(service_config: Any) -> None:
    send_playback_command(service_config, "Pause")


def find_instance_in_listing(listing: str, service_base_name: str) -> str:
    """The single service in a bus listing whose name starts with the base name."""
    matching = [
        line.strip()
        for line in listing.splitlines()
        if line.strip().startswith(service_base_name)
    ]
    if len(matching) > 1:
        raise DbusError(
            "Found multiple dbus services that match the service configuration: "
            + ", ".join(matching)
        )
    if not matching:
        raise DbusError(f"Found no matching dbus service for base name: {service_base_name}")
    return matching[0]


def get_instance_of_service(service_base_name: str) -> str:
    try:
        out = subprocess.run(["qdbus", "--session"], capture_output=True)
    except OSError as exc:
        raise DbusError("Failed to get list of services with qdbus") from exc
    try:
        listing = out.stdout.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DbusError("qdbus output is not valid UTF-8") from exc
    return find_instance_in_listing(listing, service_base_name)