"""Routing a player's audio into a dedicated sink and recording it."""

from __future__ import annotations

import os
import re
import subprocess

from striputary.config import (
    STRIPUTARY_MONITOR_SINK_DESCRIPTION,
    STRIPUTARY_MONITOR_SINK_NAME,
    STRIPUTARY_SINK_DESCRIPTION,
    STRIPUTARY_SINK_NAME,
)
from striputary.run_args import SinkType
from striputary.service_config import ServiceConfig

_SINK_INPUT_PATTERN = re.compile(r'Sink Input #([0-9]*).*?media.name = "(.*?)"')
_I32_MAX = 2**31 - 1


class RecorderError(Exception):
    """Setting up, starting or stopping the recording failed."""


def _run(args: list[str], failure_message: str) -> subprocess.CompletedProcess[bytes]:
    """Run a command to completion; raise if it cannot start or does not succeed."""
    try:
        result = subprocess.run(args, capture_output=True)
    except OSError as exc:
        raise RecorderError(failure_message) from exc
    if result.returncode != 0:
        raise RecorderError(f"{' '.join(args)} exited with status {result.returncode}")
    return result


def _parse_index(text: str) -> int:
    if not text.isdigit() or int(text) > _I32_MAX:
        raise RecorderError("Integer conversion failed for sink index")
    return int(text)


def parse_sink_input_index(listing: str, sink_name: str) -> int | None:
    """Index of the first sink input in a ``pactl list sink-inputs`` listing with this media name."""
    flat = listing.replace("\n", "")
    for match in _SINK_INPUT_PATTERN.finditer(flat):
        if match.group(2) == sink_name:
            return _parse_index(match.group(1))
    return None


def _sink_exists() -> bool:
    result = _run(
        ["pactl", "list", "sinks"],
        "Failed to execute sink list command (pactl list sinks) - is pactl installed?.",
    )
    return STRIPUTARY_SINK_NAME in result.stdout.decode("utf-8", errors="replace")


def _remove_sink() -> None:
    _run(["pactl", "unload-module", "module-null-sink"], "Failed to remove sink.")


def _default_sink_for_monitor() -> str:
    result = _run(
        ["pactl", "get-default-sink"], "Failed to get name of default sink for monitor."
    )
    try:
        return result.stdout.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise RecorderError("Failed to decode output of pactl get-default-sink") from exc


def _create_monitor_sink() -> None:
    _run(
        [
            "pactl",
            "load-module",
            "module-combine-sink",
            f"sink_name={STRIPUTARY_MONITOR_SINK_NAME}",
            f"sink_properties=device.description={STRIPUTARY_MONITOR_SINK_DESCRIPTION}",
            f"slaves={STRIPUTARY_SINK_NAME},{_default_sink_for_monitor()}",
        ],
        "Failed to execute sink creation command.",
    )


def _create_sink(sink_type: SinkType) -> str:
    """Create the recording sink and return the name of the sink to play into."""
    _run(
        [
            "pactl",
            "load-module",
            "module-null-sink",
            f"sink_name={STRIPUTARY_SINK_NAME}",
            f"sink_properties=device.description={STRIPUTARY_SINK_DESCRIPTION}",
        ],
        "Failed to execute sink creation command.",
    )
    if sink_type is SinkType.MONITOR:
        _create_monitor_sink()
        return STRIPUTARY_MONITOR_SINK_NAME
    return STRIPUTARY_SINK_NAME


def _sink_input_index(service_config: ServiceConfig) -> int | None:
    result = _run(
        ["pactl", "list", "sink-inputs"], "Failed to execute list sink inputs command."
    )
    listing = result.stdout.decode("utf-8", errors="replace")
    return parse_sink_input_index(listing, service_config.sink_name)


def _redirect_sink(index: int, output_sink_name: str) -> None:
    _run(
        ["pactl", "move-sink-input", str(index), output_sink_name],
        "Failed to execute sink redirection via pactl move-sink-input - is pactl installed?",
    )


def _setup_recording(service_config: ServiceConfig, sink_type: SinkType) -> None:
    if _sink_exists():
        _remove_sink()
    output_sink_name = _create_sink(sink_type)
    index = _sink_input_index(service_config)
    if index is None:
        raise RecorderError(
            f"Failed to find sink index for service: {service_config.sink_name}"
        )
    _redirect_sink(index, output_sink_name)


def start_recording(
    output_file: str | os.PathLike[str], service_config: ServiceConfig, sink_type: SinkType
) -> subprocess.Popen[bytes]:
    """Route the service's audio into the recording sink and start recording it."""
    _setup_recording(service_config, sink_type)
    try:
        return subprocess.Popen(
            [
                "parec",
                "-d",
                f"{STRIPUTARY_SINK_NAME}.monitor",
                "--file-format=wav",
                os.fspath(output_file),
            ]
        )
    except OSError as exc:
        raise RecorderError("Failed to execute record command - is parec installed?") from exc


def stop_recording(process: subprocess.Popen[bytes]) -> None:
    try:
        process.terminate()
    except OSError as exc:
        raise RecorderError("Failed to terminate parec while recording") from exc
    process.wait()
    print("Stopped recording.")