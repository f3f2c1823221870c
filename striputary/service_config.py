"""Supported playback services and how to reach them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import yaml

from striputary.recording.mpris import get_instance_of_service


class Service(Enum):
    SPOTIFY_NATIVE = "spotify_native"
    SPOTIFY_CHROMIUM = "spotify_chromium"

    @classmethod
    def parse(cls, text: str) -> Service:
        """Read a service name as written in the config file or on the command line."""
        try:
            value = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ValueError(f"invalid service: {text!r}") from exc
        for member in cls:
            if member.value == value:
                return member
        raise ValueError(f"unknown service: {text!r}")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ServiceConfig:
    sink_name: str
    dbus_bus_name: str

    @classmethod
    def from_service(cls, service: Service) -> ServiceConfig:
        if service is Service.SPOTIFY_NATIVE:
            return cls(sink_name="Spotify", dbus_bus_name="org.mpris.MediaPlayer2.spotify")
        return cls(
            sink_name="Playback",
            dbus_bus_name=get_instance_of_service("org.mpris.MediaPlayer2.chromium"),
        )