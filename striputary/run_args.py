"""Everything a recording run needs to know."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from striputary import config
from striputary.service_config import ServiceConfig


class SinkType(Enum):
    NORMAL = "normal"
    """Audio playback will not be audible while recording."""
    MONITOR = "monitor"
    """Audio playback will be audible while recording."""


@dataclass
class RunArgs:
    session_dir: Path
    service_config: ServiceConfig
    sink_type: SinkType = SinkType.NORMAL

    def __post_init__(self) -> None:
        self.session_dir = Path(self.session_dir)

    def yaml_file(self) -> Path:
        return self.session_dir / config.DEFAULT_SESSION_FILE

    def buffer_file(self) -> Path:
        return self.session_dir / config.DEFAULT_BUFFER_FILE