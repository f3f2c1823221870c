"""Collect items arriving on a queue from another thread."""

from __future__ import annotations

import queue
from typing import Generic, TypeVar

T = TypeVar("T")


class DataStream(Generic[T]):
    """Accumulates everything received from a queue in ``data``."""

    def __init__(self, receiver: queue.Queue[T]) -> None:
        self.receiver = receiver
        self.data: list[T] = []

    def update(self, timeout: float) -> None:
        """Wait up to ``timeout`` seconds for one more item."""
        try:
            item = self.receiver.get(timeout=timeout)
        except queue.Empty:
            return
        self.data.append(item)