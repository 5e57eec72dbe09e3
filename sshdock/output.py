"""
Output log shared by all commands.

The log is a plain sink with ``append_line``; timestamps come from
``TimestampedLog``, a decorator composed around any sink when the
application is built.
"""

from __future__ import annotations
import logging
from datetime import datetime
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class LogSink(Protocol):
    """Anything that accepts human-readable log lines."""

    def append_line(self, text: str) -> None: ...

    def show(self) -> None: ...


class OutputLog:
    """
    In-memory output channel.

    Keeps every line for later display and mirrors it to the
    ``sshdock.output`` logger. Listeners (e.g. a Qt output panel) are
    called with each line as it arrives.

    Usage:
        log = OutputLog()
        log.add_listener(panel.append)
        log.append_line("Find ssh on your system.")
    """

    def __init__(self, name: str = "sshdock"):
        self.name = name
        self.lines: list[str] = []
        self._listeners: list[Callable[[str], None]] = []
        self._show_handler: Optional[Callable[[], None]] = None

    def add_listener(self, listener: Callable[[str], None]) -> None:
        self._listeners.append(listener)

    def set_show_handler(self, handler: Callable[[], None]) -> None:
        """Set the callback that brings the log view to the front."""
        self._show_handler = handler

    def append_line(self, text: str) -> None:
        self.lines.append(text)
        logger.info(text)
        for listener in self._listeners:
            try:
                listener(text)
            except Exception as e:
                logger.exception(f"Output listener error: {e}")

    def show(self) -> None:
        if self._show_handler:
            self._show_handler()

    def __str__(self) -> str:
        return "\n".join(self.lines)


class TimestampedLog:
    """
    Sink decorator that prefixes every line with ``[YYYY-MM-DD HH:MM:SS]``.

    Args:
        sink: Wrapped sink
        clock: Returns the current time (injectable for tests)
    """

    def __init__(self, sink: LogSink, clock: Callable[[], datetime] = datetime.now):
        self._sink = sink
        self._clock = clock

    @property
    def sink(self) -> LogSink:
        return self._sink

    def append_line(self, text: str) -> None:
        stamp = self._clock().strftime(TIMESTAMP_FORMAT)
        self._sink.append_line(f"[{stamp}] {text}")

    def show(self) -> None:
        self._sink.show()
