"""Append-only progress log shared by the pipeline stages."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from .logging import get_logger, progress_extra
from .models import LogEvent, LogKind

LogSink = Callable[[LogEvent], None]

_LEVELS = {
    LogKind.INFO: logging.INFO,
    LogKind.SUCCESS: logging.INFO,
    LogKind.WARNING: logging.WARNING,
    LogKind.ERROR: logging.ERROR,
}


class ProgressLog:
    """Records progress events in order and forwards each one to a sink.

    Every event is also mirrored to the ``gitme.progress`` logger, which is
    how the CLI shows progress on the console.
    """

    def __init__(self, sink: Optional[LogSink] = None) -> None:
        self._sink = sink
        self._events: List[LogEvent] = []
        self.logger = get_logger("progress")

    @property
    def events(self) -> tuple[LogEvent, ...]:
        return tuple(self._events)

    def emit(self, message: str, kind: LogKind = LogKind.INFO) -> LogEvent:
        event = LogEvent(message=message, kind=kind)
        self._events.append(event)
        self.logger.log(_LEVELS[kind], message, extra=progress_extra(kind.value))
        if self._sink is not None:
            self._sink(event)
        return event

    def info(self, message: str) -> LogEvent:
        return self.emit(message, LogKind.INFO)

    def success(self, message: str) -> LogEvent:
        return self.emit(message, LogKind.SUCCESS)

    def warning(self, message: str) -> LogEvent:
        return self.emit(message, LogKind.WARNING)

    def error(self, message: str) -> LogEvent:
        return self.emit(message, LogKind.ERROR)


__all__ = ["LogSink", "ProgressLog"]
