"""Server-sent event messages and the channel that carries them."""

from __future__ import annotations

import json
import queue
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, Optional, Union

from .errors import GitMeError
from .logging import get_logger
from .models import LogEvent, LogKind
from .progress import ProgressLog

logger = get_logger("events")


@dataclass(frozen=True)
class LogMessage:
    message: str
    log_type: LogKind = LogKind.INFO

    def to_payload(self) -> Dict[str, object]:
        return {"type": "log", "message": self.message, "logType": self.log_type.value}


@dataclass(frozen=True)
class CompleteMessage:
    readme: str

    def to_payload(self) -> Dict[str, object]:
        return {"type": "complete", "readme": self.readme}


@dataclass(frozen=True)
class ErrorMessage:
    message: str

    def to_payload(self) -> Dict[str, object]:
        return {"type": "error", "message": self.message}


StreamMessage = Union[LogMessage, CompleteMessage, ErrorMessage]


def is_terminal(message: StreamMessage) -> bool:
    return isinstance(message, (CompleteMessage, ErrorMessage))


def encode_sse(message: StreamMessage) -> str:
    """Render one message as a ``data: <json>`` server-sent event."""
    return f"data: {json.dumps(message.to_payload())}\n\n"


class ChannelClosedError(RuntimeError):
    """Raised when a message is pushed after the terminal one."""


class EventChannel:
    """Single-consumer queue that closes itself after a terminal message."""

    def __init__(self) -> None:
        self._queue: "queue.Queue[StreamMessage]" = queue.Queue()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def push(self, message: StreamMessage) -> None:
        with self._lock:
            if self._closed:
                raise ChannelClosedError("event channel already closed")
            if is_terminal(message):
                self._closed = True
            self._queue.put(message)

    def log_sink(self, event: LogEvent) -> None:
        self.push(LogMessage(message=event.message, log_type=event.kind))

    def messages(self) -> Iterator[StreamMessage]:
        """Yield messages in order, stopping after the terminal one."""
        while True:
            message = self._queue.get()
            yield message
            if is_terminal(message):
                return


def run_into_channel(channel: EventChannel, job: Callable[[ProgressLog], str]) -> None:
    """Run ``job`` with a progress log wired to the channel and close it with the outcome."""
    progress = ProgressLog(channel.log_sink)
    try:
        readme = job(progress)
    except GitMeError as exc:
        logger.warning("README generation failed: %s", exc)
        channel.push(ErrorMessage(str(exc)))
    except Exception as exc:
        logger.exception("Unexpected pipeline failure")
        channel.push(ErrorMessage(str(exc) or "Unknown error"))
    else:
        channel.push(CompleteMessage(readme))


def stream_events(
    job: Callable[[ProgressLog], str], *, channel: Optional[EventChannel] = None
) -> Iterator[str]:
    """Start ``job`` on a worker thread and yield its events as SSE strings."""
    channel = channel or EventChannel()
    worker = threading.Thread(
        target=run_into_channel, args=(channel, job), name="gitme-stream", daemon=True
    )
    worker.start()
    for message in channel.messages():
        yield encode_sse(message)


__all__ = [
    "ChannelClosedError",
    "CompleteMessage",
    "ErrorMessage",
    "EventChannel",
    "LogMessage",
    "StreamMessage",
    "encode_sse",
    "is_terminal",
    "run_into_channel",
    "stream_events",
]
