"""Logging setup for gitme.

Pipeline progress and diagnostics share the ``gitme`` logger hierarchy.
Progress records carry their kind (info, success, warning, error) in the
``progress_kind`` record attribute so the console can label a success line
the same way the streaming endpoint does.
"""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "gitme"
PROGRESS_KIND_ATTR = "progress_kind"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the gitme hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def progress_extra(kind: str) -> dict[str, str]:
    """Build the ``extra`` mapping that tags a record as a progress event."""
    return {PROGRESS_KIND_ATTR: kind}


class ConsoleFormatter(logging.Formatter):
    """Render ``[gitme] <kind> <message>`` lines.

    Progress records are labelled with their progress kind; everything else
    falls back to the lower-cased level name. With ``show_source`` the
    originating logger is appended for non-progress records, which is what
    ``--verbose`` wants when tracing provider retries.
    """

    def __init__(self, *, show_source: bool = False) -> None:
        super().__init__()
        self.show_source = show_source

    def format(self, record: logging.LogRecord) -> str:
        kind = getattr(record, PROGRESS_KIND_ATTR, None)
        label = kind or record.levelname.lower()
        line = f"[gitme] {label} {record.getMessage()}"
        if self.show_source and kind is None:
            line = f"{line} ({record.name})"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send gitme records to stderr and, when given, to ``log_file``."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Repeated calls in one process (tests, ``serve`` reloads) must not stack handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(ConsoleFormatter(show_source=verbose))
    logger.addHandler(console)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)
        # The file keeps debug detail even when the console stays at info.
        logger.setLevel(logging.DEBUG)

    return logger


__all__ = [
    "ConsoleFormatter",
    "PROGRESS_KIND_ATTR",
    "configure_logging",
    "get_logger",
    "progress_extra",
]
