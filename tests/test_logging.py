"""Console labelling and handler setup for the gitme logger."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List

import pytest

from gitme.logging import PROGRESS_KIND_ATTR, ConsoleFormatter, configure_logging, get_logger
from gitme.progress import ProgressLog


class _Collector(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.records: List[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.fixture
def restore_gitme_logger() -> Iterator[logging.Logger]:
    logger = logging.getLogger("gitme")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    handlers, level, propagate = saved
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate


def _record(message: str, level: int = logging.INFO, name: str = "gitme.llm.gateway", **extra) -> logging.LogRecord:
    record = logging.LogRecord(name, level, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_console_formatter_labels_progress_kind() -> None:
    formatter = ConsoleFormatter()

    line = formatter.format(_record("README generated successfully!", **{PROGRESS_KIND_ATTR: "success"}))

    assert line == "[gitme] success README generated successfully!"


def test_console_formatter_falls_back_to_level_name() -> None:
    formatter = ConsoleFormatter()

    assert formatter.format(_record("Gemini rate limited", logging.WARNING)) == "[gitme] warning Gemini rate limited"


def test_console_formatter_shows_source_for_diagnostics_only() -> None:
    formatter = ConsoleFormatter(show_source=True)

    diagnostic = formatter.format(_record("retrying in 2.0s", logging.DEBUG))
    progress = formatter.format(_record("Fetching files...", **{PROGRESS_KIND_ATTR: "info"}))

    assert diagnostic == "[gitme] debug retrying in 2.0s (gitme.llm.gateway)"
    assert progress == "[gitme] info Fetching files..."


def test_progress_log_tags_records_with_kind() -> None:
    collector = _Collector()
    logger = get_logger("progress")
    logger.addHandler(collector)
    previous_level = logger.level
    logger.setLevel(logging.DEBUG)
    try:
        progress = ProgressLog()
        progress.success("Selected 3 key files for analysis")
        progress.warning("Skipping large file: big.js")
    finally:
        logger.removeHandler(collector)
        logger.setLevel(previous_level)

    assert [(record.levelno, getattr(record, PROGRESS_KIND_ATTR)) for record in collector.records] == [
        (logging.INFO, "success"),
        (logging.WARNING, "warning"),
    ]


def test_configure_logging_replaces_handlers(restore_gitme_logger: logging.Logger) -> None:
    configure_logging()
    configure_logging(verbose=True)

    assert len(restore_gitme_logger.handlers) == 1
    assert restore_gitme_logger.level == logging.DEBUG
    assert restore_gitme_logger.propagate is False


def test_configure_logging_writes_progress_to_console(
    restore_gitme_logger: logging.Logger, capsys: pytest.CaptureFixture[str]
) -> None:
    configure_logging()

    ProgressLog().success("README generated successfully!")

    assert "[gitme] success README generated successfully!" in capsys.readouterr().err


def test_configure_logging_file_sink_keeps_debug_detail(
    restore_gitme_logger: logging.Logger, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    log_file = tmp_path / "gitme.log"
    configure_logging(log_file=log_file)

    get_logger("llm.gateway").debug("Gemini attempt 1 of 3")
    for handler in restore_gitme_logger.handlers:
        handler.flush()

    assert "DEBUG gitme.llm.gateway: Gemini attempt 1 of 3" in log_file.read_text(encoding="utf-8")
    assert "Gemini attempt 1 of 3" not in capsys.readouterr().err
