"""
Logging for rollscan.

Console output goes to stdout (INFO, or DEBUG when DEBUG=1); an optional
log file always records DEBUG. Parsing narration arrives as
``ExtractionEvent`` objects and is rendered by the formatters here
rather than as free text at each call site.

Usage:
    from rollscan.logger import get_logger, log_event
    logger = get_logger("DocumentExtractor")
    log_event(logger, event)
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from .config import get_config
from .models.events import (
    FIELD_DETECTED,
    RECORD_ACCEPTED,
    SCORE_ROW,
    STRATEGY_SELECTED,
    SUBJECT_DETECTED,
    ExtractionEvent,
)
from .utils.timing import format_duration


CONSOLE_FORMAT = '%(asctime)s | %(levelname)-8s | %(message)s'
FILE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'

RESET = '\033[0m'
LEVEL_COLORS = {
    'DEBUG': '\033[36m',     # Cyan
    'INFO': '\033[32m',      # Green
    'WARNING': '\033[33m',   # Yellow
    'ERROR': '\033[31m',     # Red
    'CRITICAL': '\033[35m',  # Magenta
}
PHASE_COLORS = {
    FIELD_DETECTED: '\033[34m',        # Blue
    SUBJECT_DETECTED: '\033[34m',
    RECORD_ACCEPTED: '\033[32m',       # Green
    SCORE_ROW: '\033[32m',
    STRATEGY_SELECTED: '\033[1;32m',   # Bold green
}


def render_event(event: ExtractionEvent, colored: bool = False) -> str:
    """
    One-line rendering of a parsing event.

    >>> render_event(ExtractionEvent("field_detected", "name", "Ada Bola", "block", 2))
    "[block] field_detected name='Ada Bola' @2"
    """
    phase = event.phase
    if colored and phase in PHASE_COLORS:
        phase = f"{PHASE_COLORS[phase]}{phase}{RESET}"

    parts = [f"[{event.strategy or 'scores'}]", phase]
    if event.field:
        parts.append(f"{event.field}={event.value!r}")
    elif event.value is not None:
        parts.append(repr(event.value))
    if event.line_index is not None:
        parts.append(f"@{event.line_index}")
    return " ".join(parts)


class EventFormatter(logging.Formatter):
    """
    Formatter that renders records carrying an ``event`` attribute.

    Records are copied before rewriting, so each handler formats the
    event its own way.
    """

    def __init__(self, fmt: str, datefmt: Optional[str] = None, colored: bool = False):
        super().__init__(fmt, datefmt=datefmt)
        self.colored = colored

    def format(self, record):
        event = getattr(record, "event", None)
        if event is None and not self.colored:
            return super().format(record)

        record = logging.makeLogRecord(record.__dict__)
        if event is not None:
            record.msg = render_event(event, colored=self.colored)
            record.args = None
        if self.colored and record.levelname in LEVEL_COLORS:
            record.levelname = f"{LEVEL_COLORS[record.levelname]}{record.levelname}{RESET}"
        return super().format(record)


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(EventFormatter(CONSOLE_FORMAT, datefmt='%H:%M:%S', colored=sys.stdout.isatty()))
    return handler


def _file_handler(log_dir: Path) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"rollscan_{datetime.now():%Y%m%d_%H%M%S}.log"

    handler = logging.FileHandler(log_file, encoding='utf-8')
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(EventFormatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    return handler


def setup_logger(
    name: str = "rollscan",
    log_dir: Optional[Path] = None,
    debug: Optional[bool] = None,
    log_to_file: Optional[bool] = None
) -> logging.Logger:
    """
    Configure a named logger. Unset arguments come from ``get_config()``.

    Loggers that already have handlers are returned unchanged.
    """
    config = get_config()
    if debug is None:
        debug = config.debug
    if log_dir is None:
        log_dir = config.logs_dir
    if log_to_file is None:
        log_to_file = config.log_to_file

    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    logger.addHandler(_console_handler(logging.DEBUG if debug else logging.INFO))

    if log_to_file:
        logger.addHandler(_file_handler(Path(log_dir)))

    return logger


_loggers: dict[str, logging.Logger] = {}


def get_logger(name: str = "rollscan") -> logging.Logger:
    """Return the cached logger for ``name``, configuring it on first use."""
    if name not in _loggers:
        _loggers[name] = setup_logger(name)
    return _loggers[name]


def log_event(logger: logging.Logger, event: ExtractionEvent, level: int = logging.DEBUG) -> None:
    logger.log(level, "%s", event, extra={"event": event})


def log_timing(logger: logging.Logger, operation: str, duration_sec: float) -> None:
    """Sub-second timings are DEBUG noise; longer ones are INFO."""
    level = logging.DEBUG if duration_sec < 1 else logging.INFO
    logger.log(level, f"{operation}: {format_duration(duration_sec)}")


def set_console_level(level: int) -> None:
    """Change the console threshold of every logger created so far."""
    for logger in _loggers.values():
        for handler in logger.handlers:
            if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
                handler.setLevel(level)
