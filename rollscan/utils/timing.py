"""
Timing for extraction calls.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional


@dataclass
class TimingResult:
    """Filled in when the timed block exits."""
    name: str
    duration_sec: float = 0.0
    success: bool = True


@contextmanager
def timed_operation(
    name: str,
    logger: Optional[logging.Logger] = None,
    log_level: int = logging.DEBUG
) -> Iterator[TimingResult]:
    """
    Time a block; exceptions propagate after the duration is recorded.

    Usage:
        with timed_operation("extract_students", logger) as timing:
            ...
        result.timing_sec = timing.duration_sec
    """
    result = TimingResult(name=name)
    start = time.perf_counter()

    try:
        yield result
    except Exception:
        result.success = False
        raise
    finally:
        result.duration_sec = time.perf_counter() - start
        if logger is not None:
            suffix = "" if result.success else " (failed)"
            logger.log(log_level, f"{name}: {format_duration(result.duration_sec)}{suffix}")


def format_duration(seconds: float) -> str:
    """
    >>> format_duration(0.25)
    '250.0ms'
    >>> format_duration(75)
    '1m 15.0s'
    """
    if seconds < 1:
        return f"{seconds * 1000:.1f}ms"
    if seconds < 60:
        return f"{seconds:.2f}s"
    minutes, secs = divmod(seconds, 60)
    return f"{int(minutes)}m {secs:.1f}s"
