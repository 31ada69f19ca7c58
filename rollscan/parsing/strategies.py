"""
Student extraction strategies.

Three independent heuristics group recognized lines into candidate
students:

- windowed: slide a 6-line look-ahead window, consume 4 lines per record
- block:    one record per blank-line separated block
- table:    split rows below a header line into columns

Every strategy has the signature ``(lines, *, sink=None) -> list`` and is
pure. ``select_students`` tries them in order and returns the output of
the first one that finds anything; results are never merged.

Windowed and table scanning drop blank lines first, so paragraph breaks
never take window slots. The block strategy keeps them as record
boundaries.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, List, Optional, Sequence, Tuple

from ..config import ExtractionConfig
from ..models import CandidateStudent, EventSink, emit
from ..models.events import (
    RECORD_ACCEPTED,
    STRATEGY_DONE,
    STRATEGY_SELECTED,
    STRATEGY_START,
)
from .detectors import PHONE_PATTERN, StudentDraft, is_table_header, split_lines
from .normalize import normalize_name, normalize_phone, normalize_reg_no, synthesize_reg_no


WINDOW_SIZE = 6
WINDOW_ADVANCE = 4
MIN_TABLE_ROW_LENGTH = 5

BLOCK_SEPARATOR = re.compile(r"\n\s*\n")
TABLE_COLUMN_SEPARATOR = re.compile(r"\t|\||\s{2,}")

StudentStrategy = Callable[..., List[CandidateStudent]]


def non_blank(lines: Sequence[str]) -> List[str]:
    return [line for line in lines if line.strip()]


def windowed_strategy(
    lines: Sequence[str],
    *,
    sink: Optional[EventSink] = None,
    window_size: int = WINDOW_SIZE,
    advance: int = WINDOW_ADVANCE,
) -> List[CandidateStudent]:
    """
    Scan with a look-ahead window.

    For each cursor position the next ``window_size`` lines feed one
    draft. A draft with a name is accepted and the cursor jumps by
    ``advance``; otherwise it moves on by one line.
    Event line indexes count non-blank lines only.
    """
    lines = non_blank(lines)
    students: List[CandidateStudent] = []
    i = 0

    while i < len(lines):
        draft = StudentDraft()
        for j in range(i, min(i + window_size, len(lines))):
            line = lines[j].strip()
            if len(line) < 2:
                continue
            draft.absorb(line, sink=sink, strategy="windowed", line_index=j)

        if draft.has_name:
            student = draft.to_candidate(len(students) + 1)
            students.append(student)
            emit(sink, RECORD_ACCEPTED, value=student.to_dict(), strategy="windowed", line_index=i)
            i += advance
        else:
            i += 1

    return students


def block_strategy(
    lines: Sequence[str],
    *,
    sink: Optional[EventSink] = None,
) -> List[CandidateStudent]:
    """One candidate per blank-line delimited block that contains a name."""
    students: List[CandidateStudent] = []
    text = "\n".join(lines)

    for block in BLOCK_SEPARATOR.split(text):
        block_lines = split_lines(block)
        if not block_lines:
            continue

        draft = StudentDraft()
        for line in block_lines:
            draft.absorb(line, sink=sink, strategy="block")

        if draft.has_name:
            student = draft.to_candidate(len(students) + 1)
            students.append(student)
            emit(sink, RECORD_ACCEPTED, value=student.to_dict(), strategy="block")

    return students


def table_strategy(
    lines: Sequence[str],
    *,
    sink: Optional[EventSink] = None,
    min_row_length: int = MIN_TABLE_ROW_LENGTH,
) -> List[CandidateStudent]:
    """
    Read rows below the first header line as columns.

    Columns are separated by tabs, pipes or runs of 2+ spaces. Column 0
    is the name, column 1 the reg no, and the first later column with a
    10+ digit run the phone.
    """
    lines = non_blank(lines)
    header_index = None
    for idx, line in enumerate(lines):
        if is_table_header(line):
            header_index = idx
            break

    if header_index is None:
        return []

    students: List[CandidateStudent] = []

    for idx in range(header_index + 1, len(lines)):
        row = lines[idx].strip()
        if is_table_header(row) or len(row) < min_row_length:
            continue

        parts = [part.strip() for part in TABLE_COLUMN_SEPARATOR.split(row) if part.strip()]
        if len(parts) < 2:
            continue

        name = normalize_name(parts[0])
        if len(name.split()) < 2:
            continue

        reg_no = normalize_reg_no(parts[1]) or synthesize_reg_no(len(students) + 1)

        phone = None
        for part in parts[2:]:
            match = PHONE_PATTERN.search(part)
            if match:
                phone = normalize_phone(match.group(0))
                break

        student = CandidateStudent(name=name, reg_no=reg_no, parent_phone=phone)
        students.append(student)
        emit(sink, RECORD_ACCEPTED, value=student.to_dict(), strategy="table", line_index=idx)

    return students


DEFAULT_STRATEGIES: List[Tuple[str, StudentStrategy]] = [
    ("windowed", windowed_strategy),
    ("block", block_strategy),
    ("table", table_strategy),
]


def build_strategies(config: Optional[ExtractionConfig] = None) -> List[Tuple[str, StudentStrategy]]:
    """Default strategy chain bound to ``config``'s constants."""
    if config is None:
        return list(DEFAULT_STRATEGIES)
    return [
        ("windowed", partial(windowed_strategy, window_size=config.window_size,
                             advance=config.window_advance)),
        ("block", block_strategy),
        ("table", partial(table_strategy, min_row_length=config.min_table_row_length)),
    ]


@dataclass
class StrategyOutcome:
    """Output of the selector: the winning strategy and its records."""
    strategy: Optional[str] = None
    students: List[CandidateStudent] = field(default_factory=list)
    attempted: List[str] = field(default_factory=list)


def select_students(
    lines: Sequence[str],
    strategies: Optional[Sequence[Tuple[str, StudentStrategy]]] = None,
    sink: Optional[EventSink] = None,
) -> StrategyOutcome:
    """Run strategies in order, stopping at the first non-empty result."""
    if strategies is None:
        strategies = DEFAULT_STRATEGIES

    outcome = StrategyOutcome()

    for name, strategy in strategies:
        emit(sink, STRATEGY_START, strategy=name)
        outcome.attempted.append(name)
        students = strategy(lines, sink=sink)
        emit(sink, STRATEGY_DONE, strategy=name, value=len(students))

        if students:
            outcome.strategy = name
            outcome.students = students
            emit(sink, STRATEGY_SELECTED, strategy=name, value=len(students))
            break

    return outcome
