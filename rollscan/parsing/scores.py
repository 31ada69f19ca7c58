"""
Result sheet score parsing.

Finds lines naming a known subject and reads CA1, CA2 and exam scores
from the first three numbers on that line and the two lines after it.
"""

from __future__ import annotations

import re
from typing import List, Optional

from ..models import CandidateScoreRow, EventSink, emit
from ..models.events import SCORE_ROW, SUBJECT_DETECTED
from .detectors import detect_subject


SCORE_LOOKAHEAD = 3

_FIRST_DIGIT = re.compile(r"\d")
_DIGIT_RUN = re.compile(r"\d+")
_WORD_START = re.compile(r"\b[a-z]")


def subject_display_name(line: str) -> str:
    """Text before the first digit, with each word capitalized."""
    prefix = _FIRST_DIGIT.split(line, maxsplit=1)[0].strip()
    return _WORD_START.sub(lambda m: m.group(0).upper(), prefix)


def harvest_numbers(lines: List[str]) -> List[int]:
    numbers: List[int] = []
    for line in lines:
        numbers.extend(int(n) for n in _DIGIT_RUN.findall(line))
    return numbers


def parse_scores(
    text: str,
    sink: Optional[EventSink] = None,
    lookahead: int = SCORE_LOOKAHEAD,
) -> List[CandidateScoreRow]:
    """
    Parse subject score rows out of recognized text.

    Every subject line yields its own row; repeated subjects are not
    merged. Fewer than three numbers means no row.
    """
    rows: List[CandidateScoreRow] = []
    lines = [line for line in text.split("\n") if line.strip()]

    for i, line in enumerate(lines):
        keyword = detect_subject(line)
        if keyword is None:
            continue

        subject = subject_display_name(line)
        emit(sink, SUBJECT_DETECTED, field="subject", value=subject, line_index=i)

        numbers = harvest_numbers(lines[i:i + lookahead])
        if len(numbers) < 3 or not subject:
            continue

        row = CandidateScoreRow(subject=subject, ca1=numbers[0], ca2=numbers[1], exam=numbers[2])
        rows.append(row)
        emit(sink, SCORE_ROW, value=row.to_dict(), line_index=i)

    return rows
