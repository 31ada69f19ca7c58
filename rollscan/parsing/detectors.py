"""
Field detectors.

Each detector tests a single recognized line against one field pattern,
independent of where the line sits in the document. A line may satisfy
several detectors; ``StudentDraft`` keeps the first value found for each
field.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

from ..models import CandidateStudent, EventSink, emit
from ..models.events import FIELD_DETECTED
from .normalize import (
    normalize_email,
    normalize_name,
    normalize_phone,
    normalize_reg_no,
    synthesize_reg_no,
)


NAME_PATTERN = re.compile(r"[A-Za-z][A-Za-z\s]{3,50}")

# 2-4 letters, an optional class digit (JSS1, SSS2), then one or more
# numeric segments optionally led by "/" or "-": ABC12, JSS1/0023, STD/24/001
REG_NO_PATTERN = re.compile(r"[A-Z]{2,4}\d*(?:[/-]?\d{2,})+", re.IGNORECASE)

PHONE_PATTERN = re.compile(r"\d{10,}")
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
DIGIT_PATTERN = re.compile(r"\d")

SUBJECT_KEYWORDS = [
    'mathematics', 'math', 'maths',
    'english', 'language',
    'science', 'basic science',
    'social studies', 'social',
    'yoruba', 'igbo', 'hausa',
    'computer', 'ict',
    'biology', 'chemistry', 'physics',
    'economics', 'geography', 'history',
    'literature', 'french',
    'agricultural', 'agriculture',
    'civic', 'business', 'commerce',
    'technical', 'home economics',
    'music', 'arts', 'physical', 'health',
]

TABLE_HEADER_KEYWORDS = ['name', 'reg', 'student', 'phone', 'email']


def is_name_line(line: str) -> bool:
    """Letters and spaces only, 4-51 characters, at least two words."""
    if not NAME_PATTERN.fullmatch(line) or DIGIT_PATTERN.search(line):
        return False
    return len(line.split()) >= 2


def detect_name(line: str) -> Optional[str]:
    if not is_name_line(line):
        return None
    return normalize_name(line) or None


def detect_reg_no(line: str) -> Optional[str]:
    match = REG_NO_PATTERN.search(line)
    return normalize_reg_no(match.group(0)) if match else None


def detect_phone(line: str) -> Optional[str]:
    match = PHONE_PATTERN.search(line)
    return normalize_phone(match.group(0)) if match else None


def detect_email(line: str) -> Optional[str]:
    match = EMAIL_PATTERN.search(line)
    return normalize_email(match.group(0)) if match else None


def detect_subject(line: str) -> Optional[str]:
    """Return the first subject keyword contained in ``line``, if any."""
    lowered = line.lower()
    for keyword in SUBJECT_KEYWORDS:
        if keyword in lowered:
            return keyword
    return None


def is_table_header(line: str) -> bool:
    lowered = line.lower()
    return any(keyword in lowered for keyword in TABLE_HEADER_KEYWORDS)


@dataclass
class StudentDraft:
    """Accumulates fields for one candidate, first match wins per field."""
    name: Optional[str] = None
    reg_no: Optional[str] = None
    parent_phone: Optional[str] = None
    parent_email: Optional[str] = None

    def absorb(
        self,
        line: str,
        sink: Optional[EventSink] = None,
        strategy: Optional[str] = None,
        line_index: Optional[int] = None,
    ) -> None:
        """Run every detector over ``line`` and claim unfilled fields."""
        for field_name, detector in _STUDENT_DETECTORS:
            if getattr(self, field_name) is not None:
                continue
            value = detector(line)
            if value:
                setattr(self, field_name, value)
                emit(sink, FIELD_DETECTED, field=field_name, value=value,
                     strategy=strategy, line_index=line_index)

    @property
    def has_name(self) -> bool:
        return bool(self.name)

    def to_candidate(self, index: int) -> CandidateStudent:
        """Finalize; ``index`` is the 1-based position used for a synthesized reg no."""
        return CandidateStudent(
            name=self.name or "",
            reg_no=self.reg_no or synthesize_reg_no(index),
            parent_phone=self.parent_phone,
            parent_email=self.parent_email,
        )


_STUDENT_DETECTORS = [
    ("name", detect_name),
    ("reg_no", detect_reg_no),
    ("parent_phone", detect_phone),
    ("parent_email", detect_email),
]


def split_lines(text: str) -> List[str]:
    """Split text into trimmed, non-empty lines."""
    return [line.strip() for line in text.split("\n") if line.strip()]
