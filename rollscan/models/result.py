"""
Extraction result model.

Either the whole extraction call succeeded (possibly with empty record
lists) or it failed wholesale; there is no per-record error reporting.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

from .records import CandidateScoreRow, CandidateStudent


@dataclass
class ExtractionResult:
    """
    Result of one extraction call.

    ``confidence`` is the OCR engine's own page score (0-100), passed
    through unmodified.
    """

    success: bool = True
    students: Optional[List[CandidateStudent]] = None
    scores: Optional[List[CandidateScoreRow]] = None
    confidence: float = 0.0
    raw_text: str = ""
    lines: List[str] = field(default_factory=list)
    error: Optional[str] = None
    error_type: Optional[str] = None
    timing_sec: float = 0.0

    @classmethod
    def ok(
        cls,
        raw_text: str = "",
        confidence: float = 0.0,
        lines: Optional[List[str]] = None,
        students: Optional[List[CandidateStudent]] = None,
        scores: Optional[List[CandidateScoreRow]] = None,
        timing_sec: float = 0.0,
    ) -> "ExtractionResult":
        """Create successful result."""
        return cls(
            success=True,
            students=students,
            scores=scores,
            confidence=confidence,
            raw_text=raw_text,
            lines=list(lines or []),
            timing_sec=timing_sec,
        )

    @classmethod
    def failure(
        cls,
        error: str,
        error_type: str = "UnknownError",
        timing_sec: float = 0.0
    ) -> "ExtractionResult":
        """Create error result."""
        return cls(
            success=False,
            error=error,
            error_type=error_type,
            timing_sec=timing_sec,
        )

    @property
    def record_count(self) -> int:
        return len(self.students or []) + len(self.scores or [])

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase wire shape."""
        if not self.success:
            return {"success": False, "error": self.error}

        data: dict[str, Any] = {
            "success": True,
            "confidence": self.confidence,
            "rawText": self.raw_text,
        }
        if self.students is not None:
            data["students"] = [s.to_dict() for s in self.students]
        if self.scores is not None:
            data["scores"] = [s.to_dict() for s in self.scores]
        return data
