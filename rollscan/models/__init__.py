"""
Data models for rollscan.

These models represent the recognized input and the candidate records
produced from it, and are easily serializable to JSON.
"""

from .document import RecognizedDocument
from .records import CandidateStudent, CandidateScoreRow, clamp_score, CA_MAX, EXAM_MAX
from .result import ExtractionResult
from .events import ExtractionEvent, EventSink, emit

__all__ = [
    # Input
    "RecognizedDocument",

    # Records
    "CandidateStudent",
    "CandidateScoreRow",
    "clamp_score",
    "CA_MAX",
    "EXAM_MAX",

    # Results
    "ExtractionResult",

    # Events
    "ExtractionEvent",
    "EventSink",
    "emit",
]
