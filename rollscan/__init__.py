"""
rollscan - extract student lists and subject scores from scanned sheets.
"""

from .extractor import DocumentExtractor
from .models import (
    CandidateScoreRow,
    CandidateStudent,
    ExtractionEvent,
    ExtractionResult,
    RecognizedDocument,
)
from .ocr import EngineHandle, OCREngine, TesseractEngine

__version__ = "0.1.0"

__all__ = [
    "DocumentExtractor",
    "EngineHandle",
    "OCREngine",
    "TesseractEngine",
    "RecognizedDocument",
    "CandidateStudent",
    "CandidateScoreRow",
    "ExtractionResult",
    "ExtractionEvent",
]
