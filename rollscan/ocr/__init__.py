"""
OCR engines.

- OCREngine: contract every engine implements
- TesseractEngine: pytesseract backed engine
- EngineHandle: explicit lifecycle and single-flight initialization
"""

from .base import OCREngine, ProgressLogger, STATUS_LOADING, STATUS_RECOGNIZING
from .handle import EngineHandle
from .tesseract import TesseractEngine, reconstruct_document

__all__ = [
    "OCREngine",
    "ProgressLogger",
    "STATUS_LOADING",
    "STATUS_RECOGNIZING",
    "EngineHandle",
    "TesseractEngine",
    "reconstruct_document",
]
