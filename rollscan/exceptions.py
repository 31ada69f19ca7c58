"""
Custom exceptions for rollscan.

All application-specific exceptions inherit from RollScanError.
"""

from __future__ import annotations

from typing import Optional, Any


class RollScanError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message: Human-readable error message
        details: Additional error details (for debugging)
        recoverable: Whether the error can potentially be recovered from
    """

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(RollScanError):
    """
    Invalid or missing configuration.

    Examples:
        - Non-positive window size
        - EXTRACT_MAX_WORKERS=0
    """

    def __init__(self, message: str, config_key: Optional[str] = None):
        details = {"config_key": config_key} if config_key else None
        super().__init__(message, details=details, recoverable=False)


class ImageLoadError(RollScanError):
    """
    Image source could not be decoded.

    Examples:
        - File does not exist
        - Corrupt bytes
        - Malformed base64 payload
    """

    def __init__(self, message: str, source: Optional[str] = None):
        details = {"source": source[:200]} if source else None
        super().__init__(message, details=details, recoverable=False)


class OCRError(RollScanError):
    """
    OCR engine failure.

    Examples:
        - Tesseract not installed
        - Language pack missing
    """

    def __init__(
        self,
        message: str,
        engine: Optional[str] = None,
        languages: Optional[str] = None,
        recoverable: bool = False
    ):
        details = {}
        if engine:
            details["engine"] = engine
        if languages:
            details["languages"] = languages
        super().__init__(message, details=details, recoverable=recoverable)


class OCRInitializationError(OCRError):
    """Engine could not be initialized. Never retried automatically."""


class TesseractNotFoundError(OCRInitializationError):
    """Tesseract OCR is not installed or not accessible."""

    def __init__(self, tesseract_path: Optional[str] = None):
        message = (
            "Tesseract OCR not found. Please install Tesseract:\n"
            "  - Windows: https://github.com/UB-Mannheim/tesseract/wiki\n"
            "  - macOS: brew install tesseract\n"
            "  - Ubuntu: sudo apt install tesseract-ocr"
        )
        super().__init__(message, engine="tesseract")
        if tesseract_path:
            self.details["tesseract_path_tried"] = tesseract_path


class RecognitionError(OCRError):
    """Recognition of a single image failed."""

    def __init__(self, message: str, engine: Optional[str] = None):
        super().__init__(message, engine=engine, recoverable=True)


class EngineClosedError(RollScanError):
    """An engine handle was used after close()."""

    def __init__(self, message: str = "OCR engine handle is closed"):
        super().__init__(message, recoverable=True)
