from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from ..models import RecognizedDocument


# Receives {"status": str, "progress": float in 0..1}
ProgressLogger = Callable[[dict], None]

STATUS_LOADING = "loading image"
STATUS_RECOGNIZING = "recognizing text"


class OCREngine(ABC):
    """
    Interface for text recognition engines.

    IMPORTANT:
    - Engines return literal recognized text, lines and a page confidence.
    - Engines must NOT interpret the text; parsing happens downstream.
    """

    name: str = "base"

    def __init__(self):
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @abstractmethod
    def initialize(self) -> None:
        """Prepare the engine. Raises OCRInitializationError on failure."""
        raise NotImplementedError

    @abstractmethod
    def recognize(
        self,
        image: Any,
        logger: Optional[ProgressLogger] = None,
        whitelist: Optional[str] = None,
    ) -> RecognizedDocument:
        """Recognize one image. Raises RecognitionError on failure."""
        raise NotImplementedError

    def terminate(self) -> None:
        """Release engine resources."""
        self._initialized = False

    @staticmethod
    def report(logger: Optional[ProgressLogger], status: str, progress: float) -> None:
        if logger is not None:
            logger({"status": status, "progress": progress})
