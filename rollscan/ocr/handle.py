"""
Explicitly owned OCR engine handle.

Callers create a handle, share it with whichever extractors should reuse
the engine, and close it when done. Initialization is single-flight:
concurrent first users block on a lock and the engine is initialized
once.
"""

from __future__ import annotations

import threading
from typing import Any, Optional

from ..exceptions import EngineClosedError
from ..logger import get_logger
from ..models import RecognizedDocument
from .base import OCREngine, ProgressLogger


class EngineHandle:
    """
    Lifecycle owner for one OCREngine.

    Usage:
        with EngineHandle(TesseractEngine()) as handle:
            document = handle.recognize("class_list.jpg")
    """

    def __init__(self, engine: OCREngine, reopen: bool = True):
        """
        Args:
            engine: Engine to own
            reopen: Allow lazy re-initialization after close()
        """
        self._engine = engine
        self._lock = threading.Lock()
        self._open = False
        self._closed = False
        self._reopen = reopen
        self.logger = get_logger("EngineHandle")

    @property
    def engine(self) -> OCREngine:
        return self._engine

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> OCREngine:
        """
        Initialize the engine if needed and return it.

        Initialization errors propagate; the next call tries again.
        """
        if self._open:
            return self._engine

        with self._lock:
            if self._closed and not self._reopen:
                raise EngineClosedError()
            if not self._open:
                self.logger.debug(f"Initializing OCR engine: {self._engine.name}")
                self._engine.initialize()
                self._open = True
                self._closed = False

        return self._engine

    def get(self) -> OCREngine:
        return self.open()

    def recognize(
        self,
        image: Any,
        logger: Optional[ProgressLogger] = None,
        whitelist: Optional[str] = None,
    ) -> RecognizedDocument:
        return self.get().recognize(image, logger=logger, whitelist=whitelist)

    def close(self) -> None:
        """Terminate the engine. Safe to call more than once."""
        with self._lock:
            if self._open:
                self._engine.terminate()
                self._open = False
                self.logger.debug(f"OCR engine terminated: {self._engine.name}")
            self._closed = True

    def __enter__(self) -> "EngineHandle":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
