"""
Tesseract OCR engine.

Runs pytesseract's word-level ``image_to_data`` and rebuilds reading
order lines from it. Paragraph and block changes are written as blank
lines so block-based parsing can see them.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pytesseract
from pytesseract import Output

from ..config import OCRConfig, PreprocessConfig, get_config
from ..exceptions import (
    OCRInitializationError,
    RecognitionError,
    TesseractNotFoundError,
)
from ..logger import get_logger
from ..models import RecognizedDocument
from ..utils.image_utils import load_image, preprocess_for_ocr, to_pil
from .base import OCREngine, ProgressLogger, STATUS_LOADING, STATUS_RECOGNIZING


WINDOWS_TESSERACT_PATH = r"C:\Program Files\Tesseract-OCR\tesseract.exe"


def reconstruct_document(
    ocr_data: Dict[str, Any],
    min_confidence: int = 0,
    engine: str = "tesseract",
) -> RecognizedDocument:
    """
    Rebuild text lines from Tesseract ``image_to_data`` output.

    Words are grouped by (page, block, paragraph, line) and ordered by
    their left edge. Page confidence is the mean of the word confidences
    tesseract reported (negative values mean "no word" and are skipped).
    """
    n = len(ocr_data.get("text", []))
    lines_dict: Dict[Tuple[int, int, int, int], List[Tuple[int, str]]] = {}
    confidences: List[float] = []

    for i in range(n):
        txt = (ocr_data["text"][i] or "").strip()
        if not txt:
            continue

        conf = float(ocr_data.get("conf", [-1] * n)[i])
        if conf >= 0 and conf < min_confidence:
            continue
        if conf >= 0:
            confidences.append(conf)

        key = (
            int(ocr_data.get("page_num", [1] * n)[i]),
            int(ocr_data.get("block_num", [0] * n)[i]),
            int(ocr_data.get("par_num", [0] * n)[i]),
            int(ocr_data.get("line_num", [0] * n)[i]),
        )
        x = int(ocr_data.get("left", [0] * n)[i])
        lines_dict.setdefault(key, []).append((x, txt))

    lines: List[str] = []
    previous_paragraph = None
    for key in sorted(lines_dict.keys()):
        paragraph = key[:3]
        if previous_paragraph is not None and paragraph != previous_paragraph:
            lines.append("")
        previous_paragraph = paragraph

        words = sorted(lines_dict[key], key=lambda t: t[0])
        lines.append(" ".join(w[1] for w in words))

    confidence = sum(confidences) / len(confidences) if confidences else 0.0

    return RecognizedDocument(
        text="\n".join(lines),
        lines=tuple(lines),
        confidence=round(confidence, 2),
        engine=engine,
        meta={"words": len(confidences)},
    )


class TesseractEngine(OCREngine):
    """Recognize images with a local tesseract binary through pytesseract."""

    name = "tesseract"

    def __init__(
        self,
        ocr_config: Optional[OCRConfig] = None,
        preprocess_config: Optional[PreprocessConfig] = None,
    ):
        super().__init__()
        config = get_config()
        self.ocr_config = ocr_config or config.ocr
        self.preprocess_config = preprocess_config or config.preprocess
        self.version: Optional[str] = None
        self.logger = get_logger("TesseractEngine")

    def _resolve_binary(self) -> Optional[str]:
        if self.ocr_config.tesseract_path:
            return self.ocr_config.tesseract_path
        if os.name == "nt" and Path(WINDOWS_TESSERACT_PATH).exists():
            return WINDOWS_TESSERACT_PATH
        return None

    def initialize(self) -> None:
        if self._initialized:
            return

        tesseract_cmd = self._resolve_binary()
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
            self.logger.info(f"Using Tesseract from: {tesseract_cmd}")

        try:
            self.version = str(pytesseract.get_tesseract_version())
        except pytesseract.TesseractNotFoundError:
            raise TesseractNotFoundError(tesseract_cmd)
        except Exception as e:
            raise OCRInitializationError(
                f"Tesseract not available: {e}",
                engine=self.name,
                languages=self.ocr_config.languages,
            ) from e

        self._initialized = True
        self.logger.info(
            f"Tesseract {self.version} initialized (languages: {self.ocr_config.languages})"
        )

    def recognize(
        self,
        image: Any,
        logger: Optional[ProgressLogger] = None,
        whitelist: Optional[str] = None,
    ) -> RecognizedDocument:
        if not self._initialized:
            self.initialize()

        self.report(logger, STATUS_LOADING, 0.0)
        img = load_image(image)

        try:
            if self.preprocess_config.enabled:
                img = preprocess_for_ocr(
                    img,
                    max_width=self.preprocess_config.max_width,
                    threshold=self.preprocess_config.threshold,
                    sharpen=self.preprocess_config.sharpen,
                )
            self.report(logger, STATUS_LOADING, 1.0)

            self.report(logger, STATUS_RECOGNIZING, 0.0)
            data = pytesseract.image_to_data(
                to_pil(img),
                lang=self.ocr_config.languages,
                config=self.ocr_config.build_tesseract_config(whitelist),
                output_type=Output.DICT,
            )
        except Exception as e:
            raise RecognitionError(f"Tesseract recognition failed: {e}", engine=self.name) from e

        document = reconstruct_document(
            data,
            min_confidence=self.ocr_config.min_word_confidence,
            engine=self.name,
        )
        self.report(logger, STATUS_RECOGNIZING, 1.0)
        return document
