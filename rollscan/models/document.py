"""
Recognized document model.

The output of an OCR engine and the only input of the parsing engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Tuple


@dataclass(frozen=True)
class RecognizedDocument:
    """
    Line-segmented text recognized from one image.

    ``lines`` follows ``text.split("\\n")``: blank lines are kept so that
    paragraph boundaries survive for block-based parsing.
    """

    text: str = ""
    lines: Tuple[str, ...] = ()
    confidence: float = 0.0
    engine: str = ""
    meta: dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_text(cls, text: str, confidence: float = 0.0, engine: str = "") -> "RecognizedDocument":
        """Build a document from plain recognized text."""
        return cls(
            text=text,
            lines=tuple(text.split("\n")),
            confidence=confidence,
            engine=engine,
        )

    @classmethod
    def from_lines(cls, lines: Iterable[str], confidence: float = 0.0, engine: str = "") -> "RecognizedDocument":
        """Build a document from recognized lines."""
        lines = tuple(lines)
        return cls(text="\n".join(lines), lines=lines, confidence=confidence, engine=engine)

    @property
    def non_empty_lines(self) -> list[str]:
        return [line for line in self.lines if line.strip()]

    def __len__(self) -> int:
        return len(self.lines)
