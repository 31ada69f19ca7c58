"""
Extraction events.

Parsing narrates its progress through structured events delivered to an
optional caller-supplied sink, so callers and tests can observe which
strategy ran and which fields were detected.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Callable, Optional


# Phases
STRATEGY_START = "strategy_start"
STRATEGY_DONE = "strategy_done"
FIELD_DETECTED = "field_detected"
RECORD_ACCEPTED = "record_accepted"
STRATEGY_SELECTED = "strategy_selected"
SUBJECT_DETECTED = "subject_detected"
SCORE_ROW = "score_row"


@dataclass(frozen=True)
class ExtractionEvent:
    """One step of the parsing narration."""
    phase: str
    field: Optional[str] = None
    value: Any = None
    strategy: Optional[str] = None
    line_index: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}

    def __str__(self) -> str:
        parts = [self.phase]
        if self.strategy:
            parts.append(f"strategy={self.strategy}")
        if self.field:
            parts.append(f"{self.field}={self.value!r}")
        elif self.value is not None:
            parts.append(f"value={self.value!r}")
        if self.line_index is not None:
            parts.append(f"line={self.line_index}")
        return " ".join(parts)


EventSink = Callable[[ExtractionEvent], None]


def emit(sink: Optional[EventSink], phase: str, **kwargs: Any) -> None:
    """Deliver an event to ``sink`` if one was supplied."""
    if sink is not None:
        sink(ExtractionEvent(phase=phase, **kwargs))
