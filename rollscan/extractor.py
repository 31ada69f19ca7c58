"""
Document extractor.

Recognizes an image through a shared engine handle and turns the
recognized text into candidate students or score rows.

Recognition failures never raise: they come back as
``ExtractionResult(success=False, error=...)``. Engine initialization
failures do raise, since nothing can be recognized until the caller
fixes the engine.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, List, Optional, Sequence, Tuple

from .config import Config, get_config
from .exceptions import EngineClosedError, OCRInitializationError
from .logger import get_logger, log_event
from .models import ExtractionEvent, ExtractionResult, EventSink, RecognizedDocument
from .models import CandidateScoreRow
from .ocr import EngineHandle, ProgressLogger, STATUS_RECOGNIZING
from .parsing import StrategyOutcome, build_strategies, parse_scores, select_students
from .parsing.strategies import StudentStrategy
from .utils.timing import timed_operation


ProgressCallback = Callable[[int], None]


def progress_logger(on_progress: Optional[ProgressCallback]) -> Optional[ProgressLogger]:
    """Adapt an integer percent callback to engine progress events."""
    if on_progress is None:
        return None

    def _log(message: dict) -> None:
        if message.get("status") == STATUS_RECOGNIZING:
            on_progress(int(message.get("progress", 0.0) * 100 + 0.5))

    return _log


class DocumentExtractor:
    """
    Extract candidate records from scanned class lists and result sheets.

    Usage:
        with EngineHandle(TesseractEngine()) as handle:
            extractor = DocumentExtractor(handle)
            result = extractor.extract_students("class_list.jpg")
    """

    name = "DocumentExtractor"

    def __init__(
        self,
        handle: EngineHandle,
        config: Optional[Config] = None,
        strategies: Optional[Sequence[Tuple[str, StudentStrategy]]] = None,
        event_sink: Optional[EventSink] = None,
    ):
        """
        Args:
            handle: Engine handle, owned and closed by the caller
            config: Configuration (default: global config)
            strategies: Ordered (name, strategy) pairs for student parsing
            event_sink: Receives every ExtractionEvent emitted while parsing
        """
        self.handle = handle
        self.config = config or get_config()
        self.strategies = list(strategies) if strategies is not None else build_strategies(
            self.config.extraction
        )
        self.event_sink = event_sink
        self.logger = get_logger(self.name)

    @property
    def debug_mode(self) -> bool:
        return self.config.debug

    def log_error(self, message: str, error: Optional[Exception] = None) -> None:
        if error:
            self.logger.error(f"{message}: {error}", exc_info=self.debug_mode)
        else:
            self.logger.error(message)

    def _on_event(self, event: ExtractionEvent) -> None:
        if self.debug_mode:
            log_event(self.logger, event)
        if self.event_sink is not None:
            self.event_sink(event)

    # ==================== Recognition ====================

    def _recognize(
        self,
        image: Any,
        on_progress: Optional[ProgressCallback],
        whitelist: Optional[str] = None,
    ) -> Tuple[Optional[RecognizedDocument], Optional[ExtractionResult]]:
        """Return (document, None) on success or (None, error result)."""
        try:
            document = self.handle.recognize(
                image,
                logger=progress_logger(on_progress),
                whitelist=whitelist,
            )
        except (OCRInitializationError, EngineClosedError):
            raise
        except Exception as e:
            self.log_error("Recognition failed", e)
            return None, ExtractionResult.failure(
                getattr(e, "message", None) or str(e),
                error_type=type(e).__name__,
            )

        self.logger.debug(
            f"Recognized {len(document.non_empty_lines)} lines "
            f"(confidence {document.confidence:.2f}%)"
        )
        return document, None

    def _run(
        self,
        operation: str,
        image: Any,
        on_progress: Optional[ProgressCallback],
        build: Callable[[RecognizedDocument], ExtractionResult],
        whitelist: Optional[str] = None,
    ) -> ExtractionResult:
        with timed_operation(operation, self.logger) as timing:
            document, failure = self._recognize(image, on_progress, whitelist)
            result = failure if failure is not None else build(document)
        result.timing_sec = timing.duration_sec
        return result

    def extract_text(self, image: Any, on_progress: Optional[ProgressCallback] = None) -> ExtractionResult:
        """Recognize ``image`` and return its raw text, lines and confidence."""
        return self._run(
            "extract_text",
            image,
            on_progress,
            lambda document: ExtractionResult.ok(
                raw_text=document.text,
                confidence=document.confidence,
                lines=list(document.lines),
            ),
        )

    # ==================== Students ====================

    def parse_students(self, document: RecognizedDocument) -> StrategyOutcome:
        """Run the strategy chain over an already recognized document."""
        outcome = select_students(document.lines, self.strategies, sink=self._on_event)

        if outcome.students:
            self.logger.info(
                f"Found {len(outcome.students)} students ({outcome.strategy} parsing)"
            )
        else:
            self.logger.info("No students found")
        return outcome

    def extract_students(self, image: Any, on_progress: Optional[ProgressCallback] = None) -> ExtractionResult:
        """Recognize a class list and extract candidate students."""
        return self._run(
            "extract_students",
            image,
            on_progress,
            lambda document: ExtractionResult.ok(
                raw_text=document.text,
                confidence=document.confidence,
                lines=list(document.lines),
                students=self.parse_students(document).students,
            ),
            whitelist=self.config.ocr.student_whitelist,
        )

    def extract_students_batch(
        self,
        images: Sequence[Any],
        on_item: Optional[Callable[[int, ExtractionResult], None]] = None,
    ) -> List[ExtractionResult]:
        """
        Extract students from several images on a thread pool.

        All workers share this extractor's engine handle. Results are
        returned in input order; ``on_item(index, result)`` fires as each
        image completes.
        """
        results: List[Optional[ExtractionResult]] = [None] * len(images)
        max_workers = max(1, self.config.extraction.max_workers)

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            future_to_index = {
                executor.submit(self.extract_students, image): idx
                for idx, image in enumerate(images)
            }

            for future in as_completed(future_to_index):
                idx = future_to_index[future]
                result = future.result()
                results[idx] = result
                if on_item is not None:
                    on_item(idx, result)

        return results

    # ==================== Scores ====================

    def parse_scores(self, document: RecognizedDocument) -> List[CandidateScoreRow]:
        """Run the score parser over an already recognized document."""
        scores = parse_scores(
            document.text,
            sink=self._on_event,
            lookahead=self.config.extraction.score_lookahead,
        )
        self.logger.info(f"Total subjects extracted: {len(scores)}")
        return scores

    def extract_scores(self, image: Any, on_progress: Optional[ProgressCallback] = None) -> ExtractionResult:
        """Recognize a result sheet and extract subject score rows."""
        return self._run(
            "extract_scores",
            image,
            on_progress,
            lambda document: ExtractionResult.ok(
                raw_text=document.text,
                confidence=document.confidence,
                lines=list(document.lines),
                scores=self.parse_scores(document),
            ),
        )
