# rollscan/cli.py

import argparse
import json
import logging
import os
import sys
import time
from pathlib import Path

from rich.console import Console
from rich.table import Table

from .config import reset_config
from .exceptions import OCRInitializationError
from .extractor import DocumentExtractor
from .logger import get_logger, log_timing, set_console_level
from .models import ExtractionResult, RecognizedDocument
from .ocr import EngineHandle, TesseractEngine
from .progress import get_progress

console = Console(stderr=True)
out = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rollscan",
        description="Extract student lists and subject scores from scanned sheets",
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--debug", action="store_true", help="verbose logging and parse events")
    common.add_argument("--json", action="store_true", help="print results as JSON")

    sub = parser.add_subparsers(dest="command", required=True)

    students = sub.add_parser("students", parents=[common], help="extract students from class list images")
    students.add_argument("images", nargs="*", help="image files")
    students.add_argument("--text-file", help="parse already recognized text instead of an image")

    scores = sub.add_parser("scores", parents=[common], help="extract subject scores from a result sheet")
    scores.add_argument("images", nargs="*", help="image files")
    scores.add_argument("--text-file", help="parse already recognized text instead of an image")

    text = sub.add_parser("text", parents=[common], help="print recognized text")
    text.add_argument("images", nargs="+", help="image files")

    return parser


def render_students(result: ExtractionResult, title: str) -> None:
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Name")
    table.add_column("Reg No")
    table.add_column("Parent Phone")
    table.add_column("Parent Email")

    for idx, student in enumerate(result.students or [], start=1):
        table.add_row(
            str(idx),
            student.name,
            student.reg_no,
            student.parent_phone or "",
            student.parent_email or "",
        )
    out.print(table)


def render_scores(result: ExtractionResult, title: str) -> None:
    table = Table(title=title)
    table.add_column("Subject")
    table.add_column("CA1", justify="right")
    table.add_column("CA2", justify="right")
    table.add_column("Exam", justify="right")
    table.add_column("Total", justify="right")

    for row in result.scores or []:
        table.add_row(row.subject, str(row.ca1), str(row.ca2), str(row.exam), str(row.total))
    out.print(table)


def render_json(results: list) -> None:
    payload = [result.to_dict() for _, result in results]
    if len(payload) == 1:
        payload = payload[0]
    out.print(
        json.dumps(payload, indent=2, ensure_ascii=False),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


def render(command: str, result: ExtractionResult, title: str) -> None:
    if not result.success:
        console.print(f"[bold red]❌ {title}: {result.error}")
        return

    if command == "students":
        render_students(result, title)
    elif command == "scores":
        render_scores(result, title)
    else:
        out.print(result.raw_text, markup=False, highlight=False)

    if command != "text":
        console.print(f"OCR confidence: {result.confidence:.2f}%")


def parse_text_file(extractor: DocumentExtractor, command: str, path: str) -> ExtractionResult:
    text = Path(path).read_text(encoding="utf-8")
    document = RecognizedDocument.from_text(text)

    if command == "students":
        outcome = extractor.parse_students(document)
        return ExtractionResult.ok(raw_text=text, lines=list(document.lines), students=outcome.students)
    return ExtractionResult.ok(raw_text=text, lines=list(document.lines), scores=extractor.parse_scores(document))


def run_images(extractor: DocumentExtractor, command: str, images: list) -> list:
    extract = {
        "students": extractor.extract_students,
        "scores": extractor.extract_scores,
        "text": extractor.extract_text,
    }[command]

    results = []
    progress = get_progress(console)

    with progress:
        for image in images:
            task = progress.add_task(f"🔍 {Path(image).name}", total=100)
            result = extract(
                image,
                on_progress=lambda percent, task=task: progress.update(task, completed=percent),
            )
            progress.update(task, completed=100)
            results.append((image, result))

    return results


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.debug:
        os.environ["DEBUG"] = "1"
        reset_config()

    logger = get_logger("rollscan")
    start_time = time.perf_counter()

    # Opened lazily on first recognition; --text-file never touches tesseract
    handle = EngineHandle(TesseractEngine())
    try:
        extractor = DocumentExtractor(handle)
        if args.json:
            # stdout carries the JSON payload
            set_console_level(logging.CRITICAL)

        if getattr(args, "text_file", None):
            results = [(args.text_file, parse_text_file(extractor, args.command, args.text_file))]
        elif not args.images:
            console.print("[bold red]No images given (or use --text-file)")
            return 2
        else:
            results = run_images(extractor, args.command, args.images)
    except OCRInitializationError as e:
        logger.debug(f"OCR engine unavailable: {e}")
        console.print(f"❌ {e.message}", style="bold red", markup=False, highlight=False)
        if args.json:
            render_json([(None, ExtractionResult.failure(e.message, error_type=type(e).__name__))])
        return 1
    finally:
        handle.close()

    if args.json:
        render_json(results)
    else:
        for source, result in results:
            render(args.command, result, Path(source).name)

    log_timing(logger, "Extraction completed", time.perf_counter() - start_time)

    failed = [source for source, result in results if not result.success]
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
