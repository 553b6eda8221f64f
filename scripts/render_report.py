"""
Render a graded PDF report from exam page images.

Marks come either from saved annotation service responses (one JSON file
per image, same order) or from a live Gemini call (--live, needs
SMARTGRADE_GEMINI_API_KEY / GEMINI_API_KEY in the environment).

Usage:
    python scripts/render_report.py page1.jpg page2.jpg \
        --responses page1.json page2.json --student "Ada Lovelace"
    python scripts/render_report.py page1.jpg --live --output out/
"""

import argparse
import logging
import sys
from pathlib import Path

from smartgrade.core.errors import ServiceError
from smartgrade.core.models import Page, PageAnnotation, StudentInfo
from smartgrade.core.schemas import ValidationError
from smartgrade.core.utils import parse_annotation_response
from smartgrade.pipeline import AnnotationService, GeminiAnnotationService, GradingConfig
from smartgrade.pipeline.session import GradingSession
from smartgrade.report import OverflowPolicy, ReportConfig, write_document

logger = logging.getLogger("render_report")


class SavedResponseService(AnnotationService):
    """Replays saved service responses, keyed by page id."""

    def __init__(self, responses: dict[str, Path]) -> None:
        self._responses = responses

    def annotate(self, page: Page) -> PageAnnotation:
        path = self._responses[page.id]
        logger.info(f"Replaying {path.name} for page {page.id}")
        try:
            return parse_annotation_response(path.read_bytes())
        except ValidationError as e:
            raise ServiceError(f"Saved response {path} is invalid: {e}", page_id=page.id) from e


def main() -> int:
    parser = argparse.ArgumentParser(description="Render a graded PDF report")
    parser.add_argument("images", nargs="+", type=Path, help="Exam page images, in order")
    parser.add_argument("--responses", nargs="*", type=Path, default=[], help="Saved service JSON, one per image")
    parser.add_argument("--live", action="store_true", help="Call the Gemini service instead of replaying JSON")
    parser.add_argument("--student", default="", help="Student name for the report filename")
    parser.add_argument("--output", type=Path, default=Path("workspace/reports"), help="Output directory")
    parser.add_argument(
        "--overflow",
        choices=[p.value for p in OverflowPolicy],
        default=OverflowPolicy.EXTEND.value,
        help="Sidebar overflow handling",
    )
    parser.add_argument("--skip-failed", action="store_true", help="Skip failing pages instead of aborting")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    on_error = "skip" if args.skip_failed else "abort"
    session = GradingSession()
    pages = session.ingest(args.images)

    if args.live:
        config = GradingConfig.from_env(on_error=on_error)
        service: AnnotationService = GeminiAnnotationService(config)
    else:
        if len(args.responses) != len(pages):
            parser.error(f"Expected {len(pages)} response files, got {len(args.responses)}")
        config = GradingConfig(on_error=on_error)
        service = SavedResponseService({page.id: path for page, path in zip(pages, args.responses)})

    grading = session.grade(service, config)
    for failure in grading.failures:
        logger.warning(f"Page {failure.page_index + 1} was not graded: {failure.error}")

    counts = session.editor.counts()
    logger.info(f"Marks: {counts.correct} correct, {counts.incorrect} incorrect")

    student = StudentInfo(args.student) if args.student.strip() else None
    result = session.export(
        student,
        ReportConfig(overflow=OverflowPolicy(args.overflow)),
        on_error=on_error,
    )
    for warning in result.warnings:
        logger.warning(warning)

    path = write_document(result.document, args.output / result.filename)
    print(f"[OK] {result.page_count} pages → {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
