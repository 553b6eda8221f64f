"""
Unit Tests for Report Page Composition

Layout is pure, so these tests inspect draw commands only. Text is
measured with a fake measurer (10 px per character).
"""

import pytest

from conftest import make_mark
from smartgrade.core.models import Language, MarkStatus
from smartgrade.report.layout import (
    DrawDashedLine,
    DrawGlyph,
    DrawImage,
    DrawWrappedText,
    FillRect,
    FontWeight,
    GlyphKind,
    OverflowPolicy,
    ReportConfig,
    compose_page,
    sort_marks,
)


def _texts(plan):
    return [c for c in plan.commands_of(DrawWrappedText)]


def _sidebar_texts(plan):
    """Text blocks excluding the title."""
    return _texts(plan)[1:]


class TestSortMarks:
    def test_when_equal_y_then_original_order_kept(self):
        marks = [
            make_mark("a", y=50),
            make_mark("b", y=10),
            make_mark("c", y=90),
            make_mark("d", y=10),
        ]
        ordered = sort_marks(marks)
        assert [m.y for m in ordered] == [10, 10, 50, 90]
        assert [m.id for m in ordered] == ["b", "d", "a", "c"]


class TestComposePage:
    # ─────────────────────────────────────────────────────────────────────────
    # Surface Geometry
    # ─────────────────────────────────────────────────────────────────────────

    def test_when_1000_wide_then_sidebar_is_450(self, measurer):
        plan = compose_page(0, (1000, 1400), [], None, measurer)
        assert (plan.width, plan.height) == (1450, 1400)
        assert plan.sidebar_left == 1000
        assert not plan.overflowed

    def test_when_odd_width_then_sidebar_floored(self, measurer):
        plan = compose_page(0, (333, 500), [], None, measurer)
        assert plan.width == 333 + 149

    def test_when_size_not_positive_then_raises_error(self, measurer):
        with pytest.raises(ValueError, match="must be positive"):
            compose_page(0, (0, 100), [], None, measurer)

    def test_when_composed_then_background_image_sidebar_divider_first(self, measurer):
        plan = compose_page(0, (1000, 1400), [make_mark()], None, measurer)
        background, image, sidebar, divider = plan.commands[:4]
        assert isinstance(background, FillRect) and background.color == "#ffffff"
        assert isinstance(image, DrawImage) and image.origin == (0, 0)
        assert sidebar.box == (1000, 0, 1450, 1400)
        assert sidebar.color == "#f8f9fa"
        assert divider.color == "#e5e7eb"
        assert divider.box[2] - divider.box[0] == 2

    def test_when_title_enabled_then_bilingual_bold_title(self, measurer):
        plan = compose_page(0, (1000, 1400), [], None, measurer)
        (title,) = _texts(plan)
        assert "".join(title.lines) == "Grading Report / 评分报告"
        assert title.font.weight is FontWeight.BOLD
        assert title.font.size == 25
        assert title.origin == (1040, 60)

    def test_when_title_disabled_then_no_text(self, measurer):
        plan = compose_page(0, (1000, 1400), [], ReportConfig(show_title=False), measurer)
        assert _texts(plan) == []

    # ─────────────────────────────────────────────────────────────────────────
    # Per-Mark Commands
    # ─────────────────────────────────────────────────────────────────────────

    def test_when_marks_unsorted_then_sidebar_follows_y_order(self, measurer):
        marks = [
            make_mark("a", y=50, question="A"),
            make_mark("b", y=10, question="B"),
            make_mark("c", y=90, question="C"),
            make_mark("d", y=10, question="D"),
        ]
        plan = compose_page(0, (1000, 1400), marks, None, measurer)
        questions = [t.lines[0] for t in _sidebar_texts(plan) if t.font.weight is FontWeight.BOLD]
        assert questions == ["B", "D", "A", "C"]

    def test_when_correct_mark_then_green_check(self, measurer):
        plan = compose_page(0, (1000, 1400), [make_mark(x=10, y=50)], None, measurer)
        glyph = plan.commands_of(DrawGlyph)[0]
        assert glyph.kind is GlyphKind.CHECK
        assert glyph.color == "#22c55e"
        assert glyph.center == pytest.approx((100, 700))
        assert glyph.size == pytest.approx(30)
        assert glyph.stroke == pytest.approx(5)

    def test_when_incorrect_mark_then_red_cross(self, measurer):
        plan = compose_page(0, (1000, 1400), [make_mark(status=MarkStatus.INCORRECT)], None, measurer)
        assert plan.commands_of(DrawGlyph)[0].kind is GlyphKind.CROSS
        assert plan.commands_of(DrawGlyph)[0].color == "#ef4444"

    def test_when_small_image_then_minimum_stroke(self, measurer):
        plan = compose_page(0, (200, 300), [make_mark()], None, measurer)
        assert plan.commands_of(DrawGlyph)[0].stroke == 3

    def test_when_first_mark_then_connector_reaches_cursor(self, measurer):
        plan = compose_page(0, (1000, 1400), [make_mark(x=10, y=50)], None, measurer)
        (connector,) = plan.commands_of(DrawDashedLine)
        assert connector.start == pytest.approx((130, 700))
        # Cursor 120 after the title, plus one base font (15)
        assert connector.end == pytest.approx((1000, 135))
        assert connector.color == "#d1d5db"
        assert (connector.width, connector.dash) == (2, 10)

    def test_when_mark_then_status_dot_left_of_text(self, measurer):
        plan = compose_page(0, (1000, 1400), [make_mark(status=MarkStatus.INCORRECT)], None, measurer)
        dot = [g for g in plan.commands_of(DrawGlyph) if g.kind is GlyphKind.DOT][0]
        assert dot.center == pytest.approx((1025, 127.5))
        assert dot.size == 6
        assert dot.color == "#ef4444"

    def test_when_correct_with_answer_then_no_correct_answer_block(self, measurer):
        mark = make_mark(status=MarkStatus.CORRECT, student_answer="4", correct_answer="4")
        plan = compose_page(0, (1000, 1400), [mark], None, measurer)
        assert not [t for t in _texts(plan) if t.font.weight is FontWeight.ITALIC]

    def test_when_incorrect_with_answer_then_italic_correct_answer(self, measurer):
        mark = make_mark(status=MarkStatus.INCORRECT, student_answer="5", correct_answer="4")
        plan = compose_page(0, (1000, 1400), [mark], None, measurer)
        (italic,) = [t for t in _texts(plan) if t.font.weight is FontWeight.ITALIC]
        assert italic.lines == ("Correct: 4",)
        assert italic.color == "#15803d"

    def test_when_incorrect_without_answer_then_no_correct_answer_block(self, measurer):
        plan = compose_page(0, (1000, 1400), [make_mark(status=MarkStatus.INCORRECT)], None, measurer)
        assert not [t for t in _texts(plan) if t.font.weight is FontWeight.ITALIC]

    def test_when_blocks_written_then_each_below_previous(self, measurer):
        mark = make_mark(
            status=MarkStatus.INCORRECT,
            question="What is 2+2?",
            student_answer="5",
            correct_answer="4",
            explanation="Two plus two is four.",
        )
        plan = compose_page(0, (1000, 1400), [mark], None, measurer)
        question, answer, correct, note = _sidebar_texts(plan)
        assert question.origin[1] == 120
        assert answer.origin[1] == pytest.approx(question.bottom + 5)
        assert correct.origin[1] == pytest.approx(answer.bottom + 5)
        assert note.origin[1] == pytest.approx(correct.bottom + 5)
        assert note.font.size == 13
        assert note.line_height == pytest.approx(22.5 * 0.9)
        assert note.lines == ("Note: Two plus two is four.",)
        assert answer.lines == ("Ans: 5",)

    def test_when_second_mark_then_starts_after_item_spacing(self, measurer):
        marks = [make_mark("a", y=10, question="A"), make_mark("b", y=20, question="B")]
        plan = compose_page(0, (1000, 1400), marks, None, measurer)
        texts = _sidebar_texts(plan)
        first_answer, second_question = texts[1], texts[2]
        assert second_question.origin[1] == pytest.approx(first_answer.bottom + 1.5 * 22.5)

    def test_when_long_question_then_wrapped_to_content_width(self, measurer):
        plan = compose_page(0, (1000, 1400), [make_mark(question="x" * 80)], None, measurer)
        question = _sidebar_texts(plan)[0]
        # 370 px content width at 10 px per character
        assert [len(line) for line in question.lines] == [37, 37, 6]

    def test_when_chinese_page_then_localized_prefixes(self, measurer):
        mark = make_mark(status=MarkStatus.INCORRECT, student_answer="5", correct_answer="4", explanation="因为")
        plan = compose_page(0, (1000, 1400), [mark], None, measurer, Language.ZH)
        _, answer, correct, note = _sidebar_texts(plan)
        assert answer.lines[0].startswith("作答：")
        assert correct.lines[0].startswith("正确答案：")
        assert note.lines[0].startswith("解析：")

    def test_when_question_missing_then_placeholder(self, measurer):
        plan = compose_page(0, (1000, 1400), [make_mark()], None, measurer)
        assert _sidebar_texts(plan)[0].lines == ("Question",)

    # ─────────────────────────────────────────────────────────────────────────
    # Overflow
    # ─────────────────────────────────────────────────────────────────────────

    def _crowded(self):
        return [make_mark(f"m{i}", y=i, explanation="e" * 200) for i in range(10)]

    def test_when_overflow_and_extend_then_page_grows(self, measurer):
        plan = compose_page(0, (1000, 400), self._crowded(), None, measurer)
        assert plan.overflowed
        assert plan.height == pytest.approx(plan.content_bottom + 40, abs=1)
        assert plan.commands[2].box[3] == plan.height
        assert "extended" in plan.warnings[0]

    def test_when_overflow_and_clip_then_height_kept_with_warning(self, measurer):
        config = ReportConfig(overflow=OverflowPolicy.CLIP)
        plan = compose_page(0, (1000, 400), self._crowded(), config, measurer)
        assert plan.overflowed
        assert plan.height == 400
        assert "clipped" in plan.warnings[0]

    def test_when_content_fits_then_no_warning(self, measurer):
        plan = compose_page(0, (1000, 1400), [make_mark()], None, measurer)
        assert plan.warnings == []
