"""
Integration Tests for Report Export

Real Pillow fonts and ReportLab output, inspected with pypdf.
"""

import io

import pytest
from pypdf import PdfReader

from conftest import make_image_bytes, make_mark
from smartgrade.core.errors import ImageLoadError
from smartgrade.core.models import Language, MarkStatus, Page, StudentInfo
from smartgrade.report import OverflowPolicy, ReportConfig, ReportError, build_report


def _mediaboxes(data):
    reader = PdfReader(io.BytesIO(data))
    return [(round(float(p.mediabox.width)), round(float(p.mediabox.height))) for p in reader.pages]


@pytest.fixture
def portrait_page():
    return Page(id="p0", image=make_image_bytes(1000, 1400, format="JPEG"), language=Language.EN)


class TestBuildReport:
    def test_when_one_page_two_marks_then_single_wide_page(self, portrait_page):
        """1000x1400 page with a correct and an incorrect mark → one 1450x1400 page."""
        marks = [
            make_mark("a", x=30, y=20, status=MarkStatus.CORRECT, question="1+1", student_answer="2"),
            make_mark("b", x=40, y=60, status=MarkStatus.INCORRECT, question="2+2", student_answer="5", correct_answer="4"),
        ]
        result = build_report([portrait_page], marks, StudentInfo("Ada"))

        assert result.page_count == 1
        assert result.page_sizes == ((1450, 1400),)
        assert _mediaboxes(result.document) == [(1450, 1400)]
        assert result.filename == "Exam_Graded_Ada.pdf"
        assert result.warnings == ()

    def test_when_pages_have_no_marks_then_still_rendered(self, portrait_page):
        second = Page(id="p1", image=make_image_bytes(800, 600))
        result = build_report([portrait_page, second], [])
        assert result.page_sizes == ((1450, 1400), (1160, 600))
        assert _mediaboxes(result.document) == [(1450, 1400), (1160, 600)]
        assert result.filename == "Exam_Graded_Student.pdf"

    def test_when_marks_span_pages_then_each_page_gets_its_own(self, portrait_page):
        second = Page(id="p1", image=make_image_bytes(400, 300))
        marks = [make_mark(f"m{i}", page_index=1, explanation="x" * 300) for i in range(4)]
        result = build_report([portrait_page, second], marks)
        # Only the small page is crowded enough to extend
        assert result.page_sizes[0] == (1450, 1400)
        assert result.page_sizes[1][1] > 300
        assert len(result.warnings) == 1
        assert "Page 2" in result.warnings[0]

    def test_when_clip_policy_then_height_kept(self):
        page = Page(id="p0", image=make_image_bytes(400, 300))
        marks = [make_mark(f"m{i}", explanation="x" * 300) for i in range(4)]
        result = build_report([page], marks, config=ReportConfig(overflow=OverflowPolicy.CLIP))
        assert result.page_sizes == ((580, 300),)
        assert "clipped" in result.warnings[0]

    def test_when_page_undecodable_then_report_error(self, portrait_page):
        broken = Page(id="bad", image=b"nope")
        with pytest.raises(ReportError) as exc_info:
            build_report([portrait_page, broken], [])
        assert exc_info.value.page_index == 1
        assert isinstance(exc_info.value.__cause__, ImageLoadError)

    def test_when_skip_mode_then_bad_page_omitted(self, portrait_page):
        broken = Page(id="bad", image=b"nope")
        result = build_report([broken, portrait_page], [], on_error="skip")
        assert result.page_count == 1
        assert result.skipped == (0,)
        assert "omitted" in result.warnings[0]

    def test_when_every_page_skipped_then_report_error(self):
        with pytest.raises(ReportError, match="No pages"):
            build_report([Page(id="bad", image=b"nope")], [], on_error="skip")

    def test_when_chinese_page_then_rendered(self):
        page = Page(id="zh", image=make_image_bytes(600, 800), language=Language.ZH)
        mark = make_mark(status=MarkStatus.INCORRECT, question="一加一", student_answer="三", correct_answer="二")
        result = build_report([page], [mark], StudentInfo("李雷"))
        assert result.page_count == 1
        assert result.filename == "Exam_Graded_李雷.pdf"


@pytest.fixture
def rasterized(monkeypatch):
    """Records every surface build_report rasterizes."""
    from smartgrade.report import controller

    surfaces = []
    real_rasterize = controller.rasterize

    def spy(*args, **kwargs):
        surface = real_rasterize(*args, **kwargs)
        surfaces.append(surface)
        return surface

    monkeypatch.setattr(controller, "rasterize", spy)
    return surfaces


def _is_closed(image):
    try:
        image.getpixel((0, 0))
    except ValueError:
        return True
    return False


class TestSurfaceRelease:
    def test_when_export_succeeds_then_surfaces_closed(self, portrait_page, rasterized):
        build_report([portrait_page], [make_mark()])
        assert len(rasterized) == 1
        assert all(_is_closed(s) for s in rasterized)

    def test_when_assembly_fails_then_surfaces_still_closed(self, portrait_page, rasterized, monkeypatch):
        def broken_render(*args, **kwargs):
            raise RuntimeError("encoder crashed")

        monkeypatch.setattr("smartgrade.report.controller.render_document", broken_render)
        second = Page(id="p1", image=make_image_bytes(400, 300))
        with pytest.raises(RuntimeError, match="encoder crashed"):
            build_report([portrait_page, second], [make_mark()])
        assert len(rasterized) == 2
        assert all(_is_closed(s) for s in rasterized)

    def test_when_later_page_aborts_then_earlier_surfaces_closed(self, portrait_page, rasterized):
        with pytest.raises(ReportError):
            build_report([portrait_page, Page(id="bad", image=b"nope")], [])
        assert len(rasterized) == 1
        assert _is_closed(rasterized[0])
