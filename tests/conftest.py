import io
import sys
from pathlib import Path

import pytest
from PIL import Image

# Add src to sys.path so we can import smartgrade
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from smartgrade.core.models import Mark, MarkStatus, Page  # noqa: E402


def make_image_bytes(width: int = 200, height: int = 100, color: str = "white", format: str = "PNG") -> bytes:
    """Encode a solid image."""
    img = Image.new("RGB", (width, height), color=color)
    buf = io.BytesIO()
    img.save(buf, format=format)
    return buf.getvalue()


def make_mark(
    mark_id: str = "m1",
    x: float = 50.0,
    y: float = 50.0,
    status: MarkStatus = MarkStatus.CORRECT,
    page_index: int = 0,
    **text,
) -> Mark:
    return Mark(id=mark_id, x=x, y=y, status=status, page_index=page_index, **text)


class FakeMeasurer:
    """Every character is 10 px wide, whatever the font."""

    def measure(self, text, font):
        return 10.0 * len(text)


# Common test fixtures
@pytest.fixture
def png_bytes() -> bytes:
    """A 200x100 white PNG."""
    return make_image_bytes()


@pytest.fixture
def sample_page(png_bytes) -> Page:
    return Page(id="page1", image=png_bytes, mime_type="image/png")


@pytest.fixture
def sample_image(tmp_path: Path) -> Path:
    """Create a simple test image on disk."""
    img = Image.new("RGB", (200, 100), color="white")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path


@pytest.fixture
def measurer() -> FakeMeasurer:
    return FakeMeasurer()
