import random
import sys
from pathlib import Path

import pytest
from PIL import Image

# Add src to sys.path so we can import spread_layout
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from spread_layout.core.models.items import PlacedItem  # noqa: E402
from spread_layout.core.models.spread import Spread  # noqa: E402
from spread_layout.images.provider import InMemoryImageProvider  # noqa: E402


# Common test fixtures
@pytest.fixture
def rng():
    """Seeded random source."""
    return random.Random(1234)


@pytest.fixture
def three_boards():
    """3 boards of 1080x1320 with spacing 24."""
    return Spread(board_count=3, board_w=1080, board_h=1320, spacing=24)


@pytest.fixture
def two_narrow_boards():
    """Two 150-wide boards without spacing, for partition tests."""
    return Spread(board_count=2, board_w=150, board_h=300, spacing=0)


@pytest.fixture
def small_items():
    """Ten 50x50 items."""
    return [PlacedItem(f"i{n}", x=0, y=0, w=50, h=50, z_order=n) for n in range(10)]


@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a simple test image."""
    img = Image.new("RGB", (200, 100), color="white")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path


@pytest.fixture
def red_image():
    """400x300 solid red image."""
    return Image.new("RGB", (400, 300), color=(255, 0, 0))


@pytest.fixture
def provider(red_image):
    """In-memory provider serving the red image as 'red'."""
    return InMemoryImageProvider({"red": red_image})
