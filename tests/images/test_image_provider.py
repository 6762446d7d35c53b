"""
Tests for image providers and natural-size resolution.
"""

import pytest
from PIL import Image

from spread_layout.core.models.items import PlacedItem
from spread_layout.images.provider import (
    FileImageProvider,
    ImageNotFoundError,
    InMemoryImageProvider,
    expand_sources,
    resolve_natural_sizes,
)


class TestFileImageProvider:
    """Tests for FileImageProvider."""

    def test_get_image_when_file_exists_then_decoded_rgb(self, sample_image):
        # Arrange
        provider = FileImageProvider(sample_image.parent)

        # Act
        image = provider.get_image("sample.png")

        # Assert
        assert image.size == (200, 100)
        assert image.mode == "RGB"

    def test_get_image_when_called_twice_then_cached(self, sample_image):
        provider = FileImageProvider()

        first = provider.get_image(str(sample_image))
        second = provider.get_image(str(sample_image))

        assert first is second

    def test_get_image_when_alpha_then_rgba(self, tmp_path):
        path = tmp_path / "alpha.png"
        Image.new("RGBA", (10, 10), (0, 0, 0, 0)).save(path)

        with FileImageProvider() as provider:
            assert provider.get_image(str(path)).mode == "RGBA"

    def test_get_image_when_missing_then_raises(self, tmp_path):
        provider = FileImageProvider(tmp_path)

        with pytest.raises(ImageNotFoundError, match="not found"):
            provider.get_image("nope.jpg")

    def test_get_image_when_not_an_image_then_raises(self, tmp_path):
        path = tmp_path / "broken.png"
        path.write_text("definitely not a png")

        with pytest.raises(ImageNotFoundError, match="Cannot decode"):
            FileImageProvider().get_image(str(path))

    def test_natural_size_when_file_exists_then_width_height(self, sample_image):
        assert FileImageProvider().natural_size(str(sample_image)) == (200, 100)


class TestInMemoryImageProvider:
    """Tests for InMemoryImageProvider."""

    def test_get_image_when_known_then_same_object(self, red_image):
        provider = InMemoryImageProvider({"red": red_image})
        assert provider.get_image("red") is red_image

    def test_get_image_when_unknown_then_raises(self, provider):
        with pytest.raises(ImageNotFoundError):
            provider.get_image("blue")


class TestResolveNaturalSizes:
    """Tests for resolve_natural_sizes()."""

    def test_resolve_when_mixed_items_then_pending_reported(self, provider):
        # Arrange
        items = [
            PlacedItem("ok", x=0, y=0, w=10, h=10, source="red"),
            PlacedItem("missing", x=0, y=0, w=10, h=10, source="blue"),
            PlacedItem("nosource", x=0, y=0, w=10, h=10),
            PlacedItem("known", x=0, y=0, w=10, h=10, natural_w=7, natural_h=3, source="blue"),
        ]

        # Act
        resolved, pending = resolve_natural_sizes(items, provider)

        # Assert
        assert [n.id for n in resolved] == ["ok", "missing", "nosource", "known"]
        assert (resolved[0].natural_w, resolved[0].natural_h) == (400, 300)
        assert (resolved[3].natural_w, resolved[3].natural_h) == (7, 3)
        assert pending == ["missing", "nosource"]


def test_expand_sources_when_directory_then_images_in_name_order(tmp_path):
    for name in ("b.jpg", "a.png", "notes.txt"):
        (tmp_path / name).write_bytes(b"")
    loose = tmp_path / "loose.webp"

    expanded = expand_sources([tmp_path, loose])

    assert [p.name for p in expanded] == ["a.png", "b.jpg", "loose.webp"]
