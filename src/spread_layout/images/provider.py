"""
Module: images.provider

Purpose:
    Abstract interface for accessing source photographs by reference.
    Decoding is the only deferred step in the pipeline: items learn
    their natural size from a provider before they can be composited.

Key Classes:
    - ImageProvider: Abstract base class for image access
    - FileImageProvider: Loads images from paths on disk (lazy, cached)
    - InMemoryImageProvider: Serves pre-built PIL images (tests, callers
      that already hold decoded images)
    - ImageNotFoundError: Exception for missing or undecodable sources

Key Functions:
    - resolve_natural_sizes(): Fill in natural sizes from a provider

Dependencies:
    - PIL: Image decoding

Used By:
    - output.renderer: Board rasterization
    - session: Adding images
    - controller: Export pipeline
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from PIL import Image, ImageOps, UnidentifiedImageError

from spread_layout.core.models.items import PlacedItem

logger = logging.getLogger(__name__)

# Extensions accepted when expanding directories
IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".bmp", ".webp", ".tif", ".tiff")


class ImageNotFoundError(Exception):
    """Source image missing or not decodable."""
    pass


class ImageProvider(ABC):
    """
    Abstract interface for accessing source photographs.

    Implementations map an item's source reference to a decoded image.
    """

    @abstractmethod
    def get_image(self, source: str) -> Image.Image:
        """
        Get the decoded image for a source reference.

        Args:
            source: Source reference (e.g. a file path)

        Returns:
            PIL Image in RGB or RGBA mode, EXIF orientation applied

        Raises:
            ImageNotFoundError: If the source cannot be loaded
        """

    def natural_size(self, source: str) -> Tuple[int, int]:
        """
        Get (width, height) of a source in pixels.

        Raises:
            ImageNotFoundError: If the source cannot be loaded
        """
        return self.get_image(source).size

    def close(self) -> None:
        """Release any held resources."""

    def __enter__(self) -> "ImageProvider":
        """Context manager entry."""
        return self

    def __exit__(self, *args) -> None:
        """Context manager exit - close resources."""
        self.close()


class FileImageProvider(ImageProvider):
    """
    Provider that loads images from disk on first use.

    Relative sources are resolved against base_dir. Decoded images are
    cached until close().

    Example:
        >>> with FileImageProvider(Path("photos")) as provider:
        ...     provider.natural_size("beach.jpg")
        (4032, 3024)
    """

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        """
        Initialize provider.

        Args:
            base_dir: Directory relative sources are resolved against
        """
        self._base_dir = Path(base_dir) if base_dir is not None else None
        self._cache: Dict[str, Image.Image] = {}

    def resolve(self, source: str) -> Path:
        """Path on disk for a source reference."""
        path = Path(source)
        if not path.is_absolute() and self._base_dir is not None:
            path = self._base_dir / path
        return path

    def get_image(self, source: str) -> Image.Image:
        """Get decoded image, loading it on first access."""
        cached = self._cache.get(source)
        if cached is not None:
            return cached

        path = self.resolve(source)
        if not path.exists():
            raise ImageNotFoundError(f"Image not found: {path}")
        try:
            with Image.open(path) as raw:
                image = ImageOps.exif_transpose(raw)
                image = image.convert("RGBA" if _has_alpha(image) else "RGB")
        except (UnidentifiedImageError, OSError) as e:
            raise ImageNotFoundError(f"Cannot decode image {path}: {e}") from e

        logger.debug(f"Loaded {path} ({image.width}x{image.height})")
        self._cache[source] = image
        return image

    def close(self) -> None:
        """Close cached images and free resources."""
        for image in self._cache.values():
            image.close()
        self._cache.clear()


class InMemoryImageProvider(ImageProvider):
    """Provider over a fixed mapping of source reference to PIL image."""

    def __init__(self, images: Mapping[str, Image.Image]) -> None:
        self._images = dict(images)

    def get_image(self, source: str) -> Image.Image:
        image = self._images.get(source)
        if image is None:
            raise ImageNotFoundError(f"No image for source: {source}")
        return image


def resolve_natural_sizes(
    items: Sequence[PlacedItem],
    provider: ImageProvider,
) -> Tuple[List[PlacedItem], List[str]]:
    """
    Record the natural size of every item whose source can be decoded.

    Items that already know their size are left alone. Items without a
    source, or whose source fails to load, stay pending.

    Args:
        items: Items to resolve
        provider: Image source

    Returns:
        Tuple of (items in input order, ids still lacking a natural size)
    """
    resolved = []
    pending = []
    for item in items:
        if item.has_natural_size:
            resolved.append(item)
            continue
        if item.source is None:
            pending.append(item.id)
            resolved.append(item)
            continue
        try:
            w, h = provider.natural_size(item.source)
        except ImageNotFoundError as e:
            logger.warning(f"Item {item.id}: {e}")
            pending.append(item.id)
            resolved.append(item)
            continue
        resolved.append(item.with_natural_size(w, h))
    return resolved, pending


def expand_sources(paths: Sequence[Path]) -> List[Path]:
    """
    Expand directories into the image files they contain.

    Files are kept as given; directories contribute their image files
    (by extension) in name order.
    """
    expanded = []
    for path in paths:
        path = Path(path)
        if path.is_dir():
            expanded.extend(
                sorted(p for p in path.iterdir() if p.suffix.lower() in IMAGE_EXTENSIONS)
            )
        else:
            expanded.append(path)
    return expanded


def _has_alpha(image: Image.Image) -> bool:
    return image.mode in ("RGBA", "LA", "PA") or (
        image.mode == "P" and "transparency" in image.info
    )
