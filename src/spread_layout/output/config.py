"""
Module: output.config

Purpose:
    Export and preview configuration objects.

Key Classes:
    - ExportConfig: Raster export settings (scale, background, format)
    - GuideOptions: Preview guide styling

Dependencies:
    - PIL.ImageColor: Colour validation
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from PIL import ImageColor

# Export limits
MIN_OUTPUT_SCALE = 1
MAX_OUTPUT_SCALE = 4
DEFAULT_OUTPUT_SCALE = 2
DEFAULT_BACKGROUND = "#000000"
DEFAULT_PREFIX = "spread"
JPEG_QUALITY = 95

# Preview limits
MIN_ZOOM = 0.25
MAX_ZOOM = 1.5
DEFAULT_ZOOM = 0.35

# Format -> (PIL format name, file extension)
IMAGE_FORMATS = {
    "png": ("PNG", "png"),
    "jpeg": ("JPEG", "jpg"),
}


@dataclass(frozen=True)
class ExportConfig:
    """
    Raster export settings (immutable).

    Attributes:
        output_scale: Output pixels per spread unit (1..4)
        background: Fill colour behind every board (any PIL colour string)
        image_format: "png" or "jpeg"
        filename_prefix: Files are named {prefix}_{n}.{ext}, n from 1
        jpeg_quality: JPEG quality when image_format is "jpeg"

    Example:
        >>> config = ExportConfig(output_scale=1, image_format="jpeg")
        >>> config.filename_for(0)
        'spread_1.jpg'
    """

    output_scale: float = DEFAULT_OUTPUT_SCALE
    background: str = DEFAULT_BACKGROUND
    image_format: str = "png"
    filename_prefix: str = DEFAULT_PREFIX
    jpeg_quality: int = JPEG_QUALITY

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not MIN_OUTPUT_SCALE <= self.output_scale <= MAX_OUTPUT_SCALE:
            raise ValueError(
                f"output_scale must be between {MIN_OUTPUT_SCALE} and "
                f"{MAX_OUTPUT_SCALE}: {self.output_scale}"
            )
        if self.image_format not in IMAGE_FORMATS:
            raise ValueError(
                f"image_format must be one of {sorted(IMAGE_FORMATS)}: {self.image_format}"
            )
        if not self.filename_prefix.strip():
            raise ValueError("filename_prefix must be non-empty")
        if not 1 <= self.jpeg_quality <= 100:
            raise ValueError(f"jpeg_quality must be between 1 and 100: {self.jpeg_quality}")
        try:
            ImageColor.getrgb(self.background)
        except ValueError as e:
            raise ValueError(f"Invalid background colour: {self.background}") from e

    @property
    def pil_format(self) -> str:
        return IMAGE_FORMATS[self.image_format][0]

    @property
    def extension(self) -> str:
        return IMAGE_FORMATS[self.image_format][1]

    def filename_for(self, board_index: int, extension: Optional[str] = None) -> str:
        """File name for a board (board_index is 0-based, names are 1-based)."""
        return f"{self.filename_prefix}_{board_index + 1}.{extension or self.extension}"


@dataclass(frozen=True)
class GuideOptions:
    """
    Preview guide styling (immutable). Guides are never exported.

    Attributes:
        color: Board outline / label colour
        opacity: Guide opacity (0..1)
        show_labels: Draw "slide N" labels
        mark_overlaps: Cross out items that overlap under the spacing
        line_width: Outline width in preview pixels
    """

    color: str = "#00ff6a"
    opacity: float = 0.6
    show_labels: bool = True
    mark_overlaps: bool = True
    line_width: int = 2

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not 0 <= self.opacity <= 1:
            raise ValueError(f"opacity must be between 0 and 1: {self.opacity}")
        if self.line_width < 1:
            raise ValueError(f"line_width must be >= 1: {self.line_width}")
        try:
            ImageColor.getrgb(self.color)
        except ValueError as e:
            raise ValueError(f"Invalid guide colour: {self.color}") from e

    @property
    def rgba(self) -> tuple[int, int, int, int]:
        """Guide colour with opacity applied as alpha."""
        r, g, b = ImageColor.getrgb(self.color)[:3]
        return (r, g, b, round(self.opacity * 255))
