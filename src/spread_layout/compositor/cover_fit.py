"""
Module: compositor.cover_fit

Purpose:
    "Object-fit: cover" arithmetic. Scales a source so it fully covers a
    frame while keeping its aspect ratio, centred, with the overflow
    cropped away.

Key Functions:
    - cover_fit(): Scale, footprint and centring offset for a frame

Key Classes:
    - CoverFit: Result of cover_fit
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CoverFit:
    """
    Cover-fit of a natural-size source into a frame (immutable).

    The scaled image's top-left corner sits at
    (frame.x - offset_x, frame.y - offset_y); offsets are >= 0.

    Attributes:
        scale: Source px -> spread units
        render_w: Scaled source width (>= frame width)
        render_h: Scaled source height (>= frame height)
        offset_x: Horizontal overflow on each side
        offset_y: Vertical overflow on each side

    Example:
        >>> fit = cover_fit(400, 300, 200, 200)
        >>> fit.scale, fit.offset_x, fit.offset_y
        (0.6666666666666666, 33.33333333333333, 0.0)
    """

    scale: float
    render_w: float
    render_h: float
    offset_x: float
    offset_y: float


def cover_fit(natural_w: float, natural_h: float, frame_w: float, frame_h: float) -> CoverFit:
    """
    Compute the cover-fit of a source into a frame.

    Args:
        natural_w: Source width in pixels (> 0)
        natural_h: Source height in pixels (> 0)
        frame_w: Frame width (> 0)
        frame_h: Frame height (> 0)

    Returns:
        CoverFit with scale = max(frame_w/natural_w, frame_h/natural_h)

    Raises:
        ValueError: If any dimension is not positive
    """
    if natural_w <= 0 or natural_h <= 0:
        raise ValueError(f"Natural size must be positive: {natural_w}x{natural_h}")
    if frame_w <= 0 or frame_h <= 0:
        raise ValueError(f"Frame size must be positive: {frame_w}x{frame_h}")

    scale = max(frame_w / natural_w, frame_h / natural_h)
    render_w = natural_w * scale
    render_h = natural_h * scale
    return CoverFit(
        scale=scale,
        render_w=render_w,
        render_h=render_h,
        offset_x=(render_w - frame_w) / 2,
        offset_y=(render_h - frame_h) / 2,
    )
