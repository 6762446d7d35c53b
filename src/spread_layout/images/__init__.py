"""
Module: images

Purpose:
    Source image access for the layout and export pipeline.

Key Classes:
    - ImageProvider: Abstract interface for image access
    - FileImageProvider: Disk-backed provider
    - InMemoryImageProvider: Mapping-backed provider

Dependencies:
    - PIL: Image decoding
"""

from .provider import (
    ImageProvider,
    FileImageProvider,
    InMemoryImageProvider,
    ImageNotFoundError,
    expand_sources,
    resolve_natural_sizes,
)

__all__ = [
    "ImageProvider",
    "FileImageProvider",
    "InMemoryImageProvider",
    "ImageNotFoundError",
    "expand_sources",
    "resolve_natural_sizes",
]
