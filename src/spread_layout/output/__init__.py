"""
Module: output

Purpose:
    Board rasterization, export (image files, ZIP, PDF) and previews.

Key Functions:
    - render_board(): Rasterize one board
    - export_boards(): One image file per board
    - write_boards_zip(): PNG boards in a ZIP
    - render_to_pdf(): One PDF page per board
    - render_preview(): Whole-spread preview with guides

Dependencies:
    - PIL: Rasterization
    - reportlab: PDF generation
"""

from .config import ExportConfig, GuideOptions
from .overlay import ShapeKind, render_preview
from .pdf import render_to_pdf
from .renderer import ExportError, ExportNotReadyError, export_boards, render_board, render_boards
from .zip_writer import write_boards_zip

__all__ = [
    "ExportConfig",
    "GuideOptions",
    "ShapeKind",
    "render_preview",
    "render_to_pdf",
    "ExportError",
    "ExportNotReadyError",
    "export_boards",
    "render_board",
    "render_boards",
    "write_boards_zip",
]
