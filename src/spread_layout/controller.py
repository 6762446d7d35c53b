"""
Module: controller

Purpose:
    Orchestrate the complete export pipeline.
    Resolve sizes → Check readiness → Render boards → Bundle → Metadata

Key Functions:
    - export_spread(): Main entry point for exporting a spread

Key Classes:
    - ExportResult: Complete export result

Dependencies:
    - images.provider: Natural size resolution
    - output: Board files, ZIP, PDF
    - placement.audit: Overlap report in metadata

Used By:
    - cli: export command
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from spread_layout.core.models.items import PlacedItem
from spread_layout.core.models.spread import Spread
from spread_layout.core.utils.serialization import serialize_spread
from spread_layout.images.provider import ImageProvider, resolve_natural_sizes
from spread_layout.output.config import ExportConfig
from spread_layout.output.pdf import render_to_pdf
from spread_layout.output.renderer import ExportError, ensure_ready, export_boards, render_boards
from spread_layout.output.zip_writer import write_boards_zip
from spread_layout.placement.audit import audit_overlaps

logger = logging.getLogger(__name__)

METADATA_FILENAME = "export_metadata.json"


@dataclass(frozen=True)
class ExportResult:
    """
    Complete export result (immutable).

    Attributes:
        output_dir: Directory everything was written to
        board_files: One image per board (empty if skipped)
        zip_path: ZIP bundle, if requested
        pdf_path: PDF, if requested
        metadata: Export metadata dictionary
        warnings: Any warnings during export

    Example:
        >>> result = export_spread(items, spread, provider, Path("out"))
        >>> len(result.board_files) == spread.board_count
        True
    """
    output_dir: Path
    board_files: tuple[Path, ...]
    zip_path: Optional[Path]
    pdf_path: Optional[Path]
    metadata: dict
    warnings: tuple[str, ...]


def export_spread(
    items: Sequence[PlacedItem],
    spread: Spread,
    provider: ImageProvider,
    output_dir: Path,
    config: ExportConfig = ExportConfig(),
    *,
    write_images: bool = True,
    write_zip: bool = False,
    write_pdf: bool = False,
    timestamped: bool = False,
    audit_margin: Optional[float] = None,
) -> ExportResult:
    """
    Export a spread from start to finish.

    Pipeline:
    1. Resolve natural sizes of every sourced item
    2. Refuse if any source is still not decoded
    3. Render every board once, then write one image per board (optional)
    4. Write a ZIP of PNG boards (optional)
    5. Write a PDF, one page per board (optional)
    6. Write export metadata JSON

    Args:
        items: Items on the spread
        spread: Spread configuration
        provider: Source image access
        output_dir: Base output directory
        config: Export settings
        write_images: Write per-board image files
        write_zip: Write {prefix}.zip
        write_pdf: Write {prefix}.pdf
        timestamped: Write into a new timestamped subfolder of output_dir
        audit_margin: Gap the layout was built to keep (default: spread spacing;
            0 for seamless masonry)

    Returns:
        ExportResult with paths and metadata

    Raises:
        ExportNotReadyError: If a source could not be decoded
        ExportError: If any step fails
    """
    warnings: List[str] = []
    start_time = time.perf_counter()
    logger.info(f"Starting export of {len(items)} items over {spread.board_count} boards")

    # 1-2. Natural sizes
    items, _ = resolve_natural_sizes(items, provider)
    ensure_ready(items)

    margin = spread.spacing if audit_margin is None else audit_margin
    overlaps = audit_overlaps(items, margin)
    if overlaps:
        warnings.append(f"{len(overlaps)} overlapping pair(s) at margin {margin}")
        logger.warning(warnings[-1])

    # 3. Render each board once for every output
    images = None
    if write_images or write_zip or write_pdf:
        images = render_boards(items, spread, provider, config)

    if timestamped:
        output_dir = _generate_timestamped_subfolder(Path(output_dir), config)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    logger.info(f"Output directory: {output_dir}")

    board_files: List[Path] = []
    if write_images:
        board_files = export_boards(items, spread, provider, output_dir, config, images=images)

    # 4. ZIP
    zip_path = None
    if write_zip:
        zip_path = write_boards_zip(
            items, spread, provider, output_dir / f"{config.filename_prefix}.zip", config,
            images=images,
        )
        logger.info(f"Exported boards ZIP: {zip_path}")

    # 5. PDF
    pdf_path = None
    if write_pdf:
        pdf_path = render_to_pdf(
            items, spread, provider, output_dir / f"{config.filename_prefix}.pdf", config,
            images=images,
        )

    elapsed = time.perf_counter() - start_time
    logger.info(f"Export completed in {elapsed:.2f}s")

    # 6. Metadata
    metadata = _build_metadata(
        spread, items, config, board_files, zip_path, pdf_path, overlaps, margin
    )
    _write_metadata(output_dir, metadata)

    return ExportResult(
        output_dir=output_dir,
        board_files=tuple(board_files),
        zip_path=zip_path,
        pdf_path=pdf_path,
        metadata=metadata,
        warnings=tuple(warnings),
    )


def _generate_timestamped_subfolder(base_dir: Path, config: ExportConfig) -> Path:
    """
    Pick a new timestamped subfolder inside base_dir.

    Returns:
        Path like base/20250116-103045__spread__x2, with a (n) suffix
        on collision
    """
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    folder_name = f"{timestamp}__{config.filename_prefix}__x{config.output_scale:g}"

    output_path = base_dir / folder_name
    if output_path.exists():
        counter = 1
        while (base_dir / f"{folder_name}({counter})").exists():
            counter += 1
        output_path = base_dir / f"{folder_name}({counter})"
    return output_path


def _build_metadata(
    spread: Spread,
    items: Sequence[PlacedItem],
    config: ExportConfig,
    board_files: Sequence[Path],
    zip_path: Optional[Path],
    pdf_path: Optional[Path],
    overlaps,
    audit_margin: float,
) -> dict:
    """
    Build metadata dictionary for an export.

    Example:
        >>> metadata = _build_metadata(spread, items, config, files, None, None, [], 24)
        >>> metadata["spread"]["board_count"]
        3
    """
    from spread_layout import __version__

    return {
        "generated_at": datetime.now().isoformat(timespec="seconds"),
        "tool_version": __version__,
        "spread": serialize_spread(spread),
        "export": asdict(config),
        "item_count": len(items),
        "items": [
            {
                "id": n.id,
                "source": n.source,
                "natural_size": [n.natural_w, n.natural_h],
                "z_order": n.z_order,
            }
            for n in sorted(items, key=lambda n: n.z_order)
        ],
        "audit_margin": audit_margin,
        "overlaps": [[p.first_id, p.second_id] for p in overlaps],
        "files": {
            "boards": [p.name for p in board_files],
            "zip": zip_path.name if zip_path else None,
            "pdf": pdf_path.name if pdf_path else None,
        },
    }


def _write_metadata(output_dir: Path, metadata: dict) -> None:
    """
    Write metadata JSON file to output directory.

    Raises:
        ExportError: If writing fails
    """
    metadata_path = output_dir / METADATA_FILENAME
    try:
        with open(metadata_path, "w") as f:
            json.dump(metadata, f, indent=2)
        logger.debug(f"Wrote metadata to {metadata_path}")
    except OSError as e:
        raise ExportError(f"Failed to write metadata: {e}") from e
