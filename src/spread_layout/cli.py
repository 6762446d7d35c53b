"""
Module: cli

Purpose:
    Command-line front end.

        spread-layout layout IMAGE... --out layout.json [--strategy scatter]
        spread-layout export layout.json --out DIR [--zip] [--pdf]
        spread-layout preview layout.json --out preview.png
        spread-layout audit layout.json

Key Functions:
    - main(): Parse arguments, run one command, return an exit code
    - build_parser(): argparse parser for all commands
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from spread_layout import __version__
from spread_layout.controller import export_spread
from spread_layout.core.models.spread import (
    DEFAULT_BOARD_COUNT,
    DEFAULT_BOARD_H,
    DEFAULT_BOARD_W,
    DEFAULT_SPACING,
    Spread,
)
from spread_layout.core.schemas.validator import ValidationError
from spread_layout.core.utils.serialization import LayoutFileError
from spread_layout.images.provider import FileImageProvider, ImageNotFoundError, expand_sources
from spread_layout.output.config import (
    DEFAULT_BACKGROUND,
    DEFAULT_OUTPUT_SCALE,
    DEFAULT_PREFIX,
    DEFAULT_ZOOM,
    ExportConfig,
    GuideOptions,
)
from spread_layout.output.overlay import render_preview
from spread_layout.output.renderer import ExportError, ExportNotReadyError
from spread_layout.placement.policy import (
    DEFAULT_MAX_ATTEMPTS,
    MasonryOptions,
    PlacementPolicy,
    ScatterOptions,
)
from spread_layout.placement.strategy import Strategy, parse_strategy
from spread_layout.session import SpreadSession

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"

# Exit codes
EXIT_OK = 0
EXIT_OVERLAPS = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spread-layout",
        description="Lay photographs out across fixed-size boards and export each board.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    # layout
    layout = commands.add_parser("layout", help="Arrange images and write a layout file")
    layout.add_argument("images", nargs="+", type=Path, help="Image files or directories")
    layout.add_argument("--out", "-o", type=Path, required=True, help="Layout JSON to write")
    layout.add_argument("--boards", type=int, default=DEFAULT_BOARD_COUNT, help="Number of boards (1-20)")
    layout.add_argument("--width", type=float, default=DEFAULT_BOARD_W, help="Board width (100-8000)")
    layout.add_argument("--height", type=float, default=DEFAULT_BOARD_H, help="Board height (100-8000)")
    layout.add_argument("--spacing", type=float, default=DEFAULT_SPACING, help="Minimum gap (0-200)")
    layout.add_argument(
        "--strategy",
        default=Strategy.SCATTER.value,
        choices=[s.value for s in Strategy],
        help="Layout strategy",
    )
    layout.add_argument("--seed", type=int, default=None, help="Random seed")
    layout.add_argument("--max-attempts", type=int, default=DEFAULT_MAX_ATTEMPTS,
                        help="Random candidates per item before falling back")
    layout.add_argument("--columns", type=int, default=None, help="Masonry columns per board (2-4)")
    layout.add_argument("--keep-aspect", action="store_true",
                        help="Masonry heights follow each image's aspect ratio")
    layout.add_argument("--resize", action="store_true", help="Scatter draws a random size per image")

    # export
    export = commands.add_parser("export", help="Render boards from a layout file")
    export.add_argument("layout", type=Path, help="Layout JSON")
    export.add_argument("--out", "-o", type=Path, required=True, help="Output directory")
    export.add_argument("--scale", type=float, default=DEFAULT_OUTPUT_SCALE, help="Output scale (1-4)")
    export.add_argument("--background", default=DEFAULT_BACKGROUND, help="Board background colour")
    export.add_argument("--format", dest="image_format", default="png",
                        choices=["png", "jpeg", "jpg"], help="Board image format")
    export.add_argument("--prefix", default=DEFAULT_PREFIX, help="Output file name prefix")
    export.add_argument("--zip", action="store_true", help="Also write a ZIP of PNG boards")
    export.add_argument("--pdf", action="store_true", help="Also write a PDF, one page per board")
    export.add_argument("--no-images", action="store_true", help="Skip per-board image files")
    export.add_argument("--timestamped", action="store_true",
                        help="Write into a new timestamped subfolder")

    # preview
    preview = commands.add_parser("preview", help="Render a whole-spread preview")
    preview.add_argument("layout", type=Path, help="Layout JSON")
    preview.add_argument("--out", "-o", type=Path, required=True, help="Preview PNG to write")
    preview.add_argument("--zoom", type=float, default=DEFAULT_ZOOM, help="Zoom (0.25-1.5)")
    preview.add_argument("--no-guides", action="store_true", help="Hide board guides")

    # audit
    audit = commands.add_parser("audit", help="Report overlapping items in a layout file")
    audit.add_argument("layout", type=Path, help="Layout JSON")
    audit.add_argument("--margin", type=float, default=None,
                       help="Required gap (default: the layout's own margin)")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the command line.

    Returns:
        0 on success, 1 when audit finds overlaps, 2 on error
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
    )

    handlers = {
        "layout": _cmd_layout,
        "export": _cmd_export,
        "preview": _cmd_preview,
        "audit": _cmd_audit,
    }
    try:
        return handlers[args.command](args)
    except ExportNotReadyError as e:
        logger.error(f"Export refused: {e}")
    except (LayoutFileError, ValidationError, ExportError, ImageNotFoundError, ValueError) as e:
        logger.error(str(e))
    return EXIT_ERROR


def _cmd_layout(args: argparse.Namespace) -> int:
    spread = Spread.from_input(args.boards, args.width, args.height, args.spacing)
    policy = PlacementPolicy(max_attempts=args.max_attempts, seed=args.seed)
    session = SpreadSession(spread, policy)

    sources = expand_sources(args.images)
    missing = [p for p in sources if not p.is_file()]
    if missing:
        raise ImageNotFoundError(f"Image not found: {', '.join(str(p) for p in missing)}")
    if not sources:
        raise ValueError("No images given")

    with FileImageProvider() as provider:
        session.add_images([str(p.resolve()) for p in sources], provider)

    result = session.arrange(
        parse_strategy(args.strategy),
        scatter_options=ScatterOptions(resize=args.resize),
        masonry_options=MasonryOptions(columns=args.columns, keep_aspect=args.keep_aspect),
    )
    session.save(args.out)

    print(f"Placed {result.item_count} images on {spread.board_count} boards -> {args.out}")
    if result.has_fallbacks:
        print(f"{len(result.fallback_ids)} image(s) used a fallback position and may overlap")
    return EXIT_OK


def _cmd_export(args: argparse.Namespace) -> int:
    session = SpreadSession.load(args.layout)
    config = ExportConfig(
        output_scale=args.scale,
        background=args.background,
        image_format="jpeg" if args.image_format == "jpg" else args.image_format,
        filename_prefix=args.prefix,
    )
    with FileImageProvider(args.layout.parent) as provider:
        result = export_spread(
            session.items,
            session.spread,
            provider,
            args.out,
            config,
            write_images=not args.no_images,
            write_zip=args.zip,
            write_pdf=args.pdf,
            timestamped=args.timestamped,
            audit_margin=session.audit_margin,
        )

    for path in result.board_files:
        print(path)
    for path in (result.zip_path, result.pdf_path):
        if path is not None:
            print(path)
    return EXIT_OK


def _cmd_preview(args: argparse.Namespace) -> int:
    session = SpreadSession.load(args.layout)
    with FileImageProvider(args.layout.parent) as provider:
        session.resolve_sizes(provider)
        image = render_preview(
            session.items,
            session.spread,
            provider,
            zoom=args.zoom,
            guides=None if args.no_guides else GuideOptions(),
            margin=session.audit_margin,
        )
    args.out.parent.mkdir(parents=True, exist_ok=True)
    image.save(args.out, format="PNG")
    print(args.out)
    return EXIT_OK


def _cmd_audit(args: argparse.Namespace) -> int:
    session = SpreadSession.load(args.layout)
    pairs = session.audit(args.margin)
    for pair in pairs:
        print(f"{pair.first_id}\t{pair.second_id}")
    if pairs:
        logger.warning(f"{len(pairs)} overlapping pair(s)")
        return EXIT_OVERLAPS
    print("No overlaps")
    return EXIT_OK
