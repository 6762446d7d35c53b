"""Top-level package for Spread Layout.

Provides subpackages:
- spread_layout.core – geometry kernel, board model, items, snapshot schema
- spread_layout.placement – non-overlapping layout strategies
- spread_layout.compositor – cover-fit crop operations per board
- spread_layout.output – board rasterization, ZIP and PDF export, preview
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        for line in pyproject.read_text(encoding="utf-8").splitlines():
            if line.strip().startswith("version"):
                # Parse: version = "0.3.0"
                return line.split("=")[1].strip().strip('"').strip("'")

    from importlib.metadata import PackageNotFoundError, version as pkg_version
    try:
        return pkg_version("spread-layout")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
