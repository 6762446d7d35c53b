"""Entry point for ``python -m spread_layout``."""

import sys

from spread_layout.cli import main

if __name__ == "__main__":
    sys.exit(main())
