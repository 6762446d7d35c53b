"""
Module: placement.policy

Purpose:
    Retry/scan budget shared by all placement strategies, plus the
    per-strategy option objects.

Key Classes:
    - PlacementPolicy: max attempts, scan step, size floor, seed
    - BoardSelection: How random scatter picks a board
    - ScatterOptions: Random scatter switches
    - MasonryOptions: Column masonry switches

Dependencies:
    - dataclasses (std)

Used By:
    - placement.scatter, placement.packer, placement.masonry,
      placement.distribute, placement.bounds
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


# Defaults
DEFAULT_MAX_ATTEMPTS = 400
DEFAULT_STEP = 8
DEFAULT_MIN_SIZE = 20

MIN_COLUMNS = 2
MAX_COLUMNS = 4


@dataclass(frozen=True)
class PlacementPolicy:
    """
    Retry/scan budget for placement (immutable).

    Attributes:
        max_attempts: Random candidates tried per item before falling back
        step: Minimum grid step for scanning strategies; the effective
            step is max(step, spacing)
        min_size: Size floor for every placed dimension
        seed: Seed for the default RNG when the caller does not pass one

    Example:
        >>> policy = PlacementPolicy(max_attempts=50, seed=7)
        >>> policy.scan_step(24)
        24
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    step: float = DEFAULT_STEP
    min_size: float = DEFAULT_MIN_SIZE
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1: {self.max_attempts}")
        if self.step <= 0:
            raise ValueError(f"step must be positive: {self.step}")
        if self.min_size <= 0:
            raise ValueError(f"min_size must be positive: {self.min_size}")

    def scan_step(self, spacing: float) -> float:
        """Effective grid step for a given spacing."""
        return max(self.step, spacing)

    def make_rng(self) -> random.Random:
        """Fresh RNG seeded from this policy."""
        return random.Random(self.seed)


class BoardSelection(Enum):
    """
    How random scatter chooses the board for each attempt.

    Attributes:
        ROUND_ROBIN: Cycle forward through boards across items
        RANDOM: Uniformly random board per attempt
    """

    ROUND_ROBIN = auto()
    RANDOM = auto()


@dataclass(frozen=True)
class ScatterOptions:
    """
    Random scatter switches (immutable).

    Attributes:
        board_selection: Round-robin or random board choice
        resize: Draw a fresh random size for every item
        spread_vertical: Use the full vertical range (else top 60%)
        shuffle: Shuffle processing order first
    """

    board_selection: BoardSelection = BoardSelection.ROUND_ROBIN
    resize: bool = False
    spread_vertical: bool = True
    shuffle: bool = False


@dataclass(frozen=True)
class MasonryOptions:
    """
    Column masonry switches (immutable).

    Attributes:
        columns: Columns per board (2..4), or None to pick randomly
        seamless: Zero gutter instead of the spread's spacing
        keep_aspect: Height from the item's own aspect ratio instead of
            a random aspect band
        shuffle: Shuffle processing order first
    """

    columns: Optional[int] = None
    seamless: bool = False
    keep_aspect: bool = False
    shuffle: bool = True

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.columns is not None and not MIN_COLUMNS <= self.columns <= MAX_COLUMNS:
            raise ValueError(
                f"columns must be between {MIN_COLUMNS} and {MAX_COLUMNS}: {self.columns}"
            )
