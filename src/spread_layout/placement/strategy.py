"""
Module: placement.strategy

Purpose:
    Named layout strategies and a single dispatcher, so callers (session,
    CLI) pick a layout by name instead of importing each function.

Key Classes:
    - Strategy: Closed set of layout strategies

Key Functions:
    - arrange(): Run a strategy by enum value
    - parse_strategy(): Strategy from a CLI/user string
"""

from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Callable, Dict, Optional, Sequence

from spread_layout.core.models.items import PlacedItem
from spread_layout.core.models.spread import Spread

from .distribute import distribute
from .masonry import editorial, editorial_seamless
from .models import PlacementResult
from .packer import pack
from .policy import MasonryOptions, PlacementPolicy, ScatterOptions
from .scatter import scatter

logger = logging.getLogger(__name__)


class Strategy(Enum):
    """
    Layout strategies.

    Attributes:
        SCATTER: Random non-overlapping scatter
        PACK: Greedy largest-first grid packing
        EDITORIAL: Column masonry with a gutter
        EDITORIAL_SEAMLESS: Column masonry without a gutter
        DISTRIBUTE: Even chunks per board, scattered within each board
    """

    SCATTER = "scatter"
    PACK = "pack"
    EDITORIAL = "editorial"
    EDITORIAL_SEAMLESS = "editorial-seamless"
    DISTRIBUTE = "distribute"


def parse_strategy(name: str) -> Strategy:
    """
    Look up a strategy by its value, case-insensitively.

    Raises:
        ValueError: If the name is not a known strategy
    """
    try:
        return Strategy(name.strip().lower().replace("_", "-"))
    except ValueError as e:
        choices = ", ".join(s.value for s in Strategy)
        raise ValueError(f"Unknown strategy '{name}' (choose from: {choices})") from e


def arrange(
    items: Sequence[PlacedItem],
    spread: Spread,
    strategy: Strategy = Strategy.SCATTER,
    policy: Optional[PlacementPolicy] = None,
    rng: Optional[random.Random] = None,
    *,
    scatter_options: Optional[ScatterOptions] = None,
    masonry_options: Optional[MasonryOptions] = None,
) -> PlacementResult:
    """
    Run one layout strategy over items.

    Args:
        items: Items to place
        spread: Spread configuration
        strategy: Which layout to run
        policy: Shared retry/scan budget (default PlacementPolicy())
        rng: Random source (default: policy.make_rng())
        scatter_options: Passed to SCATTER
        masonry_options: Passed to EDITORIAL / EDITORIAL_SEAMLESS

    Returns:
        PlacementResult from the chosen strategy
    """
    policy = policy or PlacementPolicy()
    rng = rng or policy.make_rng()
    logger.debug(f"Arranging {len(items)} items with {strategy.value}")

    runners: Dict[Strategy, Callable[[], PlacementResult]] = {
        Strategy.SCATTER: lambda: scatter(items, spread, policy, rng, scatter_options),
        Strategy.PACK: lambda: pack(items, spread, policy, rng),
        Strategy.EDITORIAL: lambda: editorial(items, spread, policy, rng, masonry_options),
        Strategy.EDITORIAL_SEAMLESS: lambda: editorial_seamless(
            items, spread, policy, rng, masonry_options
        ),
        Strategy.DISTRIBUTE: lambda: distribute(items, spread, policy, rng),
    }
    return runners[strategy]()
