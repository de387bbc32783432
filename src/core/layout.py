"""Display-height estimate for the overlay panel."""

from __future__ import annotations

import math
from typing import Optional

from core.config import LayoutConfig


def compute_display_height(
    sport_groups: int,
    competition_groups: int,
    total_matches: int,
    config: LayoutConfig,
    screen_height: Optional[int] = None,
) -> int:
    """Return the desired panel height for a hierarchy of the given shape.

    An empty hierarchy gets the fixed empty-state height. Otherwise the
    height is additive per header and row, capped at a fraction of the
    available screen height.
    """

    if sport_groups <= 0 or competition_groups <= 0:
        return config.empty_height

    desired = (
        config.base_padding
        + sport_groups * config.sport_header
        + competition_groups * (config.competition_header + config.competition_margin)
        + total_matches * config.match_row
    )
    available = screen_height if screen_height is not None else config.screen_height
    cap = math.floor(available * config.max_height_fraction)
    return min(desired, cap)
