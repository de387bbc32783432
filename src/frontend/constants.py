"""Shared constants for the Textual UI."""

from __future__ import annotations

from core.config import LayoutConfig

BRAND_RED = "#C80037"
ACTIVE_BLUE = "#0787FA"
LIVE_RED = "#ff0046"

# Terminal rows instead of pixels: one row per header, two per match.
PANEL_LAYOUT = LayoutConfig(
    base_padding=2,
    sport_header=1,
    competition_header=1,
    competition_margin=0,
    match_row=2,
    empty_height=5,
    max_height_fraction=0.85,
    screen_height=40,
)

SPORT_ROW_PREFIX = "sport:"
COMPETITION_ROW_PREFIX = "competition:"
