"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RefreshConfig:
    """Settings for the periodic match refresh loop."""

    interval_seconds: float = 20.0
    fetch_timeout_seconds: float = 15.0
    # 0 means every tracked match is fetched at once.
    max_concurrency: int = 0


@dataclass(frozen=True)
class LayoutConfig:
    """Constants for the display-height estimate."""

    base_padding: int = 60
    sport_header: int = 28
    competition_header: int = 32
    competition_margin: int = 10
    match_row: int = 64
    empty_height: int = 150
    max_height_fraction: float = 0.85
    screen_height: int = 1080
