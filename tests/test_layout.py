from __future__ import annotations

import pytest

from core.config import LayoutConfig
from core.layout import compute_display_height

CONFIG = LayoutConfig(
    base_padding=60,
    sport_header=28,
    competition_header=32,
    competition_margin=10,
    match_row=64,
    empty_height=150,
    max_height_fraction=0.85,
    screen_height=1080,
)


@pytest.mark.parametrize("matches", [0, 1, 40])
def test_empty_hierarchy_uses_fixed_height(matches: int) -> None:
    assert compute_display_height(0, 0, matches, CONFIG) == 150


@pytest.mark.parametrize(
    ("sports", "competitions", "matches", "expected"),
    [
        (1, 1, 1, 60 + 28 + 42 + 64),
        (1, 1, 3, 60 + 28 + 42 + 3 * 64),
        (2, 3, 4, 60 + 2 * 28 + 3 * 42 + 4 * 64),
    ],
)
def test_additive_height(sports: int, competitions: int, matches: int, expected: int) -> None:
    assert compute_display_height(sports, competitions, matches, CONFIG) == expected


def test_height_is_capped_at_screen_fraction() -> None:
    assert compute_display_height(1, 1, 50, CONFIG) == int(1080 * 0.85)
    assert compute_display_height(1, 1, 50, CONFIG, screen_height=600) == 510
