from __future__ import annotations

from core.identity import (
    DEFAULT_GROUP_KEY,
    derive_competition_id,
    group_key,
    resolve_match_id,
    split_competition_key,
    sport_from_href,
)


def test_resolve_match_id_prefers_overlay_then_external() -> None:
    assert resolve_match_id("ov-1", "g_1_abc") == "ov-1"
    assert resolve_match_id("  ", "g_1_abc") == "g_1_abc"


def test_resolve_match_id_generates_opaque_id() -> None:
    first = resolve_match_id("", "")
    second = resolve_match_id("", "   ")
    assert first and first.strip()
    assert first != second


def test_derive_competition_id() -> None:
    assert derive_competition_id("X", "ESPAÑA", "LaLiga") == "X"
    assert derive_competition_id("", "ESPAÑA", "LaLiga") == "ESPAÑA:LaLiga"
    assert derive_competition_id("", "ESPAÑA", "") is None


def test_group_key_chain() -> None:
    assert group_key("X", "Descanso") == "X"
    assert group_key("", "Descanso") == "Descanso"
    assert group_key("", "") == DEFAULT_GROUP_KEY


def test_split_competition_key() -> None:
    assert split_competition_key("ESPAÑA:LaLiga") == ("ESPAÑA", "LaLiga")
    assert split_competition_key("LaLiga") == ("", "LaLiga")


def test_sport_from_href() -> None:
    assert sport_from_href("https://www.flashscore.es/futbol/espana/laliga/") == "Futbol"
    assert sport_from_href("/hockey-hielo/suecia/shl/") == "Hockey Hielo"
    assert sport_from_href("https://www.flashscore.es/") is None
    assert sport_from_href("") is None
