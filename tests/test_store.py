from __future__ import annotations

from core.models import CompetitionRecord, MatchRecord, RefreshResult
from core.store import MatchStore


def _match(match_id: str, **fields) -> MatchRecord:
    fields.setdefault("source_url", f"https://example.test/partido/{match_id}/")
    return MatchRecord(id=match_id, **fields)


def test_upsert_resolves_id_chain() -> None:
    store = MatchStore()
    assert store.upsert(_match("ov-1", external_id="g_1_a")) == "ov-1"
    assert store.upsert(MatchRecord(external_id="g_1_b", source_url="u")) == "g_1_b"
    generated = store.upsert(MatchRecord(source_url="u"))
    assert generated and generated not in {"ov-1", "g_1_b"}
    assert len(store) == 3


def test_upsert_same_id_overwrites_in_place() -> None:
    store = MatchStore()
    store.upsert(_match("a", home_team="One"))
    store.upsert(_match("b"))
    store.upsert(_match("a", home_team="Uno"))

    snapshot = store.snapshot()
    assert [match.id for match in snapshot.matches] == ["a", "b"]
    assert snapshot.get("a").home_team == "Uno"


def test_upsert_with_competition_stamps_derived_id() -> None:
    store = MatchStore()
    competition = CompetitionRecord(id="", title="LaLiga", category="ESPAÑA")
    match_id = store.upsert(_match("a"), competition)

    snapshot = store.snapshot()
    assert snapshot.get(match_id).competition_id == "ESPAÑA:LaLiga"
    assert snapshot.competitions["ESPAÑA:LaLiga"].title == "LaLiga"


def test_competition_without_title_is_ignored() -> None:
    store = MatchStore()
    store.upsert(_match("a", competition_id="kept"), CompetitionRecord(id="", category="ESPAÑA"))
    snapshot = store.snapshot()
    assert snapshot.get("a").competition_id == "kept"
    assert not snapshot.competitions


def test_competition_last_write_wins() -> None:
    store = MatchStore()
    store.upsert(_match("a"), CompetitionRecord(id="X", title="Old"))
    store.upsert(_match("b"), CompetitionRecord(id="X", title="New", sport="Futbol"))
    competition = store.snapshot().competitions["X"]
    assert competition.title == "New"
    assert competition.sport == "Futbol"


def test_remove_is_noop_for_unknown_id() -> None:
    store = MatchStore()
    store.upsert(_match("a"))
    assert store.remove("missing") is None
    assert store.remove("") is None
    assert len(store) == 1


def test_remove_then_upsert_has_no_ghost_fields() -> None:
    store = MatchStore()
    store.upsert(_match("a", home_team="One", home_score="3", stage="Descanso"))
    store.remove("a")
    fresh = _match("a", home_team="Uno")
    store.upsert(fresh)
    assert store.get("a") == fresh


def test_reconcile_prunes_absent_matches() -> None:
    store = MatchStore()
    for match_id in ("a", "b", "c"):
        store.upsert(_match(match_id))

    dropped = store.reconcile([_match("b"), _match("d")], [CompetitionRecord(id="X", title="Liga")])

    assert sorted(dropped) == ["a", "c"]
    snapshot = store.snapshot()
    assert sorted(match.id for match in snapshot.matches) == ["b", "d"]
    assert "X" in snapshot.competitions


def test_reconcile_is_idempotent() -> None:
    matches = [_match("a", home_score="1"), _match("b", competition_id="X")]
    competitions = [CompetitionRecord(id="X", title="Liga")]

    once = MatchStore()
    once.reconcile(matches, competitions)
    twice = MatchStore()
    twice.reconcile(matches, competitions)
    twice.reconcile(matches, competitions)

    assert once.snapshot().matches == twice.snapshot().matches
    assert dict(once.snapshot().competitions) == dict(twice.snapshot().competitions)


def test_reconcile_keeps_id_of_record_without_identity() -> None:
    store = MatchStore()
    snapshot = [MatchRecord(source_url="https://example.test/partido/zz/", home_team="A")]

    store.reconcile(snapshot)
    first = [match.id for match in store.snapshot().matches]
    dropped = store.reconcile(snapshot)
    second = [match.id for match in store.snapshot().matches]

    assert len(first) == 1
    assert first == second
    assert dropped == []


def test_reconcile_skips_record_without_id_or_url() -> None:
    store = MatchStore()
    store.upsert(_match("a"))

    dropped = store.reconcile([_match("a"), MatchRecord(home_team="Nobody")])

    assert dropped == []
    assert [match.id for match in store.snapshot().matches] == ["a"]


def test_merge_refresh_result_touches_only_mutable_fields() -> None:
    store = MatchStore()
    store.upsert(_match("a", home_team="One", time="12'", home_score="0", away_score="0"))

    merged = store.merge_refresh_result(
        RefreshResult(match_id="a", time="13'", stage="1ª parte", home_score="1", away_score="0", raw_html="<div/>")
    )

    record = store.get("a")
    assert merged is True
    assert (record.time, record.stage, record.home_score, record.away_score) == ("13'", "1ª parte", "1", "0")
    assert record.raw_html == "<div/>"
    assert record.home_team == "One"


def test_merge_for_removed_match_is_discarded() -> None:
    store = MatchStore()
    store.upsert(_match("a"))
    store.remove("a")
    assert store.merge_refresh_result(RefreshResult("a", "1'", "", "0", "0")) is False
    assert len(store) == 0


def test_merge_parts_by_internal_id() -> None:
    store = MatchStore()
    store.upsert(_match("a", match_mid="777"))
    assert store.merge_parts("777", ("20", "18"), ("22", "15")) == "a"
    assert store.get("a").home_parts == ("20", "18")
    assert store.merge_parts("999", ("1",), ("2",)) is None


def test_resolve_id_accepts_external_id() -> None:
    store = MatchStore()
    store.upsert(_match("ov-1", external_id="g_1_a"))
    assert store.resolve_id("ov-1") == "ov-1"
    assert store.resolve_id("g_1_a") == "ov-1"
    assert store.resolve_id("g_1_z") is None


def test_snapshot_is_isolated_from_later_writes() -> None:
    store = MatchStore()
    store.upsert(_match("a"), CompetitionRecord(id="X", title="Liga"))
    snapshot = store.snapshot()
    store.upsert(_match("b"), CompetitionRecord(id="Y", title="Copa"))
    store.remove("a")

    assert [match.id for match in snapshot.matches] == ["a"]
    assert set(snapshot.competitions) == {"X"}
