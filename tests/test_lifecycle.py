from __future__ import annotations

import pytest

from core.lifecycle import LIFECYCLE_RULES, classify, resolve_display, split_display_time
from core.models import LifecycleState


@pytest.mark.parametrize(
    ("time", "stage", "state", "blinking"),
    [
        ("45'", "", LifecycleState.LIVE, True),
        ("", "Descanso", LifecycleState.LIVE, False),
        ("", "Finalizado", LifecycleState.FINISHED, False),
        ("15:00", "", LifecycleState.SCHEDULED, False),
        ("90+3'", "", LifecycleState.LIVE, True),
    ],
)
def test_classifier_table(time: str, stage: str, state: LifecycleState, blinking: bool) -> None:
    result = classify(time, stage)
    assert result.state == state
    assert result.is_blinking is blinking


def test_finished_stage_wins_over_running_minute() -> None:
    assert classify("67", "Finalizado").state == LifecycleState.FINISHED
    assert classify("90'", "Aplazado").state == LifecycleState.FINISHED


def test_halftime_never_blinks_even_with_minute_mark() -> None:
    result = classify("45'", "Descanso")
    assert result.state == LifecycleState.LIVE
    assert result.is_blinking is False


def test_bare_minute_counter_is_live_but_dates_are_not() -> None:
    assert classify("67", "").state == LifecycleState.LIVE
    assert classify("15.05.", "").state == LifecycleState.SCHEDULED
    assert classify("20:45", "").state == LifecycleState.SCHEDULED


def test_live_stage_keywords_are_case_insensitive() -> None:
    assert classify("", "  1ª PARTE ").state == LifecycleState.LIVE
    assert classify("", "Prórroga").state == LifecycleState.LIVE


def test_blank_input_is_unknown() -> None:
    result = classify("", "")
    assert result.state == LifecycleState.UNKNOWN
    assert result.is_blinking is False


def test_rule_order_is_explicit() -> None:
    assert [rule.name for rule in LIFECYCLE_RULES] == [
        "finished-stage",
        "live-stage",
        "minute-mark",
        "running-minute",
    ]


def test_split_display_time() -> None:
    assert split_display_time("45+2'") == ("45+2'", "")
    assert split_display_time("90 Finalizado") == ("90", "Finalizado")
    assert split_display_time("Descanso") == ("", "Descanso")
    assert split_display_time("") == ("", "")


def test_resolve_display_uses_clock_label_when_stage_blank() -> None:
    assert resolve_display("Aplazado", "") == ("", "Aplazado")
    assert resolve_display("Aplazado", "Final") == ("", "Final")
    assert resolve_display("", "DESCANSO") == ("", "Descanso")
