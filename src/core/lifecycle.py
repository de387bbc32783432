"""Lifecycle classification from free-text clock and stage fields (core domain).

The producer only gives us whatever text the page shows in its clock and
stage cells. Classification is a prioritized rule table: rules are tried in
order and the first one that matches decides the state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Tuple

from core.models import Classification, LifecycleState

FINISHED_MARKERS = (
    "preview",
    "finalizado",
    "final",
    "terminado",
    "penaltis",
    "postergado",
    "aplazado",
    "cancelado",
)
LIVE_MARKERS = (
    "descanso",
    "en directo",
    "en curso",
    "juego",
    "gol",
    "parte",
    "tiempo",
    "prórroga",
    "extra",
)
HALFTIME_MARKER = "descanso"
HALFTIME_LABEL = "Descanso"
MINUTE_MARK = "'"


@dataclass(frozen=True)
class LifecycleRule:
    """One entry of the classifier table."""

    name: str
    state: LifecycleState
    test: Callable[[str, str], bool]


def _stage_has_finished_marker(time: str, stage: str) -> bool:
    return any(marker in stage for marker in FINISHED_MARKERS)


def _stage_has_live_marker(time: str, stage: str) -> bool:
    return any(marker in stage for marker in LIVE_MARKERS)


def _has_minute_mark(time: str, stage: str) -> bool:
    return MINUTE_MARK in stage or MINUTE_MARK in time


def _is_running_minute(time: str, stage: str) -> bool:
    # "15:00" is a kickoff time and "15.05." a date; a bare "67" is a clock.
    return bool(time) and time[0].isdigit() and ":" not in time and "." not in time


LIFECYCLE_RULES: Tuple[LifecycleRule, ...] = (
    LifecycleRule("finished-stage", LifecycleState.FINISHED, _stage_has_finished_marker),
    LifecycleRule("live-stage", LifecycleState.LIVE, _stage_has_live_marker),
    LifecycleRule("minute-mark", LifecycleState.LIVE, _has_minute_mark),
    LifecycleRule("running-minute", LifecycleState.LIVE, _is_running_minute),
)


def normalize(text: str) -> str:
    return (text or "").strip().lower()


def classify(time: str, stage: str) -> Classification:
    """Return the lifecycle state and blinking flag for a match.

    Text that matches no rule is treated as not live: SCHEDULED when there is
    any text at all, UNKNOWN when both fields are blank.
    """

    norm_time = normalize(time)
    norm_stage = normalize(stage)

    state = LifecycleState.SCHEDULED if (norm_time or norm_stage) else LifecycleState.UNKNOWN
    for rule in LIFECYCLE_RULES:
        if rule.test(norm_time, norm_stage):
            state = rule.state
            break

    is_blinking = _has_minute_mark(norm_time, norm_stage) and not is_halftime(stage)
    return Classification(state=state, is_blinking=is_blinking)


def is_halftime(stage: str) -> bool:
    return HALFTIME_MARKER in normalize(stage)


def split_display_time(time: str) -> Tuple[str, str]:
    """Split clock text at its first letter into (numeric part, label).

    ``"45+2'"`` has no letter, so it is all numeric. ``"90 Final"`` gives
    ``("90", "Final")``.
    """

    text = (time or "").strip()
    for index, char in enumerate(text):
        if char.isalpha():
            return text[:index].strip(), text[index:].strip()
    return text, ""


def resolve_display(time: str, stage: str) -> Tuple[str, str]:
    """Return (display time, display stage), using the clock label as fallback stage."""

    numeric, label = split_display_time(time)
    display_stage = (stage or "").strip() or label
    if is_halftime(display_stage):
        display_stage = HALFTIME_LABEL
    return numeric, display_stage
