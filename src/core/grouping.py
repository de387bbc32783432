"""Grouping and ordering engine (core domain).

Turns a store snapshot into the ordered sport -> competition -> match
hierarchy. The engine is pure: same snapshot in, same view out.
"""

from __future__ import annotations

from typing import Optional

from core.config import LayoutConfig
from core.identity import (
    COMPETITION_KEY_SEPARATOR,
    DEFAULT_GROUP_KEY,
    FALLBACK_SPORT,
    FALLBACK_TITLE,
    group_key,
    split_competition_key,
    sport_from_href,
)
from core.layout import compute_display_height
from core.lifecycle import classify, is_halftime, resolve_display
from core.models import (
    CompetitionGroup,
    CompetitionRecord,
    LifecycleState,
    MatchRecord,
    MatchView,
    OverlayView,
    SportGroup,
)
from core.store import StoreSnapshot

HOME_PLACEHOLDER = "Local"
AWAY_PLACEHOLDER = "Visitante"
# Presentation layers swap this marker for their own placeholder badge.
LOGO_PLACEHOLDER = "placeholder"


def build_match_view(match: MatchRecord) -> MatchView:
    """Classify one match and apply presentation-safe defaults."""

    display_time, display_stage = resolve_display(match.time, match.stage)
    classification = classify(match.time, display_stage)
    halftime = classification.state == LifecycleState.LIVE and is_halftime(display_stage)
    state = LifecycleState.HALFTIME if halftime else classification.state

    return MatchView(
        id=match.id,
        home_team=match.home_team.strip() or HOME_PLACEHOLDER,
        away_team=match.away_team.strip() or AWAY_PLACEHOLDER,
        home_score=match.home_score.strip(),
        away_score=match.away_score.strip(),
        home_logo=match.home_logo or LOGO_PLACEHOLDER,
        away_logo=match.away_logo or LOGO_PLACEHOLDER,
        home_href=match.home_href,
        away_href=match.away_href,
        display_time=display_time,
        display_stage=display_stage,
        state=state,
        is_live=classification.state == LifecycleState.LIVE,
        is_finished=classification.state == LifecycleState.FINISHED,
        is_halftime=halftime,
        is_blinking=classification.is_blinking,
        source_url=match.source_url,
        origin_channel=match.origin_channel,
        home_red_cards=match.home_red_cards,
        away_red_cards=match.away_red_cards,
        home_parts=match.home_parts,
        away_parts=match.away_parts,
    )


def resolve_competition(key: str, snapshot: StoreSnapshot) -> tuple[CompetitionRecord, bool]:
    """Return the competition for a group key and whether it was synthesized."""

    stored = snapshot.competitions.get(key)
    if stored is not None:
        return stored, False
    if COMPETITION_KEY_SEPARATOR in key:
        category, title = split_competition_key(key)
        return CompetitionRecord(id=key, title=title or FALLBACK_TITLE, category=category), True
    title = FALLBACK_TITLE if key == DEFAULT_GROUP_KEY else key
    return CompetitionRecord(id=key, title=title), True


def resolve_sport(competition: CompetitionRecord) -> str:
    if competition.sport and competition.sport.strip():
        return competition.sport.strip()
    return sport_from_href(competition.href) or FALLBACK_SPORT


def _competition_sort_key(group: CompetitionGroup) -> tuple[str, str, str]:
    title = group.competition.title
    return title.casefold(), title, group.competition.id


def build_hierarchy(snapshot: StoreSnapshot) -> tuple[SportGroup, ...]:
    """Group a snapshot into sorted sport and competition groups.

    Matches keep their pin order inside a competition. Competitions sort by
    title and sports by name, both with explicit keys.
    """

    positions = {match.id: index for index, match in enumerate(snapshot.matches)}
    grouped: dict[str, list[MatchRecord]] = {}
    for match in snapshot.matches:
        grouped.setdefault(group_key(match.competition_id, match.stage), []).append(match)

    by_sport: dict[str, list[CompetitionGroup]] = {}
    for key, matches in grouped.items():
        competition, synthetic = resolve_competition(key, snapshot)
        ordered = sorted(matches, key=lambda match: (positions[match.id], match.id))
        group = CompetitionGroup(
            competition=competition,
            matches=tuple(build_match_view(match) for match in ordered),
            synthetic=synthetic,
        )
        by_sport.setdefault(resolve_sport(competition), []).append(group)

    sports = []
    for sport in sorted(by_sport, key=lambda name: (name.casefold(), name)):
        competitions = tuple(sorted(by_sport[sport], key=_competition_sort_key))
        sports.append(SportGroup(sport=sport, competitions=competitions))
    return tuple(sports)


def build_overlay_view(
    snapshot: StoreSnapshot,
    layout: LayoutConfig,
    screen_height: Optional[int] = None,
) -> OverlayView:
    """Build the complete render-ready view for a snapshot."""

    sports = build_hierarchy(snapshot)
    competition_count = sum(len(sport.competitions) for sport in sports)
    total_matches = len(snapshot.matches)
    height = compute_display_height(
        len(sports),
        competition_count,
        total_matches,
        layout,
        screen_height=screen_height,
    )
    return OverlayView(sports=sports, total_matches=total_matches, height=height)
