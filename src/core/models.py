"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to the browser producer's payload shapes or to any UI toolkit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class LifecycleState(str, Enum):
    """Lifecycle of a match as inferred from its free-text clock and stage."""

    SCHEDULED = "scheduled"
    LIVE = "live"
    HALFTIME = "halftime"
    FINISHED = "finished"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class CompetitionRecord:
    """One competition/league as reported by the producer."""

    id: str
    title: str = ""
    category: str = ""
    sport: str = ""
    logo: str = ""
    href: str = ""
    href_with_param: str = ""


@dataclass(frozen=True)
class MatchRecord:
    """One pinned match.

    ``id`` is the overlay id. It may be blank on ingress; the store resolves
    it through the identity chain before the record is kept.
    """

    id: str = ""
    external_id: str = ""
    match_mid: str = ""
    competition_id: str = ""
    home_team: str = ""
    away_team: str = ""
    home_score: str = ""
    away_score: str = ""
    time: str = ""
    stage: str = ""
    source_url: str = ""
    home_logo: str = ""
    away_logo: str = ""
    home_href: str = ""
    away_href: str = ""
    origin_channel: str = ""
    home_red_cards: int = 0
    away_red_cards: int = 0
    home_parts: tuple[str, ...] = ()
    away_parts: tuple[str, ...] = ()
    raw_html: str = ""


@dataclass(frozen=True)
class RefreshResult:
    """Mutable fields extracted from a re-fetched match document."""

    match_id: str
    time: str
    stage: str
    home_score: str
    away_score: str
    raw_html: str = ""
    home_parts: tuple[str, ...] = ()
    away_parts: tuple[str, ...] = ()


@dataclass(frozen=True)
class Classification:
    """Result of the lifecycle classifier."""

    state: LifecycleState
    is_blinking: bool


@dataclass(frozen=True)
class MatchView:
    """Render-ready match row with presentation-safe defaults applied."""

    id: str
    home_team: str
    away_team: str
    home_score: str
    away_score: str
    home_logo: str
    away_logo: str
    home_href: str
    away_href: str
    display_time: str
    display_stage: str
    state: LifecycleState
    is_live: bool
    is_finished: bool
    is_halftime: bool
    is_blinking: bool
    source_url: str
    origin_channel: str
    home_red_cards: int = 0
    away_red_cards: int = 0
    home_parts: tuple[str, ...] = ()
    away_parts: tuple[str, ...] = ()


@dataclass(frozen=True)
class CompetitionGroup:
    """A competition header and its ordered matches."""

    competition: CompetitionRecord
    matches: tuple[MatchView, ...]
    synthetic: bool = False

    @property
    def label(self) -> str:
        if self.competition.category:
            return f"{self.competition.category} - {self.competition.title}"
        return self.competition.title


@dataclass(frozen=True)
class SportGroup:
    """A sport header and its ordered competitions."""

    sport: str
    competitions: tuple[CompetitionGroup, ...]


@dataclass(frozen=True)
class OverlayView:
    """The full render-ready output consumed by presentation layers."""

    sports: tuple[SportGroup, ...] = field(default_factory=tuple)
    total_matches: int = 0
    height: int = 0

    @property
    def is_empty(self) -> bool:
        return self.total_matches == 0

    @property
    def competition_count(self) -> int:
        return sum(len(sport.competitions) for sport in self.sports)

    def find_match(self, match_id: str) -> Optional[MatchView]:
        for sport in self.sports:
            for group in sport.competitions:
                for match in group.matches:
                    if match.id == match_id:
                        return match
        return None
