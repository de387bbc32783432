"""Inbound event payloads and outbound commands.

Producer payloads are untrusted JSON. ``parse_message`` validates them at the
boundary: every optional field is defaulted here, and a message that cannot
be understood comes back as None so callers can drop it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Union

from core.models import CompetitionRecord, MatchRecord

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class AddMatch:
    match: MatchRecord
    competition: Optional[CompetitionRecord]
    origin_channel: str


@dataclass(frozen=True)
class RemoveMatch:
    match_id: str


@dataclass(frozen=True)
class ReconcileSnapshot:
    matches: tuple[MatchRecord, ...]
    competitions: tuple[CompetitionRecord, ...]


@dataclass(frozen=True)
class MergeParts:
    """Per-period scores for a match known only by its internal id."""

    match_mid: str
    home_parts: tuple[str, ...]
    away_parts: tuple[str, ...]


@dataclass(frozen=True)
class ShowCompetitionLink:
    href: str
    origin_channel: str


@dataclass(frozen=True)
class Ping:
    pass


InboundEvent = Union[AddMatch, RemoveMatch, ReconcileSnapshot, MergeParts, ShowCompetitionLink, Ping]


@dataclass(frozen=True)
class Navigate:
    href: str

    def to_payload(self) -> dict[str, str]:
        return {"action": "navigate", "href": self.href}


@dataclass(frozen=True)
class Uncheck:
    match_id: str

    def to_payload(self) -> dict[str, str]:
        return {"action": "uncheck", "matchId": self.match_id}


OutboundCommand = Union[Navigate, Uncheck]


def _text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    if isinstance(value, bool):
        return ""
    return str(value).strip()


def _int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _parts(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(_text(item) for item in value)


def _dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def parse_match(raw: Any, origin_channel: str = "") -> Optional[MatchRecord]:
    """Build a MatchRecord from a producer dict, defaulting every field."""

    if not isinstance(raw, dict):
        return None
    return MatchRecord(
        id=_text(raw.get("overlayId")),
        external_id=_text(raw.get("matchId")),
        match_mid=_text(raw.get("matchMid")),
        competition_id=_text(raw.get("competitionId")),
        home_team=_text(raw.get("homeTeam")),
        away_team=_text(raw.get("awayTeam")),
        home_score=_text(raw.get("homeScore")),
        away_score=_text(raw.get("awayScore")),
        time=_text(raw.get("time")),
        stage=_text(raw.get("stage")),
        source_url=_text(raw.get("url")),
        home_logo=_text(raw.get("homeLogo")),
        away_logo=_text(raw.get("awayLogo")),
        home_href=_text(raw.get("homeHref")),
        away_href=_text(raw.get("awayHref")),
        origin_channel=origin_channel or _text(raw.get("tabId")),
        home_red_cards=_int(raw.get("homeRedCards")),
        away_red_cards=_int(raw.get("awayRedCards")),
        home_parts=_parts(raw.get("homeQuarters", raw.get("homeParts"))),
        away_parts=_parts(raw.get("awayQuarters", raw.get("awayParts"))),
        raw_html=_text(raw.get("html")),
    )


def parse_competition(raw: Any) -> Optional[CompetitionRecord]:
    if not isinstance(raw, dict):
        return None
    return CompetitionRecord(
        id=_text(raw.get("competitionId")),
        title=_text(raw.get("title")),
        category=_text(raw.get("category")),
        sport=_text(raw.get("sport")),
        logo=_text(raw.get("logo")),
        href=_text(raw.get("href")),
        href_with_param=_text(raw.get("hrefWithParam")),
    )


def _parse_add(data: dict[str, Any]) -> Optional[AddMatch]:
    origin_channel = _text(data.get("tabId"))
    match = parse_match(data.get("match"), origin_channel)
    # A match without a source URL can never be refreshed or opened.
    if match is None or not match.source_url:
        return None
    return AddMatch(
        match=match,
        competition=parse_competition(data.get("competition")),
        origin_channel=match.origin_channel,
    )


def _parse_update(data: dict[str, Any]) -> Optional[InboundEvent]:
    match = parse_match(data.get("match"))
    if match is not None and match.match_mid and match.home_parts and not match.id and not match.external_id:
        return MergeParts(
            match_mid=match.match_mid,
            home_parts=match.home_parts,
            away_parts=match.away_parts,
        )
    return _parse_add(data)


def _parse_remove(data: dict[str, Any]) -> Optional[RemoveMatch]:
    match_id = _text(data.get("matchId"))
    if not match_id:
        match = _dict(data.get("match"))
        match_id = _text(match.get("overlayId")) or _text(match.get("matchId"))
    if not match_id:
        return None
    return RemoveMatch(match_id=match_id)


def _parse_snapshot(data: dict[str, Any]) -> ReconcileSnapshot:
    origin_channel = _text(data.get("tabId"))
    raw_matches = data.get("matches") if isinstance(data.get("matches"), list) else []
    raw_competitions = data.get("competitions") if isinstance(data.get("competitions"), list) else []
    matches = []
    for raw in raw_matches:
        match = parse_match(raw, origin_channel)
        if match is not None:
            matches.append(match)
    competitions = []
    for raw in raw_competitions:
        competition = parse_competition(raw)
        if competition is not None:
            competitions.append(competition)
    return ReconcileSnapshot(matches=tuple(matches), competitions=tuple(competitions))


def _parse_competition_link(data: dict[str, Any]) -> Optional[ShowCompetitionLink]:
    competition = parse_competition(data.get("competition"))
    if competition is None:
        return None
    href = competition.href_with_param or competition.href
    if not href:
        return None
    return ShowCompetitionLink(href=href, origin_channel=_text(data.get("tabId")))


def parse_message(raw: Any) -> Optional[InboundEvent]:
    """Map a producer message ``{"action": ..., "data": {...}}`` to an event."""

    if not isinstance(raw, dict):
        return None
    action = _text(raw.get("action"))
    data = _dict(raw.get("data"))

    if action == "addMatch":
        event = _parse_add(data)
    elif action == "updateMatch":
        event = _parse_update(data)
    elif action == "removeMatch":
        event = _parse_remove(data)
    elif action == "updateMatches":
        event = _parse_snapshot(data)
    elif action == "showCompetitionLink":
        event = _parse_competition_link(data)
    elif action == "ping":
        event = Ping()
    else:
        event = None

    if event is None:
        LOGGER.debug("Dropping producer message with action %r", action or None)
    return event
