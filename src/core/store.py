"""In-memory state store for pinned matches and competitions.

Every mutation runs under one lock so readers always get a consistent
snapshot. The store holds raw producer data; presentation defaults are
applied later by the grouping engine.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from core.identity import derive_competition_id, resolve_match_id
from core.models import CompetitionRecord, MatchRecord, RefreshResult

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreSnapshot:
    """Immutable point-in-time copy of the store contents."""

    matches: tuple[MatchRecord, ...]
    competitions: Mapping[str, CompetitionRecord]

    def __len__(self) -> int:
        return len(self.matches)

    def get(self, match_id: str) -> Optional[MatchRecord]:
        for match in self.matches:
            if match.id == match_id:
                return match
        return None


class MatchStore:
    """Canonical mapping of match id to match and competition id to competition."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._matches: dict[str, MatchRecord] = {}
        self._competitions: dict[str, CompetitionRecord] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._matches)

    def __contains__(self, match_id: object) -> bool:
        with self._lock:
            return match_id in self._matches

    def get(self, match_id: str) -> Optional[MatchRecord]:
        with self._lock:
            return self._matches.get(match_id)

    def resolve_id(self, identifier: str) -> Optional[str]:
        """Return the stored id for an overlay id or an external match id."""

        if not identifier:
            return None
        with self._lock:
            if identifier in self._matches:
                return identifier
            for match_id, match in self._matches.items():
                if match.external_id == identifier:
                    return match_id
        return None

    def upsert(
        self,
        match: MatchRecord,
        competition: Optional[CompetitionRecord] = None,
    ) -> Optional[str]:
        """Insert or overwrite a match and return its resolved id.

        Returns None when the record is dropped for lack of an identity.
        """

        with self._lock:
            return self._upsert_locked(match, competition)

    def upsert_competition(self, competition: CompetitionRecord) -> Optional[str]:
        with self._lock:
            return self._upsert_competition_locked(competition)

    def remove(self, match_id: str) -> Optional[MatchRecord]:
        """Delete a match if present and return the removed record."""

        if not match_id:
            return None
        with self._lock:
            return self._matches.pop(match_id, None)

    def reconcile(
        self,
        matches: Iterable[MatchRecord],
        competitions: Iterable[CompetitionRecord] = (),
    ) -> list[str]:
        """Replace the tracked set with a full snapshot.

        Every snapshot record is upserted, then any stored match whose id is
        absent from the snapshot is dropped. Returns the dropped ids.

        A record without overlay or external id takes over the id of the
        stored match with the same source URL; one with no URL either is
        skipped.
        """

        matches = list(matches)
        with self._lock:
            for competition in competitions:
                self._upsert_competition_locked(competition)
            keep = {_explicit_id(match) for match in matches} - {""}
            for match in matches:
                if not _explicit_id(match):
                    known = self._id_for_source_locked(match.source_url, keep)
                    if known is None and not match.source_url.strip():
                        LOGGER.debug("Snapshot record without id or URL skipped")
                        continue
                    if known is not None:
                        match = replace(match, id=known)
                match_id = self._upsert_locked(match, None)
                if match_id:
                    keep.add(match_id)
            dropped = [match_id for match_id in self._matches if match_id not in keep]
            for match_id in dropped:
                del self._matches[match_id]
        if dropped:
            LOGGER.debug("Reconcile dropped %s matches", len(dropped))
        return dropped

    def merge_refresh_result(self, result: RefreshResult) -> bool:
        """Apply refreshed clock, stage and score fields to an existing match.

        A result for a match removed in the meantime is discarded.
        """

        with self._lock:
            existing = self._matches.get(result.match_id)
            if existing is None:
                return False
            updated = replace(
                existing,
                time=result.time,
                stage=result.stage,
                home_score=result.home_score,
                away_score=result.away_score,
                raw_html=result.raw_html or existing.raw_html,
                home_parts=result.home_parts or existing.home_parts,
                away_parts=result.away_parts or existing.away_parts,
            )
            self._matches[result.match_id] = updated
            return True

    def merge_parts(
        self,
        match_mid: str,
        home_parts: tuple[str, ...],
        away_parts: tuple[str, ...],
    ) -> Optional[str]:
        """Attach per-period scores to the match with the given internal id."""

        if not match_mid:
            return None
        with self._lock:
            for match_id, existing in self._matches.items():
                if existing.match_mid == match_mid:
                    self._matches[match_id] = replace(
                        existing,
                        home_parts=home_parts,
                        away_parts=away_parts,
                    )
                    return match_id
        return None

    def snapshot(self) -> StoreSnapshot:
        with self._lock:
            return StoreSnapshot(
                matches=tuple(self._matches.values()),
                competitions=MappingProxyType(dict(self._competitions)),
            )

    def _id_for_source_locked(self, source_url: str, claimed: set[str]) -> Optional[str]:
        if not source_url.strip():
            return None
        for match_id, existing in self._matches.items():
            if match_id not in claimed and existing.source_url == source_url:
                return match_id
        return None

    def _upsert_competition_locked(self, competition: CompetitionRecord) -> Optional[str]:
        competition_id = derive_competition_id(competition.id, competition.category, competition.title)
        if not competition_id:
            return None
        self._competitions[competition_id] = replace(competition, id=competition_id)
        return competition_id

    def _upsert_locked(
        self,
        match: MatchRecord,
        competition: Optional[CompetitionRecord],
    ) -> Optional[str]:
        match_id = resolve_match_id(match.id, match.external_id)
        if not match_id.strip():
            return None

        record = replace(match, id=match_id)
        if competition is not None:
            competition_id = self._upsert_competition_locked(competition)
            if competition_id:
                record = replace(record, competition_id=competition_id)

        self._matches[match_id] = record
        return match_id


def _explicit_id(match: MatchRecord) -> str:
    for candidate in (match.id, match.external_id):
        if candidate and candidate.strip():
            return candidate.strip()
    return ""
