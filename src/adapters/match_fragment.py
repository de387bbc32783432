"""Locate a match inside a fetched document and extract its live fields.

Two page shapes are understood: listing pages with ``.event__match`` rows,
and match detail pages with a score header. Selectors follow the markup the
browser producer scrapes.
"""

from __future__ import annotations

import logging
from typing import Optional

from bs4 import BeautifulSoup, Tag

from core.models import MatchRecord, RefreshResult

LOGGER = logging.getLogger(__name__)

MATCH_ROW_SELECTOR = ".event__match"
MAX_PARTS = 8


def _clean(node: Optional[Tag]) -> str:
    if node is None:
        return ""
    return " ".join(node.get_text(" ", strip=True).split())


def _mid_matches(row: Tag, match_mid: str) -> bool:
    if row.get("data-mid") == match_mid:
        return True
    row_id = row.get("id") or ""
    return bool(row_id) and row_id.split("_")[-1] == match_mid


def find_match_row(soup: BeautifulSoup, match: MatchRecord) -> Optional[Tag]:
    """Pick the row for a match: overlay id, internal id, external id, then the first row."""

    rows = soup.select(MATCH_ROW_SELECTOR)
    if not rows:
        return None

    if match.id:
        for row in rows:
            if row.get("id") == match.id:
                return row
    if match.match_mid:
        for row in rows:
            if _mid_matches(row, match.match_mid):
                return row
    if match.external_id:
        for row in rows:
            if row.get("id") == match.external_id:
                return row

    LOGGER.debug("No identified row for %s; using the first of %s rows", match.id, len(rows))
    return rows[0]


def _row_parts(row: Tag, side: str) -> tuple[str, ...]:
    return tuple(_clean(node) for node in row.select(f".event__part--{side}"))


def extract_row(row: Tag, match_id: str) -> RefreshResult:
    """Read clock, stage, scores and part scores from an ``.event__match`` row."""

    return RefreshResult(
        match_id=match_id,
        time=_clean(row.select_one(".event__time")),
        stage=_clean(row.select_one(".event__stage")),
        home_score=_clean(row.select_one(".event__score--home")),
        away_score=_clean(row.select_one(".event__score--away")),
        raw_html=str(row),
        home_parts=_row_parts(row, "home"),
        away_parts=_row_parts(row, "away"),
    )


def _detail_parts(header: Tag, side: str) -> tuple[str, ...]:
    parts = []
    for index in range(1, MAX_PARTS + 1):
        home = _clean(header.select_one(f".smh__part.smh__home.smh__part--{index}"))
        away = _clean(header.select_one(f".smh__part.smh__away.smh__part--{index}"))
        if not home and not away:
            break
        parts.append(home if side == "home" else away)
    return tuple(parts)


def extract_detail(soup: BeautifulSoup, match_id: str) -> Optional[RefreshResult]:
    """Read the score header of a match detail page, if the page has one."""

    wrapper = soup.select_one(".detailScore__wrapper")
    if wrapper is None:
        return None
    scores = [_clean(span) for span in wrapper.find_all("span") if "detailScore__divider" not in (span.get("class") or [])]
    scores = [score for score in scores if score]
    home_score = scores[0] if scores else ""
    away_score = scores[1] if len(scores) > 1 else ""

    status = _clean(soup.select_one(".fixedHeaderDuel__detailStatus")) or _clean(
        soup.select_one(".detailScore__status")
    )
    clock = _clean(soup.select_one(".eventTime"))

    parts_header = soup.select_one(".smh__template")
    return RefreshResult(
        match_id=match_id,
        time=clock,
        stage=status,
        home_score=home_score,
        away_score=away_score,
        raw_html=str(wrapper),
        home_parts=_detail_parts(parts_header, "home") if parts_header else (),
        away_parts=_detail_parts(parts_header, "away") if parts_header else (),
    )


def parse_document(html: str, match: MatchRecord) -> Optional[RefreshResult]:
    """Return the refreshed fields for ``match`` or None if nothing was found."""

    soup = BeautifulSoup(html, "html.parser")
    row = find_match_row(soup, match)
    if row is not None:
        return extract_row(row, match.id)
    return extract_detail(soup, match.id)
