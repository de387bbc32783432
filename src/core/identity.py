"""Helpers for resolving match and competition identities."""

from __future__ import annotations

import uuid
from typing import Optional, Tuple
from urllib.parse import urlsplit

DEFAULT_GROUP_KEY = "default"
FALLBACK_TITLE = "Otros"
FALLBACK_SPORT = "Otros"
COMPETITION_KEY_SEPARATOR = ":"


def resolve_match_id(overlay_id: str, external_id: str) -> str:
    """Return the first non-blank of overlay id, external id, or a new id."""

    for candidate in (overlay_id, external_id):
        if candidate and candidate.strip():
            return candidate.strip()
    return uuid.uuid4().hex


def derive_competition_id(competition_id: str, category: str, title: str) -> Optional[str]:
    """Return the explicit id, or ``category:title`` when a title is known."""

    if competition_id and competition_id.strip():
        return competition_id.strip()
    if not title or not title.strip():
        return None
    return f"{category.strip()}{COMPETITION_KEY_SEPARATOR}{title.strip()}"


def group_key(competition_id: str, stage: str) -> str:
    """Grouping key chain: competition id, then stage text, then ``default``."""

    for candidate in (competition_id, stage):
        if candidate and candidate.strip():
            return candidate.strip()
    return DEFAULT_GROUP_KEY


def split_competition_key(key: str) -> Tuple[str, str]:
    """Split a ``category:title`` key into (category, title)."""

    if COMPETITION_KEY_SEPARATOR not in key:
        return "", key
    category, _, title = key.partition(COMPETITION_KEY_SEPARATOR)
    return category.strip(), title.strip()


def sport_from_href(href: str) -> Optional[str]:
    """Derive a sport name from the first path segment of a competition link.

    ``https://www.flashscore.es/hockey-hielo/suecia/shl/`` gives
    ``Hockey Hielo``.
    """

    if not href:
        return None
    path = urlsplit(href).path
    segments = [segment for segment in path.split("/") if segment]
    if not segments:
        return None
    return segments[0].replace("-", " ").title()
