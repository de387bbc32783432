"""Core overlay service.

This module is integration-agnostic. It applies producer events to the
store, re-renders the view, and routes outbound commands through a port,
so the HTTP channel and the panel UI can both drive it.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from core.config import LayoutConfig
from core.events import (
    AddMatch,
    InboundEvent,
    MergeParts,
    Navigate,
    Ping,
    ReconcileSnapshot,
    RemoveMatch,
    ShowCompetitionLink,
    Uncheck,
)
from core.grouping import build_overlay_view
from core.models import OverlayView
from core.ports import CommandSinkPort, ViewListener
from core.store import MatchStore

LOGGER = logging.getLogger(__name__)


class OverlayService:
    """Orchestrates store mutations, rendering, and outbound commands."""

    def __init__(
        self,
        store: MatchStore,
        commands: CommandSinkPort,
        layout: LayoutConfig,
    ) -> None:
        self._store = store
        self._commands = commands
        self._layout = layout
        self._listeners: list[ViewListener] = []
        self._added_hooks: list[Callable[[str], object]] = []
        self._view = OverlayView(height=layout.empty_height)

    @property
    def store(self) -> MatchStore:
        return self._store

    @property
    def view(self) -> OverlayView:
        """The most recently rendered view."""

        return self._view

    def subscribe(self, listener: ViewListener) -> None:
        self._listeners.append(listener)

    def on_added(self, hook: Callable[[str], object]) -> None:
        """Call ``hook`` with the id of every match a producer adds."""

        self._added_hooks.append(hook)

    def build_view(self, screen_height: Optional[int] = None) -> OverlayView:
        return build_overlay_view(self._store.snapshot(), self._layout, screen_height=screen_height)

    def render(self) -> OverlayView:
        """Rebuild the view from a fresh snapshot and notify listeners."""

        self._view = self.build_view()
        for listener in list(self._listeners):
            try:
                listener(self._view)
            except Exception:
                LOGGER.exception("View listener failed")
        return self._view

    def handle(self, event: InboundEvent) -> bool:
        """Apply one producer event. Returns True when the view changed."""

        if isinstance(event, Ping):
            LOGGER.debug("Ping from producer")
            return False

        if isinstance(event, AddMatch):
            match_id = self._store.upsert(event.match, event.competition)
            if match_id is None:
                return False
            LOGGER.info("Tracking match %s (%s)", match_id, event.match.source_url)
            self.render()
            for hook in list(self._added_hooks):
                try:
                    hook(match_id)
                except Exception:
                    LOGGER.exception("Added-match hook failed for %s", match_id)
            return True
        elif isinstance(event, RemoveMatch):
            match_id = self._store.resolve_id(event.match_id)
            if match_id is None or self._store.remove(match_id) is None:
                return False
            LOGGER.info("Producer removed match %s", match_id)
        elif isinstance(event, ReconcileSnapshot):
            dropped = self._store.reconcile(event.matches, event.competitions)
            LOGGER.info(
                "Snapshot applied: %s matches, %s dropped",
                len(event.matches),
                len(dropped),
            )
        elif isinstance(event, MergeParts):
            if self._store.merge_parts(event.match_mid, event.home_parts, event.away_parts) is None:
                return False
        elif isinstance(event, ShowCompetitionLink):
            self._commands.push(event.origin_channel, Navigate(href=event.href))
            return False
        else:
            return False

        self.render()
        return True

    def open_match(self, match_id: str) -> bool:
        """Ask the producer that pinned a match to load its page."""

        match = self._store.get(match_id)
        if match is None or not match.source_url:
            return False
        return self._commands.push(match.origin_channel, Navigate(href=match.source_url))

    def remove_match(self, match_id: str) -> bool:
        """Remove a match on the user's behalf and tell its producer."""

        removed = self._store.remove(match_id)
        if removed is None:
            return False
        self._commands.push(removed.origin_channel, Uncheck(match_id=removed.external_id or removed.id))
        LOGGER.info("User removed match %s", match_id)
        self.render()
        return True
