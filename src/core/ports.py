"""Ports (interfaces) used by the core.

Ports define the minimal contracts for document fetching, outbound commands
and rendering so the core can be reused with different adapters.
"""

from __future__ import annotations

from typing import Optional, Protocol

from core.events import OutboundCommand
from core.models import MatchRecord, OverlayView, RefreshResult


class DocumentFetcherPort(Protocol):
    """Fetch a match's source document and extract its current fields."""

    async def fetch(self, match: MatchRecord) -> Optional[RefreshResult]:
        """Return None when the document has no usable match fragment."""
        ...


class CommandSinkPort(Protocol):
    """Deliver outbound commands to a specific origin channel."""

    def push(self, origin_channel: str, command: OutboundCommand) -> bool:
        ...


class ViewListener(Protocol):
    def __call__(self, view: OverlayView) -> None:
        ...
