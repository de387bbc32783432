"""State container for what the panel last rendered."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class PanelState:
    had_matches: bool = False
    last_render: datetime | None = None
    message: str | None = None
