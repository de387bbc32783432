"""In-memory outbound command queue.

Implements the core CommandSinkPort. Producers poll for their own commands,
so each origin channel gets its own FIFO.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Optional

from core.events import OutboundCommand

LOGGER = logging.getLogger(__name__)


class PendingCommandQueue:
    """Pending commands keyed by origin channel, consumed one per poll."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pending: dict[str, deque[OutboundCommand]] = {}

    def push(self, origin_channel: str, command: OutboundCommand) -> bool:
        if not origin_channel:
            # Without a channel there is nobody to deliver to.
            LOGGER.debug("Dropping %s with no origin channel", type(command).__name__)
            return False
        with self._lock:
            self._pending.setdefault(origin_channel, deque()).append(command)
        return True

    def pop(self, origin_channel: str) -> Optional[OutboundCommand]:
        with self._lock:
            queue = self._pending.get(origin_channel)
            if not queue:
                return None
            command = queue.popleft()
            if not queue:
                del self._pending[origin_channel]
            return command

    def pending_count(self, origin_channel: Optional[str] = None) -> int:
        with self._lock:
            if origin_channel is not None:
                return len(self._pending.get(origin_channel, ()))
            return sum(len(queue) for queue in self._pending.values())
