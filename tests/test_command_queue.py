from __future__ import annotations

from adapters.command_queue import PendingCommandQueue
from core.events import Navigate, Uncheck


def test_commands_are_fifo_per_channel() -> None:
    queue = PendingCommandQueue()
    queue.push("tab-1", Uncheck("a"))
    queue.push("tab-1", Navigate("https://x.test/"))
    queue.push("tab-2", Uncheck("b"))

    assert queue.pending_count() == 3
    assert queue.pop("tab-1") == Uncheck("a")
    assert queue.pop("tab-1") == Navigate("https://x.test/")
    assert queue.pop("tab-1") is None
    assert queue.pending_count("tab-2") == 1


def test_commands_without_channel_are_dropped() -> None:
    queue = PendingCommandQueue()
    assert queue.push("", Uncheck("a")) is False
    assert queue.pending_count() == 0
