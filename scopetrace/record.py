"""Interval records and the clock/thread helpers that produce them."""
from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Dict

# Anchor the monotonic counter to wall-clock time once so timestamps are
# comparable across threads and readable as epoch microseconds.
_EPOCH_OFFSET_NS = time.time_ns() - time.perf_counter_ns()

_THREAD_ID_MASK = 0xFFFFFFFF


def now_us() -> int:
    """Return a high-resolution timestamp in microseconds since the Unix epoch."""

    return (time.perf_counter_ns() + _EPOCH_OFFSET_NS) // 1000


def current_thread_id() -> int:
    """Hash the calling thread's identity down to 32 bits."""

    return hash(threading.get_ident()) & _THREAD_ID_MASK


def sanitize_name(name: str) -> str:
    return name.replace('"', "'")


@dataclass(frozen=True)
class IntervalRecord:
    """One completed interval, timestamps in microseconds."""

    name: str
    start: int
    end: int
    thread_id: int

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(
                f"interval '{self.name}' ends before it starts ({self.end} < {self.start})"
            )

    @property
    def duration(self) -> int:
        return self.end - self.start

    def to_trace_event(self) -> Dict[str, Any]:
        """Complete ("X" phase) event in Chrome trace-event layout."""

        return {
            "cat": "function",
            "dur": self.duration,
            "name": sanitize_name(self.name),
            "ph": "X",
            "pid": 0,
            "tid": self.thread_id,
            "ts": self.start,
        }
