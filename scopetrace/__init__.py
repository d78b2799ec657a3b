"""Scoped timers that stream a Chrome trace-event timeline to disk."""

from __future__ import annotations

from .config import TraceConfig
from .exceptions import ConfigurationError, ScopeTraceError, TraceFormatError
from .reader import read_trace
from .record import IntervalRecord, current_thread_id, now_us
from .recorder import (
    Recorder,
    Session,
    begin_session,
    end_session,
    get_recorder,
    session,
    set_recorder,
)
from .timer import Timer, function_signature, profile_function, profile_scope

__all__ = [
    "ConfigurationError",
    "IntervalRecord",
    "Recorder",
    "ScopeTraceError",
    "Session",
    "Timer",
    "TraceConfig",
    "TraceFormatError",
    "begin_session",
    "current_thread_id",
    "end_session",
    "function_signature",
    "get_recorder",
    "now_us",
    "profile_function",
    "profile_scope",
    "read_trace",
    "session",
    "set_recorder",
]
