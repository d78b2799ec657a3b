"""Exception types raised by scopetrace."""
from __future__ import annotations


class ScopeTraceError(Exception):
    """Base exception for the package."""


class ConfigurationError(ScopeTraceError):
    """Raised when an environment setting cannot be parsed."""


class TraceFormatError(ScopeTraceError):
    """Raised when a trace file is not a finalized trace-event document."""
