"""Read finalized trace files back into interval records."""
from __future__ import annotations

from json import JSONDecodeError, loads
from pathlib import Path
from typing import Any, Dict, List

from .exceptions import TraceFormatError
from .record import IntervalRecord


def _event_to_record(event: Dict[str, Any]) -> IntervalRecord:
    try:
        start = int(event["ts"])
        return IntervalRecord(
            name=str(event["name"]),
            start=start,
            end=start + int(event["dur"]),
            thread_id=int(event["tid"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise TraceFormatError(f"malformed trace event {event!r}: {exc}") from exc


def read_trace(path: str | Path) -> List[IntervalRecord]:
    """Return the complete ("X") events of the trace at ``path`` in file order.

    Raises :class:`TraceFormatError` when the file is not valid JSON, which is
    the case for a session that was never ended.
    """

    text = Path(path).read_text(encoding="utf-8")
    try:
        document = loads(text)
    except JSONDecodeError as exc:
        raise TraceFormatError(f"{path} is not a finalized trace: {exc}") from exc
    events = document.get("traceEvents") if isinstance(document, dict) else None
    if not isinstance(events, list):
        raise TraceFormatError(f"{path} has no traceEvents array")
    return [
        _event_to_record(event)
        for event in events
        if isinstance(event, dict) and event.get("ph") == "X"
    ]
