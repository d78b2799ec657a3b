import json
from pathlib import Path

import pytest

from scopetrace import IntervalRecord, TraceFormatError, read_trace


def test_read_trace_converts_complete_events(tmp_path: Path) -> None:
    out = tmp_path / "trace.json"
    out.write_text(
        json.dumps(
            {
                "otherData": {},
                "traceEvents": [
                    {"cat": "function", "dur": 500, "name": "A", "ph": "X", "pid": 0, "tid": 7, "ts": 1000},
                    {"name": "marker", "ph": "i", "pid": 0, "tid": 7, "ts": 1200},
                ],
            }
        ),
        encoding="utf-8",
    )
    assert read_trace(out) == [IntervalRecord(name="A", start=1000, end=1500, thread_id=7)]


@pytest.mark.parametrize(
    "content",
    [
        '{"otherData": {},"traceEvents":[',
        '{"otherData": {}}',
        '[]',
        '{"traceEvents":[{"ph":"X","name":"A","ts":1}]}',
        '{"traceEvents":[{"ph":"X","name":"A","ts":10,"dur":-5,"tid":0}]}',
    ],
)
def test_read_trace_rejects_malformed_documents(tmp_path: Path, content: str) -> None:
    out = tmp_path / "bad.json"
    out.write_text(content, encoding="utf-8")
    with pytest.raises(TraceFormatError):
        read_trace(out)
