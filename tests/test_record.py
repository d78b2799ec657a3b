import threading

import pytest

from scopetrace.record import IntervalRecord, current_thread_id, now_us


def test_trace_event_layout_and_quote_substitution() -> None:
    record = IntervalRecord(name='Foo"Bar', start=1000, end=1500, thread_id=7)
    event = record.to_trace_event()
    assert event == {
        "cat": "function",
        "dur": 500,
        "name": "Foo'Bar",
        "ph": "X",
        "pid": 0,
        "tid": 7,
        "ts": 1000,
    }
    assert record.name == 'Foo"Bar'


def test_interval_record_rejects_negative_duration() -> None:
    with pytest.raises(ValueError):
        IntervalRecord(name="bad", start=10, end=9, thread_id=0)
    assert IntervalRecord(name="empty", start=10, end=10, thread_id=0).duration == 0


def test_now_us_is_epoch_microseconds_and_monotonic() -> None:
    first = now_us()
    second = now_us()
    assert second >= first
    # Somewhere after 2020-01-01 in microseconds.
    assert first > 1_577_836_800 * 1_000_000


def test_thread_id_is_32_bit_and_stable_per_thread() -> None:
    main_id = current_thread_id()
    assert 0 <= main_id <= 0xFFFFFFFF
    assert current_thread_id() == main_id

    seen: list[int] = []
    thread = threading.Thread(target=lambda: seen.append(current_thread_id()))
    thread.start()
    thread.join()
    assert 0 <= seen[0] <= 0xFFFFFFFF
