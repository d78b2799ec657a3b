from __future__ import annotations

from typing import Iterator

import pytest

from scopetrace import Recorder, TraceConfig, set_recorder


@pytest.fixture
def recorder() -> Iterator[Recorder]:
    instance = Recorder(TraceConfig())
    yield instance
    instance.end_session()


@pytest.fixture(autouse=True)
def _isolated_global_recorder() -> Iterator[None]:
    previous = set_recorder(None)
    yield
    current = set_recorder(previous)
    if current is not None:
        current.end_session()
