"""Scoped timers that emit one interval record each."""
from __future__ import annotations

import functools
import inspect
import threading
from contextlib import contextmanager
from types import TracebackType
from typing import Any, Callable, Iterator, Optional, Type, TypeVar

from .record import IntervalRecord, current_thread_id, now_us
from .recorder import Recorder, get_recorder

F = TypeVar("F", bound=Callable[..., Any])


class Timer:
    """Measures from construction until :meth:`stop`, then hands the interval to a recorder.

    A timer that is never stopped explicitly stops when its ``with`` block
    exits or when it is garbage collected, so every timer emits exactly one
    record.
    """

    def __init__(self, name: str, recorder: Recorder | None = None) -> None:
        self._stopped = False
        self._stop_lock = threading.Lock()
        self.name = name
        self._recorder = recorder
        self._start = now_us()

    @property
    def stopped(self) -> bool:
        return self._stopped

    @property
    def elapsed_us(self) -> int:
        return now_us() - self._start

    def stop(self) -> Optional[IntervalRecord]:
        """Emit the interval; later calls are no-ops and return ``None``."""

        end = now_us()
        with self._stop_lock:
            if self._stopped:
                return None
            self._stopped = True
        record = IntervalRecord(
            name=self.name,
            start=self._start,
            end=max(end, self._start),
            thread_id=current_thread_id(),
        )
        recorder = self._recorder if self._recorder is not None else get_recorder()
        recorder.write_record(record)
        return record

    def __enter__(self) -> "Timer":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.stop()

    def __del__(self) -> None:
        if not getattr(self, "_stopped", True):
            self.stop()

    def __repr__(self) -> str:
        state = "stopped" if self._stopped else "running"
        return f"Timer(name={self.name!r}, {state})"


@contextmanager
def profile_scope(name: str, recorder: Recorder | None = None) -> Iterator[Timer]:
    """Time the body of a ``with`` block under ``name``."""

    timer = Timer(name, recorder)
    try:
        yield timer
    finally:
        timer.stop()


def function_signature(func: Callable[..., Any]) -> str:
    """Human-readable ``module.qualname(params)`` label for ``func``."""

    module = getattr(func, "__module__", None)
    qualname = getattr(func, "__qualname__", None) or getattr(func, "__name__", repr(func))
    label = f"{module}.{qualname}" if module else qualname
    try:
        return f"{label}{inspect.signature(func)}"
    except (TypeError, ValueError):
        return label


def profile_function(
    func: Optional[F] = None,
    *,
    name: Optional[str] = None,
    recorder: Recorder | None = None,
) -> Any:
    """Decorator timing every call of the wrapped function.

    Usable bare (``@profile_function``) or with arguments
    (``@profile_function(name="load")``). Calls run untimed while the
    recorder is disabled.
    """

    def decorate(target: F) -> F:
        label = name or function_signature(target)

        @functools.wraps(target)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            active = recorder if recorder is not None else get_recorder()
            if not active.enabled:
                return target(*args, **kwargs)
            with Timer(label, active):
                return target(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    if func is not None:
        return decorate(func)
    return decorate
