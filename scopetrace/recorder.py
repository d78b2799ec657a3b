"""Thread-safe recorder that streams interval records into a trace-event JSON file."""
from __future__ import annotations

import atexit
import json
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, TextIO

from .config import TraceConfig
from .exceptions import ConfigurationError
from .record import IntervalRecord

logger = logging.getLogger(__name__)

TRACE_HEADER = '{"otherData": {},"traceEvents":['
TRACE_FOOTER = "]}"


@dataclass(frozen=True)
class Session:
    """One open recording run bound to a single output file."""

    name: str
    path: Path


class Recorder:
    """Owns at most one open session and serialises writes from every thread.

    Session open, session close and the append of each record happen under a
    single lock; building the JSON fragment for a record does not. Every I/O
    failure is logged and turns recording into a no-op instead of raising into
    the instrumented application.
    """

    def __init__(self, config: TraceConfig | None = None) -> None:
        self.config = config or TraceConfig()
        # Reentrant so a timer finalised by the garbage collector while this
        # thread already holds the lock cannot deadlock.
        self._lock = threading.RLock()
        self._session: Optional[Session] = None
        self._stream: Optional[TextIO] = None
        self._first_record = True
        self._records_written = 0
        if self.config.finalize_on_exit:
            atexit.register(self._finalize_at_exit)

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    @property
    def session_active(self) -> bool:
        with self._lock:
            return self._session is not None

    @property
    def session_name(self) -> Optional[str]:
        with self._lock:
            return None if self._session is None else self._session.name

    @property
    def records_written(self) -> int:
        """Records accepted by the current (or most recently closed) session."""

        with self._lock:
            return self._records_written

    def begin_session(self, name: str, filepath: str | Path | None = None) -> None:
        """Open ``filepath`` (truncating it) and start a session called ``name``.

        A session that is still open is finalized first. When the file cannot
        be opened no session is left active.
        """

        if not self.enabled:
            logger.debug("Tracing disabled; ignoring session '%s'.", name)
            return
        path = Path(filepath if filepath is not None else self.config.default_path)
        with self._lock:
            if self._session is not None:
                logger.warning(
                    "begin_session('%s') while session '%s' is still open; closing it first.",
                    name,
                    self._session.name,
                )
                self._close_locked()
            self._first_record = True
            self._records_written = 0
            try:
                stream = path.open("w", encoding="utf-8")
            except (OSError, ValueError) as exc:
                logger.error("Could not open trace file %s: %s", path, exc)
                return
            self._stream = stream
            self._session = Session(name=name, path=path)
            if not self._emit_locked(TRACE_HEADER):
                self._release_locked()
                return
            logger.info("Trace session '%s' recording to %s.", name, path)

    def end_session(self) -> None:
        """Write the document footer and close the current session, if any."""

        with self._lock:
            if self._session is None:
                return
            self._close_locked()

    def write_record(self, record: IntervalRecord) -> None:
        """Append ``record`` to the open session; dropped silently when none is open."""

        fragment = json.dumps(
            record.to_trace_event(),
            separators=(",", ":"),
            sort_keys=True,
        )
        with self._lock:
            if self._session is None:
                return
            chunk = fragment if self._first_record else "," + fragment
            if self._emit_locked(chunk):
                self._first_record = False
                self._records_written += 1

    def _emit_locked(self, text: str) -> bool:
        """Append ``text``; False when nothing reached the stream.

        A failed flush still counts as written since the text sits in the
        stream buffer and will be flushed with the next append.
        """

        assert self._stream is not None
        try:
            self._stream.write(text)
        except (OSError, ValueError) as exc:
            logger.error("Failed writing to trace file %s: %s", self._session_path(), exc)
            return False
        try:
            self._stream.flush()
        except OSError as exc:
            logger.error("Failed flushing trace file %s: %s", self._session_path(), exc)
        return True

    def _close_locked(self) -> None:
        assert self._session is not None
        session = self._session
        self._emit_locked(TRACE_FOOTER)
        self._release_locked()
        logger.info(
            "Trace session '%s' closed with %d record(s) in %s.",
            session.name,
            self._records_written,
            session.path,
        )

    def _release_locked(self) -> None:
        stream = self._stream
        self._stream = None
        self._session = None
        if stream is None:
            return
        try:
            stream.close()
        except OSError as exc:
            logger.error("Failed closing trace file: %s", exc)

    def _session_path(self) -> Optional[Path]:
        return None if self._session is None else self._session.path

    def _finalize_at_exit(self) -> None:
        with self._lock:
            if self._session is None:
                return
            logger.info("Finalizing trace session '%s' at interpreter exit.", self._session.name)
            self._close_locked()


_default_recorder: Optional[Recorder] = None
_default_lock = threading.Lock()


def get_recorder() -> Recorder:
    """Return the process-wide recorder, building it from the environment on first use.

    A malformed ``SCOPETRACE_*`` setting is logged and the defaults are used.
    """

    global _default_recorder
    with _default_lock:
        if _default_recorder is None:
            try:
                config = TraceConfig.from_env()
            except ConfigurationError as exc:
                logger.error("Ignoring invalid trace configuration: %s", exc)
                config = TraceConfig()
            _default_recorder = Recorder(config)
        return _default_recorder


def set_recorder(recorder: Optional[Recorder]) -> Optional[Recorder]:
    """Install ``recorder`` as the process-wide instance and return the previous one.

    Passing ``None`` makes the next :func:`get_recorder` call build a fresh one.
    """

    global _default_recorder
    with _default_lock:
        previous = _default_recorder
        _default_recorder = recorder
        return previous


def begin_session(name: str, filepath: str | Path | None = None) -> None:
    get_recorder().begin_session(name, filepath)


def end_session() -> None:
    get_recorder().end_session()


@contextmanager
def session(
    name: str,
    filepath: str | Path | None = None,
    recorder: Recorder | None = None,
) -> Iterator[Recorder]:
    """Run the ``with`` body inside a session that is always finalized."""

    target = recorder or get_recorder()
    target.begin_session(name, filepath)
    try:
        yield target
    finally:
        target.end_session()
