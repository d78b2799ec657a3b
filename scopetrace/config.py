"""Environment-driven settings for the trace recorder."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import dotenv_values

from .exceptions import ConfigurationError

DEFAULT_TRACE_PATH = "results.json"

ENV_ENABLED = "SCOPETRACE_ENABLED"
ENV_OUTPUT = "SCOPETRACE_OUTPUT"
ENV_FINALIZE_ON_EXIT = "SCOPETRACE_FINALIZE_ON_EXIT"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _parse_bool(key: str, raw: Optional[str], default: bool) -> bool:
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ConfigurationError(f"{key} must be a boolean flag, got {raw!r}")


@dataclass(frozen=True)
class TraceConfig:
    """Recorder settings.

    ``enabled=False`` turns every session and record into a no-op.
    ``finalize_on_exit`` closes a still-open session from an ``atexit`` hook;
    without it a session left open at exit produces an unterminated file.
    """

    enabled: bool = True
    default_path: str = DEFAULT_TRACE_PATH
    finalize_on_exit: bool = False

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        dotenv_path: str | Path | None = None,
    ) -> "TraceConfig":
        """Build a config from ``.env`` values overlaid with the process environment."""

        values: dict[str, Optional[str]] = {}
        if dotenv_path is not None:
            values.update(dotenv_values(Path(dotenv_path)))
        values.update(os.environ if environ is None else environ)
        output = values.get(ENV_OUTPUT) or DEFAULT_TRACE_PATH
        return cls(
            enabled=_parse_bool(ENV_ENABLED, values.get(ENV_ENABLED), True),
            default_path=output,
            finalize_on_exit=_parse_bool(
                ENV_FINALIZE_ON_EXIT, values.get(ENV_FINALIZE_ON_EXIT), False
            ),
        )
