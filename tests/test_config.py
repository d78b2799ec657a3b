from pathlib import Path

import pytest

from scopetrace.config import DEFAULT_TRACE_PATH, TraceConfig
from scopetrace.exceptions import ConfigurationError


def test_defaults_when_environment_is_empty() -> None:
    config = TraceConfig.from_env(environ={})
    assert config == TraceConfig(enabled=True, default_path=DEFAULT_TRACE_PATH, finalize_on_exit=False)
    assert DEFAULT_TRACE_PATH == "results.json"


def test_environment_flags_are_parsed() -> None:
    config = TraceConfig.from_env(
        environ={
            "SCOPETRACE_ENABLED": "No",
            "SCOPETRACE_OUTPUT": "trace/out.json",
            "SCOPETRACE_FINALIZE_ON_EXIT": "on",
        }
    )
    assert config.enabled is False
    assert config.default_path == "trace/out.json"
    assert config.finalize_on_exit is True


def test_invalid_boolean_raises() -> None:
    with pytest.raises(ConfigurationError):
        TraceConfig.from_env(environ={"SCOPETRACE_ENABLED": "sometimes"})


def test_dotenv_values_are_overridden_by_environment(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("SCOPETRACE_OUTPUT=from_file.json\nSCOPETRACE_ENABLED=0\n", encoding="utf-8")
    config = TraceConfig.from_env(environ={"SCOPETRACE_ENABLED": "1"}, dotenv_path=env_file)
    assert config.default_path == "from_file.json"
    assert config.enabled is True
