"""Pytest configuration for test isolation.

The categorizer never reads the environment itself, but the CLI builds its
settings from ``ANTHROPIC_API_KEY`` / ``OPENAI_API_KEY`` (and ``.env``). A
developer's real credentials must never leak into a test run and trigger live
network calls, so every test starts with those variables removed and with the
working directory pointed at an empty temp dir (no stray ``.env``).
"""

from __future__ import annotations

from pathlib import Path

import pytest

_ENV_VARS = (
    "ANTHROPIC_API_KEY",
    "OPENAI_API_KEY",
    "SPEND_ANALYSIS_LLM_MODEL",
    "SPEND_ANALYSIS_LLM_TIMEOUT",
    "SPEND_ANALYSIS_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
