"""Pytest configuration for shared fixtures and path setup."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
for candidate in (ROOT, SRC):
    candidate_str = str(candidate)
    if candidate_str not in sys.path:
        sys.path.insert(0, candidate_str)


@pytest.fixture
def settings_factory(monkeypatch: pytest.MonkeyPatch):
    """Build ``Settings`` from explicit values, ignoring the caller's environment."""

    from bot.config import Settings

    for name in ("BASE64_UTF8", "BASE64_URLSAFE", "TEXT_THRESHOLD", "MAX_FILE_MB", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    def factory(**overrides: object) -> Settings:
        values: dict[str, object] = {"BOT_TOKEN": "token"}
        values.update(overrides)
        return Settings.model_validate(values)

    return factory


@pytest.fixture
def app_config(settings_factory):
    return settings_factory(TEXT_THRESHOLD=200, MAX_FILE_MB=1).to_dataclass()
