"""Shared fixtures."""

import logging

import pytest
import structlog
from structlog.testing import capture_logs

from seqteams.config import Settings

WEBHOOK_URL = "https://teams.example.test/webhook/abc"
BASE_URL = "https://seq.example.com"


@pytest.fixture(autouse=True)
def _isolate(monkeypatch, tmp_path):
    # Keep user config files and stray env vars out of the tests
    monkeypatch.setenv("SEQTEAMS_CONFIG_DIR", str(tmp_path / "config"))
    for name in ("SEQTEAMS_CONFIG", "SEQTEAMS_COLOR", "SEQTEAMS_TRACE_MESSAGE", "SEQ_APP_SETTING_COLOR"):
        monkeypatch.delenv(name, raising=False)
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def make_settings():
    def _make(**overrides):
        values = {"webhook_url": WEBHOOK_URL, "base_url": BASE_URL}
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def settings(make_settings):
    return make_settings()


@pytest.fixture
def logs():
    with capture_logs() as captured:
        yield captured
