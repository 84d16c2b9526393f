"""Tests for log processors and setup."""

import json
import logging

from seqteams.utils.logging import _filter_sensitive, _to_clef, get_logger, setup_logging


class TestFilterSensitive:
    def test_redacts_key_value_secrets(self):
        out = _filter_sensitive(None, "info", {"event": "x", "detail": "token=abc123"})
        assert out["detail"] == "token=***REDACTED***"

    def test_redacts_teams_webhook_path(self):
        url = "https://contoso.webhook.office.com/webhookb2/aaaa-bbbb@cccc/IncomingWebhook/dddd/eeee"
        out = _filter_sensitive(None, "error", {"uri": url})
        assert out["uri"] == "https://contoso.webhook.office.com/webhookb2/***REDACTED***"

    def test_leaves_other_values(self):
        out = _filter_sensitive(None, "info", {"uri": "https://example.test/hook", "n": 3})
        assert out == {"uri": "https://example.test/hook", "n": 3}


class TestClef:
    def test_reshapes_event_dict(self):
        out = _to_clef(None, "error", {
            "event": "teams_send_failed",
            "level": "error",
            "timestamp": "2024-05-01T12:00:00Z",
            "logger": "seqteams.core.dispatcher",
            "status_code": 500,
            "@odd": 1,
        })
        assert out == {
            "@t": "2024-05-01T12:00:00Z",
            "@m": "teams_send_failed",
            "@l": "Error",
            "SourceContext": "seqteams.core.dispatcher",
            "status_code": 500,
            "@@odd": 1,
        }

    def test_information_level_omitted(self):
        out = _to_clef(None, "info", {"event": "x", "level": "info", "timestamp": "t"})
        assert "@l" not in out

    def test_exception_becomes_x(self):
        out = _to_clef(None, "error", {"event": "x", "level": "critical", "exception": "Traceback..."})
        assert out["@x"] == "Traceback..."
        assert out["@l"] == "Fatal"


class TestSetup:
    def test_clef_output(self, capsys):
        setup_logging(level="INFO", fmt="clef")
        get_logger("seqteams.test").warning("something_odd", detail="x")

        line = capsys.readouterr().err.strip().splitlines()[-1]
        doc = json.loads(line)
        assert doc["@m"] == "something_odd"
        assert doc["@l"] == "Warning"
        assert doc["detail"] == "x"
        assert doc["SourceContext"] == "seqteams.test"

    def test_level_applied(self):
        setup_logging(level="WARNING", fmt="json")
        assert logging.getLogger().level == logging.WARNING
        assert logging.getLogger("httpx").level == logging.WARNING
