"""Unit tests for structlog configuration."""

import json

import pytest
import structlog

from infrastructure.logging import configure_logging


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_json_output_without_tty(self, monkeypatch, capsys):
        """Should render JSON to stderr when not attached to a terminal."""
        monkeypatch.delenv("FORCE_COLOR", raising=False)
        monkeypatch.setattr("sys.stderr.isatty", lambda: False)
        configure_logging()

        structlog.get_logger().info("project_deleted", project_id="abc")

        captured = capsys.readouterr()
        assert captured.out == ""
        event = json.loads(captured.err.strip().splitlines()[-1])
        assert event["event"] == "project_deleted"
        assert event["project_id"] == "abc"
        assert event["level"] == "info"

    def test_debug_events_filtered_by_default(self, monkeypatch, capsys):
        monkeypatch.delenv("FORCE_COLOR", raising=False)
        monkeypatch.setattr("sys.stderr.isatty", lambda: False)
        configure_logging(debug=False)

        structlog.get_logger().debug("atlas_request_completed")

        assert capsys.readouterr().err == ""

    def test_debug_events_emitted_in_debug_mode(self, monkeypatch, capsys):
        monkeypatch.delenv("FORCE_COLOR", raising=False)
        monkeypatch.setattr("sys.stderr.isatty", lambda: False)
        configure_logging(debug=True)

        structlog.get_logger().debug("atlas_request_completed")

        assert "atlas_request_completed" in capsys.readouterr().err
