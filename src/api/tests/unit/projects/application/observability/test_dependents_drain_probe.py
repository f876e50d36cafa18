"""Unit tests for the dependents drain probe."""

from unittest.mock import MagicMock

from projects.application.observability import DefaultDependentsDrainProbe
from shared_kernel.observability_context import ObservationContext

PROJECT_ID = "5f1a2b3c4d5e6f7a8b9c0d1e"


class TestDrainLogging:
    """Tests for drain events."""

    def test_logs_drain_started_debug(self):
        mock_logger = MagicMock()
        probe = DefaultDependentsDrainProbe(logger=mock_logger)

        probe.drain_started(project_id=PROJECT_ID, timeout_seconds=1800.0)

        mock_logger.debug.assert_called_once_with(
            "project_dependents_drain_started",
            project_id=PROJECT_ID,
            timeout_seconds=1800.0,
        )

    def test_logs_each_tick_at_debug(self):
        mock_logger = MagicMock()
        probe = DefaultDependentsDrainProbe(logger=mock_logger)

        probe.drain_ticked(project_id=PROJECT_ID, state="DELETING", dependent_count=2)
        probe.drain_ticked(project_id=PROJECT_ID, state="RETRY", dependent_count=None)

        assert mock_logger.debug.call_count == 2
        assert mock_logger.debug.call_args[1]["state"] == "RETRY"
        assert mock_logger.debug.call_args[1]["dependent_count"] is None

    def test_logs_fetch_failure_at_debug(self):
        mock_logger = MagicMock()
        probe = DefaultDependentsDrainProbe(logger=mock_logger)

        probe.dependents_fetch_failed(project_id=PROJECT_ID, error="reset")

        assert mock_logger.debug.call_args[0][0] == "project_dependents_fetch_failed"
        mock_logger.warning.assert_not_called()

    def test_logs_drain_completed_info(self):
        mock_logger = MagicMock()
        probe = DefaultDependentsDrainProbe(logger=mock_logger)

        probe.drain_completed(project_id=PROJECT_ID, ticks=3)

        mock_logger.info.assert_called_once_with(
            "project_dependents_drained", project_id=PROJECT_ID, ticks=3
        )

    def test_with_context_binds_metadata(self):
        mock_logger = MagicMock()
        probe = DefaultDependentsDrainProbe(logger=mock_logger).with_context(
            ObservationContext(request_id="req-1")
        )

        probe.drain_completed(project_id=PROJECT_ID, ticks=1)

        assert mock_logger.info.call_args[1]["request_id"] == "req-1"
