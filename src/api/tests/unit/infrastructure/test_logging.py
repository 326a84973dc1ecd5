"""Unit tests for structlog configuration."""

import pytest
import structlog

from infrastructure.logging import configure_logging


@pytest.fixture(autouse=True)
def reset_structlog():
    """Restore structlog defaults after each test."""
    yield
    structlog.reset_defaults()


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_output_without_tty(self, monkeypatch, capsys):
        """Non-TTY output should be rendered as JSON."""
        monkeypatch.delenv("FORCE_COLOR", raising=False)
        monkeypatch.setattr("sys.stdout.isatty", lambda: False)

        configure_logging("info")
        structlog.get_logger().info("registry_schema_resolved", service="my-graph")

        out = capsys.readouterr().out
        assert '"event": "registry_schema_resolved"' in out
        assert '"service": "my-graph"' in out

    def test_filters_below_minimum_level(self, monkeypatch, capsys):
        """Events below the configured level should be dropped."""
        monkeypatch.delenv("FORCE_COLOR", raising=False)
        monkeypatch.setattr("sys.stdout.isatty", lambda: False)

        configure_logging("warning")
        logger = structlog.get_logger()
        logger.info("registry_client_created")
        logger.warning("registry_schema_change_subscription_rejected")

        out = capsys.readouterr().out
        assert "registry_client_created" not in out
        assert "registry_schema_change_subscription_rejected" in out

    def test_rejects_unknown_level(self):
        """Unknown level names should raise."""
        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging("verbose")
