"""
Tests for logger functionality.
"""

import pytest

from formmatch.env import reset_settings
from formmatch.logger import StructuredLogger, get_logger, reset_logger


@pytest.fixture
def quiet_logger(tmp_path):
    return StructuredLogger(name="test", log_dir=tmp_path, enable_console=False)


class TestStructuredLogger:
    """Test structured logging functionality."""

    def test_logger_creation(self, tmp_path):
        """Logger should be created with empty metrics."""
        logger = StructuredLogger(
            name="test",
            level="INFO",
            log_dir=tmp_path,
            enable_console=False,
        )

        assert logger.logger.name == "test"
        assert logger.metrics["forms_detected"] == 0
        assert logger.metrics["origin_fill_rate"] == {}

    def test_log_methods(self, quiet_logger):
        """All log level methods should work."""
        quiet_logger.debug("Debug message")
        quiet_logger.info("Info message")
        quiet_logger.warning("Warning message")
        quiet_logger.error("Error message")

    def test_log_with_context(self, tmp_path, quiet_logger):
        """Context is appended to the message as JSON."""
        quiet_logger.info("Learned form", origin="shop.example.com", fields=3)

        log_content = next(tmp_path.glob("*.log")).read_text()
        assert '"origin": "shop.example.com"' in log_content
        assert '"fields": 3' in log_content

    def test_learning_metrics(self, quiet_logger):
        quiet_logger.record_form_learned(3)
        quiet_logger.record_form_learned(2)

        metrics = quiet_logger.get_metrics()
        assert metrics["forms_detected"] == 2
        assert metrics["fields_learned"] == 5

    def test_fill_metrics(self, quiet_logger):
        """Fill attempts and fills are tracked per origin."""
        quiet_logger.record_fill_attempt("shop.example.com")
        quiet_logger.record_form_filled("shop.example.com")
        quiet_logger.record_fill_attempt("blog.example.com")
        quiet_logger.record_field_outcomes(matched=2, unmatched=1)
        quiet_logger.record_error("Timeout")
        quiet_logger.record_error("Timeout")

        metrics = quiet_logger.get_metrics()

        assert metrics["forms_filled"] == 1
        assert metrics["fields_matched"] == 2
        assert metrics["fields_unmatched"] == 1
        assert metrics["errors_by_type"] == {"Timeout": 2}
        assert metrics["origin_fill_rate"]["shop.example.com"]["match_rate"] == 1.0
        assert metrics["origin_fill_rate"]["blog.example.com"]["match_rate"] == 0.0

    def test_match_rate_calculation(self, quiet_logger):
        # 3 attempts, 2 fills = 66.7% match rate
        for _ in range(3):
            quiet_logger.record_fill_attempt("shop.example.com")

        quiet_logger.record_form_filled("shop.example.com")
        quiet_logger.record_form_filled("shop.example.com")

        rate = quiet_logger.get_metrics()["origin_fill_rate"]["shop.example.com"]["match_rate"]
        assert rate == pytest.approx(0.667, rel=0.01)

    def test_metrics_summary(self, tmp_path, quiet_logger):
        quiet_logger.record_page_fetched()
        quiet_logger.record_fill_attempt("shop.example.com")
        quiet_logger.record_form_filled("shop.example.com")
        quiet_logger.record_field_outcomes(matched=1, unmatched=1)

        quiet_logger.log_metrics_summary()

        log_content = next(tmp_path.glob("*.log")).read_text()
        assert "Fields matched: 1/2 (50.0%)" in log_content
        assert "shop.example.com: 1/1 (100.0%)" in log_content

    def test_log_file_creation(self, tmp_path, quiet_logger):
        """Log file should be created in specified directory."""
        quiet_logger.info("Test message")

        log_files = list(tmp_path.glob("formmatch_*.log"))
        assert len(log_files) == 1
        assert "Test message" in log_files[0].read_text()

    def test_file_output_disabled(self, tmp_path):
        logger = StructuredLogger(name="test", log_dir=tmp_path, enable_file=False, enable_console=False)
        logger.info("Nowhere")
        assert list(tmp_path.glob("*.log")) == []


class TestGlobalLogger:
    """Test global logger singleton."""

    def test_get_logger_singleton(self, tmp_path):
        """get_logger should return same instance."""
        reset_logger()

        logger1 = get_logger(log_dir=tmp_path, enable_console=False)
        logger2 = get_logger()

        assert logger1 is logger2

    def test_reset_logger(self, tmp_path):
        """reset_logger should create new instance."""
        reset_logger()

        logger1 = get_logger(log_dir=tmp_path, enable_console=False)
        logger1.record_form_learned(1)

        reset_logger()

        logger2 = get_logger(log_dir=tmp_path, enable_console=False)

        assert logger2 is not logger1
        assert logger2.metrics["forms_detected"] == 0

    def test_level_from_settings(self, tmp_path, monkeypatch):
        monkeypatch.setenv("FORMMATCH_LOG_LEVEL", "DEBUG")
        reset_logger()

        logger = get_logger(log_dir=tmp_path, enable_console=False)
        logger.info("Configured")

        assert logger.logger.level == 10
        reset_logger()


class TestLazyHandlers:
    """Test that handlers are attached on first use."""

    def test_creation_touches_nothing_on_disk(self, tmp_path):
        log_dir = tmp_path / "later"
        logger = StructuredLogger(name="lazy", log_dir=log_dir, enable_console=False)
        logger.record_form_learned(2)
        assert not log_dir.exists()

        logger.info("First message")

        assert list(log_dir.glob("formmatch_*.log"))

    def test_configure_keeps_metrics(self, tmp_path):
        logger = StructuredLogger(name="lazy", log_dir=tmp_path, enable_console=False)
        logger.record_form_learned(3)

        logger.configure(level="DEBUG", enable_file=False)

        assert logger.logger.level == 10
        assert logger.logger.handlers == []
        assert logger.metrics["fields_learned"] == 3

    def test_global_logger_follows_settings_at_configure(self, tmp_path, monkeypatch):
        reset_logger()
        logger = get_logger(enable_console=False)

        monkeypatch.setenv("FORMMATCH_LOG_TO_FILE", "1")
        monkeypatch.setenv("FORMMATCH_LOG_DIR", str(tmp_path / "from_env"))
        reset_settings()
        logger.configure()

        assert list((tmp_path / "from_env").glob("formmatch_*.log"))
        reset_logger()
