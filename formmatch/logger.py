"""
Structured logging system for formmatch.

Provides centralized logging with console and file outputs, plus
in-process metrics for learning and filling sessions.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime
import json


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks how many forms were learned and filled, and how well fields matched.
    """

    def __init__(
        self,
        name: str = "formmatch",
        level: Optional[str] = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: Optional[bool] = True,
        enable_console: bool = True,
        use_settings: bool = False,
    ):
        """
        Initialize the structured logger.

        Handlers are attached on the first message or on configure(), so
        creating a logger has no side effects on disk.

        Args:
            name: Logger name; engine loggers named ``<name>.matching.*`` propagate here
            level: Log level (DEBUG, INFO, WARNING, ERROR)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to file
            enable_console: Output logs to console
            use_settings: Fill options left as None from the current Settings
        """
        self.logger = logging.getLogger(name)
        self.metrics = {
            "forms_detected": 0,
            "forms_filled": 0,
            "fields_learned": 0,
            "fields_matched": 0,
            "fields_unmatched": 0,
            "pages_fetched": 0,
            "errors_by_type": {},
            "origin_fill_rate": {},
        }
        self._options = {
            "level": level,
            "log_dir": log_dir,
            "enable_file": enable_file,
            "enable_console": enable_console,
        }
        self._use_settings = use_settings
        self._handlers_ready = False

    def configure(self, **options):
        """Re-attach handlers with updated options. Metrics are kept."""
        self._options.update(options)
        self._setup_handlers()

    def _resolved_options(self) -> dict:
        options = dict(self._options)
        defaults = {"level": "INFO", "log_dir": Path("logs"), "enable_file": True}
        if self._use_settings:
            from .env import get_settings

            settings = get_settings()
            defaults = {
                "level": settings.log_level,
                "log_dir": settings.log_dir,
                "enable_file": settings.log_to_file,
            }
        for key, value in defaults.items():
            if options[key] is None:
                options[key] = value
        return options

    def _setup_handlers(self):
        options = self._resolved_options()
        level = getattr(logging, options["level"].upper())
        self.logger.setLevel(level)
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        if options["enable_console"]:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(level)
            console_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        if options["enable_file"]:
            log_dir = options["log_dir"]
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"formmatch_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # Always log everything to file
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

        self._handlers_ready = True

    def debug(self, message: str, **kwargs):
        """Log debug message with optional context."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        """Log info message with optional context."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with optional context."""
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        """Log error message with optional context."""
        self._log(logging.ERROR, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if not self._handlers_ready:
            self._setup_handlers()
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_form_learned(self, field_count: int):
        """Count one detected form and the fields learned from it."""
        self.metrics["forms_detected"] += 1
        self.metrics["fields_learned"] += field_count

    def record_page_fetched(self):
        self.metrics["pages_fetched"] += 1

    def record_fill_attempt(self, origin: str):
        """Record that a form on ``origin`` was offered for filling."""
        stats = self.metrics["origin_fill_rate"].setdefault(
            origin, {"attempts": 0, "matches": 0}
        )
        stats["attempts"] += 1

    def record_form_filled(self, origin: str):
        self.metrics["forms_filled"] += 1
        if origin in self.metrics["origin_fill_rate"]:
            self.metrics["origin_fill_rate"][origin]["matches"] += 1

    def record_field_outcomes(self, matched: int, unmatched: int):
        self.metrics["fields_matched"] += matched
        self.metrics["fields_unmatched"] += unmatched

    def record_error(self, error_type: str):
        """Count a failure by its type name."""
        if error_type not in self.metrics["errors_by_type"]:
            self.metrics["errors_by_type"][error_type] = 0
        self.metrics["errors_by_type"][error_type] += 1

    def get_metrics(self) -> dict:
        """Return current metrics."""
        metrics_copy = self.metrics.copy()
        for origin, stats in metrics_copy["origin_fill_rate"].items():
            if stats["attempts"] > 0:
                stats["match_rate"] = round(stats["matches"] / stats["attempts"], 3)

        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        matched = metrics["fields_matched"]
        total_fields = matched + metrics["fields_unmatched"]
        field_rate = 0
        if total_fields > 0:
            field_rate = round(matched / total_fields * 100, 1)

        self.info("=== Form Session Metrics ===")
        self.info(f"Pages fetched: {metrics['pages_fetched']}")
        self.info(f"Forms learned: {metrics['forms_detected']} ({metrics['fields_learned']} fields)")
        self.info(f"Forms filled: {metrics['forms_filled']}")
        self.info(f"Fields matched: {matched}/{total_fields} ({field_rate}%)")

        if metrics["origin_fill_rate"]:
            self.info("Fill rates by origin:")
            for origin, stats in metrics["origin_fill_rate"].items():
                rate = stats.get("match_rate", 0) * 100
                self.info(f"  {origin}: {stats['matches']}/{stats['attempts']} ({rate:.1f}%)")

        if metrics["errors_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


# Global logger instance
_global_logger: Optional[StructuredLogger] = None


def get_logger(name: str = "formmatch", level: Optional[str] = None, **kwargs) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Level, log directory and file output default to the Settings current
    when the first message is logged, or when configure() is called.

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        kwargs.setdefault("log_dir", None)
        kwargs.setdefault("enable_file", None)
        _global_logger = StructuredLogger(name=name, level=level, use_settings=True, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
