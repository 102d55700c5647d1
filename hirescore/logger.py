"""
Structured logging system for hirescore.

Provides centralized logging with console and optional file output, and
counters for monitoring job creation and application scoring.
"""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks metrics for jobs, applications and rejected requests.
    """

    def __init__(
        self,
        name: str = "hirescore",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for daily log files; no file output when None
            enable_console: Output logs to console
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self.logger.handlers.clear()

        self.metrics = {
            "jobs_created": 0,
            "applications_submitted": 0,
            "validation_failures": 0,
            "errors_by_type": {},
            "score_totals": {},
        }

        if enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_handler.setFormatter(logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            self.logger.addHandler(console_handler)

        if log_dir is not None:
            log_dir = Path(log_dir)
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"hirescore_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # file gets everything
            file_handler.setFormatter(logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            self.logger.addHandler(file_handler)

    def debug(self, message: str, **kwargs):
        """Log debug message with optional context."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        """Log info message with optional context."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        self._log(logging.ERROR, message, kwargs)

    def critical(self, message: str, **kwargs):
        self._log(logging.CRITICAL, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_job_created(self):
        self.metrics["jobs_created"] += 1

    def record_application(self, job_id: str, total_score: float, max_score: float):
        """Record a scored application against its job."""
        self.metrics["applications_submitted"] += 1
        totals = self.metrics["score_totals"].setdefault(
            job_id, {"applications": 0, "earned": 0.0, "possible": 0.0}
        )
        totals["applications"] += 1
        totals["earned"] += total_score
        totals["possible"] += max_score

    def record_validation_failure(self, count: int = 1):
        self.metrics["validation_failures"] += count

    def record_error(self, error_type: str):
        errors = self.metrics["errors_by_type"]
        errors[error_type] = errors.get(error_type, 0) + 1

    def get_metrics(self) -> dict:
        """Return current metrics with per-job average score ratios."""
        metrics_copy = self.metrics.copy()
        for job_id, stats in metrics_copy["score_totals"].items():
            if stats["possible"] > 0:
                stats["average_ratio"] = round(stats["earned"] / stats["possible"], 3)
        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        self.info("=== Service Metrics ===")
        self.info(f"Jobs created: {metrics['jobs_created']}")
        self.info(f"Applications submitted: {metrics['applications_submitted']}")
        self.info(f"Rejected requests: {metrics['validation_failures']}")

        if metrics["score_totals"]:
            self.info("Average score per job:")
            for job_id, stats in metrics["score_totals"].items():
                ratio = stats.get("average_ratio", 0) * 100
                self.info(f"  {job_id}: {stats['applications']} applications ({ratio:.1f}%)")

        if metrics["errors_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


# Global logger instance
_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "hirescore",
    level: str = "INFO",
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None


def configure_logger(
    name: str = "hirescore",
    level: str = "INFO",
    **kwargs
) -> StructuredLogger:
    """Replace the global logger with one built from the given settings."""
    global _global_logger
    _global_logger = StructuredLogger(name=name, level=level, **kwargs)
    return _global_logger
