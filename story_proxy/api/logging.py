"""Structured logging infrastructure for the API layer.

Provides JSON-formatted logging for production and human-readable
logging for development, plus a ProxyLogger helper for request lifecycle events.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

# Extra fields copied into JSON log records when present
_EXTRA_FIELDS = (
    "stage",
    "animal",
    "model",
    "status_code",
    "duration",
    "text_length",
    "error_type",
)


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in _EXTRA_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


# httpx logs full request URLs at INFO, and the Gemini URL carries the API key
# as a query parameter, so these stay at WARNING regardless of verbosity.
QUIET_LOGGERS = ("httpx", "httpcore")

# Uvicorn loggers are routed through the root handler instead of their own
UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(json_format: bool = True, level: int = logging.INFO) -> None:
    """
    Install a single stderr handler on the root logger.

    Args:
        json_format: JSONFormatter output when True, TEXT_FORMAT otherwise
        level: Root level; DEBUG enables request-body and endpoint diagnostics
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter() if json_format else logging.Formatter(TEXT_FORMAT))
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    for name in UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True


class ProxyLogger:
    """Logger for /transcript request events with structured fields."""

    def __init__(self):
        self.logger = logging.getLogger("story_proxy")

    def request_received(self, body: dict) -> None:
        self.logger.info("Incoming request to /transcript", extra={"stage": "received"})
        self.logger.debug(
            f"Request body: {json.dumps(body, indent=2, default=str)}",
            extra={"stage": "received"},
        )

    def validation_failed(self, message: str) -> None:
        self.logger.warning(message, extra={"stage": "validation_failed"})

    def upstream_started(self, model: str, endpoint: str) -> None:
        extra = {"stage": "upstream_called", "model": model}
        self.logger.info("Sending request to Gemini API", extra=extra)
        self.logger.debug(f"Endpoint: {endpoint}", extra=extra)

    def story_generated(self, text_length: int, duration: float) -> None:
        self.logger.info(
            f"Transcript generated, length: {text_length}",
            extra={
                "stage": "completed",
                "text_length": text_length,
                "duration": round(duration, 2),
            },
        )

    def upstream_failed(
        self, error: Exception, status_code: Optional[int] = None, details=None
    ) -> None:
        extra = {"stage": "failed", "error_type": type(error).__name__}
        if status_code is not None:
            extra["status_code"] = status_code
        self.logger.error(f"Gemini request failed: {error}", extra=extra)
        if details is not None:
            self.logger.debug(
                f"Upstream error data: {json.dumps(details, indent=2, default=str)}",
                extra=extra,
            )


# Global proxy logger instance
proxy_logger = ProxyLogger()
