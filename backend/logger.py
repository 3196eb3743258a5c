"""
Structured logging configuration for the document pipeline API.

Services attach document context with the standard ``extra`` argument:

    logger.info("Loaded guide.pdf", extra={"fingerprint": fp, "pages": 3})

Both formatters below pick up the attributes named in CONTEXT_FIELDS.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict

# Record attributes describing which document and page a line is about
CONTEXT_FIELDS = ("fingerprint", "source", "page_number", "pages", "chunks", "status")

PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def record_context(record: logging.LogRecord) -> Dict[str, Any]:
    """Document context attached to a record, in CONTEXT_FIELDS order."""
    return {
        key: getattr(record, key)
        for key in CONTEXT_FIELDS
        if getattr(record, key, None) is not None
    }


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_data.update(record_context(record))

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ContextFormatter(logging.Formatter):
    """Plain-text lines with the document context appended as key=value pairs."""

    def __init__(self):
        super().__init__(PLAIN_FORMAT)

    def formatMessage(self, record: logging.LogRecord) -> str:
        line = super().formatMessage(record)
        context = record_context(record)
        if "fingerprint" in context:
            context["fingerprint"] = str(context["fingerprint"])[:12]
        if context:
            line += " [" + " ".join(f"{key}={value}" for key, value in context.items()) + "]"
        return line


def setup_logging(log_level: str = "INFO", log_format: str = "json") -> None:
    """Replace the root handlers with one using the JSON or plain-text formatter."""
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if log_format == "json" else ContextFormatter())

    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        root_logger.removeHandler(existing)
    root_logger.setLevel(getattr(logging, log_level))
    root_logger.addHandler(handler)
