import logging
import sys
from datetime import datetime, timezone

from pythonjsonlogger import jsonlogger

SERVICE_NAME = "employability-assessment"
LOG_FORMAT = "%(timestamp)s %(level)s %(name)s %(message)s"


class AssessmentJsonFormatter(jsonlogger.JsonFormatter):
    """
    One JSON object per record, tagged with the service name.

    Fields passed through ``extra`` (the request log adds method, path,
    status and duration_ms) are emitted as top-level keys.
    """
    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = SERVICE_NAME


def setup_logging(log_level_str: str = "INFO") -> logging.Handler:
    """
    Sends JSON logs to stdout through a single root handler.

    Calling it again only changes the level.
    """
    log_level = getattr(logging, log_level_str.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers:
        if isinstance(handler.formatter, AssessmentJsonFormatter):
            return handler

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(AssessmentJsonFormatter(LOG_FORMAT))
    root_logger.addHandler(handler)
    return handler
