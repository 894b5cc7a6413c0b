"""
structlog setup shared by the API and the wizard client.

Development runs get a readable console renderer; every other
environment logs one JSON object per line.
"""
import logging
import sys
from typing import Any, Dict, List, Optional

import structlog

from app.config import settings

# Values under these keys never reach a log line
SENSITIVE_KEYS = frozenset({"password", "hashed_password", "jwt", "confirm_password"})


def redact_sensitive(logger: Any, method_name: str, event_dict: Dict) -> Dict:
    for key in SENSITIVE_KEYS.intersection(event_dict):
        event_dict[key] = "[redacted]"
    return event_dict


def add_service_fields(logger: Any, method_name: str, event_dict: Dict) -> Dict:
    event_dict.setdefault("service", settings.APP_NAME.lower())
    event_dict.setdefault("environment", settings.ENVIRONMENT)
    return event_dict


def _render_chain(json_logs: bool) -> List:
    if json_logs:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    # ConsoleRenderer formats exceptions itself
    return [structlog.dev.ConsoleRenderer()]


def configure_logging(json_logs: Optional[bool] = None):
    """Route structlog through stdlib logging with the app's processor chain."""
    if json_logs is None:
        json_logs = settings.ENVIRONMENT != "development"

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            redact_sensitive,
            add_service_fields,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
        ] + _render_chain(json_logs),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()


def get_logger(name: str = __name__):
    return structlog.get_logger(name)
