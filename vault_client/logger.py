"""
Structured logging for the vault client.

Every module logs through get_logger(); events carry an event_type plus
keyword context (account, tx_hash, error...). Output is JSON unless
VAULT_LOG_FORMAT=console.
"""

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import structlog

LOG_LEVEL = getattr(logging, os.getenv("VAULT_LOG_LEVEL", "INFO").upper(), logging.INFO)
LOG_FORMAT = os.getenv("VAULT_LOG_FORMAT", "json").strip().lower()


def _stamp_event(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """UTC timestamp, and structlog's 'event' key renamed to event_type"""
    event_dict.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
    if "event" in event_dict:
        event_dict.setdefault("event_type", event_dict.pop("event"))
    return event_dict


def configure_logging(log_format: str = LOG_FORMAT, level: int = LOG_LEVEL) -> None:
    processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.format_exc_info,
        _stamp_event,
    ]
    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_logging()


def get_logger(name: Optional[str] = None) -> Any:
    """Bound logger tagged with the calling module"""
    logger = structlog.get_logger()
    return logger.bind(logger=name) if name else logger
