"""
Monitoring module for the Inkpost backend.

Usage
-----
>>> from inkpost.monitoring import configure_logging, get_logger
>>> configure_logging()
>>> logger = get_logger(__name__)
"""

from inkpost.monitoring.logging import (
    clear_context,
    configure_logging,
    get_logger,
    get_request_id,
    redact_pii,
    sanitize_headers,
    sanitize_log_message,
    set_request_id,
)

__all__ = [
    "clear_context",
    "configure_logging",
    "get_logger",
    "get_request_id",
    "redact_pii",
    "sanitize_headers",
    "sanitize_log_message",
    "set_request_id",
]
