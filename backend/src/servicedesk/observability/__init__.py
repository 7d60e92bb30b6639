"""Observability module for ServiceDesk.

Provides structured logging with request ID correlation.
"""

from .logging_config import configure_logging, get_logger
from .request_id import (
    request_id_var,
    get_request_id,
    set_request_id,
    generate_request_id,
    request_context,
)

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    # Request ID
    "request_id_var",
    "get_request_id",
    "set_request_id",
    "generate_request_id",
    "request_context",
]
