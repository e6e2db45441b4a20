"""
Structured logging module.

Provides JSON logging with context propagation and identifier masking.
"""

from core.logging.context import (
    clear_log_context,
    get_log_context,
    set_log_context,
)
from core.logging.formatters import ConsoleFormatter, JSONFormatter
from core.logging.setup import (
    generate_trace_id,
    get_logger,
    setup_logging,
)
from core.logging.utilities import log_exception, mask_identifier

__all__ = [
    # Setup
    "setup_logging",
    "get_logger",
    "generate_trace_id",
    # Formatters
    "JSONFormatter",
    "ConsoleFormatter",
    # Context
    "set_log_context",
    "get_log_context",
    "clear_log_context",
    # Utilities
    "log_exception",
    "mask_identifier",
]
