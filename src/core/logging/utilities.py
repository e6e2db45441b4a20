"""Logging utility functions."""

import logging
from typing import Any

from core.errors.exceptions import classify_exception

MASK_VISIBLE_CHARS = 4


def mask_identifier(value: str | None, visible: int = MASK_VISIBLE_CHARS) -> str:
    """
    Mask an identifier for logging, keeping only a short prefix.

    Example:
        >>> mask_identifier("c0ffee-1234-5678")
        'c0ff…(16)'
    """
    if not value:
        return ""
    if len(value) <= visible:
        return "*" * len(value)
    return f"{value[:visible]}…({len(value)})"


def log_exception(
    logger: logging.Logger,
    exc: Exception,
    msg: str,
    level: int = logging.ERROR,
    include_traceback: bool = True,
    **kwargs: Any,
) -> None:
    """
    Log exception with context and optional traceback.

    Adds error_category (from PairingError subclasses, otherwise by
    classify_exception) and truncates long error messages.

    Args:
        logger: Logger instance
        exc: Exception to log
        msg: Context message
        level: Log level (default: ERROR)
        include_traceback: Include full traceback (default: True)
        **kwargs: Additional context fields

    Example:
        try:
            store.save(contents)
        except StorageError as e:
            log_exception(logger, e, "Pairing file write failed", path=str(store.path))
    """
    if kwargs.get("error_category") is None:
        kwargs["error_category"] = classify_exception(exc).value

    error_msg = str(exc)
    if len(error_msg) > 500:
        error_msg = error_msg[:500] + "..."
    kwargs["error_message"] = error_msg
    kwargs.setdefault("error_type", type(exc).__name__)

    if include_traceback:
        logger.log(level, msg, exc_info=exc, extra=kwargs)
    else:
        logger.log(level, msg, extra=kwargs)
