"""
Error classification and exception hierarchy.

Provides:
- ErrorCategory enum for classifying errors
- PairingError hierarchy for typed exceptions
- Classification utilities for HTTP statuses and OS errors
"""

from core.errors.exceptions import (
    IdentifierError,
    PairingError,
    PermanentError,
    PreconditionError,
    StorageError,
    TransientError,
    classify_exception,
    classify_http_status,
    classify_os_error,
)
from core.types import ErrorCategory

__all__ = [
    # Enums
    "ErrorCategory",
    # Base classes
    "PairingError",
    "TransientError",
    "PermanentError",
    # Domain errors
    "PreconditionError",
    "IdentifierError",
    "StorageError",
    # Classification utilities
    "classify_http_status",
    "classify_os_error",
    "classify_exception",
]
