"""
Core types used across modules.

This module provides the base enums shared by the error hierarchy and the
pairing client so that error categories compare consistently everywhere.
"""

from enum import Enum


class ErrorCategory(Enum):
    """
    Classification of error types for reporting decisions.

    The pairing import never retries on its own; the category is recorded on
    every failure so callers (and logs) can tell a flaky network from a
    request the server will keep rejecting.

    Categories:
        TRANSIENT: Temporary failures that may succeed if the user tries again
                   (e.g., network timeouts, 5xx responses, busy files)
        AUTH: The service rejected the caller's identity (e.g., 401)
        PERMANENT: Failures that won't succeed on a repeat attempt
                   (e.g., server-reported errors, missing identifiers,
                   read-only filesystem)
        UNKNOWN: Unclassified errors
    """

    TRANSIENT = "transient"
    AUTH = "auth"
    PERMANENT = "permanent"
    UNKNOWN = "unknown"
