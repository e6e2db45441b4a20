"""
Core library: reusable, integration-agnostic components.

Modules:
    errors   - Error classification and exception hierarchy
    logging  - Structured JSON logging with context propagation
    utils    - JSON serialization helpers

Design Principles:
    - No dependencies on the appdb service or the pairing workflow
    - All modules are independently testable
    - Type hints throughout
"""

from .types import ErrorCategory

__version__ = "0.1.0"

__all__ = [
    "ErrorCategory",
]
