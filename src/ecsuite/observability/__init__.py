"""Logging for ecsuite: structlog with stderr output and key material redaction.

Example:
    >>> from ecsuite.observability import get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.info("ecsuite.suite.key_imported", ski="3f2a...", key_type="ECKeyPair")
"""

from ecsuite.observability.logging import (
    configure_logging,
    get_logger,
    is_debug_mode,
    sanitize_for_logging,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "is_debug_mode",
    "sanitize_for_logging",
]
