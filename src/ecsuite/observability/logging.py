"""structlog setup for ecsuite.

Events go through the stdlib root logger to stderr, so CLI stdout only ever
carries digests, signatures and key summaries. Fields that can hold private
key material are redacted before rendering unless ``ECSUITE_DEBUG`` is set.

Environment Variables:
    ECSUITE_LOG_FORMAT: "console" (default) or "json"
    ECSUITE_LOG_LEVEL: DEBUG, INFO (default), WARNING or ERROR
    ECSUITE_SERVICE_NAME: value of the ``service`` field (default "ecsuite")
    ECSUITE_DEBUG: "true"/"1"/"yes"/"on" disables redaction

Example:
    >>> logger = get_logger("ecsuite.crypto.suite")
    >>> logger.info("ecsuite.suite.key_generated", ski="3f2a...", curve="secp256r1")
"""

import logging
import os
import sys
from typing import Any

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

ENV_LOG_FORMAT = "ECSUITE_LOG_FORMAT"
ENV_LOG_LEVEL = "ECSUITE_LOG_LEVEL"
ENV_SERVICE_NAME = "ECSUITE_SERVICE_NAME"
ENV_DEBUG = "ECSUITE_DEBUG"

_DEFAULTS = {
    ENV_LOG_FORMAT: "console",
    ENV_LOG_LEVEL: "INFO",
    ENV_SERVICE_NAME: "ecsuite",
}

REDACTED_PLACEHOLDER = "***REDACTED***"

# Substrings of field names that may carry key material or credentials
_SENSITIVE_FIELDS = ("private", "scalar", "secret", "password", "token")

_configured = False


def _setting(name: str, override: str | None) -> str:
    return override or os.environ.get(name, _DEFAULTS[name])


def _redact_value(value: Any) -> Any:
    if isinstance(value, dict):
        return sanitize_for_logging(value)
    if isinstance(value, list):
        return [_redact_value(item) for item in value]
    return value


def sanitize_for_logging(data: dict[str, Any]) -> dict[str, Any]:
    """Copy ``data`` with sensitive fields replaced by REDACTED_PLACEHOLDER.

    A field is sensitive when its name contains private, scalar, secret,
    password or token (any case). Nested dicts, also inside lists, are
    sanitized as well.

    Example:
        >>> sanitize_for_logging({"ski": "ab12", "private_scalar": "00ff"})
        {'ski': 'ab12', 'private_scalar': '***REDACTED***'}
    """
    return {
        key: (
            REDACTED_PLACEHOLDER
            if any(field in key.lower() for field in _SENSITIVE_FIELDS)
            else _redact_value(value)
        )
        for key, value in data.items()
    }


def is_debug_mode() -> bool:
    """Return True if ECSUITE_DEBUG is set to a truthy value (e.g. true, 1)."""
    return os.environ.get(ENV_DEBUG, "").strip().lower() in ("true", "1", "yes", "on")


def _redact_sensitive(_logger: WrappedLogger, _method: str, event_dict: EventDict) -> EventDict:
    if is_debug_mode():
        return event_dict
    return sanitize_for_logging(event_dict)


def configure_logging(
    log_format: str | None = None,
    log_level: str | None = None,
    service_name: str | None = None,
    force: bool = False,
) -> None:
    """Route structlog through a single stderr handler on the root logger.

    Arguments left as None fall back to the ECSUITE_* environment variables.
    Repeated calls are no-ops unless ``force`` is True; the CLI forces a
    reconfiguration for ``--verbose``.
    """
    global _configured

    if _configured and not force:
        return

    shared: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        _redact_sensitive,
    ]
    renderer: Processor
    if _setting(ENV_LOG_FORMAT, log_format).lower() == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True, exception_formatter=structlog.dev.plain_traceback
        )

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(_setting(ENV_LOG_LEVEL, log_level).upper())

    structlog.contextvars.bind_contextvars(service=_setting(ENV_SERVICE_NAME, service_name))
    _configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, configuring logging from the environment on first use."""
    if not _configured:
        configure_logging()
    return structlog.stdlib.get_logger(name)
