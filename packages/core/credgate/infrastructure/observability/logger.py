"""structlog-backed observability with credential redaction."""

import logging
import re
from collections.abc import MutableMapping
from datetime import UTC, datetime
from typing import Any

import structlog

from credgate.domain.interfaces.observability_manager import (
    ObservabilityError,
    ObservabilityManager,
)

SECRET_FIELDS = frozenset({"api_key", "apiKey", "candidate", "raw", "x-api-key", "authorization"})
"""Field names whose values are always redacted."""

REDACTED = "[REDACTED]"

_KEY_PATTERN = re.compile(r"\b(?:sk-ant-|sk-|pk-)[A-Za-z0-9_\-]{8,}")


def sanitize_for_logging(data: Any) -> Any:
    """Return a copy of ``data`` with credential material masked.

    Values under SECRET_FIELDS are replaced whole. Inside any other string,
    substrings shaped like a provider key are masked, so a key echoed back in
    a provider error message does not reach the logs.
    """
    if isinstance(data, dict):
        return {
            key: REDACTED if key in SECRET_FIELDS else sanitize_for_logging(value)
            for key, value in data.items()
        }
    if isinstance(data, (list, tuple)):
        return [sanitize_for_logging(item) for item in data]
    if isinstance(data, str):
        return _KEY_PATTERN.sub(REDACTED, data)
    return data


def redact_secrets(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor applying sanitize_for_logging to every log line."""
    return sanitize_for_logging(dict(event_dict))  # type: ignore[no-any-return]


def configure_logging(log_level: str = "INFO", json_format: bool = True) -> None:
    """Configure structlog and the stdlib root logger.

    Every line, including those from plain ``structlog.get_logger()`` callers
    such as the HTTP layer, passes through ``redact_secrets`` before rendering.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
        json_format: JSON lines when True, console output when False.
    """
    renderer: Any = (
        structlog.processors.JSONRenderer() if json_format else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            redact_secrets,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(message)s",
    )


class DefaultObservabilityManager(ObservabilityManager):
    """ObservabilityManager writing events and log lines through structlog.

    Rendering is chosen by the caller (``json_format``), never by sniffing
    the environment.
    """

    def __init__(self, log_level: str = "INFO", json_format: bool = True) -> None:
        configure_logging(log_level=log_level, json_format=json_format)
        self._logger = structlog.get_logger("credgate")

    async def emit_event(
        self,
        event_type: str,
        payload: dict[str, Any],
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """Write ``event_type`` as an INFO line carrying the sanitized payload.

        Raises:
            ObservabilityError: If the line could not be written.
        """
        try:
            fields = sanitize_for_logging(payload)
            if metadata:
                fields["metadata"] = {
                    "timestamp": datetime.now(UTC).isoformat(),
                    **sanitize_for_logging(metadata),
                }
            self._logger.info(event_type, event_type=event_type, **fields)
        except Exception as e:
            raise ObservabilityError(f"Failed to emit event: {e}") from e

    async def log(
        self,
        level: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Write a sanitized line at ``level``; unknown levels fall back to INFO.

        Raises:
            ObservabilityError: If the line could not be written.
        """
        try:
            write = getattr(self._logger, level.lower(), self._logger.info)
            write(sanitize_for_logging(message), **sanitize_for_logging(context or {}))
        except Exception as e:
            raise ObservabilityError(f"Failed to log message: {e}") from e
