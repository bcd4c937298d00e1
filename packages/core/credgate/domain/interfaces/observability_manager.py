"""ObservabilityManager interface: where validation and attribution report to."""

from abc import ABC, abstractmethod
from typing import Any


class ObservabilityManager(ABC):
    """Sink for structured events and log lines.

    Components receive one explicitly instead of configuring logging
    themselves. Implementations must never receive raw credentials:
    callers pass outcomes, reasons and provider codes only.
    """

    @abstractmethod
    async def emit_event(
        self,
        event_type: str,
        payload: dict[str, Any],
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """Record a named domain event.

        Args:
            event_type: Event name, e.g. "credential_validated" or
                "attribution_decided".
            payload: Event fields.
            metadata: Optional request-scoped fields such as request_id.

        Raises:
            ObservabilityError: The event could not be recorded.
        """

    @abstractmethod
    async def log(
        self,
        level: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Write a log line at the given level.

        Args:
            level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
            message: Human-readable message.
            context: Optional structured fields.

        Raises:
            ObservabilityError: The line could not be written.
        """


class ObservabilityError(Exception):
    """An event or log line could not be recorded."""
