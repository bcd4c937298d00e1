"""Normalized errors raised while talking to a key provider."""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """What went wrong on the way to, or at, the provider."""

    AuthenticationError = "authentication_error"
    """Provider refused the credential (401/403)."""

    RateLimitError = "rate_limit_error"
    """Provider throttled the call (429)."""

    ProviderError = "provider_error"
    """Provider answered with something unusable (5xx, odd status, bad body)."""

    TimeoutError = "timeout_error"
    """No answer within the probe budget."""

    NetworkError = "network_error"
    """Transport-level failure."""

    ValidationError = "validation_error"
    """Provider rejected the probe request itself (400)."""

    UnknownError = "unknown_error"
    """Anything not covered above."""


class SystemError(Exception):
    """Provider failure reduced to a provider-independent shape.

    Probes build these in ``map_error`` and classify on ``category``; the
    provider's own code, when it sent one, is kept in ``provider_code``.

    Example:
        ```python
        error = probe.map_error(exc)
        if error.category == ErrorCategory.RateLimitError:
            wait = error.retry_after
        ```
    """

    def __init__(
        self,
        category: ErrorCategory | str,
        message: str,
        provider_code: str | None = None,
        retryable: bool = False,
        details: dict[str, Any] | None = None,
        retry_after: int | None = None,
    ) -> None:
        """
        Args:
            category: ErrorCategory or its string value.
            message: Human-readable message, free of credential material.
            provider_code: Provider's error code or type, if any.
            retryable: Whether repeating the call later could succeed.
            details: Extra fields extracted from the provider's error body.
            retry_after: Seconds to wait, from the Retry-After header.
        """
        self.category = ErrorCategory(category)
        self.message = message
        self.provider_code = provider_code
        self.retryable = retryable
        self.details = details or {}
        self.retry_after = retry_after
        super().__init__(message)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(category={self.category.value}, "
            f"message={self.message!r}, retryable={self.retryable})"
        )

    def __str__(self) -> str:
        return self.message


class InfrastructureError(SystemError):
    """The provider could not be reached at all.

    Raised instead of an invalid-credential verdict: the candidate key was
    never checked, so callers must present this as a server-side failure.
    """

    def __init__(
        self,
        message: str,
        provider_code: str | None = "network_error",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            category=ErrorCategory.NetworkError,
            message=message,
            provider_code=provider_code,
            retryable=True,
            details=details,
        )
