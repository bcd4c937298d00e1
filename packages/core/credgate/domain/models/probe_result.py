"""ProbeResult model for remote credential checks."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ProbeOutcome(str, Enum):
    """Classification of a single probe call."""

    Ok = "ok"
    """Authority answered with non-empty content."""

    Rejected = "rejected"
    """Authority answered successfully but with no content."""

    Invalid = "invalid"
    """Authority reported the credential as unauthorized."""

    Indeterminate = "indeterminate"
    """The call could neither confirm nor deny the credential."""


RATE_LIMITED = "rate-limited"
TIMEOUT = "timeout"
EMPTY_RESPONSE = "empty response"
UNAUTHORIZED = "unauthorized"


class ProbeResult(BaseModel):
    """Result of probing a provider with a candidate credential.

    Example:
        ```python
        result = ProbeResult.indeterminate(RATE_LIMITED, retry_after=30)
        if result.outcome == ProbeOutcome.Indeterminate:
            ...
        ```
    """

    outcome: ProbeOutcome = Field(..., description="Probe classification")
    message: str = Field(default="", description="Short reason for non-ok outcomes")
    status_code: int | None = Field(default=None, description="HTTP status from the authority")
    provider_code: str | None = Field(default=None, description="Provider error code if any")
    retry_after: int | None = Field(default=None, ge=0, description="Seconds to wait before retrying")
    latency_ms: int | None = Field(default=None, ge=0, description="Round trip time")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def ok(cls, **kwargs: object) -> ProbeResult:
        return cls(outcome=ProbeOutcome.Ok, **kwargs)

    @classmethod
    def rejected(cls, message: str = EMPTY_RESPONSE, **kwargs: object) -> ProbeResult:
        return cls(outcome=ProbeOutcome.Rejected, message=message, **kwargs)

    @classmethod
    def invalid(cls, message: str = UNAUTHORIZED, **kwargs: object) -> ProbeResult:
        return cls(outcome=ProbeOutcome.Invalid, message=message, **kwargs)

    @classmethod
    def indeterminate(cls, message: str, **kwargs: object) -> ProbeResult:
        return cls(outcome=ProbeOutcome.Indeterminate, message=message, **kwargs)
