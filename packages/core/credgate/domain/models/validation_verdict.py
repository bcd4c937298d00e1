"""ValidationVerdict model for credential validation results."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ValidationReason(str, Enum):
    """Why a credential was accepted or refused."""

    Ok = "ok"
    MissingKey = "missing_key"
    BadPrefix = "bad_prefix"
    TooShort = "too_short"
    Unauthorized = "unauthorized"
    EmptyResponse = "empty_response"
    RateLimited = "rate_limited"
    Timeout = "timeout"
    ProviderError = "provider_error"


class VerdictCategory(str, Enum):
    """Error family a verdict belongs to.

    Rejections and indeterminate outcomes are both ``valid=False`` for the
    end user; the category keeps them apart for diagnostics and retry
    guidance.
    """

    Confirmed = "confirmed"
    """The authority accepted the credential."""

    FormatError = "format_error"
    """Syntactic failure, no network call was made."""

    AuthorityRejection = "authority_rejection"
    """The authority refused the credential."""

    AuthorityIndeterminate = "authority_indeterminate"
    """The authority could not confirm or deny the credential."""


_CATEGORY_BY_REASON: dict[ValidationReason, VerdictCategory] = {
    ValidationReason.Ok: VerdictCategory.Confirmed,
    ValidationReason.MissingKey: VerdictCategory.FormatError,
    ValidationReason.BadPrefix: VerdictCategory.FormatError,
    ValidationReason.TooShort: VerdictCategory.FormatError,
    ValidationReason.Unauthorized: VerdictCategory.AuthorityRejection,
    ValidationReason.EmptyResponse: VerdictCategory.AuthorityRejection,
    ValidationReason.RateLimited: VerdictCategory.AuthorityIndeterminate,
    ValidationReason.Timeout: VerdictCategory.AuthorityIndeterminate,
    ValidationReason.ProviderError: VerdictCategory.AuthorityIndeterminate,
}


def category_for(reason: ValidationReason) -> VerdictCategory:
    """Return the error family for a validation reason."""
    return _CATEGORY_BY_REASON[reason]


class ValidationVerdict(BaseModel):
    """Immutable result of validating one candidate credential.

    A new key entry always produces a new verdict; verdicts are never
    updated in place.

    Example:
        ```python
        verdict = ValidationVerdict(valid=False, reason=ValidationReason.Unauthorized)
        assert verdict.category == VerdictCategory.AuthorityRejection
        ```
    """

    valid: bool = Field(..., description="Whether the credential is confirmed working")
    reason: ValidationReason = Field(..., description="Why the verdict was reached")
    category: VerdictCategory | None = Field(
        default=None,
        description="Error family, derived from reason when omitted",
    )
    message: str = Field(default="", description="Human-readable detail")
    checked_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="When the verdict was produced",
    )
    retry_after: int | None = Field(
        default=None,
        ge=0,
        description="Seconds the authority asked us to wait (rate limiting only)",
    )

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_consistency(self) -> ValidationVerdict:
        """Fill the category and reject contradictory verdicts."""
        expected = category_for(self.reason)
        if self.category is None:
            object.__setattr__(self, "category", expected)
        elif self.category != expected:
            raise ValueError(
                f"category {self.category.value} does not match reason {self.reason.value}"
            )
        if self.valid != (self.reason == ValidationReason.Ok):
            raise ValueError("valid must be True exactly when reason is ok")
        return self

    @property
    def is_indeterminate(self) -> bool:
        """Whether the authority could not decide either way."""
        return self.category == VerdictCategory.AuthorityIndeterminate
