"""Credential model and format check results."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class FormatResult(str, Enum):
    """Outcome of the syntactic credential check."""

    Ok = "ok"
    """Candidate looks like a provider key."""

    MissingKey = "missing_key"
    """Candidate is empty or absent."""

    BadPrefix = "bad_prefix"
    """Candidate does not start with the provider's required prefix."""

    TooShort = "too_short"
    """Candidate is shorter than the minimum key length."""

    @property
    def is_ok(self) -> bool:
        """Whether the candidate passed the format check."""
        return self is FormatResult.Ok


class Credential(BaseModel):
    """A user-supplied provider API key, as seen by the format check.

    The raw secret only lives for the duration of a validation call. It is
    kept out of ``repr`` and out of serialized output so it cannot leak
    through logs or API responses.
    """

    raw: str = Field(..., description="The candidate secret", repr=False, exclude=True)
    prefix_valid: bool = Field(..., description="Candidate starts with the required prefix")
    length_valid: bool = Field(..., description="Candidate meets the minimum length")

    model_config = ConfigDict(frozen=True)

    @property
    def format_valid(self) -> bool:
        """Whether both syntactic checks passed."""
        return self.prefix_valid and self.length_valid
