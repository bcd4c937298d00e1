"""KeyFormatValidator component for syntactic credential checks."""

from __future__ import annotations

from credgate.domain.models.credential import Credential, FormatResult

DEFAULT_KEY_PREFIX = "sk-ant-"
DEFAULT_MIN_KEY_LENGTH = 20


class KeyFormatValidator:
    """Pure syntactic check of a candidate credential.

    No I/O and no side effects: the same candidate always yields the same
    result, and every input (including ``None`` and non-strings) maps to a
    FormatResult instead of raising.

    Checks run in a fixed order: missing, prefix, length.
    """

    def __init__(
        self,
        required_prefix: str = DEFAULT_KEY_PREFIX,
        min_length: int = DEFAULT_MIN_KEY_LENGTH,
    ) -> None:
        """Initialize KeyFormatValidator.

        Args:
            required_prefix: Literal prefix every provider key starts with.
            min_length: Minimum total key length, prefix included.
        """
        if min_length < 1:
            raise ValueError("min_length must be positive")
        self.required_prefix = required_prefix
        self.min_length = min_length

    def check(self, candidate: str | None) -> FormatResult:
        """Classify a candidate credential by shape alone.

        Args:
            candidate: User-supplied key, possibly empty or absent.

        Returns:
            FormatResult.MissingKey, BadPrefix, TooShort or Ok.
        """
        if candidate is None or candidate == "":
            return FormatResult.MissingKey
        if not isinstance(candidate, str) or not candidate.startswith(self.required_prefix):
            return FormatResult.BadPrefix
        if len(candidate) < self.min_length:
            return FormatResult.TooShort
        return FormatResult.Ok

    def inspect(self, candidate: str | None) -> Credential:
        """Build a Credential carrying both syntactic flags."""
        raw = candidate if isinstance(candidate, str) else ""
        return Credential(
            raw=raw,
            prefix_valid=bool(raw) and raw.startswith(self.required_prefix),
            length_valid=len(raw) >= self.min_length,
        )


_default_validator = KeyFormatValidator()


def check(candidate: str | None) -> FormatResult:
    """Check a candidate against the default provider format (``sk-ant-``, 20 chars)."""
    return _default_validator.check(candidate)
