"""CredentialValidationService component for end-to-end key validation."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import suppress
from datetime import UTC, datetime
from typing import Any

from credgate.domain.components.key_format_validator import KeyFormatValidator
from credgate.domain.interfaces.key_probe import KeyProbeProtocol
from credgate.domain.interfaces.observability_manager import (
    ObservabilityError,
    ObservabilityManager,
)
from credgate.domain.models.credential import FormatResult
from credgate.domain.models.probe_result import (
    RATE_LIMITED,
    TIMEOUT,
    ProbeOutcome,
    ProbeResult,
)
from credgate.domain.models.validation_verdict import ValidationReason, ValidationVerdict

_REASON_BY_FORMAT: dict[FormatResult, ValidationReason] = {
    FormatResult.MissingKey: ValidationReason.MissingKey,
    FormatResult.BadPrefix: ValidationReason.BadPrefix,
    FormatResult.TooShort: ValidationReason.TooShort,
}

_FORMAT_MESSAGES: dict[FormatResult, str] = {
    FormatResult.MissingKey: "API key is required",
    FormatResult.BadPrefix: "API key must start with '{prefix}'",
    FormatResult.TooShort: "API key format is invalid",
}


def _utcnow() -> datetime:
    return datetime.now(UTC)


class CredentialValidationService:
    """Validates a user-supplied credential and produces a single verdict.

    The format check runs first and short-circuits without any network call.
    Only candidates that look like provider keys are probed, exactly once.
    Indeterminate probe outcomes (rate limiting, timeouts, provider errors)
    are reported as invalid: an unproven credential is never accepted.

    The service holds no mutable state, so one instance can serve concurrent
    requests.
    """

    def __init__(
        self,
        format_validator: KeyFormatValidator,
        probe: KeyProbeProtocol,
        observability_manager: ObservabilityManager,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize CredentialValidationService.

        Args:
            format_validator: Syntactic checker for candidate keys.
            probe: Remote probe used to confirm the key with the provider.
            observability_manager: ObservabilityManager for events and logging.
            clock: Source of verdict timestamps.
        """
        self._format_validator = format_validator
        self._probe = probe
        self._observability = observability_manager
        self._clock = clock

    async def validate(self, candidate: str | None) -> ValidationVerdict:
        """Validate a candidate credential.

        Args:
            candidate: User-supplied API key.

        Returns:
            ValidationVerdict describing the outcome. Malformed input never
            raises; it yields an invalid verdict with a format reason.

        Raises:
            InfrastructureError: The provider could not be reached at all.
                Propagated from the probe so it is not mistaken for a bad key.
        """
        format_result = self._format_validator.check(candidate)
        if not format_result.is_ok:
            verdict = ValidationVerdict(
                valid=False,
                reason=_REASON_BY_FORMAT[format_result],
                message=_FORMAT_MESSAGES[format_result].format(
                    prefix=self._format_validator.required_prefix
                ),
                checked_at=self._clock(),
            )
            credential = self._format_validator.inspect(candidate)
            await self._emit(
                "credential_format_rejected",
                verdict,
                {
                    "prefix_valid": credential.prefix_valid,
                    "length_valid": credential.length_valid,
                },
            )
            return verdict

        result = await self._probe.probe(candidate)  # type: ignore[arg-type]
        await self._emit(
            "credential_probe_completed",
            None,
            {
                "outcome": result.outcome.value,
                "probe_message": result.message,
                "status_code": result.status_code,
                "latency_ms": result.latency_ms,
            },
        )

        verdict = self._verdict_from_probe(result)
        await self._emit("credential_validated", verdict)
        return verdict

    def _verdict_from_probe(self, result: ProbeResult) -> ValidationVerdict:
        """Map a probe outcome onto a verdict."""
        checked_at = self._clock()

        if result.outcome == ProbeOutcome.Ok:
            return ValidationVerdict(
                valid=True,
                reason=ValidationReason.Ok,
                message="API key is valid and working",
                checked_at=checked_at,
            )

        if result.outcome == ProbeOutcome.Invalid:
            return ValidationVerdict(
                valid=False,
                reason=ValidationReason.Unauthorized,
                message="API key is invalid or unauthorized",
                checked_at=checked_at,
            )

        if result.outcome == ProbeOutcome.Rejected:
            return ValidationVerdict(
                valid=False,
                reason=ValidationReason.EmptyResponse,
                message=result.message or "API key validation failed",
                checked_at=checked_at,
            )

        # Indeterminate: not yet proven, so not accepted.
        if result.message == RATE_LIMITED:
            return ValidationVerdict(
                valid=False,
                reason=ValidationReason.RateLimited,
                message="Rate limit exceeded - API key may be valid but limited",
                checked_at=checked_at,
                retry_after=result.retry_after,
            )
        if result.message == TIMEOUT:
            return ValidationVerdict(
                valid=False,
                reason=ValidationReason.Timeout,
                message="Provider did not answer in time - API key could not be verified",
                checked_at=checked_at,
            )
        return ValidationVerdict(
            valid=False,
            reason=ValidationReason.ProviderError,
            message=f"Failed to validate API key: {result.message}",
            checked_at=checked_at,
        )

    async def _emit(
        self,
        event_type: str,
        verdict: ValidationVerdict | None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        payload: dict[str, Any] = {"provider_id": self._probe.provider_id}
        if verdict is not None:
            payload.update(
                valid=verdict.valid,
                reason=verdict.reason.value,
                category=verdict.category.value if verdict.category else None,
            )
        if extra:
            payload.update(extra)

        try:
            await self._observability.emit_event(
                event_type=event_type,
                payload=payload,
                metadata={"checked_at": self._clock().isoformat()},
            )
        except ObservabilityError as e:
            # Validation result stands even if the event is lost
            with suppress(ObservabilityError):
                await self._observability.log(
                    level="WARNING",
                    message=f"Failed to emit {event_type} event: {e}",
                    context={"provider_id": self._probe.provider_id},
                )
