"""Domain models for credgate."""

from credgate.domain.models.credential import Credential, FormatResult
from credgate.domain.models.execution_context import ExecutionContext
from credgate.domain.models.policy_decision import PolicyDecision, QuotaPool, RunAttribution
from credgate.domain.models.probe_result import ProbeOutcome, ProbeResult
from credgate.domain.models.system_error import ErrorCategory, InfrastructureError, SystemError
from credgate.domain.models.validation_verdict import (
    ValidationReason,
    ValidationVerdict,
    VerdictCategory,
)

__all__ = [
    "Credential",
    "FormatResult",
    "ExecutionContext",
    "PolicyDecision",
    "QuotaPool",
    "RunAttribution",
    "ProbeOutcome",
    "ProbeResult",
    "ErrorCategory",
    "InfrastructureError",
    "SystemError",
    "ValidationReason",
    "ValidationVerdict",
    "VerdictCategory",
]
