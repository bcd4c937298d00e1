"""credgate - validation and quota attribution for user-owned provider keys."""

from credgate.domain.components.attribution_policy import AttributionPolicy, decide
from credgate.domain.components.credential_validation_service import (
    CredentialValidationService,
)
from credgate.domain.components.key_format_validator import KeyFormatValidator
from credgate.domain.models import (
    ExecutionContext,
    FormatResult,
    InfrastructureError,
    PolicyDecision,
    QuotaPool,
    ValidationReason,
    ValidationVerdict,
    VerdictCategory,
)
from credgate.gate import CredentialGate

__version__ = "0.1.0"

__all__ = [
    "AttributionPolicy",
    "CredentialGate",
    "CredentialValidationService",
    "ExecutionContext",
    "FormatResult",
    "InfrastructureError",
    "KeyFormatValidator",
    "PolicyDecision",
    "QuotaPool",
    "ValidationReason",
    "ValidationVerdict",
    "VerdictCategory",
    "decide",
]
