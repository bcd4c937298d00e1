"""Domain components."""

from credgate.domain.components.attribution_policy import AttributionPolicy, decide
from credgate.domain.components.credential_validation_service import (
    CredentialValidationService,
)
from credgate.domain.components.key_format_validator import KeyFormatValidator, check

__all__ = [
    "AttributionPolicy",
    "CredentialValidationService",
    "KeyFormatValidator",
    "check",
    "decide",
]
