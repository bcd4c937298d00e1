"""
Dependency injection setup for the credgate HTTP service.
"""

from functools import cache

from credgate.domain.interfaces.observability_manager import ObservabilityManager
from credgate.gate import CredentialGate
from credgate.infrastructure.config.settings import ValidationSettings
from credgate.infrastructure.observability.logger import DefaultObservabilityManager


@cache
def get_settings() -> ValidationSettings:
    """Get a singleton instance of the settings, read from the environment once."""
    return ValidationSettings()


@cache
def get_observability_manager() -> ObservabilityManager:
    """Get a singleton instance of the ObservabilityManager."""
    settings = get_settings()
    return DefaultObservabilityManager(
        log_level=settings.log_level,
        json_format=settings.json_logs,
    )


@cache
def get_gate() -> CredentialGate:
    """Get a singleton instance of the CredentialGate."""
    return CredentialGate(
        config=get_settings(),
        observability_manager=get_observability_manager(),
    )
