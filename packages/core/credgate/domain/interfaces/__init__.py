"""Domain interfaces for dependency injection."""

from credgate.domain.interfaces.key_probe import KeyProbe, KeyProbeProtocol
from credgate.domain.interfaces.observability_manager import (
    ObservabilityError,
    ObservabilityManager,
)

__all__ = [
    "KeyProbe",
    "KeyProbeProtocol",
    "ObservabilityError",
    "ObservabilityManager",
]
