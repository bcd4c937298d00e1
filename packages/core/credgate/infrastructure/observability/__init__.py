"""Observability infrastructure module."""

from credgate.infrastructure.observability.logger import (
    DefaultObservabilityManager,
    sanitize_for_logging,
)

__all__ = [
    "DefaultObservabilityManager",
    "sanitize_for_logging",
]
