"""Configuration infrastructure module."""

from credgate.infrastructure.config.file_loader import (
    ConfigurationError,
    ConfigurationFileLoader,
)
from credgate.infrastructure.config.settings import ValidationSettings

__all__ = [
    "ValidationSettings",
    "ConfigurationFileLoader",
    "ConfigurationError",
]
