"""Configuration settings using pydantic-settings."""

from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from credgate.infrastructure.config.file_loader import ConfigurationFileLoader


class ValidationSettings(BaseSettings):
    """Configuration for credential validation.

    Settings are read once, at the edge of the application, and passed into
    components explicitly. Environment variables use the ``CREDGATE_`` prefix
    (e.g. ``CREDGATE_PROBE_TIMEOUT_SECONDS=5``).

    Example:
        ```python
        settings = ValidationSettings()
        settings = ValidationSettings(provider="openai")
        settings = ValidationSettings.from_file("credgate.yaml")
        ```
    """

    model_config = SettingsConfigDict(
        env_prefix="CREDGATE_",
        case_sensitive=False,
        extra="ignore",
    )

    # Provider probe
    provider: str = Field(
        default="anthropic",
        description="Provider whose keys are validated (anthropic, openai)",
    )
    base_url: str | None = Field(
        default=None,
        description="Override for the provider API base URL",
    )
    probe_model: str | None = Field(
        default=None,
        description="Override for the probe model; defaults to the provider's cheapest",
    )
    probe_max_tokens: int = Field(
        default=10,
        ge=1,
        le=10,
        description="Output token cap for the probe completion",
    )
    probe_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Total time allowed for one probe call",
    )
    anthropic_version: str | None = Field(
        default=None,
        description="Override for the anthropic-version header",
    )

    # Format check
    key_prefix: str | None = Field(
        default=None,
        description="Required key prefix; defaults to the provider's prefix",
    )
    min_key_length: int = Field(
        default=20,
        ge=1,
        description="Minimum key length, prefix included",
    )

    # Observability configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    json_logs: bool = Field(
        default=True,
        description="Render logs as JSON; False gives human-readable development output",
    )

    @field_validator("provider")
    @classmethod
    def normalize_provider(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.strip().upper()

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> "ValidationSettings":
        """Create settings from a dictionary.

        Args:
            config: Dictionary with configuration values.

        Returns:
            ValidationSettings instance.
        """
        return cls(**config)

    @classmethod
    def from_file(cls, path: str | Path | None = None) -> "ValidationSettings":
        """Create settings from a YAML or JSON file.

        Args:
            path: Configuration file path; falls back to CREDGATE_CONFIG_FILE.

        Returns:
            ValidationSettings instance.

        Raises:
            ConfigurationError: If the file cannot be found or parsed.
        """
        return cls.from_dict(ConfigurationFileLoader(path).load())
