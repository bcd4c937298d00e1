"""CredentialGate - entry point wiring validation and attribution together."""

from contextlib import suppress
from typing import Any

import httpx

from credgate.domain.components.attribution_policy import AttributionPolicy
from credgate.domain.components.credential_validation_service import (
    CredentialValidationService,
)
from credgate.domain.components.key_format_validator import KeyFormatValidator
from credgate.domain.interfaces.key_probe import KeyProbe, KeyProbeProtocol
from credgate.domain.interfaces.observability_manager import (
    ObservabilityError,
    ObservabilityManager,
)
from credgate.domain.models.execution_context import ExecutionContext
from credgate.domain.models.policy_decision import PolicyDecision, RunAttribution
from credgate.domain.models.validation_verdict import ValidationVerdict
from credgate.infrastructure.adapters import PROBES
from credgate.infrastructure.config.file_loader import ConfigurationError
from credgate.infrastructure.config.settings import ValidationSettings
from credgate.infrastructure.observability.logger import DefaultObservabilityManager


def create_probe(
    settings: ValidationSettings,
    client: httpx.AsyncClient | None = None,
) -> KeyProbe:
    """Build the probe for the configured provider.

    Raises:
        ConfigurationError: If the provider is not supported.
    """
    probe_cls = PROBES.get(settings.provider)
    if probe_cls is None:
        raise ConfigurationError(
            f"Unsupported provider {settings.provider!r}. "
            f"Supported providers: {', '.join(sorted(PROBES))}",
            field="provider",
        )
    kwargs: dict[str, Any] = {
        "base_url": settings.base_url,
        "timeout": settings.probe_timeout_seconds,
        "model": settings.probe_model,
        "max_tokens": settings.probe_max_tokens,
        "client": client,
    }
    if settings.anthropic_version and settings.provider == "anthropic":
        kwargs["api_version"] = settings.anthropic_version
    return probe_cls(**kwargs)


def create_format_validator(settings: ValidationSettings) -> KeyFormatValidator:
    """Build the format validator, defaulting the prefix to the provider's."""
    prefix = settings.key_prefix
    if prefix is None:
        probe_cls = PROBES.get(settings.provider)
        if probe_cls is None:
            raise ConfigurationError(
                f"Unsupported provider {settings.provider!r}", field="provider"
            )
        prefix = probe_cls.KEY_PREFIX
    return KeyFormatValidator(required_prefix=prefix, min_length=settings.min_key_length)


class CredentialGate:
    """Main entry point for the library.

    Validates user-supplied provider keys and decides which quota pool an
    execution draws from.

    Example:
        ```python
        gate = CredentialGate()
        verdict = await gate.validate_key("sk-ant-...")

        decision = await gate.authorize_execution(
            ExecutionContext(is_scheduled=True, has_stored_valid_key=verdict.valid)
        )
        ```
    """

    def __init__(
        self,
        config: ValidationSettings | dict[str, Any] | None = None,
        observability_manager: ObservabilityManager | None = None,
        probe: KeyProbeProtocol | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize CredentialGate with dependencies.

        Args:
            config: ValidationSettings, a dictionary of settings, or None to
                read them from the environment.
            observability_manager: Optional ObservabilityManager. Defaults to
                DefaultObservabilityManager configured from settings.
            probe: Optional probe (any KeyProbeProtocol). Defaults to the configured provider's.
            http_client: Optional AsyncClient shared by the default probe.

        Raises:
            ValueError: If the config type is not supported.
            ConfigurationError: If the configured provider is unknown.
        """
        if config is None:
            self._config = ValidationSettings()
        elif isinstance(config, dict):
            self._config = ValidationSettings.from_dict(config)
        elif isinstance(config, ValidationSettings):
            self._config = config
        else:
            raise ValueError(
                f"Invalid config type: {type(config)}. Expected ValidationSettings, dict, or None"
            )

        if observability_manager is None:
            self._observability_manager: ObservabilityManager = DefaultObservabilityManager(
                log_level=self._config.log_level,
                json_format=self._config.json_logs,
            )
        else:
            self._observability_manager = observability_manager

        self._probe = probe or create_probe(self._config, client=http_client)
        self._validation_service = CredentialValidationService(
            format_validator=create_format_validator(self._config),
            probe=self._probe,
            observability_manager=self._observability_manager,
        )
        self._policy = AttributionPolicy()

    @property
    def config(self) -> ValidationSettings:
        return self._config

    @property
    def probe(self) -> KeyProbeProtocol:
        return self._probe

    @property
    def policy(self) -> AttributionPolicy:
        return self._policy

    async def validate_key(self, candidate: str | None) -> ValidationVerdict:
        """Validate a user-supplied key. See CredentialValidationService.validate."""
        return await self._validation_service.validate(candidate)

    async def authorize_execution(self, ctx: ExecutionContext) -> PolicyDecision:
        """Decide one execution attempt and record the decision."""
        decision = self._policy.decide(ctx)
        await self._record(
            "attribution_decided",
            {
                "is_scheduled": ctx.is_scheduled,
                "is_recurring": ctx.is_recurring,
                "has_stored_valid_key": ctx.has_stored_valid_key,
                "permitted": decision.permitted,
                "quota_pool": decision.quota_pool.value,
            },
        )
        return decision

    async def attribute_run(self, ctx_by_agent: dict[str, ExecutionContext]) -> RunAttribution:
        """Decide every agent of a workflow run and record the summary."""
        attribution = self._policy.attribute_run(ctx_by_agent)
        await self._record(
            "run_attributed",
            {
                "permitted": attribution.permitted,
                "user_owned_agents": len(attribution.user_owned_agents),
                "platform_agents": len(attribution.platform_agents),
                "denied_agents": attribution.denied_agents,
            },
        )
        return attribution

    async def _record(self, event_type: str, payload: dict[str, Any]) -> None:
        try:
            await self._observability_manager.emit_event(event_type=event_type, payload=payload)
        except ObservabilityError as e:
            with suppress(ObservabilityError):
                await self._observability_manager.log(
                    level="WARNING",
                    message=f"Failed to emit {event_type} event: {e}",
                )
