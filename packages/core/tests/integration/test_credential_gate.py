"""Integration tests for CredentialGate wiring."""

from typing import Any

import httpx
import pytest

from credgate import CredentialGate
from credgate.domain.interfaces.observability_manager import ObservabilityError
from credgate.domain.models.execution_context import ExecutionContext
from credgate.domain.models.policy_decision import QuotaPool
from credgate.domain.models.validation_verdict import ValidationReason
from credgate.gate import create_format_validator, create_probe
from credgate.infrastructure.adapters.anthropic_probe import AnthropicKeyProbe
from credgate.infrastructure.adapters.openai_probe import OpenAIKeyProbe
from credgate.infrastructure.config.file_loader import ConfigurationError
from credgate.infrastructure.config.settings import ValidationSettings


class TestFactories:
    """Tests for create_probe and create_format_validator."""

    def test_anthropic_probe_from_settings(self) -> None:
        """Test that settings flow into the probe."""
        settings = ValidationSettings(
            base_url="http://localhost:8080",
            probe_timeout_seconds=3,
            probe_max_tokens=5,
            anthropic_version="2024-01-01",
        )
        probe = create_probe(settings)
        assert isinstance(probe, AnthropicKeyProbe)
        assert probe.base_url == "http://localhost:8080"
        assert probe.timeout == 3
        assert probe.max_tokens == 5
        assert probe.api_version == "2024-01-01"

    def test_openai_probe_from_settings(self) -> None:
        """Test selecting the OpenAI probe."""
        probe = create_probe(ValidationSettings(provider="openai"))
        assert isinstance(probe, OpenAIKeyProbe)

    def test_unknown_provider(self) -> None:
        """Test that an unsupported provider is a configuration error."""
        with pytest.raises(ConfigurationError, match="Unsupported provider"):
            create_probe(ValidationSettings(provider="cohere"))

    def test_prefix_defaults_to_provider(self) -> None:
        """Test that the format prefix follows the provider."""
        assert create_format_validator(ValidationSettings()).required_prefix == "sk-ant-"
        assert (
            create_format_validator(ValidationSettings(provider="openai")).required_prefix == "sk-"
        )

    def test_prefix_override(self) -> None:
        """Test an explicit prefix and length."""
        validator = create_format_validator(
            ValidationSettings(key_prefix="pk-", min_key_length=8)
        )
        assert validator.required_prefix == "pk-"
        assert validator.min_length == 8


class TestCredentialGate:
    """Tests for CredentialGate."""

    def test_dict_config(self, observability: Any, fake_probe: Any) -> None:
        """Test initialization from a dictionary."""
        gate = CredentialGate(
            config={"min_key_length": 24},
            observability_manager=observability,
            probe=fake_probe,
        )
        assert gate.config.min_key_length == 24
        assert gate.probe is fake_probe

    def test_invalid_config_type(self) -> None:
        """Test that an unsupported config type is refused."""
        with pytest.raises(ValueError, match="Invalid config type"):
            CredentialGate(config="provider=anthropic")  # type: ignore[arg-type]

    def test_unknown_provider(self, observability: Any) -> None:
        """Test that the gate fails fast on an unknown provider."""
        with pytest.raises(ConfigurationError):
            CredentialGate(config={"provider": "cohere"}, observability_manager=observability)

    @pytest.mark.asyncio
    async def test_validate_key_end_to_end(self, observability: Any) -> None:
        """Test validation through the real probe and a mocked provider."""
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(
                200, json={"content": [{"type": "text", "text": "Hello!"}]}
            )

        gate = CredentialGate(
            config=ValidationSettings(),
            observability_manager=observability,
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )

        verdict = await gate.validate_key("sk-ant-abcdefghijklmno")
        rejected = await gate.validate_key("not-a-key")

        assert verdict.valid is True
        assert rejected.reason == ValidationReason.BadPrefix
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_authorize_execution_records_decision(
        self, observability: Any, fake_probe: Any
    ) -> None:
        """Test that each decision is emitted as an event."""
        gate = CredentialGate(observability_manager=observability, probe=fake_probe)

        decision = await gate.authorize_execution(ExecutionContext(is_scheduled=True))

        assert decision.permitted is False
        assert observability.event_types() == ["attribution_decided"]
        payload = observability.events[0]["payload"]
        assert payload["quota_pool"] == "none"
        assert payload["is_scheduled"] is True

    @pytest.mark.asyncio
    async def test_attribute_run(self, observability: Any, fake_probe: Any) -> None:
        """Test attributing a whole workflow run."""
        gate = CredentialGate(observability_manager=observability, probe=fake_probe)

        attribution = await gate.attribute_run(
            {
                "planner": ExecutionContext(has_stored_valid_key=True),
                "coder": ExecutionContext(),
            }
        )

        assert attribution.permitted is True
        assert attribution.decisions["planner"].quota_pool == QuotaPool.UserOwned
        assert attribution.decisions["coder"].quota_pool == QuotaPool.Platform
        assert observability.event_types() == ["run_attributed"]

    @pytest.mark.asyncio
    async def test_decision_survives_observability_outage(
        self, observability: Any, fake_probe: Any
    ) -> None:
        """Test that a decision is returned when events and logs both fail."""
        observability.emit_error = ObservabilityError("event system down")
        observability.log_error = ObservabilityError("log sink down")
        gate = CredentialGate(observability_manager=observability, probe=fake_probe)

        decision = await gate.authorize_execution(ExecutionContext())

        assert decision.quota_pool == QuotaPool.Platform
