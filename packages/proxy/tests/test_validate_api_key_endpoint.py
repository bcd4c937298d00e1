"""Tests for the POST /api/validate-api-key endpoint."""

from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from credgate.domain.interfaces.key_probe import KeyProbe
from credgate.domain.models.probe_result import RATE_LIMITED, ProbeResult
from credgate.domain.models.system_error import (
    ErrorCategory,
    InfrastructureError,
    SystemError,
)
from credgate.gate import CredentialGate
from credgate.infrastructure.adapters.anthropic_probe import AnthropicKeyProbe
from credgate.infrastructure.config.settings import ValidationSettings
from credgate_proxy.dependencies import get_gate
from credgate_proxy.main import create_app

VALID_KEY = "sk-ant-abcdefghijklmno"


class StubProbe(KeyProbe):
    """Probe returning a fixed result, or raising a fixed error."""

    provider_id = "stub"

    def __init__(self, result: ProbeResult | None = None, error: Exception | None = None) -> None:
        self.result = result or ProbeResult.ok(status_code=200)
        self.error = error
        self.calls: list[str] = []

    async def probe(self, candidate: str) -> ProbeResult:
        self.calls.append(candidate)
        if self.error:
            raise self.error
        return self.result

    def map_error(self, provider_error: Exception) -> SystemError:
        return SystemError(category=ErrorCategory.UnknownError, message=str(provider_error))


class SilentObservabilityManager:
    """Observability manager that drops everything."""

    async def emit_event(self, event_type: str, payload: dict[str, Any], metadata: Any = None) -> None:
        return None

    async def log(self, level: str, message: str, context: Any = None) -> None:
        return None


def make_client(probe: KeyProbe) -> TestClient:
    gate = CredentialGate(
        config=ValidationSettings(provider="anthropic", key_prefix=None),
        observability_manager=SilentObservabilityManager(),  # type: ignore[arg-type]
        probe=probe,
    )
    app = create_app(enable_hsts=False)
    app.dependency_overrides[get_gate] = lambda: gate
    return TestClient(app)


class TestValidateApiKeyEndpoint:
    """Tests for the validation endpoint status semantics."""

    def test_valid_key(self) -> None:
        """Test that a working key answers 200."""
        client = make_client(StubProbe())

        response = client.post("/api/validate-api-key", json={"apiKey": VALID_KEY})

        assert response.status_code == 200
        assert response.json() == {
            "valid": True,
            "reason": "ok",
            "message": "API key is valid and working",
        }

    def test_missing_key(self) -> None:
        """Test that an empty body answers 400 without probing."""
        probe = StubProbe()
        client = make_client(probe)

        response = client.post("/api/validate-api-key", json={})

        assert response.status_code == 400
        assert response.json()["reason"] == "missing_key"
        assert response.json()["error"] == "API key is required"
        assert probe.calls == []

    @pytest.mark.parametrize(
        ("api_key", "reason"),
        [("sk-proj-abcdefghijklmnopqrstuvwxyz", "bad_prefix"), ("sk-ant-abc", "too_short")],
    )
    def test_format_failures(self, api_key: str, reason: str) -> None:
        """Test format failures answer 400."""
        probe = StubProbe()
        client = make_client(probe)

        response = client.post("/api/validate-api-key", json={"apiKey": api_key})

        assert response.status_code == 400
        assert response.json()["valid"] is False
        assert response.json()["reason"] == reason
        assert probe.calls == []

    def test_unauthorized_key(self) -> None:
        """Test that a rejected key answers 400 with reason unauthorized."""
        client = make_client(StubProbe(ProbeResult.invalid(status_code=401)))

        response = client.post("/api/validate-api-key", json={"apiKey": VALID_KEY})

        assert response.status_code == 400
        assert response.json()["reason"] == "unauthorized"
        assert response.json()["error"] == "API key is invalid or unauthorized"

    def test_rate_limited_key(self) -> None:
        """Test that rate limiting answers 400 with a retry hint."""
        client = make_client(StubProbe(ProbeResult.indeterminate(RATE_LIMITED, retry_after=15)))

        response = client.post("/api/validate-api-key", json={"apiKey": VALID_KEY})

        assert response.status_code == 400
        assert response.json()["reason"] == "rate_limited"
        assert response.json()["retryAfter"] == 15

    def test_unreachable_provider(self) -> None:
        """Test that an infrastructure failure answers 500."""
        client = make_client(StubProbe(error=InfrastructureError("connection refused")))

        response = client.post("/api/validate-api-key", json={"apiKey": VALID_KEY})

        assert response.status_code == 500
        assert response.json()["valid"] is False
        assert VALID_KEY not in response.text

    def test_unexpected_error(self) -> None:
        """Test that an unexpected failure answers 500."""
        client = make_client(StubProbe(error=RuntimeError("boom")))

        response = client.post("/api/validate-api-key", json={"apiKey": VALID_KEY})

        assert response.status_code == 500
        assert response.json()["error"] == "Internal server error during validation"

    def test_no_body(self) -> None:
        """Test that a request without a body is a missing key, not a 422."""
        probe = StubProbe()
        client = make_client(probe)

        response = client.post("/api/validate-api-key")

        assert response.status_code == 400
        assert response.json()["reason"] == "missing_key"
        assert probe.calls == []

    @pytest.mark.parametrize("api_key", [12345, ["sk-ant-abcdefghijklmno"], {"key": "x"}, True])
    def test_non_string_key(self, api_key: Any) -> None:
        """Test that a key of the wrong type is a format failure, not a 422."""
        probe = StubProbe()
        client = make_client(probe)

        response = client.post("/api/validate-api-key", json={"apiKey": api_key})

        assert response.status_code == 400
        assert response.json()["reason"] == "bad_prefix"
        assert probe.calls == []

    def test_undecodable_provider_answer(self) -> None:
        """Test that an unreadable provider body is a 400 provider error, not a 500."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200, headers={"content-encoding": "gzip"}, content=b"not gzip at all"
            )

        probe = AnthropicKeyProbe(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
        client = make_client(probe)

        response = client.post("/api/validate-api-key", json={"apiKey": VALID_KEY})

        assert response.status_code == 400
        assert response.json()["reason"] == "provider_error"
