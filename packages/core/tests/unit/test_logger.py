"""Tests for the default observability manager and log sanitizing."""

import pytest

from credgate.infrastructure.observability.logger import (
    REDACTED,
    DefaultObservabilityManager,
    redact_secrets,
    sanitize_for_logging,
)


class TestSanitizeForLogging:
    """Tests for sanitize_for_logging."""

    def test_secret_fields_redacted(self) -> None:
        """Test that secret field names are replaced wholesale."""
        data = {"api_key": "anything", "apiKey": "x", "candidate": "y", "provider_id": "anthropic"}
        assert sanitize_for_logging(data) == {
            "api_key": REDACTED,
            "apiKey": REDACTED,
            "candidate": REDACTED,
            "provider_id": "anthropic",
        }

    def test_key_inside_string_masked(self) -> None:
        """Test that key-shaped substrings are masked in free text."""
        message = "Validation failed for sk-ant-abcdefghijklmno at provider"
        assert sanitize_for_logging(message) == f"Validation failed for {REDACTED} at provider"

    def test_nested_structures(self) -> None:
        """Test recursion into lists and dicts."""
        data = {"events": [{"raw": "secret"}, "sk-proj-1234567890abcdef"]}
        assert sanitize_for_logging(data) == {"events": [{"raw": REDACTED}, REDACTED]}

    def test_plain_values_untouched(self) -> None:
        """Test that ordinary values pass through."""
        assert sanitize_for_logging({"status_code": 401, "ok": False}) == {
            "status_code": 401,
            "ok": False,
        }
        assert sanitize_for_logging("sk-short") == "sk-short"


class TestDefaultObservabilityManager:
    """Tests for DefaultObservabilityManager."""

    @pytest.mark.asyncio
    async def test_emit_event_and_log(self) -> None:
        """Test that events and logs are accepted in both render modes."""
        for json_format in (True, False):
            manager = DefaultObservabilityManager(log_level="DEBUG", json_format=json_format)
            await manager.emit_event(
                "credential_validated",
                {"valid": True, "api_key": "sk-ant-abcdefghijklmno"},
                metadata={"request_id": "req-1"},
            )
            await manager.log("WARNING", "probe slow", {"latency_ms": 9000})
            await manager.log("INFO", "no context")


class TestRedactSecretsProcessor:
    """Tests for the structlog redaction processor."""

    def test_processor_masks_event_dict(self) -> None:
        """Test that lines from plain structlog loggers are redacted too."""
        event_dict = {
            "event": "validation_infrastructure_error",
            "error": "connection reset while sending sk-ant-abcdefghijklmno",
            "api_key": "sk-ant-abcdefghijklmno",
            "provider_code": "network_error",
        }

        result = redact_secrets(None, "error", event_dict)

        assert result["api_key"] == REDACTED
        assert "sk-ant-" not in result["error"]
        assert result["provider_code"] == "network_error"
        assert event_dict["api_key"] == "sk-ant-abcdefghijklmno"
