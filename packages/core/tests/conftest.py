"""Pytest configuration and shared fixtures."""

from datetime import UTC, datetime
from typing import Any

import pytest

from credgate.domain.components.key_format_validator import KeyFormatValidator
from credgate.domain.interfaces.key_probe import KeyProbe
from credgate.domain.interfaces.observability_manager import ObservabilityManager
from credgate.domain.models.probe_result import ProbeResult
from credgate.domain.models.system_error import ErrorCategory, SystemError

VALID_LOOKING_KEY = "sk-ant-abcdefghijklmno"
FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


class RecordingObservabilityManager(ObservabilityManager):
    """ObservabilityManager that keeps events and logs in memory."""

    def __init__(self) -> None:
        self.events: list[dict[str, Any]] = []
        self.logs: list[dict[str, Any]] = []
        self.emit_error: Exception | None = None
        self.log_error: Exception | None = None

    async def emit_event(
        self,
        event_type: str,
        payload: dict[str, Any],
        metadata: dict[str, Any] | None = None,
    ) -> None:
        if self.emit_error:
            raise self.emit_error
        self.events.append({"event_type": event_type, "payload": payload, "metadata": metadata})

    async def log(
        self,
        level: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        if self.log_error:
            raise self.log_error
        self.logs.append({"level": level, "message": message, "context": context})

    def event_types(self) -> list[str]:
        return [e["event_type"] for e in self.events]


class FakeProbe(KeyProbe):
    """KeyProbe returning a canned result (or raising) and counting calls."""

    provider_id = "fake"

    def __init__(
        self,
        result: ProbeResult | None = None,
        error: Exception | None = None,
    ) -> None:
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


@pytest.fixture
def observability() -> RecordingObservabilityManager:
    return RecordingObservabilityManager()


@pytest.fixture
def format_validator() -> KeyFormatValidator:
    return KeyFormatValidator()


@pytest.fixture
def fake_probe() -> FakeProbe:
    return FakeProbe()


@pytest.fixture
def probe_factory() -> type[FakeProbe]:
    """FakeProbe class, for tests that need a specific canned result."""
    return FakeProbe


@pytest.fixture
def fixed_clock() -> Any:
    return lambda: FIXED_NOW
