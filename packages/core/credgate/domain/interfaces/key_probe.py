"""KeyProbe abstract interface for remote credential checks.

A probe is the only I/O boundary of the validation core. Everything that
touches the provider lives behind this interface so the format check and the
attribution policy can be tested without network mocking.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from credgate.domain.models.probe_result import ProbeResult
    from credgate.domain.models.system_error import SystemError


class KeyProbe(ABC):
    """Abstract interface for provider-specific credential probes.

    Key Responsibilities:
    - Issue exactly one minimal-cost call to the provider with the candidate
    - Classify the provider's answer into a ProbeResult
    - Map transport errors to system error categories
    - Bound the call with an explicit timeout

    Example Usage:
        ```python
        class MyProviderProbe(KeyProbe):
            async def probe(self, candidate: str) -> ProbeResult:
                # Send the cheapest possible request
                # Return ProbeResult.ok() / invalid() / ...
                ...
        ```
    """

    provider_id: str = "unknown"
    """Identifier of the provider this probe talks to."""

    @abstractmethod
    async def probe(self, candidate: str) -> ProbeResult:
        """Probe the provider once with the candidate credential.

        Args:
            candidate: Credential that already passed the format check.

        Returns:
            ProbeResult: Classified outcome. Rate limiting, timeouts and
                unexpected provider answers are reported as indeterminate
                results, never raised.

        Raises:
            InfrastructureError: The provider could not be reached at all,
                so the credential was not checked.
        """
        ...

    @abstractmethod
    def map_error(self, provider_error: Exception) -> SystemError:
        """Map a transport or provider error to a system error category.

        Args:
            provider_error: Exception raised while calling the provider.

        Returns:
            SystemError: Normalized error with category, message,
                provider_code and retryable flag.
        """
        ...


class KeyProbeProtocol(Protocol):
    """Protocol for type checking probes without inheriting from KeyProbe."""

    provider_id: str

    async def probe(self, candidate: str) -> ProbeResult:
        """Probe the provider once with the candidate credential."""
        ...

    def map_error(self, provider_error: Exception) -> SystemError:
        """Map a transport or provider error to a system error category."""
        ...


__all__ = [
    "KeyProbe",
    "KeyProbeProtocol",
]
