"""Shared HTTP implementation of the KeyProbe interface."""

from __future__ import annotations

import asyncio
import time
from abc import abstractmethod
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from typing import Any

import httpx

from credgate.domain.interfaces.key_probe import KeyProbe
from credgate.domain.models.probe_result import (
    RATE_LIMITED,
    TIMEOUT,
    UNAUTHORIZED,
    ProbeResult,
)
from credgate.domain.models.system_error import (
    ErrorCategory,
    InfrastructureError,
    SystemError,
)

PROBE_PROMPT = "Hi"
"""Single-turn prompt sent with every probe."""


class HttpKeyProbe(KeyProbe):
    """Probe a provider's completion endpoint over HTTP.

    Subclasses describe the request (``build_request``) and where the
    completion text lives in the answer (``extract_content``). This class
    owns the outcome classification, which is the same for every provider:

    - 2xx with content: ok
    - 2xx without content: rejected ("empty response")
    - 401/403: invalid ("unauthorized")
    - 429: indeterminate ("rate-limited")
    - timeout: indeterminate ("timeout")
    - anything else the provider answers: indeterminate
    - connection never established: InfrastructureError

    The whole call, connection included, is bounded by ``timeout`` seconds.
    """

    BASE_URL = ""
    """Provider API base URL."""

    DEFAULT_MODEL = ""
    """Cheapest model offered by the provider."""

    TIMEOUT = 10.0
    """Total probe timeout in seconds."""

    MAX_TOKENS = 10
    """Output token cap for the probe completion."""

    KEY_PREFIX = ""
    """Literal prefix every key for this provider starts with."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the probe.

        Args:
            base_url: Optional base URL override (for testing or proxies).
            timeout: Optional total timeout override in seconds.
            model: Optional model override. Should stay on the cheapest tier.
            max_tokens: Optional output token cap, at most MAX_TOKENS.
            client: Optional shared AsyncClient. When omitted a short-lived
                client is opened for every probe.
        """
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout or self.TIMEOUT
        self.model = model or self.DEFAULT_MODEL
        self.max_tokens = max_tokens or self.MAX_TOKENS
        if not 1 <= self.max_tokens <= self.MAX_TOKENS:
            raise ValueError(f"max_tokens must be between 1 and {self.MAX_TOKENS}")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        self._client = client

    @abstractmethod
    def build_request(self, candidate: str) -> tuple[str, dict[str, str], dict[str, Any]]:
        """Return (path, headers, json body) for the probe completion."""
        ...

    @abstractmethod
    def extract_content(self, response_data: dict[str, Any]) -> str:
        """Return the completion text from a successful response body."""
        ...

    async def probe(self, candidate: str) -> ProbeResult:
        """Send one minimal completion request and classify the answer.

        Args:
            candidate: Credential that already passed the format check.

        Returns:
            ProbeResult for every outcome the provider can produce.

        Raises:
            InfrastructureError: No connection to the provider could be made.
        """
        started = time.monotonic()
        try:
            response = await asyncio.wait_for(self._send(candidate), timeout=self.timeout)
        except (httpx.ConnectError, httpx.ConnectTimeout, httpx.ProxyError) as e:
            error = self.map_error(e)
            raise InfrastructureError(
                message=error.message,
                provider_code=error.provider_code,
            ) from e
        except (asyncio.TimeoutError, httpx.TimeoutException):
            return ProbeResult.indeterminate(
                TIMEOUT,
                provider_code="timeout",
                latency_ms=self._elapsed_ms(started),
            )
        except httpx.HTTPError as e:
            # Anything else the exchange can raise (read errors, undecodable
            # bodies, redirect loops) leaves the key unproven.
            error = self.map_error(e)
            return ProbeResult.indeterminate(
                error.message,
                provider_code=error.provider_code,
                latency_ms=self._elapsed_ms(started),
            )

        return self._classify(response, self._elapsed_ms(started))

    async def _send(self, candidate: str) -> httpx.Response:
        path, headers, body = self.build_request(candidate)
        url = f"{self.base_url}{path}"
        if self._client is not None:
            return await self._client.post(url, json=body, headers=headers, timeout=self.timeout)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(url, json=body, headers=headers)

    def _classify(self, response: httpx.Response, latency_ms: int) -> ProbeResult:
        status_code = response.status_code

        if response.is_success:
            try:
                response_data = response.json()
            except ValueError:
                return ProbeResult.indeterminate(
                    f"{self.provider_id} returned a malformed response",
                    status_code=status_code,
                    provider_code="malformed_response",
                    latency_ms=latency_ms,
                )
            content = self.extract_content(response_data) if isinstance(response_data, dict) else ""
            if content:
                return ProbeResult.ok(status_code=status_code, latency_ms=latency_ms)
            return ProbeResult.rejected(status_code=status_code, latency_ms=latency_ms)

        error = self._error_from_response(response)
        if error.category == ErrorCategory.AuthenticationError:
            return ProbeResult.invalid(
                UNAUTHORIZED,
                status_code=status_code,
                provider_code=error.provider_code,
                latency_ms=latency_ms,
            )
        if error.category == ErrorCategory.RateLimitError:
            return ProbeResult.indeterminate(
                RATE_LIMITED,
                status_code=status_code,
                provider_code=error.provider_code,
                retry_after=error.retry_after,
                latency_ms=latency_ms,
            )
        return ProbeResult.indeterminate(
            error.message,
            status_code=status_code,
            provider_code=error.provider_code,
            latency_ms=latency_ms,
        )

    def map_error(self, provider_error: Exception) -> SystemError:
        """Map an httpx error to a system error category.

        Args:
            provider_error: Exception raised while calling the provider.

        Returns:
            SystemError: Normalized error with appropriate category.
        """
        if isinstance(provider_error, httpx.HTTPStatusError):
            return self._error_from_response(provider_error.response)

        if isinstance(provider_error, (httpx.TimeoutException, asyncio.TimeoutError)):
            return SystemError(
                category=ErrorCategory.TimeoutError,
                message=f"Request to {self.provider_id} timed out after {self.timeout}s",
                provider_code="timeout",
                retryable=True,
            )

        if isinstance(provider_error, (httpx.NetworkError, httpx.ProxyError)):
            return SystemError(
                category=ErrorCategory.NetworkError,
                message=f"Network error connecting to {self.provider_id}: {provider_error}",
                provider_code="network_error",
                retryable=True,
            )

        if isinstance(provider_error, httpx.DecodingError):
            return SystemError(
                category=ErrorCategory.ProviderError,
                message=f"{self.provider_id} returned an undecodable response: {provider_error}",
                provider_code="malformed_response",
                retryable=True,
            )

        return SystemError(
            category=ErrorCategory.UnknownError,
            message=f"Unknown error from {self.provider_id}: {provider_error}",
            provider_code="unknown",
            retryable=False,
            details={"original_error": str(provider_error)},
        )

    def _error_from_response(self, response: httpx.Response) -> SystemError:
        status_code = response.status_code
        retry_after = self._extract_retry_after(response)
        error_details = self._extract_error_details(response)
        error_message = error_details.get("message") or ""
        provider_code = error_details.get("code")

        if status_code in (401, 403):
            return SystemError(
                category=ErrorCategory.AuthenticationError,
                message=error_message or f"{self.provider_id} authentication failed - invalid API key",
                provider_code=provider_code or "invalid_api_key",
                retryable=False,
                details=error_details,
            )
        if status_code == 429:
            return SystemError(
                category=ErrorCategory.RateLimitError,
                message=error_message or f"{self.provider_id} rate limit exceeded",
                provider_code=provider_code or "rate_limit_exceeded",
                retryable=True,
                details=error_details,
                retry_after=retry_after,
            )
        if status_code == 400:
            return SystemError(
                category=ErrorCategory.ValidationError,
                message=error_message or f"{self.provider_id} rejected the probe request",
                provider_code=provider_code or "validation_error",
                retryable=False,
                details=error_details,
            )
        return SystemError(
            category=ErrorCategory.ProviderError,
            message=error_message or f"{self.provider_id} API error ({status_code})",
            provider_code=provider_code or f"http_error_{status_code}",
            retryable=status_code >= 500,
            details=error_details,
            retry_after=retry_after,
        )

    def _extract_retry_after(self, response: httpx.Response) -> int | None:
        """Extract retry-after seconds from response headers.

        Retry-After may be an integer number of seconds or an HTTP date.
        """
        retry_after_header = response.headers.get("retry-after")
        if not retry_after_header:
            return None

        try:
            return max(int(retry_after_header), 0)
        except ValueError:
            pass

        try:
            retry_date = parsedate_to_datetime(retry_after_header)
        except (TypeError, ValueError):
            return None
        if retry_date.tzinfo is None:
            retry_date = retry_date.replace(tzinfo=UTC)
        seconds = (retry_date - datetime.now(UTC)).total_seconds()
        return int(seconds) if seconds > 0 else None

    def _extract_error_details(self, response: httpx.Response) -> dict[str, Any]:
        """Extract message and code from an error body.

        Both supported providers nest details under an ``error`` object.
        """
        try:
            body = response.json()
        except ValueError:
            return {"message": response.text[:200]} if response.text else {}

        if not isinstance(body, dict):
            return {}
        error = body.get("error")
        if not isinstance(error, dict):
            return {}
        details: dict[str, Any] = {}
        if error.get("message"):
            details["message"] = str(error["message"])
        code = error.get("code") or error.get("type")
        if code:
            details["code"] = str(code)
        return details

    @staticmethod
    def _elapsed_ms(started: float) -> int:
        return int((time.monotonic() - started) * 1000)
