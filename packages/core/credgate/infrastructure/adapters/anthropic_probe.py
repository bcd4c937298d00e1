"""Anthropic implementation of the credential probe."""

from __future__ import annotations

from typing import Any

import httpx

from credgate.infrastructure.adapters.http_probe import PROBE_PROMPT, HttpKeyProbe


class AnthropicKeyProbe(HttpKeyProbe):
    """Probe Anthropic's Messages API with a candidate key.

    Example:
        ```python
        probe = AnthropicKeyProbe()
        result = await probe.probe("sk-ant-...")
        ```
    """

    provider_id = "anthropic"

    BASE_URL = "https://api.anthropic.com"
    """Anthropic API base URL."""

    DEFAULT_MODEL = "claude-3-haiku-20240307"
    """Cheapest model used for validation."""

    KEY_PREFIX = "sk-ant-"
    """Literal prefix of Anthropic API keys."""

    API_VERSION = "2023-06-01"
    """Value of the anthropic-version header."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
        client: httpx.AsyncClient | None = None,
        api_version: str | None = None,
    ) -> None:
        super().__init__(
            base_url=base_url,
            timeout=timeout,
            model=model,
            max_tokens=max_tokens,
            client=client,
        )
        self.api_version = api_version or self.API_VERSION

    def build_request(self, candidate: str) -> tuple[str, dict[str, str], dict[str, Any]]:
        headers = {
            "x-api-key": candidate,
            "anthropic-version": self.api_version,
            "content-type": "application/json",
        }
        body = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": PROBE_PROMPT}],
        }
        return "/v1/messages", headers, body

    def extract_content(self, response_data: dict[str, Any]) -> str:
        # {"content": [{"type": "text", "text": "..."}], ...}
        blocks = response_data.get("content") or []
        if not isinstance(blocks, list):
            return ""
        return "".join(
            block.get("text") or ""
            for block in blocks
            if isinstance(block, dict) and block.get("type") == "text"
        )
