"""OpenAI implementation of the credential probe."""

from __future__ import annotations

from typing import Any

from credgate.infrastructure.adapters.http_probe import PROBE_PROMPT, HttpKeyProbe


class OpenAIKeyProbe(HttpKeyProbe):
    """Probe OpenAI's chat completions endpoint with a candidate key."""

    provider_id = "openai"

    BASE_URL = "https://api.openai.com"
    """OpenAI API base URL."""

    DEFAULT_MODEL = "gpt-3.5-turbo"
    """Cheapest chat model used for validation."""

    KEY_PREFIX = "sk-"
    """Literal prefix of OpenAI API keys."""

    def build_request(self, candidate: str) -> tuple[str, dict[str, str], dict[str, Any]]:
        headers = {
            "Authorization": f"Bearer {candidate}",
            "Content-Type": "application/json",
        }
        body = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": PROBE_PROMPT}],
        }
        return "/v1/chat/completions", headers, body

    def extract_content(self, response_data: dict[str, Any]) -> str:
        # {"choices": [{"message": {"content": "..."}}]}
        choices = response_data.get("choices") or []
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            return ""
        message = choices[0].get("message") or {}
        content = message.get("content") if isinstance(message, dict) else None
        return content if isinstance(content, str) else ""
