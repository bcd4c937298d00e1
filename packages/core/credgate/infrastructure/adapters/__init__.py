"""Provider probe adapters."""

from credgate.infrastructure.adapters.anthropic_probe import AnthropicKeyProbe
from credgate.infrastructure.adapters.http_probe import HttpKeyProbe
from credgate.infrastructure.adapters.openai_probe import OpenAIKeyProbe

PROBES: dict[str, type[HttpKeyProbe]] = {
    AnthropicKeyProbe.provider_id: AnthropicKeyProbe,
    OpenAIKeyProbe.provider_id: OpenAIKeyProbe,
}

__all__ = [
    "AnthropicKeyProbe",
    "HttpKeyProbe",
    "OpenAIKeyProbe",
    "PROBES",
]
