"""Shared base for OpenAI-compatible chat-completions providers."""

from typing import Any, Dict, Optional

from .base import BaseLLMProvider, ProviderRequest


class ChatCompletionsProvider(BaseLLMProvider):
    """Provider speaking the ``/chat/completions`` message-array protocol.

    Subclasses set ``endpoint`` and may add headers via ``extra_headers``.
    """

    endpoint: str = ""

    def extra_headers(self) -> Dict[str, str]:
        """Provider-specific headers added after auth."""
        return {}

    def build_request(self, prompt: str) -> ProviderRequest:
        """Bearer-authenticated request with a single user message."""
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        headers.update(self.extra_headers())
        body = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        return ProviderRequest(url=self.endpoint, headers=headers, body=body)

    def extract_text(self, response: Any) -> Optional[str]:
        """Text lives at ``choices[0].message.content``."""
        try:
            return response["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            return None
