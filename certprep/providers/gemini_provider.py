"""Google Gemini provider integration (Generative Language REST API)."""

from typing import Any, Dict, Optional

from .base import BaseLLMProvider, ProviderRequest

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta/models"


class GeminiProvider(BaseLLMProvider):
    """Gemini ``generateContent`` integration for question generation."""

    default_model = "gemini-2.5-flash"

    def __init__(
        self,
        api_key: Optional[str],
        model: Optional[str] = None,
        top_p: float = 0.85,
        top_k: int = 30,
        **kwargs: Any,
    ):
        """
        Initialize Gemini provider.

        Args:
            api_key: Google API key
            model: Model to use (default: gemini-2.5-flash)
            top_p: Nucleus sampling parameter
            top_k: Top-k sampling parameter
            **kwargs: Passed to BaseLLMProvider (temperature, max_tokens)
        """
        super().__init__(api_key, model, **kwargs)
        self.top_p = top_p
        self.top_k = top_k

    def build_request(self, prompt: str) -> ProviderRequest:
        """Single prompt with a generation config; the key travels in the URL."""
        body: Dict[str, Any] = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.temperature,
                "topP": self.top_p,
                "topK": self.top_k,
                "maxOutputTokens": self.max_tokens,
                "candidateCount": 1,
            },
        }
        return ProviderRequest(
            url=f"{GEMINI_API_BASE}/{self.model}:generateContent?key={self.api_key}",
            headers={"Content-Type": "application/json"},
            body=body,
        )

    def extract_text(self, response: Any) -> Optional[str]:
        """Text lives at ``candidates[0].content.parts[0].text``."""
        try:
            return response["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            return None
