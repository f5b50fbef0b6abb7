"""DeepSeek provider integration, routed through OpenRouter."""

from typing import Any, Dict, Optional

from .chat_completions import ChatCompletionsProvider

OPENROUTER_ENDPOINT = "https://openrouter.ai/api/v1/chat/completions"


class OpenRouterProvider(ChatCompletionsProvider):
    """DeepSeek R1 served by OpenRouter's chat-completions API."""

    provider_name = "deepseek"
    default_model = "deepseek/deepseek-r1"
    endpoint = OPENROUTER_ENDPOINT

    def __init__(
        self,
        api_key: Optional[str],
        model: Optional[str] = None,
        referer: str = "https://yourapp.com",
        title: str = "Exam Prep App",
        **kwargs: Any,
    ):
        """
        Initialize OpenRouter provider.

        Args:
            api_key: OpenRouter API key
            model: OpenRouter model identifier (default: deepseek/deepseek-r1)
            referer: Value of the HTTP-Referer attribution header
            title: Value of the X-Title attribution header
            **kwargs: Passed to BaseLLMProvider (temperature, max_tokens)
        """
        super().__init__(api_key, model, **kwargs)
        self.referer = referer
        self.title = title

    def extra_headers(self) -> Dict[str, str]:
        return {"HTTP-Referer": self.referer, "X-Title": self.title}
