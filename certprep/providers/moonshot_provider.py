"""Moonshot (Kimi) provider integration."""

from .chat_completions import ChatCompletionsProvider

MOONSHOT_ENDPOINT = "https://api.moonshot.cn/v1/chat/completions"


class MoonshotProvider(ChatCompletionsProvider):
    """Moonshot chat-completions API integration."""

    default_model = "moonshot-v1-8k"
    endpoint = MOONSHOT_ENDPOINT
