"""Lightweight LLM client abstraction."""

from .client import (ChatCompletionsLLMClient, LLMClient, LLMPrompt,
                     StubLLMClient, get_default_client)

__all__ = [
    "ChatCompletionsLLMClient",
    "LLMClient",
    "LLMPrompt",
    "StubLLMClient",
    "get_default_client",
]
