"""
LLM Provider Module

Thin provider abstraction over the OpenAI chat completions API.

Usage:
    from askdb.llm import LLMProviderFactory, LLMRequest, LLMMessage
    from askdb.config import get_settings

    provider = LLMProviderFactory.create_provider(get_settings().llm)

    request = LLMRequest(
        messages=[LLMMessage(role="user", content="Hello!")], temperature=0.0, max_tokens=64
    )
    response = await provider.generate(request)
"""

from askdb.llm.base import BaseLLMProvider
from askdb.llm.factory import LLMProviderFactory
from askdb.llm.models import LLMMessage, LLMRequest, LLMResponse, LLMUsage
from askdb.llm.openai import OpenAIProvider

__all__ = [
    "BaseLLMProvider",
    "LLMMessage",
    "LLMRequest",
    "LLMResponse",
    "LLMUsage",
    "LLMProviderFactory",
    "OpenAIProvider",
]
