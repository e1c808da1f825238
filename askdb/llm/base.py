"""
Model provider interface.

The generation pipeline talks to exactly one provider through
``CompletionClient``; a provider turns an ``LLMRequest`` into an
``LLMResponse`` and lets provider SDK errors propagate unchanged.
"""

import logging
from abc import ABC, abstractmethod

from askdb.llm.models import LLMRequest, LLMResponse

logger = logging.getLogger(__name__)


class BaseLLMProvider(ABC):
    """
    A chat completion backend.

    Attributes:
        provider_name: Identifier reported in responses and logs
        timeout: Request timeout in seconds
    """

    provider_name: str = "base"

    def __init__(self, timeout: int = 30):
        self.timeout = timeout

    @abstractmethod
    async def generate(self, request: LLMRequest) -> LLMResponse:
        """Run one completion; SDK errors are raised as-is."""

    async def close(self) -> None:
        """Release network resources held by the provider."""

    def _log_exchange(self, request: LLMRequest, response: LLMResponse) -> None:
        logger.debug(
            f"{self.provider_name} completion",
            extra={
                "provider": self.provider_name,
                "model": response.model,
                "message_count": len(request.messages),
                "temperature": request.temperature,
                "max_tokens": request.max_tokens,
                "total_tokens": response.usage.total_tokens,
                "finish_reason": response.finish_reason,
            },
        )
