"""
OpenAI provider.

Also serves any OpenAI-compatible endpoint (vLLM, Ollama, Azure gateways)
reachable through ``base_url``.
"""

import logging

import openai
from openai import AsyncOpenAI

from askdb.llm.base import BaseLLMProvider
from askdb.llm.models import FinishReason, LLMRequest, LLMResponse, LLMUsage

logger = logging.getLogger(__name__)


class OpenAIProvider(BaseLLMProvider):
    """Chat completions through the official async SDK."""

    provider_name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4.1",
        base_url: str | None = None,
        timeout: int = 30,
    ):
        super().__init__(timeout=timeout)
        self.model = model
        self.client = AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=float(timeout))
        logger.info(
            "OpenAI provider initialized",
            extra={"model": model, "custom_endpoint": base_url is not None},
        )

    async def generate(self, request: LLMRequest) -> LLMResponse:
        """
        Raises:
            openai.APIError: Any SDK failure, timeouts included
        """
        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=[message.model_dump() for message in request.messages],
                temperature=request.temperature,
                max_tokens=request.max_tokens,
            )
        except openai.APIError as e:
            logger.error(f"OpenAI API error: {e}")
            raise

        choice = completion.choices[0]
        usage = completion.usage
        response = LLMResponse(
            content=choice.message.content or "",
            model=completion.model,
            provider=self.provider_name,
            finish_reason=self._map_finish_reason(choice.finish_reason),
            usage=LLMUsage(
                prompt_tokens=usage.prompt_tokens,
                completion_tokens=usage.completion_tokens,
                total_tokens=usage.total_tokens,
            )
            if usage
            else LLMUsage(),
        )
        self._log_exchange(request, response)
        return response

    async def close(self) -> None:
        await self.client.close()

    @staticmethod
    def _map_finish_reason(reason: str | None) -> FinishReason:
        if reason in ("length", "content_filter"):
            return reason
        return "stop"
