"""
Completion client: the single seam between the pipeline and the model provider.
"""

import logging
from collections.abc import Sequence
from typing import Any

import openai

from askdb.errors import MissingCredential, UpstreamError
from askdb.llm.base import BaseLLMProvider
from askdb.llm.models import LLMMessage, LLMRequest

logger = logging.getLogger(__name__)


def upstream_message(exc: openai.APIError) -> str:
    """Return the provider's own error message when the payload carries one."""
    body: Any = getattr(exc, "body", None)
    if isinstance(body, dict):
        error = body.get("error", body)
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return exc.message or "OpenAI error"


class CompletionClient:
    """Send a conversation to the model and return its raw text."""

    def __init__(self, provider: BaseLLMProvider | None) -> None:
        self.provider = provider

    @property
    def is_configured(self) -> bool:
        return self.provider is not None

    async def complete(
        self,
        messages: Sequence[LLMMessage],
        max_tokens: int,
        temperature: float,
    ) -> str:
        """
        Run one completion.

        Raises:
            MissingCredential: No provider credential configured (no network call made)
            UpstreamError: The provider call failed
        """
        if self.provider is None:
            raise MissingCredential()

        request = LLMRequest(
            messages=list(messages),
            max_tokens=max_tokens,
            temperature=temperature,
        )
        try:
            response = await self.provider.generate(request)
        except openai.APIError as exc:
            message = upstream_message(exc)
            raise UpstreamError(
                message,
                context={"status_code": getattr(exc, "status_code", None)},
            ) from exc

        return response.content.strip()
