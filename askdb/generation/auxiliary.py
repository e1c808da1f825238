"""
Auxiliary, lower-stakes model calls: chat titles and sample questions.

Both go through the global quota. Output parsing is best-effort: a sample
question reply that is not a JSON array of strings yields an empty list.
"""

import json
import logging
import re
from collections.abc import Sequence

from askdb.errors import MalformedAuxiliaryOutput
from askdb.generation.completion import CompletionClient
from askdb.generation.schema_encoder import encode_schema
from askdb.llm.models import LLMMessage
from askdb.models.chat import Message
from askdb.models.schema import Table
from askdb.prompts import PromptLoader, get_prompt_loader
from askdb.quota.limiter import RateLimiter

logger = logging.getLogger(__name__)

TITLE_MAX_WORDS = 8
MAX_SAMPLE_QUESTIONS = 5

_JSON_ARRAY = re.compile(r"\[.*\]", re.DOTALL)


class TitleGenerator:
    """Summarize a transcript into a short plain-text label."""

    def __init__(
        self,
        rate_limiter: RateLimiter,
        completion: CompletionClient,
        prompts: PromptLoader | None = None,
        max_tokens: int = 32,
        temperature: float = 0.5,
    ) -> None:
        self.rate_limiter = rate_limiter
        self.completion = completion
        self.prompts = prompts or get_prompt_loader()
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def generate(self, messages: Sequence[Message]) -> str:
        """
        Derive a title for the conversation.

        Raises:
            QuotaExceeded, MissingCredential, UpstreamError: propagated to the caller
        """
        await self.rate_limiter.acquire()
        transcript = json.dumps([message.model_dump() for message in messages])
        conversation = [
            LLMMessage(role="system", content=self.prompts.render("title/system.md")),
            LLMMessage(
                role="user",
                content=self.prompts.render("title/instruction.md", max_words=TITLE_MAX_WORDS),
            ),
            LLMMessage(role="user", content=transcript),
        ]
        raw = await self.completion.complete(
            conversation,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        return raw.replace("\n", "").strip()


def parse_sample_questions(raw: str, limit: int = MAX_SAMPLE_QUESTIONS) -> list[str]:
    """
    Parse a JSON array of question strings.

    Raises:
        MalformedAuxiliaryOutput: If no JSON array of strings can be recovered
    """
    text = raw.strip()
    try:
        parsed = json.loads(text or "[]")
    except json.JSONDecodeError:
        # Fenced or prose-wrapped array
        match = _JSON_ARRAY.search(text)
        if not match:
            raise MalformedAuxiliaryOutput("Reply contains no JSON array") from None
        try:
            parsed = json.loads(match.group(0))
        except json.JSONDecodeError as exc:
            raise MalformedAuxiliaryOutput(f"Invalid JSON array: {exc}") from exc

    if not isinstance(parsed, list):
        raise MalformedAuxiliaryOutput("Reply is not a JSON array")

    questions = [item.strip() for item in parsed if isinstance(item, str) and item.strip()]
    return questions[:limit]


class SampleQuestionGenerator:
    """Suggest natural-language questions a user might ask about a schema."""

    def __init__(
        self,
        rate_limiter: RateLimiter,
        completion: CompletionClient,
        prompts: PromptLoader | None = None,
        max_tokens: int = 256,
        temperature: float = 0.7,
    ) -> None:
        self.rate_limiter = rate_limiter
        self.completion = completion
        self.prompts = prompts or get_prompt_loader()
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def generate(self, schema: Sequence[Table]) -> list[str]:
        """
        Return up to five example questions; an unparseable reply yields [].

        Raises:
            QuotaExceeded, MissingCredential, UpstreamError: propagated to the caller
        """
        await self.rate_limiter.acquire()
        conversation = [
            LLMMessage(role="system", content=self.prompts.render("suggestions/system.md")),
            LLMMessage(
                role="user",
                content=self.prompts.render(
                    "suggestions/instruction.md",
                    count=MAX_SAMPLE_QUESTIONS,
                    schema=encode_schema(schema),
                ),
            ),
        ]
        raw = await self.completion.complete(
            conversation,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        try:
            return parse_sample_questions(raw)
        except MalformedAuxiliaryOutput as exc:
            logger.warning("Discarding malformed sample questions", extra={"reason": str(exc)})
            return []
