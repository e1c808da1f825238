"""
SQL generation service.

One generation turn runs: quota gate -> conversation build -> completion ->
SQL extraction. The auto-fix turn feeds an execution error back through the
same path as a synthetic user message.
"""

import logging
import time
from collections.abc import Sequence

from askdb.generation.completion import CompletionClient
from askdb.generation.conversation import ConversationBuilder
from askdb.generation.extractor import extract_sql
from askdb.generation.schema_encoder import encode_schema
from askdb.models.chat import Message
from askdb.models.schema import Table
from askdb.quota.limiter import RateLimiter

logger = logging.getLogger(__name__)

AUTO_FIX_TEMPLATE = (
    "The previous SQL query returned this error: {error}. Please fix the query and try again."
)


def auto_fix_message(error_text: str) -> Message:
    """The synthetic user turn asking the model to correct its own SQL."""
    return Message(role="user", content=AUTO_FIX_TEMPLATE.format(error=error_text))


class SQLGenerator:
    """
    Natural language to SQL generation.

    Attributes:
        rate_limiter: Global quota gate, consulted before every model call
        completion: Model client
        builder: Conversation assembler
        max_tokens: Completion token cap for SQL
        temperature: Sampling temperature for SQL (0 for determinism)
    """

    def __init__(
        self,
        rate_limiter: RateLimiter,
        completion: CompletionClient,
        builder: ConversationBuilder | None = None,
        max_tokens: int = 256,
        temperature: float = 0.0,
    ) -> None:
        self.rate_limiter = rate_limiter
        self.completion = completion
        self.builder = builder or ConversationBuilder()
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def generate(
        self,
        schema: Sequence[Table],
        messages: Sequence[Message] | None = None,
        prompt: str | None = None,
    ) -> str:
        """
        Generate one SQL statement for the latest user request.

        Args:
            schema: Schema snapshot of the target database
            messages: Prior transcript, oldest first
            prompt: Optional new user utterance

        Returns:
            Bare SQL text

        Raises:
            QuotaExceeded: Global quota used up
            EmptyRequest: No user utterance to answer
            MissingCredential: No model credential configured
            UpstreamError: Model call failed
        """
        start_time = time.perf_counter()
        await self.rate_limiter.acquire()

        conversation = self.builder.build(messages, prompt, encode_schema(schema))
        raw = await self.completion.complete(
            conversation,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        sql = extract_sql(raw)

        logger.info(
            "Generated SQL",
            extra={
                "message_count": len(conversation),
                "table_count": len(schema),
                "sql_chars": len(sql),
                "latency_ms": round((time.perf_counter() - start_time) * 1000, 2),
            },
        )
        return sql

    async def auto_fix(
        self,
        schema: Sequence[Table],
        messages: Sequence[Message],
        error_text: str,
    ) -> str:
        """
        Run one corrective turn for a failed execution.

        The error is appended as a user message to the full prior history and
        generation runs once more. There is no automatic retry beyond this pass.
        """
        logger.info("Auto-fixing SQL after execution error", extra={"error": error_text[:200]})
        history = [*messages, auto_fix_message(error_text)]
        return await self.generate(schema, messages=history)
