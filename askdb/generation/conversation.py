"""
Conversation assembly for SQL generation.

Builds the message sequence sent to the model: one system message carrying
the fixed instructions and the encoded schema, followed by the dialogue
transcript. A built conversation always ends in a resolvable user request.
"""

import logging
from collections.abc import Sequence

from askdb.errors import EmptyRequest
from askdb.llm.models import LLMMessage
from askdb.models.chat import Message
from askdb.prompts import PromptLoader, get_prompt_loader

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "sql/system.md"


def last_user_message(messages: Sequence[Message]) -> Message | None:
    for message in reversed(messages):
        if message.role == "user":
            return message
    return None


class ConversationBuilder:
    """Assemble and validate the message list for one generation request."""

    def __init__(self, prompts: PromptLoader | None = None) -> None:
        self.prompts = prompts or get_prompt_loader()

    def system_message(self, schema_text: str) -> LLMMessage:
        return LLMMessage(role="system", content=self.prompts.render(SYSTEM_PROMPT, schema=schema_text))

    def build(
        self,
        prior_messages: Sequence[Message] | None,
        prompt: str | None,
        schema_text: str,
    ) -> list[LLMMessage]:
        """
        Build the model conversation.

        Args:
            prior_messages: Earlier turns, oldest first (may be empty)
            prompt: A new user utterance, appended after the prior turns
            schema_text: Output of ``encode_schema``

        Returns:
            System message followed by the transcript

        Raises:
            EmptyRequest: If no non-empty user utterance can be resolved
        """
        history = list(prior_messages or [])
        if prompt is not None and prompt.strip():
            history.append(Message(role="user", content=prompt))

        if not history:
            raise EmptyRequest()

        latest = last_user_message(history)
        if latest is None or not latest.content.strip():
            raise EmptyRequest("Conversation has no non-empty user message.")

        conversation = [self.system_message(schema_text)]
        # Empty turns carry nothing for the model and the provider rejects them
        conversation.extend(
            LLMMessage(role=message.role, content=message.content)
            for message in history
            if message.content.strip()
        )

        logger.debug(
            "Built conversation",
            extra={"message_count": len(conversation), "schema_chars": len(schema_text)},
        )
        return conversation
