"""
LLM Provider Factory

Creates the configured provider instance, or nothing when no credential is
available so callers can fail without touching the network.
"""

import logging

from askdb.config import LLMSettings
from askdb.llm.base import BaseLLMProvider
from askdb.llm.openai import OpenAIProvider

logger = logging.getLogger(__name__)


class LLMProviderFactory:
    """Build the model provider from ``LLM_*`` settings."""

    @staticmethod
    def create_provider(config: LLMSettings) -> BaseLLMProvider | None:
        """
        Returns:
            Configured provider, or None when no API key is set
        """
        if not config.openai_api_key:
            logger.warning("OpenAI API key not configured; model calls will be refused.")
            return None

        return OpenAIProvider(
            api_key=config.openai_api_key,
            model=config.openai_model,
            base_url=config.base_url,
            timeout=config.timeout,
        )
