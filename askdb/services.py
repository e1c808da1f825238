"""
Service wiring shared by the HTTP app and the CLI.

Builds the rate limiter, model client, generators and chat registry from
settings. Network resources (Redis, system database) are only touched when
used, except the session store which is initialized by ``open_services``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from askdb.chat.controller import ChatRegistry
from askdb.chat.history import SessionHistory, TitleScheduler
from askdb.chat.store import ChatSessionStore
from askdb.config import Settings
from askdb.generation.auxiliary import SampleQuestionGenerator, TitleGenerator
from askdb.generation.completion import CompletionClient
from askdb.generation.generator import SQLGenerator
from askdb.llm.base import BaseLLMProvider
from askdb.llm.factory import LLMProviderFactory
from askdb.quota.limiter import CounterStore, RateLimiter, create_counter_store

logger = logging.getLogger(__name__)


@dataclass
class Services:
    settings: Settings
    counter: CounterStore
    rate_limiter: RateLimiter
    provider: BaseLLMProvider | None
    completion: CompletionClient
    sql_generator: SQLGenerator
    title_generator: TitleGenerator
    sample_questions: SampleQuestionGenerator
    history: SessionHistory
    titles: TitleScheduler
    chats: ChatRegistry
    session_store: ChatSessionStore | None = None

    async def close(self) -> None:
        await self.titles.drain()
        if self.provider is not None:
            await self.provider.close()
        if self.session_store is not None:
            await self.session_store.close()
        close_counter = getattr(self.counter, "aclose", None)
        if close_counter is not None:
            await close_counter()


def build_services(
    settings: Settings,
    counter: CounterStore | None = None,
    provider: BaseLLMProvider | None = None,
    session_store: ChatSessionStore | None = None,
) -> Services:
    """Assemble every component; missing pieces are created from ``settings``."""
    if counter is None:
        counter = create_counter_store(settings.redis)
    if provider is None:
        provider = LLMProviderFactory.create_provider(settings.llm)

    llm = settings.llm
    rate_limiter = RateLimiter.from_settings(counter, settings.quota)
    completion = CompletionClient(provider)
    sql_generator = SQLGenerator(
        rate_limiter,
        completion,
        max_tokens=llm.sql_max_tokens,
        temperature=llm.sql_temperature,
    )
    title_generator = TitleGenerator(
        rate_limiter,
        completion,
        max_tokens=llm.title_max_tokens,
        temperature=llm.title_temperature,
    )
    sample_questions = SampleQuestionGenerator(
        rate_limiter,
        completion,
        max_tokens=llm.suggestions_max_tokens,
        temperature=llm.suggestions_temperature,
    )
    history = SessionHistory(store=session_store)
    titles = TitleScheduler(title_generator, on_title=history.attach_title)
    chats = ChatRegistry(sql_generator, history, titles)

    return Services(
        settings=settings,
        counter=counter,
        rate_limiter=rate_limiter,
        provider=provider,
        completion=completion,
        sql_generator=sql_generator,
        title_generator=title_generator,
        sample_questions=sample_questions,
        history=history,
        titles=titles,
        chats=chats,
        session_store=session_store,
    )


async def open_services(settings: Settings) -> Services:
    """Build services and initialize the chat session store when configured."""
    session_store = None
    if settings.system_database.url:
        session_store = ChatSessionStore(str(settings.system_database.url))
        await session_store.initialize()
        logger.info("Chat session store initialized")
    else:
        logger.warning("SYSTEM_DATABASE_URL not set; chat sessions are kept in memory only.")
    return build_services(settings, session_store=session_store)
