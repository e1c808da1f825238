"""
Chat sessions: lifecycle, history and background titles.
"""

from askdb.chat.controller import ChatController, ChatRegistry, ChatState
from askdb.chat.history import SessionHistory, TitleScheduler
from askdb.chat.store import MAX_SESSION_MESSAGES, ChatSessionStore

__all__ = [
    "MAX_SESSION_MESSAGES",
    "ChatController",
    "ChatRegistry",
    "ChatSessionStore",
    "ChatState",
    "SessionHistory",
    "TitleScheduler",
]
