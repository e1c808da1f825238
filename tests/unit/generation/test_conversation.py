"""Unit tests for conversation assembly."""

import pytest

from askdb.errors import EmptyRequest
from askdb.generation.conversation import ConversationBuilder, last_user_message
from askdb.models.chat import Message


@pytest.fixture
def builder():
    return ConversationBuilder()


def user(content: str) -> Message:
    return Message(role="user", content=content)


def assistant(content: str) -> Message:
    return Message(role="assistant", content=content)


class TestSystemMessage:
    def test_contains_instructions_and_schema(self, builder):
        message = builder.system_message("users(id integer)")

        assert message.role == "system"
        assert "SQL for Postgres" in message.content
        assert 'public."table.name"' in message.content
        assert "Only output the SQL, nothing else." in message.content
        assert message.content.endswith("Schema: users(id integer)")


class TestBuild:
    def test_prompt_only(self, builder):
        conversation = builder.build(None, "show all users", "users(id integer)")

        assert [m.role for m in conversation] == ["system", "user"]
        assert conversation[1].content == "show all users"

    def test_history_preserved_in_order(self, builder):
        history = [user("count users"), assistant("SELECT count(*) FROM users"), user("only active")]

        conversation = builder.build(history, None, "users(id integer)")

        assert [m.content for m in conversation[1:]] == [
            "count users",
            "SELECT count(*) FROM users",
            "only active",
        ]

    def test_prompt_appended_after_history(self, builder):
        history = [user("count users"), assistant("SELECT count(*) FROM users")]

        conversation = builder.build(history, "by month", "")

        assert conversation[-1].role == "user"
        assert conversation[-1].content == "by month"
        assert len(conversation) == 4

    def test_single_system_message_first(self, builder):
        conversation = builder.build([user("a")], "b", "")

        roles = [m.role for m in conversation]
        assert roles[0] == "system"
        assert roles.count("system") == 1

    def test_no_messages_and_no_prompt_rejected(self, builder):
        with pytest.raises(EmptyRequest):
            builder.build([], None, "")

    def test_blank_prompt_without_history_rejected(self, builder):
        with pytest.raises(EmptyRequest):
            builder.build(None, "   ", "")

    def test_history_without_user_message_rejected(self, builder):
        with pytest.raises(EmptyRequest):
            builder.build([assistant("SELECT 1")], None, "")

    def test_blank_last_user_message_rejected(self, builder):
        with pytest.raises(EmptyRequest):
            builder.build([user("count users"), assistant("SELECT 1"), user("  ")], None, "")

    def test_empty_turns_skipped(self, builder):
        history = [user("count users"), assistant(""), user("only active")]

        conversation = builder.build(history, None, "")

        assert [m.content for m in conversation[1:]] == ["count users", "only active"]


class TestLastUserMessage:
    def test_returns_latest_user_turn(self):
        messages = [user("a"), assistant("b"), user("c"), assistant("d")]

        assert last_user_message(messages).content == "c"

    def test_none_without_user_turns(self):
        assert last_user_message([assistant("x")]) is None
