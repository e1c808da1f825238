"""Unit tests for SQL extraction from model output."""

import pytest

from askdb.generation.extractor import extract_sql


class TestExtractSQL:
    def test_sql_fence_removed(self):
        assert extract_sql("```sql\nSELECT 1;\n```") == "SELECT 1;"

    def test_bare_fence_removed(self):
        assert extract_sql("```\nSELECT 1\n```") == "SELECT 1"

    def test_uppercase_language_tag(self):
        assert extract_sql("```SQL\nSELECT 1\n```") == "SELECT 1"

    def test_inline_fences(self):
        assert extract_sql("```SELECT 1```") == "SELECT 1"

    def test_plain_sql_unchanged(self):
        assert extract_sql("  SELECT id FROM users  ") == "SELECT id FROM users"

    def test_nested_fences_stripped_until_stable(self):
        assert extract_sql("```sql\n```sql\nSELECT 1\n```\n```") == "SELECT 1"

    def test_block_inside_prose_kept(self):
        raw = "Here is the query:\n```sql\nSELECT * FROM users\n```\nHope this helps!"

        assert extract_sql(raw) == "SELECT * FROM users"

    def test_empty_fence_yields_empty_string(self):
        assert extract_sql("```\n```") == ""

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_empty_input(self, raw):
        assert extract_sql(raw) == ""

    def test_dotted_table_reference_preserved(self):
        raw = '```sql\nSELECT * FROM public."orders.2024"\n```'

        assert extract_sql(raw) == 'SELECT * FROM public."orders.2024"'

    @pytest.mark.parametrize(
        "raw",
        [
            "```sql\nSELECT 1;\n```",
            "```sql\n```sql\nSELECT 1\n```\n```",
            "Query:\n```\nSELECT 2\n```",
            "``` ```",
            "SELECT 3",
        ],
    )
    def test_idempotent_and_fence_free(self, raw):
        once = extract_sql(raw)

        assert "```" not in once
        assert extract_sql(once) == once
