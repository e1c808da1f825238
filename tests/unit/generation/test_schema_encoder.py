"""Unit tests for schema encoding."""

from askdb.generation.schema_encoder import encode_schema, encode_table, quote_table_name
from askdb.models.schema import Column, Table


class TestQuoteTableName:
    def test_plain_name_unchanged(self):
        assert quote_table_name("users") == "users"

    def test_dotted_name_quoted_in_public_schema(self):
        assert quote_table_name("orders.2024") == 'public."orders.2024"'


class TestEncodeSchema:
    def test_single_table(self):
        tables = [Table(name="users", columns=[Column(name="id", type="integer")])]

        assert encode_schema(tables) == "users(id integer)"

    def test_tables_joined_in_order(self, sample_schema):
        encoded = encode_schema(sample_schema)

        assert encoded == (
            "users(id integer, name text); "
            'public."orders.2024"(id integer, total numeric)'
        )

    def test_untyped_columns_render_name_only(self):
        table = Table(name="events", columns=["id", "kind"])

        assert encode_table(table) == "events(id, kind)"

    def test_sample_rows_appended_as_json(self):
        table = Table(
            name="users",
            columns=[Column(name="id", type="integer")],
            sample_rows=[{"id": 1}, {"id": 2}],
        )

        assert encode_table(table) == 'users(id integer)\nSample rows: [{"id": 1}, {"id": 2}]'

    def test_non_json_sample_values_are_stringified(self):
        from datetime import date

        table = Table(name="t", columns=["d"], sample_rows=[{"d": date(2024, 1, 2)}])

        assert '"2024-01-02"' in encode_table(table)

    def test_empty_schema(self):
        assert encode_schema([]) == ""

    def test_large_schema_not_truncated(self):
        tables = [Table(name=f"t{i}", columns=["id"]) for i in range(500)]

        encoded = encode_schema(tables)

        assert encoded.count("(id)") == 500
        assert encoded.endswith("t499(id)")


class TestTableValidation:
    def test_table_alias_accepted(self):
        table = Table.model_validate({"table": "users", "columns": []})

        assert table.name == "users"

    def test_sample_rows_capped_at_five(self):
        table = Table.model_validate(
            {"name": "t", "columns": ["id"], "sampleRows": [{"id": i} for i in range(8)]}
        )

        assert len(table.sample_rows) == 5

    def test_null_sample_rows_become_empty(self):
        table = Table.model_validate({"name": "t", "columns": [], "sample_rows": None})

        assert table.sample_rows == []

    def test_has_dotted_name(self):
        assert Table(name="a.b").has_dotted_name
        assert not Table(name="ab").has_dotted_name
