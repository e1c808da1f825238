"""Compact textual rendering of a schema snapshot for prompts."""

import json
from collections.abc import Iterable

from askdb.models.schema import Column, Table

TABLE_SEPARATOR = "; "


def quote_table_name(name: str) -> str:
    """Dotted names must be referenced as public."<name>" in Postgres."""
    if "." in name:
        return f'public."{name}"'
    return name


def _render_column(column: Column) -> str:
    if column.type:
        return f"{column.name} {column.type}"
    return column.name


def encode_table(table: Table) -> str:
    columns = ", ".join(_render_column(column) for column in table.columns)
    text = f"{quote_table_name(table.name)}({columns})"
    if table.sample_rows:
        text += "\nSample rows: " + json.dumps(table.sample_rows, default=str)
    return text


def encode_schema(tables: Iterable[Table]) -> str:
    """
    Serialize the whole snapshot; nothing is truncated.

    Example:
        >>> encode_schema([Table(name="users", columns=[Column(name="id", type="integer")])])
        'users(id integer)'
    """
    return TABLE_SEPARATOR.join(encode_table(table) for table in tables)
