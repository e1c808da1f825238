"""
Schema snapshot models.

A snapshot is the ordered list of tables (typed columns, optional sample rows)
describing a target database. It is validated once at the boundary and then
passed through the pipeline as typed records.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

MAX_SAMPLE_ROWS = 5


class Column(BaseModel):
    """A table column; the type is absent when only names were introspected."""

    name: str = Field(..., min_length=1, description="Column name")
    type: str | None = Field(None, description="Column data type")


class Table(BaseModel):
    """One table of a schema snapshot."""

    name: str = Field(
        ...,
        min_length=1,
        description="Table name (may contain periods)",
        validation_alias=AliasChoices("name", "table"),
    )
    columns: list[Column] = Field(default_factory=list, description="Ordered columns")
    sample_rows: list[dict[str, Any]] = Field(
        default_factory=list,
        description=f"Up to {MAX_SAMPLE_ROWS} example rows",
        validation_alias=AliasChoices("sample_rows", "sampleRows"),
    )

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("columns", mode="before")
    @classmethod
    def coerce_bare_columns(cls, value: Any) -> Any:
        """Accept bare column names alongside {name, type} objects."""
        if not isinstance(value, list):
            return value
        return [{"name": item} if isinstance(item, str) else item for item in value]

    @field_validator("sample_rows", mode="before")
    @classmethod
    def cap_sample_rows(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return value[:MAX_SAMPLE_ROWS]
        return value

    @property
    def has_dotted_name(self) -> bool:
        return "." in self.name
