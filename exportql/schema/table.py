"""Pydantic models for the column metadata consumed during truncation.

A :class:`TableDefinition` describes the physical columns of the exported
table.  It is produced by the caller (or by
:mod:`exportql.schema.converters`) and trusted as-is; exportQL never checks it
against a live database.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from exportql.schema.types import BaseType, base_type_for, normalize_type_name


class ColumnDefinition(BaseModel):
    """Metadata for a single physical column.

    Attributes:
        name: Column name.
        type: BigQuery type name (e.g. ``'STRING'``, ``'ARRAY'``, ``'JSON'``).
            Stored upper-case without type parameters.
        base_type: Coarse category.  Derived from ``type`` when omitted.
        nullable: Whether the column can be NULL.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    type: str
    base_type: BaseType
    nullable: bool = True

    @model_validator(mode="before")
    @classmethod
    def _derive_base_type(cls, data: Any) -> Any:
        """Fill ``base_type`` from ``type`` when the caller omitted it."""
        if isinstance(data, dict) and data.get("base_type") is None and "type" in data:
            data = dict(data)
            data["base_type"] = base_type_for(data["type"])
        return data

    @field_validator("type")
    @classmethod
    def _normalize_type(cls, value: str) -> str:
        return normalize_type_name(value)


class TableDefinition(BaseModel):
    """Column metadata for one table.

    Attributes:
        name: Table name.
        columns: Ordered list of column metadata.
    """

    model_config = ConfigDict(extra="forbid")

    name: str
    columns: list[ColumnDefinition] = Field(default_factory=list)

    def get_column(self, name: str) -> ColumnDefinition | None:
        """Returns the ColumnDefinition for ``name``, or ``None``."""
        for col in self.columns:
            if col.name == name:
                return col
        return None

    @property
    def column_names(self) -> list[str]:
        """Returns all column names for this table."""
        return [c.name for c in self.columns]
