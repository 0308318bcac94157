"""SELECT clause compilation with large-value truncation.

Exports are written to CSV, where a single huge cell can break downstream
consumers.  When truncation is requested every projected column is rewritten
into two SELECT items:

* the value, serialised to text and cut to ``truncate_size`` characters,
  aliased to the column name;
* a companion flag, ``1`` when the full serialisation was longer than the
  budget and ``0`` otherwise, aliased to a name unique within the call.

How a column is serialised depends on its :class:`ColumnKind`.  Each kind maps
to a pure renderer ``(column_sql, budget) -> TruncatedColumn`` in
:data:`TRUNCATION_RENDERERS`, so the dispatch is a single table lookup.
"""
from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from exportql.compile.assembly import QueryAssembly
from exportql.compile.context import CompilationContext
from exportql.errors import ColumnNotFoundError
from exportql.schema.table import ColumnDefinition, TableDefinition
from exportql.schema.types import (
    TIME_LIKE_TYPES,
    TYPE_ARRAY,
    TYPE_GEOGRAPHY,
    TYPE_JSON,
    TYPE_STRUCT,
    BaseType,
)

# ---------------------------------------------------------------------------
# Column kinds
# ---------------------------------------------------------------------------


class ColumnKind(str, Enum):
    """Truncation strategy of a column."""

    ARRAY = "array"
    GEOGRAPHY = "geography"
    JSON = "json"
    STRING_LIKE = "string_like"
    TIME_LIKE = "time_like"
    OTHER = "other"


def classify_column(col: ColumnDefinition) -> ColumnKind:
    """Return the :class:`ColumnKind` of ``col``.

    Checks run in a fixed order: nested and geography types first, then any
    column whose base type is STRING, then time-like types.  A ``TIME``
    column reported with base type STRING is therefore truncated as a string.
    """
    if col.type == TYPE_ARRAY:
        return ColumnKind.ARRAY
    if col.type == TYPE_GEOGRAPHY:
        return ColumnKind.GEOGRAPHY
    if col.type in (TYPE_JSON, TYPE_STRUCT):
        return ColumnKind.JSON
    if col.base_type == BaseType.STRING:
        return ColumnKind.STRING_LIKE
    if col.type in TIME_LIKE_TYPES:
        return ColumnKind.TIME_LIKE
    return ColumnKind.OTHER


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TruncatedColumn:
    """Un-aliased SELECT expressions for one truncated column.

    Attributes:
        value_sql: The (possibly truncated) value.
        flag_sql: ``1`` / ``0`` expression telling whether it was cut.
    """

    value_sql: str
    flag_sql: str


Renderer = Callable[[str, int], TruncatedColumn]


def _length_flag(serialized_sql: str, budget: int) -> str:
    return f"(CASE WHEN LENGTH({serialized_sql}) > {budget} THEN 1 ELSE 0 END)"


def render_array(column_sql: str, budget: int) -> TruncatedColumn:
    serialized = f"TO_JSON_STRING({column_sql})"
    return TruncatedColumn(
        value_sql=(
            f"IF(ARRAY_LENGTH({column_sql}) = 0, NULL, "
            f"SUBSTRING({serialized}, 0, {budget}))"
        ),
        flag_sql=_length_flag(serialized, budget),
    )


def render_geography(column_sql: str, budget: int) -> TruncatedColumn:
    serialized = f"ST_ASGEOJSON({column_sql})"
    return TruncatedColumn(
        value_sql=f"IF({column_sql} IS NULL, NULL, SUBSTRING({serialized}, 0, {budget}))",
        flag_sql=_length_flag(serialized, budget),
    )


def render_json(column_sql: str, budget: int) -> TruncatedColumn:
    serialized = f"TO_JSON_STRING({column_sql})"
    return TruncatedColumn(
        value_sql=f"IF({column_sql} IS NULL, NULL, SUBSTRING({serialized}, 0, {budget}))",
        flag_sql=_length_flag(serialized, budget),
    )


def render_string_like(column_sql: str, budget: int) -> TruncatedColumn:
    # CAST(NULL as STRING) is NULL and LENGTH(NULL) never exceeds the budget.
    serialized = f"CAST({column_sql} as STRING)"
    return TruncatedColumn(
        value_sql=f"SUBSTRING({serialized}, 0, {budget})",
        flag_sql=_length_flag(serialized, budget),
    )


def render_time_like(column_sql: str, budget: int) -> TruncatedColumn:
    # BigQuery formats time values itself.
    return TruncatedColumn(value_sql=column_sql, flag_sql="0")


def render_other(column_sql: str, budget: int) -> TruncatedColumn:
    return TruncatedColumn(value_sql=f"CAST({column_sql} as STRING)", flag_sql="0")


#: Renderer of every :class:`ColumnKind`.
TRUNCATION_RENDERERS: MappingProxyType[ColumnKind, Renderer] = MappingProxyType(
    {
        ColumnKind.ARRAY: render_array,
        ColumnKind.GEOGRAPHY: render_geography,
        ColumnKind.JSON: render_json,
        ColumnKind.STRING_LIKE: render_string_like,
        ColumnKind.TIME_LIKE: render_time_like,
        ColumnKind.OTHER: render_other,
    }
)


# ---------------------------------------------------------------------------
# Flag column names
# ---------------------------------------------------------------------------


def _default_suffix() -> str:
    return uuid.uuid4().hex[:13]


class UniqueNameGenerator:
    """Generates flag-column names that never repeat within one call.

    Names are the base column name followed by a 13 character suffix.

    Args:
        suffix_factory: Returns a fresh suffix on each call.
    """

    def __init__(self, suffix_factory: Callable[[], str] = _default_suffix) -> None:
        self._suffix_factory = suffix_factory
        self._issued: set[str] = set()

    def next(self, base: str) -> str:
        name = f"{base}{self._suffix_factory()}"
        while name in self._issued:
            name = f"{base}{self._suffix_factory()}"
        self._issued.add(name)
        return name


# ---------------------------------------------------------------------------
# Projection builder
# ---------------------------------------------------------------------------


class ProjectionBuilder:
    """Builds the SELECT list, truncating large values on request.

    An empty column list selects ``*`` and is never truncated.
    """

    def __init__(self, ctx: CompilationContext) -> None:
        self._ctx = ctx

    def build(
        self,
        columns: list[str],
        table_name: str,
        query: QueryAssembly,
        *,
        truncate_large_columns: bool = False,
        table: TableDefinition | None = None,
        names: UniqueNameGenerator | None = None,
    ) -> None:
        if not columns:
            query.add_select("*")
            return

        names = names or UniqueNameGenerator()
        for column in columns:
            column_sql = self._ctx.column_ref(table_name, column)
            if not truncate_large_columns:
                query.add_select(column_sql)
                continue

            definition = table.get_column(column) if table is not None else None
            if definition is None:
                raise ColumnNotFoundError(column)
            self._add_truncated(query, column_sql, column, definition, names)

    def _add_truncated(
        self,
        query: QueryAssembly,
        column_sql: str,
        column: str,
        definition: ColumnDefinition,
        names: UniqueNameGenerator,
    ) -> None:
        quote = self._ctx.compiler.quote_identifier
        renderer = TRUNCATION_RENDERERS[classify_column(definition)]
        rendered = renderer(column_sql, self._ctx.config.truncate_size)
        query.add_select(f"{rendered.value_sql} AS {quote(column)}")
        query.add_select(f"{rendered.flag_sql} AS {quote(names.next(column))}")
