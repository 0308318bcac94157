"""Clause-level SQL builders.

Each class handles exactly one part of the export statement and writes into
the per-call :class:`~exportql.compile.assembly.QueryAssembly`.  None of them
keeps state between calls.

Classes
-------
PredicateBuilder     — column filters → ``WHERE a = @p AND b IN UNNEST(@q)``
ChangeWindowBuilder  — change window → ``_timestamp`` bounds
OrderByBuilder       — sort keys → ``ORDER BY …``
LimitBuilder         — row limit → ``LIMIT n``

Projection (``SELECT``) lives in :mod:`exportql.compile.truncation`.
"""
from __future__ import annotations

from datetime import datetime, timezone

from exportql.compile.assembly import QueryAssembly
from exportql.compile.coercion import coerce_value, coerce_values
from exportql.compile.context import CompilationContext
from exportql.errors import (
    InvalidFilterError,
    QueryAssemblyError,
    QueryBuilderError,
    ValueCoercionError,
)
from exportql.schema.export_spec import Filter, SortKey
from exportql.schema.types import (
    OPERATOR_MULTI_VALUE,
    OPERATOR_SINGLE_VALUE,
    PARAMETER_TYPES,
    DataType,
    ParameterType,
)

#: Change-tracking column maintained by the storage layer.
TIMESTAMP_COLUMN = "_timestamp"

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class PredicateBuilder:
    """AND-combines column filters into the WHERE clause.

    A filter with one value compiles to ``<column> <op> <param>``; a filter
    with several values compiles to ``<column> IN|NOT IN UNNEST(<array>)``
    and only accepts ``eq`` / ``ne``.
    """

    def __init__(self, ctx: CompilationContext) -> None:
        self._ctx = ctx

    def build(self, filters: list[Filter], table_name: str, query: QueryAssembly) -> None:
        for where_filter in filters:
            if where_filter.is_multi_value:
                self._build_multiple_value(where_filter, table_name, query)
            else:
                self._build_simple_value(where_filter, table_name, query)

    def _column_sql(self, where_filter: Filter, table_name: str) -> str:
        if where_filter.data_type == DataType.STRING:
            return self._ctx.column_ref(table_name, where_filter.column_name)
        return self._ctx.converter.convert_column_by_data_type(
            table_name, where_filter.column_name, where_filter.data_type
        )

    def _build_simple_value(
        self, where_filter: Filter, table_name: str, query: QueryAssembly
    ) -> None:
        value = coerce_value(
            where_filter.data_type, where_filter.values[0], where_filter.column_name
        )
        column_sql = self._column_sql(where_filter, table_name)
        param = query.create_named_parameter(value, PARAMETER_TYPES[where_filter.data_type])
        query.and_where(
            f"{column_sql} {OPERATOR_SINGLE_VALUE[where_filter.operator]} {param}"
        )

    def _build_multiple_value(
        self, where_filter: Filter, table_name: str, query: QueryAssembly
    ) -> None:
        sql_op = OPERATOR_MULTI_VALUE.get(where_filter.operator)
        if sql_op is None:
            raise InvalidFilterError(where_filter.column_name, where_filter.operator.value)

        if where_filter.data_type == DataType.STRING:
            values: list = list(where_filter.values)
            param_type = ParameterType.STRING_ARRAY
        else:
            values = coerce_values(
                where_filter.data_type, where_filter.values, where_filter.column_name
            )
            param_type = ParameterType.INT64_ARRAY

        column_sql = self._column_sql(where_filter, table_name)
        param = query.create_named_parameter(values, param_type)
        query.and_where(f"{column_sql} {sql_op} UNNEST({param})")


class ChangeWindowBuilder:
    """Bounds the implicit ``_timestamp`` column for incremental exports.

    Both bounds are optional and independent; an empty string leaves that
    side open.  Bounds are Unix timestamps bound as UTC
    ``YYYY-MM-DD HH:MM:SS`` values.
    """

    def __init__(self, ctx: CompilationContext) -> None:
        self._ctx = ctx

    def build(self, change_since: str, change_until: str, query: QueryAssembly) -> None:
        column_sql = self._ctx.compiler.quote_identifier(TIMESTAMP_COLUMN)
        if change_since != "":
            param = query.create_named_parameter(
                format_timestamp(change_since), ParameterType.TIMESTAMP, "changedSince"
            )
            query.and_where(f"{column_sql} >= {param}")

        if change_until != "":
            param = query.create_named_parameter(
                format_timestamp(change_until), ParameterType.TIMESTAMP, "changedUntil"
            )
            query.and_where(f"{column_sql} < {param}")


def format_timestamp(timestamp: str) -> str:
    """Format a Unix timestamp string as a UTC ``YYYY-MM-DD HH:MM:SS`` value.

    Raises:
        ValueCoercionError: If ``timestamp`` is not a representable Unix time.
    """
    try:
        moment = datetime.fromtimestamp(float(timestamp.strip()), tz=timezone.utc)
    except (ValueError, OverflowError, OSError) as exc:
        raise ValueCoercionError(timestamp, "Unix timestamp", TIMESTAMP_COLUMN) from exc
    return moment.strftime(_TIMESTAMP_FORMAT)


class OrderByBuilder:
    """Compiles sort keys into the ORDER BY clause.

    STRING keys are added in sequence.  The first non-STRING key is added
    through the column converter and ends the clause: any keys after it are
    not compiled.
    """

    def __init__(self, ctx: CompilationContext) -> None:
        self._ctx = ctx

    def build(self, sort: list[SortKey], table_name: str, query: QueryAssembly) -> None:
        try:
            for order_by in sort:
                if order_by.data_type != DataType.STRING:
                    query.add_order_by(
                        self._ctx.converter.convert_column_by_data_type(
                            table_name, order_by.column_name, order_by.data_type
                        ),
                        order_by.direction.value,
                    )
                    return
                query.add_order_by(
                    self._ctx.column_ref(table_name, order_by.column_name),
                    order_by.direction.value,
                )
        except QueryAssemblyError as exc:
            raise QueryBuilderError(str(exc)) from exc


class LimitBuilder:
    """Applies the row limit; ``<= 0`` means unbounded."""

    def build(self, limit: int, query: QueryAssembly) -> None:
        if limit > 0:
            query.set_max_results(limit)
