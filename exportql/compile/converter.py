"""Column-type converters.

A :class:`ColumnConverter` returns the SQL expression used wherever a column
must be compared or sorted as a specific :class:`~exportql.schema.types.DataType`
(non-STRING filters and sort keys).  The same expression is valid in WHERE and
ORDER BY positions.

:class:`BigQueryColumnConverter` is the default.  Callers with their own
casting rules pass a different converter to
:class:`~exportql.compile.builder.ExportQueryBuilder`.
"""
from __future__ import annotations

from abc import ABC, abstractmethod

from exportql.compile.base import SQLCompiler
from exportql.schema.table import TableDefinition
from exportql.schema.types import BaseType, DataType


class ColumnConverter(ABC):
    """Produces a type-safe SQL expression for one column."""

    @abstractmethod
    def convert_column_by_data_type(
        self,
        table_name: str,
        column_name: str,
        data_type: DataType,
    ) -> str:
        """Return the expression comparing / sorting ``column_name`` as ``data_type``."""


class BigQueryColumnConverter(ColumnConverter):
    """Casts columns with ``SAFE_CAST`` so malformed stored values become NULL.

    Args:
        compiler: Compiler used to quote the column reference.
        table: Optional column metadata.  When a column's stored base type
            already matches the requested data type, the cast is skipped.
    """

    _CAST_TYPES: dict[DataType, str] = {
        DataType.INTEGER: "INT64",
        DataType.BIGINT: "INT64",
        DataType.REAL: "FLOAT64",
        DataType.DOUBLE: "FLOAT64",
        DataType.DECIMAL: "NUMERIC",
        DataType.BOOLEAN: "BOOL",
        DataType.DATE: "DATE",
        DataType.TIMESTAMP: "TIMESTAMP",
    }

    _NATIVE_BASE_TYPES: dict[DataType, BaseType] = {
        DataType.INTEGER: BaseType.INTEGER,
        DataType.BIGINT: BaseType.INTEGER,
        DataType.REAL: BaseType.FLOAT,
        DataType.DOUBLE: BaseType.FLOAT,
        DataType.DECIMAL: BaseType.NUMERIC,
        DataType.BOOLEAN: BaseType.BOOLEAN,
        DataType.DATE: BaseType.DATE,
        DataType.TIMESTAMP: BaseType.TIMESTAMP,
    }

    def __init__(self, compiler: SQLCompiler, table: TableDefinition | None = None) -> None:
        self._compiler = compiler
        self._table = table

    def convert_column_by_data_type(
        self,
        table_name: str,
        column_name: str,
        data_type: DataType,
    ) -> str:
        column_sql = self._compiler.quote_qualified(table_name, column_name)
        cast_type = self._CAST_TYPES.get(data_type)
        if cast_type is None or self._is_native(column_name, data_type):
            return column_sql
        return f"SAFE_CAST({column_sql} AS {cast_type})"

    def _is_native(self, column_name: str, data_type: DataType) -> bool:
        if self._table is None:
            return False
        col = self._table.get_column(column_name)
        return col is not None and col.base_type == self._NATIVE_BASE_TYPES.get(data_type)
