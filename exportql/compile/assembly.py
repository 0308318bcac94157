"""Parameterized query assembly.

:class:`QueryAssembly` is the SQL builder primitive the clause builders
populate.  It collects SELECT items, WHERE conditions, ORDER BY keys, the row
limit and bound parameters, then serialises them into one statement.  Values
only ever reach the SQL text as placeholders; the values themselves travel in
:attr:`QueryAssembly.params`.

One instance belongs to one compilation call.  Parameter names are unique
within that instance.
"""
from __future__ import annotations

import re
from typing import Any

from exportql.compile.base import CompiledSQL, SQLCompiler
from exportql.errors import QueryAssemblyError
from exportql.schema.types import ParameterType

_DIRECTIONS = frozenset({"ASC", "DESC"})
_GENERATED_NAME = re.compile(r"param_[0-9]+")


class QueryAssembly:
    """Accumulates the clauses and parameters of a single SELECT statement.

    Args:
        compiler: Dialect compiler providing the placeholder style.
    """

    def __init__(self, compiler: SQLCompiler) -> None:
        self._compiler = compiler
        self._select: list[str] = []
        self._from: str | None = None
        self._where: list[str] = []
        self._order_by: list[str] = []
        self._max_results: int | None = None
        self.params: dict[str, Any] = {}
        self.types: dict[str, ParameterType] = {}
        self._counter = 0

    # ------------------------------------------------------------------
    # Clause API
    # ------------------------------------------------------------------

    def add_select(self, expression: str) -> QueryAssembly:
        """Append one item to the SELECT list."""
        self._select.append(expression)
        return self

    def from_(self, table_ref: str) -> QueryAssembly:
        """Set the (already quoted) FROM reference."""
        self._from = table_ref
        return self

    def and_where(self, condition: str) -> QueryAssembly:
        """AND one condition into the WHERE clause."""
        self._where.append(condition)
        return self

    def add_order_by(self, expression: str, order: str = "ASC") -> QueryAssembly:
        """Append one ORDER BY key.

        Raises:
            QueryAssemblyError: If ``order`` is not ``ASC`` or ``DESC``.
        """
        direction = str(order).upper()
        if direction not in _DIRECTIONS:
            raise QueryAssemblyError(
                f"Invalid order direction '{order}'. Expected one of: ASC, DESC."
            )
        self._order_by.append(f"{expression} {direction}")
        return self

    def set_max_results(self, max_results: int) -> QueryAssembly:
        """Limit the number of returned rows.

        Raises:
            QueryAssemblyError: If ``max_results`` is negative.
        """
        if max_results < 0:
            raise QueryAssemblyError(
                f"Max results must be a non-negative integer, got {max_results}."
            )
        self._max_results = max_results
        return self

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------

    def create_named_parameter(
        self,
        value: Any,
        param_type: ParameterType = ParameterType.STRING,
        placeholder: str | None = None,
    ) -> str:
        """Bind ``value`` and return the placeholder to embed in SQL.

        Args:
            value: Value to bind (scalar or list for array types).
            param_type: Parameter type of the bound value.
            placeholder: Explicit parameter name; generated when omitted.

        Raises:
            QueryAssemblyError: If ``placeholder`` is already bound or uses the
                reserved ``param_<n>`` form.
        """
        if placeholder is None:
            name = self._next_generated_name()
        elif placeholder in self.params:
            raise QueryAssemblyError(f"Parameter '{placeholder}' is already bound.")
        elif _GENERATED_NAME.fullmatch(placeholder):
            raise QueryAssemblyError(
                f"Parameter name '{placeholder}' is reserved for generated parameters."
            )
        else:
            name = placeholder
        self.params[name] = value
        self.types[name] = param_type
        return self._compiler.param_placeholder(name)

    def _next_generated_name(self) -> str:
        # Skip names bound through an assembly shared with the caller.
        name = f"param_{self._counter}"
        while name in self.params:
            self._counter += 1
            name = f"param_{self._counter}"
        self._counter += 1
        return name

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------

    @property
    def where_parts(self) -> list[str]:
        """WHERE conditions in the order they were added."""
        return list(self._where)

    @property
    def select_parts(self) -> list[str]:
        """SELECT items in the order they were added."""
        return list(self._select)

    @property
    def order_by_parts(self) -> list[str]:
        """ORDER BY keys (with direction) in the order they were added."""
        return list(self._order_by)

    @property
    def max_results(self) -> int | None:
        return self._max_results

    def get_sql(self) -> str:
        """Render the statement.

        Raises:
            QueryAssemblyError: If no FROM reference was set.
        """
        if self._from is None:
            raise QueryAssemblyError("Cannot render a query without a FROM clause.")

        select_sql = ", ".join(self._select) if self._select else "*"
        parts = [f"SELECT {select_sql}", f"FROM {self._from}"]

        if self._where:
            if len(self._where) == 1:
                parts.append(f"WHERE {self._where[0]}")
            else:
                parts.append("WHERE (" + ") AND (".join(self._where) + ")")

        if self._order_by:
            parts.append(f"ORDER BY {', '.join(self._order_by)}")

        if self._max_results is not None:
            parts.append(f"LIMIT {self._max_results}")

        return " ".join(parts)

    def to_compiled(self) -> CompiledSQL:
        """Render the statement together with its bound parameters."""
        return CompiledSQL(
            sql=self.get_sql(),
            params=dict(self.params),
            types=dict(self.types),
            dialect=self._compiler.dialect_name,
        )
