"""Compiler abstractions: CompiledSQL and the SQLCompiler ABC.

``SQLCompiler`` owns the dialect-specific steps (parameter placeholder style
and identifier quoting).  Every table and column reference emitted by the
clause builders goes through :meth:`SQLCompiler.quote_identifier`.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from exportql.schema.types import ParameterType


@dataclass
class CompiledSQL:
    """The output of a successful compilation.

    Attributes:
        sql: The compiled SQL string with named placeholders.
        params: Bound values keyed by parameter name.
        types: Parameter type of each bound value, keyed by parameter name.
        dialect: The target dialect (``'bigquery'``).
    """

    sql: str
    params: dict[str, Any]
    types: dict[str, ParameterType]
    dialect: str

    def typed_params(self) -> list[tuple[str, ParameterType, Any]]:
        """Return ``(name, type, value)`` triples in binding order.

        Convenient for building driver-specific parameter objects, e.g.
        ``ScalarQueryParameter`` / ``ArrayQueryParameter`` for BigQuery.
        """
        return [(name, self.types[name], value) for name, value in self.params.items()]


class SQLCompiler(ABC):
    """Abstract base for dialect-specific SQL compilers."""

    @abstractmethod
    def param_placeholder(self, name: str) -> str:
        """Return the SQL placeholder string for a named parameter.

        Args:
            name: Parameter name (e.g. ``'param_0'``, ``'changedSince'``).

        Returns:
            Dialect-specific placeholder string.
        """

    @abstractmethod
    def quote_identifier(self, name: str) -> str:
        """Return a properly-quoted SQL identifier.

        Args:
            name: Unquoted identifier (table or column name).

        Returns:
            Quoted identifier.
        """

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the canonical dialect name."""

    def quote_qualified(self, *parts: str) -> str:
        """Quote each part and join them with dots.

        ``quote_qualified("orders", "id")`` gives the table-qualified column
        reference used throughout the clause builders.
        """
        return ".".join(self.quote_identifier(p) for p in parts)
