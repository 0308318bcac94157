"""Custom exception hierarchy for exportQL.

All public errors inherit from exportQLError so callers can catch the base
class for any exportQL-specific failure.  ``QueryBuilderError`` and its
subclasses mean "bad input to the compiler"; ``QueryAssemblyError`` comes from
the query-assembly primitive itself.
"""
from __future__ import annotations


class exportQLError(Exception):
    """Base exception for all exportQL errors."""


class ParseError(exportQLError):
    """Raised when input cannot be parsed as a valid ExportSpecification.

    Args:
        message: Human-readable description.
        raw: The raw input that failed to parse.
    """

    def __init__(self, message: str, raw: object | None = None) -> None:
        super().__init__(message)
        self.raw = raw


class ConfigError(exportQLError):
    """Raised when a CompilerConfig is misconfigured."""


class QueryAssemblyError(exportQLError):
    """Raised by :class:`~exportql.compile.assembly.QueryAssembly` on misuse."""


class QueryBuilderError(exportQLError):
    """Raised when an export specification cannot be compiled.

    Args:
        message: Human-readable description.
        column: The column being compiled when the error occurred.
    """

    def __init__(self, message: str, column: str | None = None) -> None:
        super().__init__(message)
        self.column = column


class InvalidFilterError(QueryBuilderError):
    """Raised when a multi-value filter uses an operator other than eq / ne."""

    def __init__(self, column: str, operator: str) -> None:
        super().__init__(
            f'whereFilter with multiple values can be used only with "eq", "ne" '
            f'operators (column "{column}" uses "{operator}").',
            column=column,
        )
        self.operator = operator


class ColumnNotFoundError(QueryBuilderError):
    """Raised when a column requested for truncation has no definition."""

    def __init__(self, column: str) -> None:
        super().__init__(f'Column "{column}" not found in table definition.', column=column)


class ValueCoercionError(QueryBuilderError):
    """Raised when a literal cannot be converted to its declared data type.

    Args:
        value: The raw string literal.
        data_type: The declared data type name.
        column: The column the literal belongs to, when known.
    """

    def __init__(self, value: str, data_type: str, column: str | None = None) -> None:
        where = f' for column "{column}"' if column else ""
        super().__init__(
            f"Value {value!r}{where} is not a valid {data_type} literal.",
            column=column,
        )
        self.value = value
        self.data_type = data_type
