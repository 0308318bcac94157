"""exportQL – Export query compilation for table-export storage drivers.

Describe an export, get back SQL with bound parameters.

Public API
----------
``compile_export``
    Compile an ExportSpecification (model, dict or JSON string) to
    parameterized SQL.

``parse_export_spec``
    Parse a dict or JSON string into an ExportSpecification.

Re-exported types
-----------------
``ExportSpecification``, ``Filter``, ``SortKey``, ``TableDefinition``,
``ColumnDefinition``, ``CompilerConfig``, ``CompiledSQL``, the type enums, and
all error classes.

Extensibility
-------------
Callers with their own casting rules pass a ``ColumnConverter`` to
``compile_export``; callers embedding the clauses in a larger statement use
``ExportQueryBuilder.populate`` with their own ``QueryAssembly``.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from exportql.compile.assembly import QueryAssembly
from exportql.compile.base import CompiledSQL, SQLCompiler
from exportql.compile.bigquery import BigQueryCompiler
from exportql.compile.builder import ExportQueryBuilder
from exportql.compile.coercion import coerce_value
from exportql.compile.converter import BigQueryColumnConverter, ColumnConverter
from exportql.compile.truncation import ColumnKind, UniqueNameGenerator, classify_column
from exportql.config import DEFAULT_CAST_SIZE, SUPPORTED_DIALECTS, CompilerConfig
from exportql.errors import (
    ColumnNotFoundError,
    ConfigError,
    InvalidFilterError,
    ParseError,
    QueryAssemblyError,
    QueryBuilderError,
    ValueCoercionError,
    exportQLError,
)
from exportql.schema.converters import table_definition_from_sqlalchemy
from exportql.schema.export_spec import ExportSpecification, Filter, SortKey
from exportql.schema.table import ColumnDefinition, TableDefinition
from exportql.schema.types import BaseType, DataType, Operator, ParameterType, SortOrder

__all__ = [
    # Core pipeline
    "compile_export",
    "parse_export_spec",
    # Request models
    "ExportSpecification",
    "Filter",
    "SortKey",
    "DataType",
    "Operator",
    "SortOrder",
    # Column metadata
    "TableDefinition",
    "ColumnDefinition",
    "BaseType",
    "table_definition_from_sqlalchemy",
    # Configuration
    "CompilerConfig",
    "DEFAULT_CAST_SIZE",
    "SUPPORTED_DIALECTS",
    # Compilation
    "CompiledSQL",
    "SQLCompiler",
    "BigQueryCompiler",
    "ExportQueryBuilder",
    "QueryAssembly",
    "ParameterType",
    "ColumnConverter",
    "BigQueryColumnConverter",
    "ColumnKind",
    "classify_column",
    "UniqueNameGenerator",
    "coerce_value",
    # Errors
    "exportQLError",
    "ParseError",
    "ConfigError",
    "QueryAssemblyError",
    "QueryBuilderError",
    "InvalidFilterError",
    "ColumnNotFoundError",
    "ValueCoercionError",
]


def parse_export_spec(raw: str | dict[str, Any]) -> ExportSpecification:
    """Parse a JSON string or dict into an :class:`ExportSpecification`.

    Raises:
        ParseError: If ``raw`` is not valid JSON or not a valid specification.
    """
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ParseError(f"Invalid JSON: {exc}", raw=raw) from exc

    try:
        return ExportSpecification.model_validate(raw)
    except PydanticValidationError as exc:
        raise ParseError(f"ExportSpecification structure is invalid: {exc}", raw=raw) from exc


def compile_export(
    spec: ExportSpecification | str | dict[str, Any],
    table: TableDefinition | None = None,
    config: CompilerConfig | None = None,
    converter: ColumnConverter | None = None,
) -> CompiledSQL:
    """Compile an export specification to parameterized SQL.

    This is the main entry point::

        compiled = exportql.compile_export(
            spec_json,
            table=table_definition,
            config=CompilerConfig(truncate_size=16384),
        )
        job_config = bigquery.QueryJobConfig(query_parameters=[...])
        client.query(compiled.sql, job_config=job_config)

    Args:
        spec: The export request, as a model, a dict or a JSON string.
        table: Column metadata; required for truncation.  When given and no
            converter is supplied, the default converter skips casts for
            columns already stored in the requested type.
        config: Compiler configuration; defaults to ``CompilerConfig()``.
        converter: Custom column-type converter.

    Returns:
        ``CompiledSQL`` with ``sql``, ``params``, ``types`` and ``dialect``.

    Raises:
        ParseError: If ``spec`` is a dict / string that does not parse.
        QueryBuilderError: (or subclass) if the specification cannot be compiled.
    """
    if config is None:
        config = CompilerConfig()
    if not isinstance(spec, ExportSpecification):
        spec = parse_export_spec(spec)

    compiler = BigQueryCompiler()
    if converter is None:
        converter = BigQueryColumnConverter(compiler, table)
    return ExportQueryBuilder(compiler, converter, config).build(spec, table)
