"""exportQL compilation layer: ExportSpecification → parameterized SQL."""
from exportql.compile.assembly import QueryAssembly
from exportql.compile.base import CompiledSQL, SQLCompiler
from exportql.compile.bigquery import BigQueryCompiler
from exportql.compile.builder import ExportQueryBuilder
from exportql.compile.converter import BigQueryColumnConverter, ColumnConverter

__all__ = [
    "CompiledSQL",
    "SQLCompiler",
    "BigQueryCompiler",
    "ExportQueryBuilder",
    "QueryAssembly",
    "ColumnConverter",
    "BigQueryColumnConverter",
]
