"""exportQL schema models: ExportSpecification, TableDefinition, type enums."""
from exportql.schema.export_spec import ExportSpecification, Filter, SortKey
from exportql.schema.table import ColumnDefinition, TableDefinition
from exportql.schema.types import (
    BaseType,
    DataType,
    Operator,
    ParameterType,
    SortOrder,
)

__all__ = [
    "ExportSpecification",
    "Filter",
    "SortKey",
    "ColumnDefinition",
    "TableDefinition",
    "BaseType",
    "DataType",
    "Operator",
    "ParameterType",
    "SortOrder",
]
