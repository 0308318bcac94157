"""Utilities for building a TableDefinition from external sources.

SQLAlchemy converter
--------------------
:func:`table_definition_from_sqlalchemy` reflects one table from a live
database engine (for BigQuery, an engine created through the
``sqlalchemy-bigquery`` dialect) and returns a
:class:`~exportql.schema.table.TableDefinition` ready for truncation.

Install the optional dependency before using this module::

    pip install "exportql[sqlalchemy]"

Example::

    from sqlalchemy import create_engine
    from exportql.schema.converters import table_definition_from_sqlalchemy

    engine = create_engine("bigquery://my-project/my_dataset")
    table = table_definition_from_sqlalchemy(engine, "orders")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from exportql.schema.table import ColumnDefinition, TableDefinition

if TYPE_CHECKING:
    from sqlalchemy import Engine, Table
    from sqlalchemy.types import TypeEngine


def table_definition_from_sqlalchemy(
    engine: Engine,
    table_name: str,
    *,
    schema: str | None = None,
) -> TableDefinition:
    """Build a :class:`TableDefinition` by reflecting one table.

    Args:
        engine: A connected :class:`sqlalchemy.engine.Engine` instance.
        table_name: Name of the table to reflect.
        schema: Optional schema (BigQuery dataset) name.

    Returns:
        A fully populated :class:`TableDefinition`.

    Raises:
        ImportError: If ``sqlalchemy`` is not installed.
        sqlalchemy.exc.NoSuchTableError: If the table does not exist.
    """
    try:
        from sqlalchemy import MetaData as _MetaData
        from sqlalchemy import Table as _Table
    except ImportError as exc:
        raise ImportError(
            "SQLAlchemy is required for table_definition_from_sqlalchemy(). "
            'Install it with: pip install "exportql[sqlalchemy]"'
        ) from exc

    metadata = _MetaData()
    with engine.connect() as conn:
        table = _Table(table_name, metadata, autoload_with=conn, schema=schema)
    return table_definition_from_table(table)


def table_definition_from_table(table: Table) -> TableDefinition:
    """Convert an existing :class:`sqlalchemy.Table` into a TableDefinition.

    Separated from :func:`table_definition_from_sqlalchemy` so declarative
    models and already-reflected metadata can be reused without a connection.
    """
    return TableDefinition(
        name=table.name,
        columns=[
            ColumnDefinition(
                name=col.name,
                type=bigquery_type_name(col.type),
                # Reflected columns report True/False; treat None as nullable.
                nullable=col.nullable is not False,
            )
            for col in table.columns
        ],
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def bigquery_type_name(sa_type: TypeEngine) -> str:
    """Map a SQLAlchemy column type to a BigQuery type name.

    Generic SQLAlchemy types are mapped by class; anything else (for example
    ``GEOGRAPHY`` from ``sqlalchemy-bigquery`` or a ``UserDefinedType``) falls
    back to the type's compiled name.
    """
    from sqlalchemy import types as sqltypes

    # Order matters: Float subclasses Numeric, DateTime carries the timezone.
    if isinstance(sa_type, sqltypes.ARRAY):
        return "ARRAY"
    if isinstance(sa_type, sqltypes.JSON):
        return "JSON"
    if isinstance(sa_type, sqltypes.Boolean):
        return "BOOL"
    if isinstance(sa_type, sqltypes.Integer):
        return "INT64"
    if isinstance(sa_type, sqltypes.Float):
        return "FLOAT64"
    if isinstance(sa_type, sqltypes.Numeric):
        return "NUMERIC"
    if isinstance(sa_type, sqltypes.String):
        return "STRING"
    if isinstance(sa_type, sqltypes.DateTime):
        return "TIMESTAMP" if sa_type.timezone else "DATETIME"
    if isinstance(sa_type, sqltypes.Date):
        return "DATE"
    if isinstance(sa_type, sqltypes.Time):
        return "TIME"
    if isinstance(sa_type, sqltypes.LargeBinary):
        return "BYTES"
    if isinstance(sa_type, sqltypes.NullType):
        return "STRING"
    return str(sa_type)
