"""Unit tests for exportql.schema.converters."""

from __future__ import annotations

import pytest
from sqlalchemy import (
    ARRAY,
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    Integer,
    LargeBinary,
    MetaData,
    Numeric,
    String,
    Table,
    Time,
    create_engine,
    text,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import NoSuchTableError
from sqlalchemy.types import NullType, UserDefinedType

from exportql.compile.truncation import ColumnKind, classify_column
from exportql.schema.converters import (
    bigquery_type_name,
    table_definition_from_sqlalchemy,
    table_definition_from_table,
)
from exportql.schema.types import BaseType


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class Geography(UserDefinedType):
    cache_ok = True

    def get_col_spec(self, **kw):
        return "GEOGRAPHY"


def _make_engine() -> Engine:
    """Return an in-memory SQLite engine."""
    return create_engine("sqlite:///:memory:")


def _orders_schema(engine: Engine) -> None:
    with engine.begin() as conn:
        conn.execute(
            text(
                """
                CREATE TABLE orders (
                    id         INTEGER NOT NULL,
                    name       TEXT,
                    payload    JSON,
                    created_at DATETIME,
                    opened_at  TIME,
                    amount     NUMERIC,
                    price      FLOAT,
                    active     BOOLEAN,
                    shipped_on DATE,
                    raw        BLOB
                )
                """
            )
        )


# ---------------------------------------------------------------------------
# bigquery_type_name
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("sa_type", "expected"),
    [
        (ARRAY(String), "ARRAY"),
        (JSON(), "JSON"),
        (Boolean(), "BOOL"),
        (Integer(), "INT64"),
        (Float(), "FLOAT64"),
        (Numeric(38, 9), "NUMERIC"),
        (String(50), "STRING"),
        (DateTime(timezone=True), "TIMESTAMP"),
        (DateTime(), "DATETIME"),
        (Date(), "DATE"),
        (Time(), "TIME"),
        (LargeBinary(), "BYTES"),
        (NullType(), "STRING"),
        (Geography(), "GEOGRAPHY"),
    ],
)
def test_bigquery_type_name(sa_type, expected):
    assert bigquery_type_name(sa_type) == expected


# ---------------------------------------------------------------------------
# table_definition_from_table
# ---------------------------------------------------------------------------


class TestFromTable:
    def _table(self) -> Table:
        return Table(
            "events",
            MetaData(),
            Column("id", Integer, nullable=False),
            Column("tags", ARRAY(String)),
            Column("area", Geography()),
            Column("at", DateTime(timezone=True)),
        )

    def test_columns_in_order(self):
        definition = table_definition_from_table(self._table())
        assert definition.name == "events"
        assert definition.column_names == ["id", "tags", "area", "at"]

    def test_types_and_base_types(self):
        definition = table_definition_from_table(self._table())
        assert definition.get_column("id").base_type == BaseType.INTEGER
        assert definition.get_column("tags").type == "ARRAY"
        assert definition.get_column("area").type == "GEOGRAPHY"
        assert definition.get_column("at").base_type == BaseType.TIMESTAMP

    def test_nullable(self):
        definition = table_definition_from_table(self._table())
        assert definition.get_column("id").nullable is False
        assert definition.get_column("tags").nullable is True

    def test_truncation_kinds(self):
        definition = table_definition_from_table(self._table())
        kinds = [classify_column(c) for c in definition.columns]
        assert kinds == [
            ColumnKind.OTHER,
            ColumnKind.ARRAY,
            ColumnKind.GEOGRAPHY,
            ColumnKind.TIME_LIKE,
        ]


# ---------------------------------------------------------------------------
# table_definition_from_sqlalchemy
# ---------------------------------------------------------------------------


class TestFromSqlalchemy:
    @pytest.fixture
    def engine(self) -> Engine:
        engine = _make_engine()
        _orders_schema(engine)
        return engine

    def test_reflects_columns(self, engine):
        definition = table_definition_from_sqlalchemy(engine, "orders")
        assert definition.name == "orders"
        assert definition.column_names == [
            "id",
            "name",
            "payload",
            "created_at",
            "opened_at",
            "amount",
            "price",
            "active",
            "shipped_on",
            "raw",
        ]

    def test_reflected_types(self, engine):
        definition = table_definition_from_sqlalchemy(engine, "orders")
        types = {c.name: c.type for c in definition.columns}
        assert types == {
            "id": "INT64",
            "name": "STRING",
            "payload": "JSON",
            "created_at": "DATETIME",
            "opened_at": "TIME",
            "amount": "NUMERIC",
            "price": "FLOAT64",
            "active": "BOOL",
            "shipped_on": "DATE",
            "raw": "BYTES",
        }

    def test_reflected_nullability(self, engine):
        definition = table_definition_from_sqlalchemy(engine, "orders")
        assert definition.get_column("id").nullable is False
        assert definition.get_column("name").nullable is True

    def test_missing_table(self, engine):
        with pytest.raises(NoSuchTableError):
            table_definition_from_sqlalchemy(engine, "missing")
