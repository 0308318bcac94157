"""Unit tests for the export request and column metadata models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from exportql.compile.converter import BigQueryColumnConverter
from exportql.compile.truncation import ColumnKind, classify_column
from exportql.schema.export_spec import ExportSpecification, Filter, SortKey
from exportql.schema.table import ColumnDefinition, TableDefinition
from exportql.schema.types import (
    BaseType,
    DataType,
    Operator,
    SortOrder,
    base_type_for,
    normalize_type_name,
)


# ---------------------------------------------------------------------------
# Type names
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("string", "STRING"),
        ("ARRAY<INT64>", "ARRAY"),
        ("struct<a int64>", "STRUCT"),
        ("NUMERIC(38, 9)", "NUMERIC"),
        (" json ", "JSON"),
        ("RECORD", "STRUCT"),
        ("record<a int64>", "STRUCT"),
    ],
)
def test_normalize_type_name(raw, expected):
    assert normalize_type_name(raw) == expected


@pytest.mark.parametrize(
    ("type_name", "expected"),
    [
        ("INT64", BaseType.INTEGER),
        ("BIGNUMERIC(76, 38)", BaseType.NUMERIC),
        ("FLOAT64", BaseType.FLOAT),
        ("FLOAT", BaseType.FLOAT),
        ("BOOL", BaseType.BOOLEAN),
        ("BOOLEAN", BaseType.BOOLEAN),
        ("DATE", BaseType.DATE),
        ("DATETIME", BaseType.TIMESTAMP),
        ("TIMESTAMP", BaseType.TIMESTAMP),
        ("TIME", BaseType.STRING),
        ("BYTES", BaseType.STRING),
        ("GEOGRAPHY", BaseType.STRING),
    ],
)
def test_base_type_for(type_name, expected):
    assert base_type_for(type_name) == expected


# ---------------------------------------------------------------------------
# ColumnDefinition
# ---------------------------------------------------------------------------


class TestColumnDefinition:
    def test_base_type_is_derived(self):
        col = ColumnDefinition(name="n", type="numeric(10, 2)")
        assert col.type == "NUMERIC"
        assert col.base_type == BaseType.NUMERIC
        assert col.nullable is True

    def test_explicit_base_type_wins(self):
        col = ColumnDefinition(name="t", type="TIMESTAMP", base_type="STRING")
        assert col.base_type == BaseType.STRING

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            ColumnDefinition(name="x", type="STRING", length=5)

    def test_table_lookup(self, table):
        assert table.get_column("tags").type == "ARRAY"
        assert table.get_column("nope") is None
        assert table.column_names[:3] == ["id", "name", "tags"]
        assert table.get_column("id").nullable is False


@pytest.mark.parametrize(
    ("column", "kind"),
    [
        ("tags", ColumnKind.ARRAY),
        ("location", ColumnKind.GEOGRAPHY),
        ("payload", ColumnKind.JSON),
        ("address", ColumnKind.JSON),
        ("name", ColumnKind.STRING_LIKE),
        ("opened_at", ColumnKind.STRING_LIKE),
        ("created_at", ColumnKind.TIME_LIKE),
        ("updated_at", ColumnKind.TIME_LIKE),
        ("id", ColumnKind.OTHER),
        ("amount", ColumnKind.OTHER),
        ("shipped_on", ColumnKind.OTHER),
    ],
)
def test_classify_column(table, column, kind):
    assert classify_column(table.get_column(column)) == kind


def test_time_with_timestamp_base_type_is_time_like():
    col = ColumnDefinition(name="t", type="TIME", base_type="TIMESTAMP")
    assert classify_column(col) == ColumnKind.TIME_LIKE


@pytest.mark.parametrize(
    ("type_name", "kind"),
    [
        ("FLOAT", ColumnKind.OTHER),
        ("BOOLEAN", ColumnKind.OTHER),
        ("RECORD", ColumnKind.JSON),
    ],
)
def test_legacy_type_names(type_name, kind):
    assert classify_column(ColumnDefinition(name="c", type=type_name)) == kind


@pytest.mark.parametrize(
    ("type_name", "data_type"),
    [("FLOAT", DataType.DOUBLE), ("BOOLEAN", DataType.BOOLEAN)],
)
def test_legacy_type_names_skip_native_cast(compiler, type_name, data_type):
    table = TableDefinition(name="orders", columns=[ColumnDefinition(name="c", type=type_name)])
    converter = BigQueryColumnConverter(compiler, table)
    assert converter.convert_column_by_data_type("orders", "c", data_type) == "`orders`.`c`"


# ---------------------------------------------------------------------------
# ExportSpecification
# ---------------------------------------------------------------------------


class TestExportSpecification:
    def test_defaults(self):
        spec = ExportSpecification(table_name="orders")
        assert spec.dataset is None
        assert spec.columns == []
        assert spec.filters == []
        assert spec.order_by == []
        assert spec.limit == 0
        assert spec.change_since == ""
        assert spec.change_until == ""
        assert spec.truncate_large_columns is False

    def test_enum_values_accepted_as_strings(self):
        spec = ExportSpecification.model_validate(
            {
                "table_name": "orders",
                "filters": [
                    {"column_name": "id", "operator": "ge", "values": ["1"], "data_type": "BIGINT"}
                ],
                "order_by": [{"column_name": "id", "data_type": "INTEGER", "direction": "DESC"}],
            }
        )
        assert spec.filters[0].operator == Operator.GE
        assert spec.filters[0].data_type == DataType.BIGINT
        assert spec.order_by[0].direction == SortOrder.DESC

    def test_filter_requires_a_value(self):
        with pytest.raises(ValidationError):
            Filter(column_name="id", values=[])

    def test_unknown_operator_rejected(self):
        with pytest.raises(ValidationError):
            Filter(column_name="id", operator="like", values=["a"])

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            ExportSpecification(table_name="orders", offset=10)

    def test_is_multi_value(self):
        assert not Filter(column_name="a", values=["1"]).is_multi_value
        assert Filter(column_name="a", values=["1", "2"]).is_multi_value

    def test_sort_key_defaults(self):
        key = SortKey(column_name="a")
        assert key.data_type == DataType.STRING
        assert key.direction == SortOrder.ASC

    def test_frozen(self):
        spec = ExportSpecification(table_name="orders")
        with pytest.raises(ValidationError):
            spec.limit = 5
