"""Enums and lookup tables shared by the export models and the compiler.

Filter and sort inputs carry an explicit :class:`DataType`; column metadata
carries a BigQuery type name and a coarser :class:`BaseType`.  The operator
tables are the single source of truth for operator-to-SQL mapping.
"""

from __future__ import annotations

from enum import Enum

# ---------------------------------------------------------------------------
# Export request enums
# ---------------------------------------------------------------------------


class DataType(str, Enum):
    """Semantic type a filter or sort key is compared / sorted as."""

    STRING = "STRING"
    INTEGER = "INTEGER"
    DOUBLE = "DOUBLE"
    BIGINT = "BIGINT"
    REAL = "REAL"
    DECIMAL = "DECIMAL"
    BOOLEAN = "BOOLEAN"
    DATE = "DATE"
    TIMESTAMP = "TIMESTAMP"


class Operator(str, Enum):
    """Comparison operators accepted by a filter."""

    EQ = "eq"
    NE = "ne"
    GT = "gt"
    GE = "ge"
    LT = "lt"
    LE = "le"


class SortOrder(str, Enum):
    """Sort direction of an ORDER BY key."""

    ASC = "ASC"
    DESC = "DESC"


class ParameterType(str, Enum):
    """BigQuery query-parameter types used when binding values."""

    STRING = "STRING"
    INT64 = "INT64"
    FLOAT64 = "FLOAT64"
    BOOL = "BOOL"
    DATE = "DATE"
    TIMESTAMP = "TIMESTAMP"
    INT64_ARRAY = "ARRAY<INT64>"
    STRING_ARRAY = "ARRAY<STRING>"


class BaseType(str, Enum):
    """Backend-independent column category."""

    STRING = "STRING"
    INTEGER = "INTEGER"
    NUMERIC = "NUMERIC"
    FLOAT = "FLOAT"
    BOOLEAN = "BOOLEAN"
    DATE = "DATE"
    TIMESTAMP = "TIMESTAMP"


# ---------------------------------------------------------------------------
# Data type groups
# ---------------------------------------------------------------------------

#: Data types whose literals are bound as Python ``int``.
INTEGER_DATA_TYPES: frozenset[DataType] = frozenset({DataType.INTEGER, DataType.BIGINT})

#: Data types whose literals are bound as Python ``float``.
FLOAT_DATA_TYPES: frozenset[DataType] = frozenset(
    {DataType.REAL, DataType.DECIMAL, DataType.DOUBLE}
)

#: Parameter type used for a single bound literal of each data type.
PARAMETER_TYPES: dict[DataType, ParameterType] = {
    DataType.STRING: ParameterType.STRING,
    DataType.INTEGER: ParameterType.INT64,
    DataType.BIGINT: ParameterType.INT64,
    DataType.REAL: ParameterType.FLOAT64,
    DataType.DOUBLE: ParameterType.FLOAT64,
    DataType.DECIMAL: ParameterType.FLOAT64,
    DataType.BOOLEAN: ParameterType.BOOL,
    DataType.DATE: ParameterType.DATE,
    DataType.TIMESTAMP: ParameterType.TIMESTAMP,
}

# ---------------------------------------------------------------------------
# Operator tables
# ---------------------------------------------------------------------------

#: Single-value comparison tokens.
OPERATOR_SINGLE_VALUE: dict[Operator, str] = {
    Operator.EQ: "=",
    Operator.NE: "<>",
    Operator.GT: ">",
    Operator.GE: ">=",
    Operator.LT: "<",
    Operator.LE: "<=",
}

#: Set-membership tokens; only eq / ne may carry more than one value.
OPERATOR_MULTI_VALUE: dict[Operator, str] = {
    Operator.EQ: "IN",
    Operator.NE: "NOT IN",
}

# ---------------------------------------------------------------------------
# BigQuery column types
# ---------------------------------------------------------------------------

TYPE_ARRAY = "ARRAY"
TYPE_GEOGRAPHY = "GEOGRAPHY"
TYPE_JSON = "JSON"
TYPE_STRUCT = "STRUCT"
TYPE_TIME = "TIME"
TYPE_TIMESTAMP = "TIMESTAMP"
TYPE_DATETIME = "DATETIME"

#: Types whose native string form is short and formatted by BigQuery.
TIME_LIKE_TYPES: frozenset[str] = frozenset({TYPE_TIME, TYPE_TIMESTAMP, TYPE_DATETIME})

#: Legacy names reported by the BigQuery API for nested types.
_TYPE_ALIASES: dict[str, str] = {"RECORD": TYPE_STRUCT}

_BASE_TYPES: dict[str, BaseType] = {
    "INT64": BaseType.INTEGER,
    "INT": BaseType.INTEGER,
    "SMALLINT": BaseType.INTEGER,
    "INTEGER": BaseType.INTEGER,
    "BIGINT": BaseType.INTEGER,
    "TINYINT": BaseType.INTEGER,
    "BYTEINT": BaseType.INTEGER,
    "NUMERIC": BaseType.NUMERIC,
    "DECIMAL": BaseType.NUMERIC,
    "BIGNUMERIC": BaseType.NUMERIC,
    "BIGDECIMAL": BaseType.NUMERIC,
    "FLOAT64": BaseType.FLOAT,
    "FLOAT": BaseType.FLOAT,
    "BOOL": BaseType.BOOLEAN,
    "BOOLEAN": BaseType.BOOLEAN,
    "DATE": BaseType.DATE,
    "DATETIME": BaseType.TIMESTAMP,
    "TIMESTAMP": BaseType.TIMESTAMP,
}


def normalize_type_name(type_name: str) -> str:
    """Return the bare upper-case type name.

    ``"array<int64>"`` becomes ``"ARRAY"`` and ``"NUMERIC(38, 9)"`` becomes
    ``"NUMERIC"``.  The legacy ``RECORD`` name becomes ``"STRUCT"``.
    """
    name = type_name.strip().upper()
    for sep in ("<", "("):
        name = name.split(sep, 1)[0]
    name = name.strip()
    return _TYPE_ALIASES.get(name, name)


def base_type_for(type_name: str) -> BaseType:
    """Return the :class:`BaseType` of a BigQuery type name.

    Everything that is not numeric, boolean, a date or a timestamp falls into
    ``STRING`` (including ``TIME``, ``BYTES``, ``JSON`` and nested types).
    """
    return _BASE_TYPES.get(normalize_type_name(type_name), BaseType.STRING)
