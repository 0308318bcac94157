"""Typed binding of filter literals.

Filter values arrive as strings.  :func:`coerce_value` turns one of them into
the Python value bound for its declared :class:`~exportql.schema.types.DataType`:

========================  ==========
INTEGER, BIGINT           ``int``
REAL, DECIMAL, DOUBLE     ``float``
everything else           ``str`` (unchanged)
========================  ==========

Numeric literals must be plain ASCII decimals (an optional sign, digits, and
for the float types a fraction and exponent).  Anything else, including
``nan``, ``inf`` and ``1_000``, raises :class:`~exportql.errors.ValueCoercionError`.
"""
from __future__ import annotations

import math
import re

from exportql.errors import ValueCoercionError
from exportql.schema.types import FLOAT_DATA_TYPES, INTEGER_DATA_TYPES, DataType

#: A coerced literal.
CoercedValue = int | float | str

_INTEGER_LITERAL = re.compile(r"[+-]?[0-9]+")
_FLOAT_LITERAL = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def coerce_value(data_type: DataType, raw: str, column: str | None = None) -> CoercedValue:
    """Convert ``raw`` to the bound value for ``data_type``.

    Args:
        data_type: Declared type of the filter.
        raw: The string literal.
        column: Column name, used only in the error message.

    Returns:
        ``int``, ``float`` or the unchanged ``str``.

    Raises:
        ValueCoercionError: If a numeric type gets a non-numeric literal.
    """
    if data_type in INTEGER_DATA_TYPES:
        literal = raw.strip()
        if not _INTEGER_LITERAL.fullmatch(literal):
            raise ValueCoercionError(raw, data_type.value, column)
        try:
            return int(literal)
        except ValueError as exc:
            # Exceeds the interpreter's integer string conversion limit.
            raise ValueCoercionError(raw, data_type.value, column) from exc
    if data_type in FLOAT_DATA_TYPES:
        literal = raw.strip()
        if not _FLOAT_LITERAL.fullmatch(literal):
            raise ValueCoercionError(raw, data_type.value, column)
        value = float(literal)
        if not math.isfinite(value):
            raise ValueCoercionError(raw, data_type.value, column)
        return value
    return raw


def coerce_values(data_type: DataType, raws: list[str], column: str | None = None) -> list[CoercedValue]:
    """Coerce every literal of a multi-value filter, preserving order."""
    return [coerce_value(data_type, raw, column) for raw in raws]
