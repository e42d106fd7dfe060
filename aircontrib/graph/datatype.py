"""Attribute data types used by graph models."""

from __future__ import annotations

import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


class DataType(Enum):
    """Type of an attribute value."""

    STRING = 0
    INTEGER = 1
    LONG = 2
    DOUBLE = 3
    BOOLEAN = 4
    DATE = 5

    def __str__(self) -> str:
        return self.name.capitalize()


_TYPE_NAMES = {
    "string": DataType.STRING,
    "integer": DataType.INTEGER,
    "int": DataType.INTEGER,
    "long": DataType.LONG,
    "double": DataType.DOUBLE,
    "number": DataType.DOUBLE,
    "boolean": DataType.BOOLEAN,
    "bool": DataType.BOOLEAN,
    "date": DataType.DATE,
}


def to_type_enum(type_str: str) -> tuple[DataType, bool]:
    """Return the data type for a case-insensitive name and whether it was known.

    Unknown names map to ``DataType.STRING``.
    """
    data_type = _TYPE_NAMES.get(type_str.lower())
    if data_type is None:
        return DataType.STRING, False
    return data_type, True


def _fits_int32(value: int) -> bool:
    return _INT32_MIN <= value <= _INT32_MAX


def get_data_type(val: Any) -> DataType:
    """Infer the data type of a value.

    Integers within the 32-bit range are ``INTEGER``, wider ones ``LONG``;
    a :class:`~decimal.Decimal` is ``DOUBLE`` when written with a decimal point.
    """
    if isinstance(val, bool):
        return DataType.BOOLEAN
    if isinstance(val, str):
        return DataType.STRING
    if isinstance(val, int):
        return DataType.INTEGER if _fits_int32(val) else DataType.LONG
    if isinstance(val, float):
        return DataType.DOUBLE
    if isinstance(val, Decimal):
        return DataType.DOUBLE if "." in str(val) else DataType.LONG
    if isinstance(val, datetime.datetime):
        return DataType.DATE
    raise TypeError(f"unable to determine type of {val!r}")


def is_simple_type(val: Any) -> bool:
    """Whether ``val`` is a scalar that can be stored directly."""
    if isinstance(val, (bool, str, float, Decimal)):
        return True
    if isinstance(val, int):
        return _fits_int32(val)
    return False