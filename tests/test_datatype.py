import datetime
from decimal import Decimal

import pytest

from aircontrib.graph.datatype import (
    DataType,
    get_data_type,
    is_simple_type,
    to_type_enum,
)


@pytest.mark.parametrize(
    "data_type, name",
    [
        (DataType.STRING, "String"),
        (DataType.INTEGER, "Integer"),
        (DataType.LONG, "Long"),
        (DataType.DOUBLE, "Double"),
        (DataType.BOOLEAN, "Boolean"),
        (DataType.DATE, "Date"),
    ],
)
def test_str_names(data_type, name):
    assert str(data_type) == name


@pytest.mark.parametrize(
    "text, expected",
    [
        ("string", DataType.STRING),
        ("Integer", DataType.INTEGER),
        ("int", DataType.INTEGER),
        ("LONG", DataType.LONG),
        ("double", DataType.DOUBLE),
        ("number", DataType.DOUBLE),
        ("boolean", DataType.BOOLEAN),
        ("bool", DataType.BOOLEAN),
        ("date", DataType.DATE),
    ],
)
def test_to_type_enum_known(text, expected):
    assert to_type_enum(text) == (expected, True)


def test_to_type_enum_unknown_defaults_to_string():
    assert to_type_enum("geo") == (DataType.STRING, False)


@pytest.mark.parametrize("data_type", list(DataType))
def test_name_round_trip(data_type):
    assert to_type_enum(str(data_type)) == (data_type, True)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("x", DataType.STRING),
        (5, DataType.INTEGER),
        (2**40, DataType.LONG),
        (1.5, DataType.DOUBLE),
        (Decimal("1.5"), DataType.DOUBLE),
        (Decimal("15"), DataType.LONG),
        (True, DataType.BOOLEAN),
        (datetime.datetime(2020, 1, 1), DataType.DATE),
    ],
)
def test_get_data_type(value, expected):
    assert get_data_type(value) is expected


@pytest.mark.parametrize("value", [None, object(), [1], {"a": 1}])
def test_get_data_type_rejects_unknown(value):
    with pytest.raises(TypeError):
        get_data_type(value)


@pytest.mark.parametrize("value", ["a", 1, 1.5, Decimal("2"), False])
def test_is_simple_type_true(value):
    assert is_simple_type(value) is True


@pytest.mark.parametrize("value", [None, [1], {"a": 1}, 2**40, datetime.datetime(2020, 1, 1)])
def test_is_simple_type_false(value):
    assert is_simple_type(value) is False