"""Hashing and value conversion helpers for graph entities."""

from __future__ import annotations

import datetime
import hashlib
import json
import math
import re
from decimal import Decimal
from typing import Any, Iterable

_INT32 = (-(2**31), 2**31 - 1)
_INT64 = (-(2**63), 2**63 - 1)


def _float_text(value: float) -> str:
    """Shortest text for a float, plain unless very large or very small."""
    magnitude = abs(value)
    if magnitude != 0 and (magnitude < 1e-6 or magnitude >= 1e21):
        return re.sub(r"e-0(\d)$", r"e-\1", repr(value))
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _string_json(text: str) -> str:
    encoded = json.dumps(text, ensure_ascii=False)
    for char, escape in (
        ("<", "\\u003c"),
        (">", "\\u003e"),
        ("&", "\\u0026"),
        ("\u2028", "\\u2028"),
        ("\u2029", "\\u2029"),
    ):
        encoded = encoded.replace(char, escape)
    return encoded


def _marshal(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"unsupported value: {value!r}")
        return _float_text(value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, str):
        return _string_json(value)
    if isinstance(value, datetime.datetime):
        return _string_json(value.isoformat())
    if isinstance(value, dict):
        items = sorted((str(key), item) for key, item in value.items())
        return "{" + ",".join(f"{_string_json(k)}:{_marshal(v)}" for k, v in items) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_marshal(item) for item in value) + "]"
    raise TypeError(f"unsupported type: {type(value).__name__}")


def _marshal_or_empty(value: Any) -> str:
    try:
        return _marshal(value)
    except (TypeError, ValueError):
        return ""


def hash_key(key: Iterable[Any]) -> str:
    """MD5 hex digest of the compact JSON of each key element, concatenated."""
    text = "".join(_marshal_or_empty(element) for element in key)
    return hashlib.md5(text.encode("utf-8")).hexdigest()


def cast_string(value: Any) -> str:
    """Text form of a value; ``None`` becomes the empty string."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "+Inf" if value > 0 else "-Inf"
        return _float_text(value)
    return str(value)


def _to_int(value: Any, bounds: tuple[int, int]) -> int:
    if isinstance(value, bool):
        result = int(value)
    elif isinstance(value, int):
        result = value
    elif isinstance(value, (float, Decimal)):
        if not math.isfinite(value):
            raise ValueError(f"unable to convert {value!r} to an integer")
        result = int(value)
    elif isinstance(value, (str, bytes, bytearray)):
        text = cast_string(value).strip()
        if "_" in text:
            raise ValueError(f"unable to convert {value!r} to an integer")
        try:
            result = int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                raise ValueError(f"unable to convert {value!r} to an integer") from None
            if not math.isfinite(number):
                raise ValueError(f"unable to convert {value!r} to an integer") from None
            result = int(number)
    else:
        raise ValueError(f"unable to convert {value!r} to an integer")
    low, high = bounds
    if not low <= result <= high:
        raise ValueError(f"value {value!r} is out of range")
    return result


def convert_to_integer(value: Any) -> int:
    """Convert to an integer within the 32-bit range."""
    return _to_int(value, _INT32)


def convert_to_long(value: Any) -> int:
    """Convert to an integer within the 64-bit range."""
    return _to_int(value, _INT64)


def is_integer(text: str) -> bool:
    """Whether ``text`` is a signed decimal integer that fits in 64 bits."""
    if re.fullmatch(r"[+-]?[0-9]+", text) is None:
        return False
    return _INT64[0] <= int(text) <= _INT64[1]


def replace_character(
    data: str, target_regex: str, replacement: str, do_replace: bool
) -> str:
    """Replace every match of ``target_regex`` when ``do_replace`` is set."""
    if not do_replace:
        return data
    return re.sub(target_regex, replacement, data)


_LAYOUT_TOKENS = {
    "2006": "%Y",
    "15": "%H",
    "01": "%m",
    "02": "%d",
    "04": "%M",
    "05": "%S",
    "Jan": "%b",
    "Mon": "%a",
}
_LAYOUT_PATTERN = re.compile("|".join(_LAYOUT_TOKENS))


def _format_layout(value: datetime.date, layout: str) -> str:
    return _LAYOUT_PATTERN.sub(
        lambda match: value.strftime(_LAYOUT_TOKENS[match.group(0)]), layout
    )


def format_value(value: Any, type_name: str, date_sample: str = "") -> str:
    """Render ``value`` as text for an attribute of the named data type.

    Dates are written with ``date_sample``, a layout built from the reference
    date 2006-01-02 15:04:05.
    """
    if value is None:
        raise ValueError("cannot format a missing value")
    kind = type_name.lower()
    if kind == "date":
        if isinstance(value, datetime.date):
            return _format_layout(value, date_sample) if date_sample else value.isoformat()
        return cast_string(value)
    if kind == "boolean":
        if isinstance(value, bool):
            return cast_string(value)
        text = cast_string(value).strip().lower()
        if text in ("true", "false"):
            return text
        raise ValueError(f"not a boolean: {value!r}")
    if kind in ("integer", "long"):
        return str(convert_to_long(value))
    if kind == "double":
        try:
            return cast_string(float(value))
        except (TypeError, ValueError):
            raise ValueError(f"not a number: {value!r}") from None
    return cast_string(value)