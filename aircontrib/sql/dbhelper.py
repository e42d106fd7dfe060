"""SQL dialect helpers: database kinds, bind styles and literal rendering."""

from __future__ import annotations

import json
import math
from decimal import Decimal
from enum import Enum, auto
from typing import Any, ClassVar


class DbType(Enum):
    """Supported database kinds."""

    UNKNOWN = auto()
    MYSQL = auto()
    ORACLE = auto()
    POSTGRES = auto()
    SQLITE = auto()
    SQLSERVER = auto()


class BindType(Enum):
    """Placeholder styles used in prepared statements."""

    UNKNOWN = auto()
    AT = auto()
    COLON = auto()
    DOLLAR = auto()
    QUESTION = auto()


_DB_TYPE_NAMES = {
    "mysql": DbType.MYSQL,
    "oracle": DbType.ORACLE,
    "postgres": DbType.POSTGRES,
    "sqlite": DbType.SQLITE,
    "sqlserver": DbType.SQLSERVER,
}


def to_db_type(type_str: str) -> DbType:
    """Return the database kind for a case-insensitive name."""
    try:
        return _DB_TYPE_NAMES[type_str.lower()]
    except KeyError:
        raise ValueError(f"unknown type: {type_str}") from None


def _number_text(val: int | float) -> str:
    if isinstance(val, int):
        return str(val)
    if math.isnan(val):
        return "NaN"
    if math.isinf(val):
        return "+Inf" if val > 0 else "-Inf"
    text = format(Decimal(repr(val)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _coerce_text(val: Any) -> str:
    if val is None:
        return ""
    if isinstance(val, str):
        return val
    if isinstance(val, (bytes, bytearray)):
        return bytes(val).decode("utf-8", errors="replace")
    return json.dumps(
        val, separators=(",", ":"), sort_keys=True, ensure_ascii=False, default=str
    )


class DbHelper:
    """Renders Python values as SQL literals for one database dialect."""

    db_type: ClassVar[DbType] = DbType.UNKNOWN
    bind_type: ClassVar[BindType] = BindType.UNKNOWN
    true_literal: ClassVar[str] = "true"
    false_literal: ClassVar[str] = "false"

    def to_sql_value(self, val: Any) -> str:
        """Return the SQL literal text for ``val``."""
        if isinstance(val, bool):
            return self.true_literal if val else self.false_literal
        if isinstance(val, (int, float)):
            return _number_text(val)
        return "'" + _coerce_text(val) + "'"

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class MySqlHelper(DbHelper):
    db_type = DbType.MYSQL
    bind_type = BindType.QUESTION


class OracleHelper(DbHelper):
    db_type = DbType.MYSQL
    bind_type = BindType.COLON
    true_literal = "1"
    false_literal = "0"


class PostgresHelper(DbHelper):
    db_type = DbType.POSTGRES
    bind_type = BindType.DOLLAR
    true_literal = "TRUE"
    false_literal = "FALSE"


class SqliteHelper(DbHelper):
    db_type = DbType.MYSQL
    bind_type = BindType.QUESTION
    true_literal = "1"
    false_literal = "0"


class SqlServerHelper(DbHelper):
    db_type = DbType.SQLSERVER
    bind_type = BindType.AT
    true_literal = "TRUE"
    false_literal = "FALSE"


_HELPERS: dict[DbType, type[DbHelper]] = {
    DbType.MYSQL: MySqlHelper,
    DbType.ORACLE: OracleHelper,
    DbType.POSTGRES: PostgresHelper,
    DbType.SQLITE: SqliteHelper,
    DbType.SQLSERVER: SqlServerHelper,
}


def get_db_helper(type_str: str) -> DbHelper:
    """Return a helper for the named database kind."""
    db_type = to_db_type(type_str)
    helper_class = _HELPERS.get(db_type)
    if helper_class is None:
        raise ValueError(f"unsupported db: {type_str}")
    return helper_class()