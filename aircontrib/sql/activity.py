"""An activity that runs a parameterised INSERT statement against a database."""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Callable, Mapping
from contextlib import closing
from dataclasses import dataclass
from typing import Any

from aircontrib.sql.dbhelper import BindType, get_db_helper
from aircontrib.sql.statement import SQLStatement, StmtType

logger = logging.getLogger(__name__)

ALLOWED_DB_TYPES = ("mysql", "oracle", "postgres", "sqlite", "sqlserver")
_REQUIRED_KEYS = ("dbType", "driverName", "dataSourceName", "statement")
_SQLITE_DRIVERS = ("sqlite", "sqlite3")


def _to_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ValueError(f"setting '{name}' must be an integer, got {value!r}")


def _to_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ("true", "1", "t", "yes"):
            return True
        if text in ("false", "0", "f", "no", ""):
            return False
    raise ValueError(f"setting '{name}' must be a boolean, got {value!r}")


@dataclass(frozen=True)
class Settings:
    """Configuration of an insert activity."""

    db_type: str
    driver_name: str
    data_source_name: str
    statement: str
    max_open_connections: int = 0
    max_idle_connections: int = 2
    disable_prepared: bool = False
    labeled_results: bool = False

    def __post_init__(self) -> None:
        if self.db_type not in ALLOWED_DB_TYPES:
            allowed = ",".join(ALLOWED_DB_TYPES)
            raise ValueError(
                f"setting 'dbType' must be one of ({allowed}), got {self.db_type!r}"
            )

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> Settings:
        """Build settings from a mapping keyed by the camel-case setting names."""
        missing = [key for key in _REQUIRED_KEYS if values.get(key) in (None, "")]
        if missing:
            raise ValueError(f"missing required settings: {', '.join(missing)}")
        options: dict[str, Any] = {}
        if values.get("maxOpenConnections") is not None:
            options["max_open_connections"] = _to_int(
                "maxOpenConnections", values["maxOpenConnections"]
            )
        if values.get("maxIdleConnections") is not None:
            options["max_idle_connections"] = _to_int(
                "maxIdleConnections", values["maxIdleConnections"]
            )
        if values.get("disablePrepared") is not None:
            options["disable_prepared"] = _to_bool(
                "disablePrepared", values["disablePrepared"]
            )
        if values.get("labeledResults") is not None:
            options["labeled_results"] = _to_bool(
                "labeledResults", values["labeledResults"]
            )
        return cls(
            db_type=str(values["dbType"]),
            driver_name=str(values["driverName"]),
            data_source_name=str(values["dataSourceName"]),
            statement=str(values["statement"]),
            **options,
        )


Connector = Callable[[Settings], Any]


def _default_connect(settings: Settings) -> Any:
    if settings.driver_name.lower() in _SQLITE_DRIVERS:
        return sqlite3.connect(settings.data_source_name)
    raise ValueError(
        f"unsupported driver: {settings.driver_name}; supply a connect callable"
    )


def _coerce_params(params: Any) -> dict[str, Any]:
    if params is None:
        return {}
    if isinstance(params, str):
        if not params.strip():
            return {}
        decoded = json.loads(params)
        if not isinstance(decoded, dict):
            raise TypeError(f"params must decode to an object, got {type(decoded).__name__}")
        return decoded
    if isinstance(params, Mapping):
        return dict(params)
    raise TypeError(f"params must be a mapping, got {type(params).__name__}")


class SqlInsertActivity:
    """Executes a configured INSERT statement with the parameters of each call.

    ``connect`` receives the settings and returns a DB-API connection; when it
    is omitted, SQLite drivers are opened with :mod:`sqlite3`.
    """

    def __init__(self, settings: Settings, connect: Connector | None = None) -> None:
        helper = get_db_helper(settings.db_type)
        logger.debug("DB: '%s'", settings.db_type)
        statement = SQLStatement.from_sql(helper, settings.statement)
        if statement.stmt_type is not StmtType.INSERT:
            raise ValueError("only insert statement is supported")

        self.settings = settings
        self.helper = helper
        self.statement = statement
        self.prepared_sql: str | None = (
            None if settings.disable_prepared else statement.prepared_sql
        )
        if self.prepared_sql is not None:
            logger.debug("Using PreparedStatement: %s", self.prepared_sql)
        self._connection = (connect or _default_connect)(settings)

    def eval(self, params: Any = None) -> dict[str, Any]:
        """Run the insert with ``params`` and return the affected row count and last id."""
        values = _coerce_params(params)
        logger.debug("Eval input params: %s  Total num params: %d", values, len(values))
        with closing(self._connection.cursor()) as cursor:
            if self.prepared_sql is not None:
                logger.debug("Executing statement: %s", self.prepared_sql)
                if self.helper.bind_type in (BindType.AT, BindType.COLON):
                    cursor.execute(self.prepared_sql, values)
                else:
                    args = self.statement.prepared_statement_args(values)
                    cursor.execute(self.prepared_sql, args)
            else:
                sql = self.statement.to_statement_sql(values)
                logger.debug("Executing statement: %s", sql)
                cursor.execute(sql)
            result = {
                "rows_affected": cursor.rowcount,
                "last_insert_id": getattr(cursor, "lastrowid", None),
            }
        self._connection.commit()
        return result

    def close(self) -> None:
        """Release the database connection."""
        logger.debug("cleaning up SQL Insert activity")
        self._connection.close()

    def __enter__(self) -> SqlInsertActivity:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()