"""Parsing of DML statements with named parameters."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Mapping, Union

from aircontrib.sql.dbhelper import BindType, DbHelper


class StmtType(Enum):
    """Kinds of DML statement."""

    UNKNOWN = auto()
    SELECT = auto()
    INSERT = auto()
    UPDATE = auto()
    DELETE = auto()


_STMT_NAMES = {
    "select": StmtType.SELECT,
    "insert": StmtType.INSERT,
    "update": StmtType.UPDATE,
    "delete": StmtType.DELETE,
}


def to_stmt_type(type_str: str) -> StmtType:
    """Return the statement kind for a case-insensitive keyword."""
    try:
        return _STMT_NAMES[type_str.lower()]
    except KeyError:
        raise ValueError(f"unknown statement type: {type_str}") from None


@dataclass(frozen=True)
class LiteralPart:
    """Verbatim SQL text."""

    literal: str

    def to_value(self, helper: DbHelper, params: Mapping[str, Any]) -> str:
        return self.literal

    @property
    def placeholder(self) -> str:
        return self.literal

    def __str__(self) -> str:
        return self.literal


@dataclass(frozen=True)
class ParamPart:
    """A named parameter and the placeholder it becomes in prepared SQL."""

    param: str
    placeholder: str

    def to_value(self, helper: DbHelper, params: Mapping[str, Any]) -> str:
        return helper.to_sql_value(params.get(self.param))

    def __str__(self) -> str:
        return "$" + self.param


Part = Union[LiteralPart, ParamPart]

_PLACEHOLDER_PREFIX = {BindType.AT: "@", BindType.COLON: ":", BindType.DOLLAR: "$"}


def _param_part(param: str, bind_type: BindType) -> ParamPart:
    prefix = _PLACEHOLDER_PREFIX.get(bind_type)
    placeholder = prefix + param if prefix is not None else "?"
    return ParamPart(param, placeholder)


def _find_any(text: str, chars: str, begin: int) -> int:
    return next((k for k in range(begin, len(text)) if text[k] in chars), len(text))


def parse(sql: str, bind_type: BindType) -> list[Part]:
    """Split ``sql`` into literal and parameter parts.

    Parameters are written ``:name`` (ending at a space) or ``$name`` (ending
    at a comma or closing parenthesis); text inside quotes is left alone.
    """
    parts: list[Part] = []
    size = len(sql)
    start = 0
    i = 0
    while i < size:
        char = sql[i]
        if char in "\"'":
            i = _find_any(sql, char, i + 1)
        elif char == ":":
            parts.append(LiteralPart(sql[start:i]))
            end = _find_any(sql, " ", i)
            parts.append(_param_part(sql[i + 1 : end], bind_type))
            i = start = end
        elif char == "$":
            parts.append(LiteralPart(sql[start:i]))
            end = _find_any(sql, ",)", i)
            parts.append(_param_part(sql[i + 1 : end], bind_type))
            i = start = end
        i += 1
    if start < size:
        parts.append(LiteralPart(sql[start:]))
    return parts


@dataclass(frozen=True)
class SQLStatement:
    """A parsed DML statement bound to a database dialect."""

    helper: DbHelper
    stmt_type: StmtType
    parts: tuple[Part, ...]
    prepared_sql: str
    placeholder_ids: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_sql(cls, helper: DbHelper, sql: str) -> SQLStatement:
        """Parse ``sql`` for the dialect of ``helper``."""
        sql = sql.strip()
        words = sql.split()
        if not words:
            raise ValueError(f"invalid sql '{sql}'")
        stmt_type = to_stmt_type(words[0])
        bind_type = helper.bind_type
        parts = tuple(parse(sql, bind_type))

        placeholder_ids: dict[str, int] = {}
        if bind_type is BindType.DOLLAR:
            for part in parts:
                if isinstance(part, ParamPart) and part.param not in placeholder_ids:
                    placeholder_ids[part.param] = len(placeholder_ids) + 1

        prepared = "".join(part.placeholder for part in parts)
        return cls(helper, stmt_type, parts, prepared, placeholder_ids)

    def has_params(self) -> bool:
        return len(self.parts) > 1

    def __str__(self) -> str:
        return "".join(str(part) for part in self.parts)

    def to_statement_sql(self, params: Mapping[str, Any]) -> str:
        """Return the statement with every parameter replaced by its literal."""
        return "".join(part.to_value(self.helper, params) for part in self.parts)

    def _positional_values(self, params: Mapping[str, Any]) -> list[Any]:
        return [
            params[part.param]
            for part in self.parts
            if isinstance(part, ParamPart) and part.param in params
        ]

    def prepared_statement_args(self, params: Mapping[str, Any]) -> list[Any]:
        """Arguments for executing :attr:`prepared_sql`.

        Named dialects get ``(name, value)`` pairs.
        """
        bind_type = self.helper.bind_type
        if bind_type in (BindType.AT, BindType.COLON):
            return list(params.items())
        if bind_type is BindType.QUESTION:
            return self._positional_values(params)
        if bind_type is BindType.DOLLAR:
            args: list[Any] = [None] * len(self.placeholder_ids)
            for name, position in self.placeholder_ids.items():
                args[position - 1] = params.get(name)
            return args
        return []

    def statement_args(self, params: Mapping[str, Any]) -> list[Any]:
        """Arguments for executing the statement text directly."""
        bind_type = self.helper.bind_type
        if bind_type in (BindType.AT, BindType.COLON):
            return list(params.items())
        if bind_type is BindType.QUESTION:
            return self._positional_values(params)
        if bind_type is BindType.DOLLAR:
            return list(params.values())
        return []