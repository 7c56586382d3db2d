"""
Small SQL statement builders.

Every builder returns a `Statement(text, args)` pair. Caller-supplied values
only ever travel in `args`; `text` contains identifiers and asyncpg-style
positional placeholders ($1, $2, ...) numbered in declaration order.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping, NamedTuple, Sequence

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")


class StatementError(ValueError):
    pass


class Statement(NamedTuple):
    text: str
    args: tuple[Any, ...]


class _Params:
    def __init__(self) -> None:
        self.args: list[Any] = []

    def add(self, value: Any) -> str:
        self.args.append(value)
        return f"${len(self.args)}"


def _identifier(name: str) -> str:
    if not isinstance(name, str) or not _IDENTIFIER.match(name):
        raise StatementError(f"Invalid SQL identifier: {name!r}")
    return name


def _where(where: Mapping[str, Any] | None, params: _Params) -> str:
    if not where:
        return ""
    # Equality only, combined with AND.
    clauses = [f"{_identifier(column)} = {params.add(value)}" for column, value in where.items()]
    return " WHERE " + " AND ".join(clauses)


def insert(table: str, columns: Sequence[str], *rows: Sequence[Any], suffix: str = "") -> Statement:
    if not columns:
        raise StatementError("insert requires at least one column.")
    if not rows:
        raise StatementError("insert requires at least one row.")

    column_list = ", ".join(_identifier(c) for c in columns)
    params = _Params()
    groups: list[str] = []
    for row in rows:
        if len(row) != len(columns):
            raise StatementError(
                f"Row has {len(row)} values but {len(columns)} columns were declared."
            )
        groups.append("(" + ", ".join(params.add(v) for v in row) + ")")

    text = f"INSERT INTO {_identifier(table)} ({column_list}) VALUES " + ", ".join(groups)
    suffix = (suffix or "").strip()
    if suffix:
        text += " " + suffix
    return Statement(text, tuple(params.args))


def update(
    table: str,
    assignments: Iterable[tuple[str, Any]],
    where: Mapping[str, Any],
) -> Statement:
    params = _Params()
    sets = [f"{_identifier(column)} = {params.add(value)}" for column, value in assignments]
    if not sets:
        raise StatementError("update requires at least one assignment.")
    if not where:
        raise StatementError("update requires a WHERE predicate.")

    text = f"UPDATE {_identifier(table)} SET " + ", ".join(sets) + _where(where, params)
    return Statement(text, tuple(params.args))


def select(
    columns: Sequence[str],
    table: str,
    *,
    where: Mapping[str, Any] | None = None,
    group_by: Sequence[str] = (),
    limit: int | None = None,
) -> Statement:
    """
    Build a SELECT.

    `columns` may hold expressions (e.g. aggregates); they are written by
    this codebase, never taken from a request.
    """
    if not columns:
        raise StatementError("select requires at least one column.")

    params = _Params()
    text = f"SELECT {', '.join(columns)} FROM {_identifier(table)}" + _where(where, params)
    if group_by:
        text += " GROUP BY " + ", ".join(_identifier(c) for c in group_by)
    if limit is not None:
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
            raise StatementError(f"Invalid limit: {limit!r}")
        text += f" LIMIT {limit}"
    return Statement(text, tuple(params.args))
