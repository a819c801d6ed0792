from __future__ import annotations

import logging
import typing as t

import sqlalchemy as sqla

from grader.core import di

from . import Session
from .table import base

logger = logging.getLogger(__name__)


def matching(table: type[base], key: t.Mapping[str, t.Any]) -> list[sqla.ColumnElement[bool]]:
    """Equality conditions on `key`, where a None value matches SQL NULL"""
    conditions: list[sqla.ColumnElement[bool]] = []
    for name, value in key.items():
        column = getattr(table, name)
        conditions.append(column.is_(None) if value is None else column == value)
    return conditions


def upsert(
    table: type[base],
    key: t.Mapping[str, t.Any],
    values: t.Mapping[str, t.Any],
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> bool:
    """Update the row identified by `key` with `values`, inserting it if absent.

    Rows are keyed on nullable columns in places, which rules out
    INSERT .. ON CONFLICT; this runs inside the caller's transaction instead.

    Returns:
        True if a row was inserted, False if an existing row was updated
    """
    stmt = sqla.update(table).where(*matching(table, key)).values(**values)
    result = session.execute(stmt)
    if result.rowcount:  # pyright: ignore[reportAttributeAccessIssue]
        return False

    session.execute(sqla.insert(table).values(**key, **values))
    logger.debug("inserted row", extra={"table": table.__tablename__, "key": dict(key)})
    return True
