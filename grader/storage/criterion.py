from __future__ import annotations

import typing as t

import sqlalchemy as sqla

from grader.core import di
from grader.lib import NotSet
from grader.model import Criterion, CriterionKey, GroupAssignmentID, GroupCriterion, GroupCriterionID, \
    SoloAssignmentID, SoloCriterion, SoloCriterionID

from . import cascade, Session
from .table import group_criteria, solo_criteria

CriterionTable: t.TypeAlias = type[solo_criteria] | type[group_criteria]


def table_of(key: CriterionKey | SoloAssignmentID | GroupAssignmentID) -> CriterionTable:
    """Criteria table for a criterion, or for the assignment that owns criteria"""
    match key:
        case SoloCriterionID() | SoloAssignmentID():
            return solo_criteria
        case GroupCriterionID() | GroupAssignmentID():
            return group_criteria
        case _:
            raise TypeError(f"no criteria for {key!r}")


def _model(table: CriterionTable, row: t.Mapping[str, t.Any]) -> Criterion:
    if table is solo_criteria:
        return SoloCriterion(**row)
    return GroupCriterion(**row)


@t.overload
def get(criterion_id: SoloCriterionID, *, session: Session = ...) -> SoloCriterion | None: ...


@t.overload
def get(criterion_id: GroupCriterionID, *, session: Session = ...) -> GroupCriterion | None: ...


def get(
    criterion_id: CriterionKey,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> Criterion | None:
    table = table_of(criterion_id)
    stmt = sqla.select(table.__table__).where(table.criterion_id == criterion_id)
    row = session.execute(stmt).mappings().one_or_none()
    return _model(table, row) if row else None


@t.overload
def find(assignment_id: SoloAssignmentID, *, session: Session = ...) -> tuple[SoloCriterion, ...]: ...


@t.overload
def find(assignment_id: GroupAssignmentID, *, session: Session = ...) -> tuple[GroupCriterion, ...]: ...


def find(
    assignment_id: SoloAssignmentID | GroupAssignmentID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[Criterion, ...]:
    """Criteria of an assignment, ordered by name."""
    table = table_of(assignment_id)
    stmt = (
        sqla
        .select(table.__table__)
        .where(table.assignment_id == assignment_id)
        .order_by(table.name, table.criterion_id)
    )
    rows = session.execute(stmt).mappings().all()
    return tuple(_model(table, row) for row in rows)


@t.overload
def create(
    assignment_id: SoloAssignmentID, *, name: str, description: str = ..., session: Session = ...
) -> SoloCriterion: ...


@t.overload
def create(
    assignment_id: GroupAssignmentID, *, name: str, description: str = ..., session: Session = ...
) -> GroupCriterion: ...


def create(
    assignment_id: SoloAssignmentID | GroupAssignmentID,
    *,
    name: str,
    description: str = "",
    session: Session = di.Provide["storage.persistent.session"],
) -> Criterion:
    table = table_of(assignment_id)
    criterion_id = SoloCriterionID() if table is solo_criteria else GroupCriterionID()
    values = {"criterion_id": criterion_id, "assignment_id": assignment_id, "name": name, "description": description}
    session.execute(sqla.insert(table).values(**values))
    session.flush()
    return _model(table, values)


def update(
    criterion_id: CriterionKey,
    *,
    name: str | NotSet = NotSet(),
    description: str | NotSet = NotSet(),
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """
    Raises:
        KeyError: If criterion_id does not correspond to a criterion
    """
    table = table_of(criterion_id)
    values: dict[str, t.Any] = {}
    if not isinstance(name, NotSet):
        values["name"] = name
    if not isinstance(description, NotSet):
        values["description"] = description

    stmt = (
        sqla
        .update(table)
        .where(table.criterion_id == criterion_id)
        .values(**(values or {"criterion_id": criterion_id}))
    )
    result = session.execute(stmt)
    if result.rowcount == 0:  # pyright: ignore[reportAttributeAccessIssue]
        raise KeyError(f"Criterion {criterion_id} not found")

    session.flush()


def delete(
    criterion_id: CriterionKey,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> bool:
    """Delete a criterion and every feedback row graded against it."""
    table = table_of(criterion_id)
    return bool(cascade.purge(table, table.criterion_id == criterion_id, session=session))
