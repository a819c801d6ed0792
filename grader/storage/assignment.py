"""
Storage for the three assignment variants.

Every function dispatches on the variant, given either as an
`AssignmentType` or implied by the type of the identifier, so callers can
handle solo assignments, group assignments and peer evaluations uniformly.
"""

from __future__ import annotations

import datetime
import typing as t

import sqlalchemy as sqla

from grader.core import di
from grader.lib import NotSet
from grader.model import Assignment, AssignmentKey, AssignmentType, EditionID, GroupAssignment, GroupAssignmentID, \
    PeerEvaluation, PeerEvaluationID, SoloAssignment, SoloAssignmentID

from . import cascade, Session
from .table import group_assignments, peer_evaluations, solo_assignments

AssignmentTable: t.TypeAlias = type[solo_assignments] | type[group_assignments] | type[peer_evaluations]


def table_of(kind: AssignmentType) -> AssignmentTable:
    match kind:
        case AssignmentType.Solo:
            return solo_assignments
        case AssignmentType.Group:
            return group_assignments
        case AssignmentType.Peer:
            return peer_evaluations


def kind_of(assignment_id: AssignmentKey) -> AssignmentType:
    match assignment_id:
        case SoloAssignmentID():
            return AssignmentType.Solo
        case GroupAssignmentID():
            return AssignmentType.Group
        case PeerEvaluationID():
            return AssignmentType.Peer
        case _:
            raise TypeError(f"not an assignment identifier: {assignment_id!r}")


def _key_column(kind: AssignmentType) -> sqla.ColumnElement[t.Any]:
    match kind:
        case AssignmentType.Solo:
            return solo_assignments.assignment_id
        case AssignmentType.Group:
            return group_assignments.assignment_id
        case AssignmentType.Peer:
            return peer_evaluations.evaluation_id


def _model(kind: AssignmentType, row: t.Mapping[str, t.Any]) -> Assignment:
    match kind:
        case AssignmentType.Solo:
            return SoloAssignment(**row)
        case AssignmentType.Group:
            return GroupAssignment(**row)
        case AssignmentType.Peer:
            return PeerEvaluation(**row)


@t.overload
def get(assignment_id: SoloAssignmentID, *, session: Session = ...) -> SoloAssignment | None: ...


@t.overload
def get(assignment_id: GroupAssignmentID, *, session: Session = ...) -> GroupAssignment | None: ...


@t.overload
def get(assignment_id: PeerEvaluationID, *, session: Session = ...) -> PeerEvaluation | None: ...


def get(
    assignment_id: AssignmentKey,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> Assignment | None:
    kind = kind_of(assignment_id)
    table = table_of(kind)
    stmt = sqla.select(table.__table__).where(_key_column(kind) == assignment_id)
    row = session.execute(stmt).mappings().one_or_none()
    return _model(kind, row) if row else None


@t.overload
def find(
    kind: t.Literal[AssignmentType.Solo], *, edition_id: EditionID | None = ..., session: Session = ...
) -> tuple[SoloAssignment, ...]: ...


@t.overload
def find(
    kind: t.Literal[AssignmentType.Group], *, edition_id: EditionID | None = ..., session: Session = ...
) -> tuple[GroupAssignment, ...]: ...


@t.overload
def find(
    kind: t.Literal[AssignmentType.Peer], *, edition_id: EditionID | None = ..., session: Session = ...
) -> tuple[PeerEvaluation, ...]: ...


def find(
    kind: AssignmentType,
    *,
    edition_id: EditionID | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[Assignment, ...]:
    """Find assignments of one variant, ordered by name."""
    table = table_of(kind)
    stmt = sqla.select(table.__table__)
    if edition_id is not None:
        stmt = stmt.where(table.edition_id == edition_id)
    rows = session.execute(stmt.order_by(table.name)).mappings().all()
    return tuple(_model(kind, row) for row in rows)


def ordinals(
    *,
    edition_id: EditionID,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[int | None, ...]:
    """The ordinal of every assignment of the edition, across all variants"""
    stmt = sqla.union_all(
        *(sqla.select(table.ordinal).where(table.edition_id == edition_id) for table in map(table_of, AssignmentType))
    )
    return tuple(session.execute(stmt).scalars().all())


def create(
    kind: AssignmentType,
    *,
    edition_id: EditionID,
    name: str,
    ordinal: int | None = None,
    task: str = "",
    deadline: datetime.datetime | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> Assignment:
    """Create an assignment of the given variant.

    Peer evaluations have neither task nor deadline; the other variants
    require a deadline.
    """
    values: dict[str, t.Any] = {"edition_id": edition_id, "name": name, "ordinal": ordinal}
    match kind:
        case AssignmentType.Solo | AssignmentType.Group:
            if deadline is None:
                raise ValueError(f"{kind.show} requires a deadline")
            key = SoloAssignmentID() if kind is AssignmentType.Solo else GroupAssignmentID()
            values.update(assignment_id=key, task=task, deadline=deadline)
        case AssignmentType.Peer:
            if task or deadline is not None:
                raise ValueError("Peer Evaluation has no task or deadline")
            values.update(evaluation_id=PeerEvaluationID())

    session.execute(sqla.insert(table_of(kind)).values(**values))
    session.flush()
    return _model(kind, values)


def update(
    assignment_id: AssignmentKey,
    *,
    name: str | NotSet = NotSet(),
    ordinal: int | None | NotSet = NotSet(),
    task: str | NotSet = NotSet(),
    deadline: datetime.datetime | NotSet = NotSet(),
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """Update an assignment of any variant.

    Call get() after if you need the updated entity.

    Raises:
        KeyError: If assignment_id does not correspond to an assignment
        ValueError: If task or deadline is given for a peer evaluation
    """
    kind = kind_of(assignment_id)
    values: dict[str, t.Any] = {}
    if not isinstance(name, NotSet):
        values["name"] = name
    if not isinstance(ordinal, NotSet):
        values["ordinal"] = ordinal
    if not isinstance(task, NotSet):
        values["task"] = task
    if not isinstance(deadline, NotSet):
        values["deadline"] = deadline
    if kind is AssignmentType.Peer and ("task" in values or "deadline" in values):
        raise ValueError("Peer Evaluation has no task or deadline")

    key = _key_column(kind)
    stmt = sqla.update(table_of(kind)).where(key == assignment_id).values(**(values or {key.key: assignment_id}))
    result = session.execute(stmt)
    if result.rowcount == 0:  # pyright: ignore[reportAttributeAccessIssue]
        raise KeyError(f"{kind.show} {assignment_id} not found")

    session.flush()


def delete(
    assignment_id: AssignmentKey,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> bool:
    """Delete an assignment with its criteria, feedback and ratings.

    Returns:
        True if an assignment was deleted, False if not found
    """
    kind = kind_of(assignment_id)
    return bool(cascade.purge(table_of(kind), _key_column(kind) == assignment_id, session=session))
