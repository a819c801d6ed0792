"""
Feedback rows for solo assignments, group assignments (per group) and group
members (per student within a group).

A row with a null criterion is the global feedback for its subject; there
is at most one row per subject and criterion, maintained through the
`upsert_` functions.
"""

from __future__ import annotations

import sqlalchemy as sqla

from grader.core import di
from grader.model import GroupAssignmentID, GroupCriterionID, GroupFeedback, GroupID, IndividualFeedback, \
    SoloAssignmentID, SoloCriterionID, SoloFeedback, StudentID

from . import Session
from .row import upsert as upsert_row
from .table import group_feedbacks, individual_feedbacks, solo_feedbacks


def find_solo(
    *,
    assignment_id: SoloAssignmentID | None = None,
    student_id: StudentID | None = None,
    global_only: bool = False,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[SoloFeedback, ...]:
    stmt = sqla.select(solo_feedbacks.__table__)
    if assignment_id is not None:
        stmt = stmt.where(solo_feedbacks.assignment_id == assignment_id)
    if student_id is not None:
        stmt = stmt.where(solo_feedbacks.student_id == student_id)
    if global_only:
        stmt = stmt.where(solo_feedbacks.criterion_id.is_(None))
    rows = session.execute(stmt.order_by(solo_feedbacks.feedback_id)).mappings().all()
    return tuple(SoloFeedback(**row) for row in rows)


def find_group(
    *,
    assignment_id: GroupAssignmentID | None = None,
    group_id: GroupID | None = None,
    global_only: bool = False,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[GroupFeedback, ...]:
    stmt = sqla.select(group_feedbacks.__table__)
    if assignment_id is not None:
        stmt = stmt.where(group_feedbacks.assignment_id == assignment_id)
    if group_id is not None:
        stmt = stmt.where(group_feedbacks.group_id == group_id)
    if global_only:
        stmt = stmt.where(group_feedbacks.criterion_id.is_(None))
    rows = session.execute(stmt.order_by(group_feedbacks.feedback_id)).mappings().all()
    return tuple(GroupFeedback(**row) for row in rows)


def find_individual(
    *,
    assignment_id: GroupAssignmentID | None = None,
    group_id: GroupID | None = None,
    student_id: StudentID | None = None,
    global_only: bool = False,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[IndividualFeedback, ...]:
    stmt = sqla.select(individual_feedbacks.__table__)
    if assignment_id is not None:
        stmt = stmt.where(individual_feedbacks.assignment_id == assignment_id)
    if group_id is not None:
        stmt = stmt.where(individual_feedbacks.group_id == group_id)
    if student_id is not None:
        stmt = stmt.where(individual_feedbacks.student_id == student_id)
    if global_only:
        stmt = stmt.where(individual_feedbacks.criterion_id.is_(None))
    rows = session.execute(stmt.order_by(individual_feedbacks.feedback_id)).mappings().all()
    return tuple(IndividualFeedback(**row) for row in rows)


def upsert_solo(
    assignment_id: SoloAssignmentID,
    student_id: StudentID,
    *,
    criterion_id: SoloCriterionID | None = None,
    text: str = "",
    grade: str = "",
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    key = {"assignment_id": assignment_id, "student_id": student_id, "criterion_id": criterion_id}
    upsert_row(solo_feedbacks, key, {"text": text, "grade": grade}, session=session)


def upsert_group(
    assignment_id: GroupAssignmentID,
    group_id: GroupID,
    *,
    criterion_id: GroupCriterionID | None = None,
    text: str = "",
    grade: str = "",
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    key = {"assignment_id": assignment_id, "group_id": group_id, "criterion_id": criterion_id}
    upsert_row(group_feedbacks, key, {"text": text, "grade": grade}, session=session)


def upsert_individual(
    assignment_id: GroupAssignmentID,
    group_id: GroupID,
    student_id: StudentID,
    *,
    criterion_id: GroupCriterionID | None = None,
    text: str = "",
    grade: str = "",
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    key = {
        "assignment_id": assignment_id,
        "group_id": group_id,
        "student_id": student_id,
        "criterion_id": criterion_id,
    }
    upsert_row(individual_feedbacks, key, {"text": text, "grade": grade}, session=session)


def texts(
    assignment_id: SoloAssignmentID | GroupAssignmentID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[str, ...]:
    """Every feedback text written for an assignment, group and individual rows alike."""
    match assignment_id:
        case SoloAssignmentID():
            stmt = sqla.select(solo_feedbacks.text).where(solo_feedbacks.assignment_id == assignment_id)
        case GroupAssignmentID():
            stmt = sqla.union_all(
                sqla.select(group_feedbacks.text).where(group_feedbacks.assignment_id == assignment_id),
                sqla.select(individual_feedbacks.text).where(individual_feedbacks.assignment_id == assignment_id),
            )
        case _:
            raise TypeError(f"not a graded assignment: {assignment_id!r}")
    return tuple(session.execute(stmt).scalars().all())


def count(
    *,
    criterion_id: SoloCriterionID | GroupCriterionID,
    session: Session = di.Provide["storage.persistent.session"],
) -> int:
    """Number of feedback rows graded against a criterion, across all feedback tables"""
    match criterion_id:
        case SoloCriterionID():
            tables = (solo_feedbacks,)
        case GroupCriterionID():
            tables = (group_feedbacks, individual_feedbacks)
        case _:
            raise TypeError(f"not a criterion identifier: {criterion_id!r}")
    total = 0
    for table in tables:
        stmt = sqla.select(sqla.func.count()).select_from(table).where(table.criterion_id == criterion_id)
        total += session.execute(stmt).scalar_one()
    return total
