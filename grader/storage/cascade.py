"""
Explicit delete cascades.

Every table that other rows refer to lists its dependents here, as
(dependent table, referring column) pairs. `purge` deletes the dependents of
the selected rows, depth first, before the rows themselves, so no row is ever
left pointing at a deleted one.
"""

from __future__ import annotations

import logging
import typing as t

import sqlalchemy as sqla
from sqlalchemy.orm import InstrumentedAttribute

from grader.core import di

from . import Session
from .table import base, courses, edition_students, editions, group_assignments, group_criteria, group_feedbacks, \
    group_members, groups, individual_feedbacks, peer_evaluations, peer_group_contents, peer_group_ratings, \
    peer_pair_ratings, solo_assignments, solo_criteria, solo_feedbacks, students

logger = logging.getLogger(__name__)

Dependent: t.TypeAlias = tuple[type[base], InstrumentedAttribute[t.Any]]

DEPENDENTS: dict[type[base], tuple[Dependent, ...]] = {
    courses: ((editions, editions.course_id),),
    editions: (
        (groups, groups.edition_id),
        (edition_students, edition_students.edition_id),
        (solo_assignments, solo_assignments.edition_id),
        (group_assignments, group_assignments.edition_id),
        (peer_evaluations, peer_evaluations.edition_id),
    ),
    groups: (
        (group_members, group_members.group_id),
        (group_feedbacks, group_feedbacks.group_id),
        (individual_feedbacks, individual_feedbacks.group_id),
        (peer_group_contents, peer_group_contents.group_id),
    ),
    students: (
        (group_members, group_members.student_id),
        (edition_students, edition_students.student_id),
        (solo_feedbacks, solo_feedbacks.student_id),
        (individual_feedbacks, individual_feedbacks.student_id),
        (peer_group_ratings, peer_group_ratings.student_id),
        (peer_pair_ratings, peer_pair_ratings.from_student_id),
        (peer_pair_ratings, peer_pair_ratings.to_student_id),
    ),
    solo_assignments: (
        (solo_criteria, solo_criteria.assignment_id),
        (solo_feedbacks, solo_feedbacks.assignment_id),
    ),
    solo_criteria: ((solo_feedbacks, solo_feedbacks.criterion_id),),
    group_assignments: (
        (group_criteria, group_criteria.assignment_id),
        (group_feedbacks, group_feedbacks.assignment_id),
        (individual_feedbacks, individual_feedbacks.assignment_id),
    ),
    group_criteria: (
        (group_feedbacks, group_feedbacks.criterion_id),
        (individual_feedbacks, individual_feedbacks.criterion_id),
    ),
    peer_evaluations: (
        (peer_group_contents, peer_group_contents.evaluation_id),
        (peer_group_ratings, peer_group_ratings.evaluation_id),
        (peer_pair_ratings, peer_pair_ratings.evaluation_id),
    ),
}


def primary_key(table: type[base]) -> sqla.Column[t.Any]:
    (pk,) = table.__table__.primary_key.columns
    return pk


def purge(
    table: type[base],
    *where: sqla.ColumnElement[bool],
    session: Session = di.Provide["storage.persistent.session"],
) -> int:
    """Delete the rows of `table` matching `where`, and everything that refers to them.

    Returns:
        the number of `table` rows deleted, not counting dependents
    """
    dependents = DEPENDENTS.get(table, ())
    if dependents:
        selected = sqla.select(primary_key(table)).where(*where)
        for dependent, column in dependents:
            n = purge(dependent, column.in_(selected), session=session)
            if n:
                logger.debug(
                    "purged dependents",
                    extra={"table": table.__tablename__, "dependent": dependent.__tablename__, "count": n},
                )

    result = session.execute(sqla.delete(table).where(*where))
    return result.rowcount  # pyright: ignore[reportAttributeAccessIssue]
