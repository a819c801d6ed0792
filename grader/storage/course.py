from __future__ import annotations

import typing as t

import sqlalchemy as sqla

from grader.core import di
from grader.lib import NotSet
from grader.model import Course, CourseID

from . import cascade, Session
from .table import courses


def get(
    course_id: CourseID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> Course | None:
    stmt = sqla.select(courses.__table__).where(courses.course_id == course_id)
    row = session.execute(stmt).mappings().one_or_none()
    return Course(**row) if row else None


def find(*, session: Session = di.Provide["storage.persistent.session"]) -> tuple[Course, ...]:
    """Find all courses, ordered by name."""
    stmt = sqla.select(courses.__table__).order_by(courses.name)
    rows = session.execute(stmt).mappings().all()
    return tuple(Course(**row) for row in rows)


def create(
    *,
    name: str,
    session: Session = di.Provide["storage.persistent.session"],
) -> Course:
    course_id = CourseID()
    session.execute(sqla.insert(courses).values(course_id=course_id, name=name))
    session.flush()
    return Course(course_id=course_id, name=name)


def update(
    course_id: CourseID,
    *,
    name: str | NotSet = NotSet(),
    session: Session = di.Provide["storage.persistent.session"],
) -> Course:
    """Rename a course.

    Raises:
        KeyError: If course_id does not correspond to a course
    """
    values: dict[str, t.Any] = {}
    if not isinstance(name, NotSet):
        values["name"] = name

    # an empty update still verifies the course exists
    stmt = sqla.update(courses).where(courses.course_id == course_id).values(**(values or {"course_id": course_id}))
    result = session.execute(stmt)
    if result.rowcount == 0:  # pyright: ignore[reportAttributeAccessIssue]
        raise KeyError(f"Course {course_id} not found")

    session.flush()
    return get(course_id, session=session)  # type: ignore[return-value]


def delete(
    course_id: CourseID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> bool:
    """Delete a course with its editions and everything in them.

    Returns:
        True if a course was deleted, False if not found
    """
    return bool(cascade.purge(courses, courses.course_id == course_id, session=session))
