from __future__ import annotations

import typing as t

import sqlalchemy as sqla

from grader.core import di
from grader.lib import NotSet
from grader.model import CourseID, Edition, EditionID, StudentID

from . import cascade, Session
from .table import edition_students, editions


def get(
    edition_id: EditionID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> Edition | None:
    stmt = sqla.select(editions.__table__).where(editions.edition_id == edition_id)
    row = session.execute(stmt).mappings().one_or_none()
    return Edition(**row) if row else None


def find(
    *,
    course_id: CourseID | None = None,
    student_id: StudentID | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[Edition, ...]:
    """Find editions, ordered by name.

    `student_id` restricts to the editions the student is enrolled in.
    """
    stmt = sqla.select(editions.__table__)
    if course_id is not None:
        stmt = stmt.where(editions.course_id == course_id)
    if student_id is not None:
        stmt = stmt.join(edition_students, edition_students.edition_id == editions.edition_id).where(
            edition_students.student_id == student_id
        )
    rows = session.execute(stmt.order_by(editions.name)).mappings().all()
    return tuple(Edition(**row) for row in rows)


def create(
    *,
    course_id: CourseID,
    name: str,
    session: Session = di.Provide["storage.persistent.session"],
) -> Edition:
    edition_id = EditionID()
    session.execute(sqla.insert(editions).values(edition_id=edition_id, course_id=course_id, name=name))
    session.flush()
    return Edition(edition_id=edition_id, course_id=course_id, name=name)


def update(
    edition_id: EditionID,
    *,
    name: str | NotSet = NotSet(),
    session: Session = di.Provide["storage.persistent.session"],
) -> Edition:
    """
    Raises:
        KeyError: If edition_id does not correspond to an edition
    """
    values: dict[str, t.Any] = {}
    if not isinstance(name, NotSet):
        values["name"] = name

    stmt = (
        sqla
        .update(editions)
        .where(editions.edition_id == edition_id)
        .values(**(values or {"edition_id": edition_id}))
    )
    result = session.execute(stmt)
    if result.rowcount == 0:  # pyright: ignore[reportAttributeAccessIssue]
        raise KeyError(f"Edition {edition_id} not found")

    session.flush()
    return get(edition_id, session=session)  # type: ignore[return-value]


def delete(
    edition_id: EditionID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> bool:
    """Delete an edition with its groups, assignments and enrollments.

    Students themselves are kept; they may be enrolled elsewhere.
    """
    return bool(cascade.purge(editions, editions.edition_id == edition_id, session=session))


def enroll(
    edition_id: EditionID,
    student_id: StudentID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> bool:
    """Enroll a student in an edition.

    Returns:
        True if the student was newly enrolled, False if already enrolled
    """
    stmt = sqla.select(edition_students.__table__).where(
        edition_students.edition_id == edition_id, edition_students.student_id == student_id
    )
    if session.execute(stmt).first() is not None:
        return False
    session.execute(sqla.insert(edition_students).values(edition_id=edition_id, student_id=student_id))
    return True


def unenroll(
    edition_id: EditionID,
    student_id: StudentID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> bool:
    stmt = sqla.delete(edition_students).where(
        edition_students.edition_id == edition_id, edition_students.student_id == student_id
    )
    result = session.execute(stmt)
    return bool(result.rowcount)  # pyright: ignore[reportUnknownArgumentType, reportAttributeAccessIssue]
