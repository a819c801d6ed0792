from __future__ import annotations

import typing as t

import sqlalchemy as sqla

from grader.core import di
from grader.lib import NotSet
from grader.model import EditionID, GroupID, Student, StudentID

from . import cascade, Session
from .table import edition_students, group_members, groups, students


def get(
    student_id: StudentID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> Student | None:
    stmt = sqla.select(students.__table__).where(students.student_id == student_id)
    row = session.execute(stmt).mappings().one_or_none()
    return Student(**row) if row else None


def find(
    *,
    edition_id: EditionID | None = None,
    not_in_edition_id: EditionID | None = None,
    group_id: GroupID | None = None,
    not_in_group_id: GroupID | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[Student, ...]:
    """Find students, ordered by name.

    `edition_id` restricts to students enrolled in the edition;
    `group_id` to current members of the group. The `not_in_` variants
    exclude those students instead.
    """
    stmt = sqla.select(students.__table__)
    if edition_id is not None:
        stmt = stmt.where(
            students.student_id.in_(
                sqla.select(edition_students.student_id).where(edition_students.edition_id == edition_id)
            )
        )
    if not_in_edition_id is not None:
        stmt = stmt.where(
            students.student_id.not_in(
                sqla.select(edition_students.student_id).where(edition_students.edition_id == not_in_edition_id)
            )
        )
    if group_id is not None:
        stmt = stmt.where(
            students.student_id.in_(sqla.select(group_members.student_id).where(group_members.group_id == group_id))
        )
    if not_in_group_id is not None:
        stmt = stmt.where(
            students.student_id.not_in(
                sqla.select(group_members.student_id).where(group_members.group_id == not_in_group_id)
            )
        )
    rows = session.execute(stmt.order_by(students.name, students.student_id)).mappings().all()
    return tuple(Student(**row) for row in rows)


def create(
    *,
    name: str,
    contact: str = "",
    note: str = "",
    session: Session = di.Provide["storage.persistent.session"],
) -> Student:
    student_id = StudentID()
    stmt = sqla.insert(students).values(student_id=student_id, name=name, contact=contact, note=note)
    session.execute(stmt)
    session.flush()
    return Student(student_id=student_id, name=name, contact=contact, note=note)


def update(
    student_id: StudentID,
    *,
    name: str | NotSet = NotSet(),
    contact: str | NotSet = NotSet(),
    note: str | NotSet = NotSet(),
    session: Session = di.Provide["storage.persistent.session"],
) -> Student:
    """Update a student.

    Raises:
        KeyError: If student_id does not correspond to a student
    """
    values: dict[str, t.Any] = {}
    if not isinstance(name, NotSet):
        values["name"] = name
    if not isinstance(contact, NotSet):
        values["contact"] = contact
    if not isinstance(note, NotSet):
        values["note"] = note

    stmt = (
        sqla
        .update(students)
        .where(students.student_id == student_id)
        .values(**(values or {"student_id": student_id}))
    )
    result = session.execute(stmt)
    if result.rowcount == 0:  # pyright: ignore[reportAttributeAccessIssue]
        raise KeyError(f"Student {student_id} not found")

    session.flush()
    return get(student_id, session=session)  # type: ignore[return-value]


def delete(
    student_id: StudentID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> bool:
    """Delete a student everywhere: memberships, enrollments, feedback and ratings.

    Returns:
        True if a student was deleted, False if not found
    """
    return bool(cascade.purge(students, students.student_id == student_id, session=session))


def find_in_edition_groups(
    edition_id: EditionID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[Student, ...]:
    """Students who are a member of at least one group of the edition, ordered by name."""
    stmt = (
        sqla
        .select(students.__table__)
        .where(
            students.student_id.in_(
                sqla
                .select(group_members.student_id)
                .join(groups, groups.group_id == group_members.group_id)
                .where(groups.edition_id == edition_id)
            )
        )
        .order_by(students.name, students.student_id)
    )
    rows = session.execute(stmt).mappings().all()
    return tuple(Student(**row) for row in rows)
