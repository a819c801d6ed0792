from __future__ import annotations

import typing as t

import sqlalchemy as sqla

from grader.core import di
from grader.lib import NotSet
from grader.model import EditionID, Group, GroupID, GroupMember, GroupMembership, Student, StudentID

from . import cascade, Session
from .table import group_members, groups, students


def get(
    group_id: GroupID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> Group | None:
    stmt = sqla.select(groups.__table__).where(groups.group_id == group_id)
    row = session.execute(stmt).mappings().one_or_none()
    return Group(**row) if row else None


def find(
    *,
    edition_id: EditionID | None = None,
    student_id: StudentID | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[Group, ...]:
    """Find groups, ordered by name.

    `student_id` restricts to the groups the student currently belongs to.
    """
    stmt = sqla.select(groups.__table__)
    if edition_id is not None:
        stmt = stmt.where(groups.edition_id == edition_id)
    if student_id is not None:
        stmt = stmt.where(
            groups.group_id.in_(sqla.select(group_members.group_id).where(group_members.student_id == student_id))
        )
    rows = session.execute(stmt.order_by(groups.name, groups.group_id)).mappings().all()
    return tuple(Group(**row) for row in rows)


def create(
    *,
    edition_id: EditionID,
    name: str,
    session: Session = di.Provide["storage.persistent.session"],
) -> Group:
    group_id = GroupID()
    session.execute(sqla.insert(groups).values(group_id=group_id, edition_id=edition_id, name=name))
    session.flush()
    return Group(group_id=group_id, edition_id=edition_id, name=name)


def update(
    group_id: GroupID,
    *,
    name: str | NotSet = NotSet(),
    session: Session = di.Provide["storage.persistent.session"],
) -> Group:
    """
    Raises:
        KeyError: If group_id does not correspond to a group
    """
    values: dict[str, t.Any] = {}
    if not isinstance(name, NotSet):
        values["name"] = name

    stmt = sqla.update(groups).where(groups.group_id == group_id).values(**(values or {"group_id": group_id}))
    result = session.execute(stmt)
    if result.rowcount == 0:  # pyright: ignore[reportAttributeAccessIssue]
        raise KeyError(f"Group {group_id} not found")

    session.flush()
    return get(group_id, session=session)  # type: ignore[return-value]


def delete(
    group_id: GroupID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> bool:
    """Delete a group with its memberships, feedback and peer content."""
    return bool(cascade.purge(groups, groups.group_id == group_id, session=session))


def find_members(
    group_id: GroupID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[GroupMember, ...]:
    """Current members of a group with their roles, ordered by name."""
    stmt = (
        sqla
        .select(students.__table__, group_members.role)
        .join(group_members, group_members.student_id == students.student_id)
        .where(group_members.group_id == group_id)
        .order_by(students.name, students.student_id)
    )
    rows = session.execute(stmt).mappings().all()
    return tuple(
        GroupMember(student=Student(**{k: v for k, v in row.items() if k != "role"}), role=row["role"])
        for row in rows
    )


def find_memberships(
    *,
    edition_id: EditionID,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[GroupMembership, ...]:
    stmt = (
        sqla
        .select(group_members.__table__)
        .join(groups, groups.group_id == group_members.group_id)
        .where(groups.edition_id == edition_id)
    )
    rows = session.execute(stmt).mappings().all()
    return tuple(GroupMembership(**row) for row in rows)


def add_member(
    group_id: GroupID,
    student_id: StudentID,
    *,
    role: str | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> bool:
    """
    Returns:
        True if the student was added, False if already a member
    """
    stmt = sqla.select(group_members.__table__).where(
        group_members.group_id == group_id, group_members.student_id == student_id
    )
    if session.execute(stmt).first() is not None:
        return False
    session.execute(sqla.insert(group_members).values(group_id=group_id, student_id=student_id, role=role))
    return True


def remove_member(
    group_id: GroupID,
    student_id: StudentID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> bool:
    """Remove a student from a group. Feedback they received in the group is kept."""
    stmt = sqla.delete(group_members).where(group_members.group_id == group_id, group_members.student_id == student_id)
    result = session.execute(stmt)
    return bool(result.rowcount)  # pyright: ignore[reportUnknownArgumentType, reportAttributeAccessIssue]


def set_role(
    group_id: GroupID,
    student_id: StudentID,
    role: str | None,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """
    Raises:
        KeyError: If the student is not a member of the group
    """
    stmt = (
        sqla
        .update(group_members)
        .where(group_members.group_id == group_id, group_members.student_id == student_id)
        .values(role=role)
    )
    result = session.execute(stmt)
    if result.rowcount == 0:  # pyright: ignore[reportAttributeAccessIssue]
        raise KeyError(f"Student {student_id} is not a member of group {group_id}")


def roles(
    *,
    edition_id: EditionID | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[str, ...]:
    """Distinct non-null roles in use, sorted."""
    stmt = sqla.select(group_members.role).where(group_members.role.is_not(None)).distinct()
    if edition_id is not None:
        stmt = stmt.join(groups, groups.group_id == group_members.group_id).where(groups.edition_id == edition_id)
    return tuple(sorted(session.execute(stmt).scalars().all()))
