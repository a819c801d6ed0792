from __future__ import annotations

import logging

from grader import storage
from grader.model import Group, GroupMember, Student
from grader.storage import Session

from .cache import View

logger = logging.getLogger(__name__)


class GroupState(object):
    group: Group
    members: View[tuple[GroupMember, ...]]
    available_students: View[tuple[Student, ...]]
    roles: View[tuple[str, ...]]

    def __init__(self, group: Group, *, session: Session):
        self.group = group
        self.session = session
        group_id = group.group_id

        self.members = View("members", lambda s: storage.group.find_members(group_id, session=s), session=session)
        # enrolled in the group's edition but not yet in the group
        self.available_students = View(
            "available_students",
            lambda s: storage.student.find(edition_id=group.edition_id, not_in_group_id=group_id, session=s),
            session=session,
        )
        self.roles = View("roles", lambda s: storage.group.roles(session=s), session=session)

    def add_student(self, student: Student, role: str | None = None) -> None:
        with self.session.begin():
            storage.group.add_member(self.group.group_id, student.student_id, role=role, session=self.session)
        logger.info("added group member", extra={"group_id": self.group.group_id, "student_id": student.student_id})
        self.members.refresh()
        self.available_students.refresh()

    def remove_student(self, student: Student) -> None:
        """Remove the student from the group; feedback they were given in it is kept"""
        with self.session.begin():
            storage.group.remove_member(self.group.group_id, student.student_id, session=self.session)
        logger.info(
            "removed group member", extra={"group_id": self.group.group_id, "student_id": student.student_id}
        )
        self.members.refresh()
        self.available_students.refresh()

    def update_role(self, student: Student, role: str | None) -> None:
        with self.session.begin():
            storage.group.set_role(self.group.group_id, student.student_id, role or None, session=self.session)
        self.members.refresh()
        self.roles.refresh()
