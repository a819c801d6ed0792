from __future__ import annotations

import logging

from grader import storage
from grader.aggregate import grades
from grader.lib import NotSet
from grader.model import Course, Edition, Group, GroupGrade, SoloGrade, Student
from grader.storage import Session

from .cache import View

logger = logging.getLogger(__name__)


class StudentState(object):
    """One student, seen from one edition: their details, placements and grades"""

    student: View[Student]
    groups: View[list[tuple[Group, Course, Edition]]]
    course_editions: View[list[tuple[Course, Edition]]]
    group_grades: View[list[GroupGrade]]
    solo_grades: View[list[SoloGrade]]

    def __init__(self, student: Student, edition: Edition, *, session: Session):
        self.student_id = student.student_id
        self.edition = edition
        self.session = session

        self.student = View("student", self._load_student, session=session)
        self.groups = View("groups", self._load_groups, session=session)
        self.course_editions = View("course_editions", self._load_course_editions, session=session)
        self.group_grades = View(
            "group_grades",
            lambda s: grades.load_group_grades(self.student_id, edition.edition_id, session=s),
            session=session,
        )
        self.solo_grades = View(
            "solo_grades",
            lambda s: grades.load_solo_grades(self.student_id, edition.edition_id, session=s),
            session=session,
        )

    def _load_student(self, session: Session) -> Student:
        student = storage.student.get(self.student_id, session=session)
        if student is None:
            raise KeyError(f"Student {self.student_id} not found")
        return student

    def _load_groups(self, session: Session) -> list[tuple[Group, Course, Edition]]:
        placements: list[tuple[Group, Course, Edition]] = []
        for group in storage.group.find(student_id=self.student_id, session=session):
            edition = storage.edition.get(group.edition_id, session=session)
            assert edition is not None
            course = storage.course.get(edition.course_id, session=session)
            assert course is not None
            placements.append((group, course, edition))
        return placements

    def _load_course_editions(self, session: Session) -> list[tuple[Course, Edition]]:
        pairs: list[tuple[Course, Edition]] = []
        for edition in storage.edition.find(student_id=self.student_id, session=session):
            course = storage.course.get(edition.course_id, session=session)
            assert course is not None
            pairs.append((course, edition))
        return sorted(pairs, key=lambda p: (p[0].name, p[1].name))

    def update(
        self,
        *,
        name: str | NotSet = NotSet(),
        contact: str | NotSet = NotSet(),
        note: str | NotSet = NotSet(),
    ) -> None:
        with self.session.begin():
            storage.student.update(self.student_id, name=name, contact=contact, note=note, session=self.session)
        logger.debug("updated student", extra={"student_id": self.student_id})
        self.student.refresh()
