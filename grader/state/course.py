from __future__ import annotations

import logging

from grader import storage
from grader.model import Course, Edition
from grader.storage import Session

from .cache import View

logger = logging.getLogger(__name__)


class CourseListState(object):
    courses: View[tuple[Course, ...]]

    def __init__(self, *, session: Session):
        self.session = session
        self.courses = View("courses", lambda s: storage.course.find(session=s), session=session)

    def new(self, name: str) -> Course:
        with self.session.begin():
            course = storage.course.create(name=name, session=self.session)
        logger.info("created course", extra={"course_id": course.course_id, "name": name})
        self.courses.refresh()
        return course

    def rename(self, course: Course, name: str) -> None:
        with self.session.begin():
            storage.course.update(course.course_id, name=name, session=self.session)
        self.courses.refresh()

    def delete(self, course: Course) -> None:
        with self.session.begin():
            storage.course.delete(course.course_id, session=self.session)
        logger.info("deleted course", extra={"course_id": course.course_id})
        self.courses.refresh()

    def editions(self, course: Course) -> EditionListState:
        return EditionListState(course, session=self.session)


class EditionListState(object):
    course: Course
    editions: View[tuple[Edition, ...]]

    def __init__(self, course: Course, *, session: Session):
        self.course = course
        self.session = session
        self.editions = View(
            "editions", lambda s: storage.edition.find(course_id=course.course_id, session=s), session=session
        )

    def new(self, name: str) -> Edition:
        with self.session.begin():
            edition = storage.edition.create(course_id=self.course.course_id, name=name, session=self.session)
        logger.info("created edition", extra={"edition_id": edition.edition_id, "course": self.course.name})
        self.editions.refresh()
        return edition

    def rename(self, edition: Edition, name: str) -> None:
        with self.session.begin():
            storage.edition.update(edition.edition_id, name=name, session=self.session)
        self.editions.refresh()

    def delete(self, edition: Edition) -> None:
        with self.session.begin():
            storage.edition.delete(edition.edition_id, session=self.session)
        logger.info("deleted edition", extra={"edition_id": edition.edition_id})
        self.editions.refresh()
