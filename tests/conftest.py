"""Pytest fixtures for grader integration tests.

The container is booted once per session against a throwaway SQLite file;
each test starts from freshly created tables, so tests may commit freely.

Usage:
    def test_find_courses(db_session: Session, course_factory):
        course = course_factory(name="CS101")
        with db_session.begin():
            assert storage.course.find(session=db_session) == (course,)
"""

from __future__ import annotations

import datetime
import os
import typing as t
from pathlib import Path

import pydantic as p
import pytest
from sqlalchemy.orm import Session

import grader
from grader import storage
from grader.core import GraderContainer
from grader.model import Assignment, AssignmentType, Course, Criterion, DeploymentEnvironment, Edition, \
    GroupAssignmentID, Group, SoloAssignmentID, Student
from grader.storage.table import metadata

DEADLINE = datetime.datetime(2024, 10, 1, 23, 59)


@pytest.fixture(scope="session")
def container(tmp_path_factory: pytest.TempPathFactory) -> t.Generator[GraderContainer]:
    """Boot the DI container for the test session.

    Uses the Test environment, with the database path overridden to a
    temporary directory.
    """
    ct = GraderContainer()
    root = Path(os.path.dirname(grader.__file__)).parent
    database = tmp_path_factory.mktemp("db") / "test.sqlite3"

    GraderContainer.boot(
        ct,
        debug=True,
        env=DeploymentEnvironment.Test,
        config_root=p.FileUrl(f"file://{root}/config"),
        override=(f"storage.persistent.sqlite.database={database}",),
    )

    yield ct

    ct.shutdown_resources()


@pytest.fixture
def db_session(container: GraderContainer) -> t.Generator[Session]:
    """Provide a session over freshly created tables.

    The session does not autobegin, matching production; tests open their
    own transactions with `db_session.begin()`.
    """
    engine = container.storage().persistent().engine()
    metadata.drop_all(engine)
    metadata.create_all(engine)

    session = container.storage().persistent().session()

    yield session

    session.close()


@pytest.fixture
def course_factory(db_session: Session) -> t.Callable[..., Course]:
    def create_course(name: str = "CS101") -> Course:
        with db_session.begin():
            return storage.course.create(name=name, session=db_session)

    return create_course


@pytest.fixture
def edition_factory(db_session: Session, course_factory: t.Callable[..., Course]) -> t.Callable[..., Edition]:
    """Factory fixture for editions; creates a course unless one is given."""

    def create_edition(name: str = "2024", course: Course | None = None) -> Edition:
        if course is None:
            course = course_factory()
        with db_session.begin():
            return storage.edition.create(course_id=course.course_id, name=name, session=db_session)

    return create_edition


@pytest.fixture
def student_factory(db_session: Session) -> t.Callable[..., Student]:
    """Factory fixture for students, optionally enrolled in an edition."""

    def create_student(
        name: str = "Alice",
        contact: str = "",
        note: str = "",
        edition: Edition | None = None,
    ) -> Student:
        with db_session.begin():
            student = storage.student.create(name=name, contact=contact, note=note, session=db_session)
            if edition is not None:
                storage.edition.enroll(edition.edition_id, student.student_id, session=db_session)
            return student

    return create_student


@pytest.fixture
def group_factory(db_session: Session) -> t.Callable[..., Group]:
    """Factory fixture for groups with their members.

    Usage:
        def test_something(group_factory, edition, alice, bob):
            group = group_factory(edition, name="G1", members=[alice, bob])
    """

    def create_group(
        edition: Edition,
        name: str = "G1",
        members: t.Sequence[Student] = (),
        roles: t.Mapping[str, str] | None = None,
    ) -> Group:
        roles = roles or {}
        with db_session.begin():
            group = storage.group.create(edition_id=edition.edition_id, name=name, session=db_session)
            for student in members:
                storage.group.add_member(
                    group.group_id, student.student_id, role=roles.get(student.name), session=db_session
                )
            return group

    return create_group


@pytest.fixture
def assignment_factory(db_session: Session) -> t.Callable[..., Assignment]:
    def create_assignment(
        edition: Edition,
        kind: AssignmentType = AssignmentType.Solo,
        name: str = "HW1",
        ordinal: int | None = None,
    ) -> Assignment:
        deadline = None if kind is AssignmentType.Peer else DEADLINE
        with db_session.begin():
            return storage.assignment.create(
                kind,
                edition_id=edition.edition_id,
                name=name,
                ordinal=ordinal,
                deadline=deadline,
                session=db_session,
            )

    return create_assignment


@pytest.fixture
def criterion_factory(db_session: Session) -> t.Callable[..., Criterion]:
    def create_criterion(
        assignment_id: SoloAssignmentID | GroupAssignmentID,
        name: str = "Clarity",
        description: str = "",
    ) -> Criterion:
        with db_session.begin():
            return storage.criterion.create(assignment_id, name=name, description=description, session=db_session)

    return create_criterion


@pytest.fixture
def edition(edition_factory: t.Callable[..., Edition]) -> Edition:
    """CS101, edition 2024."""
    return edition_factory()


@pytest.fixture
def alice(student_factory: t.Callable[..., Student], edition: Edition) -> Student:
    return student_factory(name="Alice", edition=edition)


@pytest.fixture
def bob(student_factory: t.Callable[..., Student], edition: Edition) -> Student:
    return student_factory(name="Bob", edition=edition)
