"""Tests for grader.storage.feedback."""

from __future__ import annotations

import typing as t

import pytest
from sqlalchemy.orm import Session

from grader.model import Assignment, AssignmentType, Edition, Group, GroupAssignment, SoloAssignment, \
    SoloCriterion, Student
from grader.storage import feedback as feedback_storage


@pytest.fixture
def hw1(edition: Edition, assignment_factory: t.Callable[..., Assignment]) -> SoloAssignment:
    return t.cast(SoloAssignment, assignment_factory(edition, AssignmentType.Solo, name="HW1"))


@pytest.fixture
def project(edition: Edition, assignment_factory: t.Callable[..., Assignment]) -> GroupAssignment:
    return t.cast(GroupAssignment, assignment_factory(edition, AssignmentType.Group, name="Project"))


class TestUpsert(object):
    """Repeated upserts of one key leave exactly one row holding the latest values."""

    def test_global_upsert_replaces(self, db_session: Session, hw1: SoloAssignment, alice: Student) -> None:
        with db_session.begin():
            feedback_storage.upsert_solo(hw1.assignment_id, alice.student_id, text="ok", grade="C", session=db_session)
        with db_session.begin():
            feedback_storage.upsert_solo(
                hw1.assignment_id, alice.student_id, text="better", grade="B", session=db_session
            )
            result = feedback_storage.find_solo(assignment_id=hw1.assignment_id, session=db_session)

        assert len(result) == 1
        assert (result[0].criterion_id, result[0].text, result[0].grade) == (None, "better", "B")

    def test_criterion_and_global_rows_are_separate(
        self,
        db_session: Session,
        hw1: SoloAssignment,
        alice: Student,
        criterion_factory: t.Callable[..., SoloCriterion],
    ) -> None:
        clarity = criterion_factory(hw1.assignment_id, name="Clarity")

        with db_session.begin():
            feedback_storage.upsert_solo(
                hw1.assignment_id, alice.student_id, text="overall", grade="A", session=db_session
            )
            feedback_storage.upsert_solo(
                hw1.assignment_id,
                alice.student_id,
                criterion_id=clarity.criterion_id,
                text="good",
                grade="B",
                session=db_session,
            )
            feedback_storage.upsert_solo(
                hw1.assignment_id,
                alice.student_id,
                criterion_id=clarity.criterion_id,
                text="very good",
                grade="A",
                session=db_session,
            )
            every = feedback_storage.find_solo(assignment_id=hw1.assignment_id, session=db_session)
            global_only = feedback_storage.find_solo(
                assignment_id=hw1.assignment_id, global_only=True, session=db_session
            )

        assert len(every) == 2
        assert {(f.criterion_id, f.text) for f in every} == {(None, "overall"), (clarity.criterion_id, "very good")}
        assert [f.text for f in global_only] == ["overall"]

    def test_group_and_individual_rows(
        self,
        db_session: Session,
        edition: Edition,
        project: GroupAssignment,
        alice: Student,
        group_factory: t.Callable[..., Group],
    ) -> None:
        g1 = group_factory(edition, members=[alice])

        with db_session.begin():
            feedback_storage.upsert_group(
                project.assignment_id, g1.group_id, text="team", grade="B", session=db_session
            )
            feedback_storage.upsert_individual(
                project.assignment_id, g1.group_id, alice.student_id, text="solid", grade="A", session=db_session
            )
            feedback_storage.upsert_individual(
                project.assignment_id, g1.group_id, alice.student_id, text="great", grade="A", session=db_session
            )
            groups = feedback_storage.find_group(assignment_id=project.assignment_id, session=db_session)
            individuals = feedback_storage.find_individual(group_id=g1.group_id, session=db_session)

        assert [(f.text, f.grade) for f in groups] == [("team", "B")]
        assert [(f.student_id, f.text) for f in individuals] == [(alice.student_id, "great")]


class TestTexts(object):
    def test_texts_include_group_and_individual_rows(
        self,
        db_session: Session,
        edition: Edition,
        project: GroupAssignment,
        alice: Student,
        group_factory: t.Callable[..., Group],
    ) -> None:
        g1 = group_factory(edition, members=[alice])

        with db_session.begin():
            feedback_storage.upsert_group(project.assignment_id, g1.group_id, text="team", session=db_session)
            feedback_storage.upsert_individual(
                project.assignment_id, g1.group_id, alice.student_id, text="solo", session=db_session
            )
            result = feedback_storage.texts(project.assignment_id, session=db_session)

        assert sorted(result) == ["solo", "team"]
