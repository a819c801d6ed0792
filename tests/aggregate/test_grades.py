"""Tests for grader.aggregate.grades."""

from __future__ import annotations

import typing as t

from sqlalchemy.orm import Session

from grader import storage
from grader.aggregate import grades
from grader.model import Assignment, AssignmentType, Course, Edition, Group, GroupAssignment, GroupGrade, \
    SoloAssignment, SoloCriterion, SoloGrade, Student


class TestSoloGrades(object):
    def test_global_grades_in_assignment_order(
        self,
        db_session: Session,
        edition: Edition,
        alice: Student,
        assignment_factory: t.Callable[..., Assignment],
        criterion_factory: t.Callable[..., SoloCriterion],
    ) -> None:
        """Only global feedback counts, and ungraded assignments are left out."""
        hw2 = t.cast(SoloAssignment, assignment_factory(edition, AssignmentType.Solo, name="HW2", ordinal=2))
        hw1 = t.cast(SoloAssignment, assignment_factory(edition, AssignmentType.Solo, name="HW1", ordinal=1))
        hw3 = t.cast(SoloAssignment, assignment_factory(edition, AssignmentType.Solo, name="HW3", ordinal=3))
        clarity = criterion_factory(hw3.assignment_id)

        with db_session.begin():
            for assignment, grade in ((hw2, "B"), (hw1, "A")):
                storage.feedback.upsert_solo(
                    assignment.assignment_id, alice.student_id, grade=grade, session=db_session
                )
            storage.feedback.upsert_solo(
                hw3.assignment_id, alice.student_id, criterion_id=clarity.criterion_id, grade="C", session=db_session
            )
            result = grades.load_solo_grades(alice.student_id, edition.edition_id, session=db_session)

        assert result == [SoloGrade(assignment_name="HW1", grade="A"), SoloGrade(assignment_name="HW2", grade="B")]

    def test_other_editions_are_excluded(
        self,
        db_session: Session,
        edition: Edition,
        alice: Student,
        course_factory: t.Callable[..., Course],
        edition_factory: t.Callable[..., Edition],
        assignment_factory: t.Callable[..., Assignment],
    ) -> None:
        other = edition_factory(name="2024", course=course_factory(name="CS102"))
        hw1 = t.cast(SoloAssignment, assignment_factory(other, AssignmentType.Solo, name="HW1"))

        with db_session.begin():
            storage.feedback.upsert_solo(hw1.assignment_id, alice.student_id, grade="A", session=db_session)
            result = grades.load_solo_grades(alice.student_id, edition.edition_id, session=db_session)

        assert result == []


class TestGroupGrades(object):
    def test_group_and_individual_grades(
        self,
        db_session: Session,
        edition: Edition,
        alice: Student,
        bob: Student,
        group_factory: t.Callable[..., Group],
        assignment_factory: t.Callable[..., Assignment],
    ) -> None:
        g1 = group_factory(edition, name="G1", members=[alice, bob])
        proj1 = t.cast(GroupAssignment, assignment_factory(edition, AssignmentType.Group, name="Proj1", ordinal=1))
        proj2 = t.cast(GroupAssignment, assignment_factory(edition, AssignmentType.Group, name="Proj2", ordinal=2))
        assignment_factory(edition, AssignmentType.Group, name="Proj3", ordinal=3)

        with db_session.begin():
            storage.feedback.upsert_group(proj1.assignment_id, g1.group_id, grade="B", session=db_session)
            storage.feedback.upsert_individual(
                proj1.assignment_id, g1.group_id, alice.student_id, grade="A", session=db_session
            )
            storage.feedback.upsert_individual(
                proj2.assignment_id, g1.group_id, bob.student_id, grade="C", session=db_session
            )
            storage.feedback.upsert_individual(
                proj2.assignment_id, g1.group_id, alice.student_id, grade="B", session=db_session
            )
            alice_grades = grades.load_group_grades(alice.student_id, edition.edition_id, session=db_session)
            bob_grades = grades.load_group_grades(bob.student_id, edition.edition_id, session=db_session)

        assert alice_grades == [
            GroupGrade(group_name="G1", assignment_name="Proj1", group_grade="B", individual_grade="A"),
            GroupGrade(group_name="G1", assignment_name="Proj2", group_grade=None, individual_grade="B"),
        ]
        assert bob_grades == [
            GroupGrade(group_name="G1", assignment_name="Proj1", group_grade="B", individual_grade=None),
            GroupGrade(group_name="G1", assignment_name="Proj2", group_grade=None, individual_grade="C"),
        ]
