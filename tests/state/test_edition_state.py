"""Tests for grader.state.edition.EditionState."""

from __future__ import annotations

import datetime
import typing as t

import pytest
from sqlalchemy.orm import Session

from grader import storage
from grader.model import Assignment, AssignmentType, Edition, Group, OpenPanel, PeerEvaluation, SoloAssignment, \
    Student
from grader.state import EditionState, GroupAssignmentState, PeerEvaluationState, SoloAssignmentState

NOW = datetime.datetime(2024, 9, 2, 9, 0)


@pytest.fixture
def state(db_session: Session, edition: Edition) -> EditionState:
    return EditionState(edition, session=db_session, now=lambda: NOW)


class TestStudents(object):
    def test_new_student_enrolled(self, state: EditionState) -> None:
        assert state.students.entities == ()

        alice = state.new_student("Alice", contact="alice@example.com")

        assert state.students.entities == (alice,)

    def test_new_student_not_enrolled(self, state: EditionState) -> None:
        carol = state.new_student("Carol", add_to_edition=False)

        assert state.students.entities == ()
        assert state.available_students.entities == (carol,)

    def test_add_to_edition(self, state: EditionState, student_factory: t.Callable[..., Student]) -> None:
        carol = student_factory(name="Carol")
        assert state.available_students.entities == (carol,)

        state.add_to_edition([carol])

        assert state.students.entities == (carol,)
        assert state.available_students.entities == ()

    def test_set_student_name(self, state: EditionState, alice: Student) -> None:
        state.set_student_name(alice, "Alicia")

        assert [s.name for s in state.students.entities] == ["Alicia"]

    def test_delete_student(
        self,
        state: EditionState,
        edition: Edition,
        alice: Student,
        bob: Student,
        group_factory: t.Callable[..., Group],
    ) -> None:
        g1 = group_factory(edition, members=[alice, bob])

        state.delete_student(alice)

        assert state.students.entities == (bob,)
        assert [m.student for m in state.group(g1).members.entities] == [bob]


class TestGroups(object):
    def test_new_rename_delete(self, state: EditionState) -> None:
        g1 = state.new_group("G1")
        state.new_group("G0")
        assert [g.name for g in state.groups.entities] == ["G0", "G1"]

        state.set_group_name(g1, "G2")
        assert [g.name for g in state.groups.entities] == ["G0", "G2"]

        state.delete_group(g1)
        assert [g.name for g in state.groups.entities] == ["G0"]


class TestAssignments(object):
    """Assignment commands and the merged order."""

    def test_new_assignment_numbers_after_existing(self, state: EditionState) -> None:
        hw1 = state.new_assignment(AssignmentType.Solo, "HW1")
        proj = state.new_assignment(AssignmentType.Group, "Proj")
        pe1 = state.new_assignment(AssignmentType.Peer, "PE1")

        assert [hw1.ordinal, proj.ordinal, pe1.ordinal] == [1, 2, 3]
        assert state.assignments.entities == [hw1, proj, pe1]
        assert t.cast(SoloAssignment, hw1).deadline == NOW
        assert state.next_ordinal() == 4

    def test_swap_order_fills_missing_ordinal(
        self,
        state: EditionState,
        edition: Edition,
        assignment_factory: t.Callable[..., Assignment],
    ) -> None:
        """HW1 (1), Quiz1 (2), PE1 (absent): swapping HW1 with PE1 yields PE1, Quiz1, HW1."""
        hw1 = assignment_factory(edition, AssignmentType.Group, name="HW1", ordinal=1)
        assignment_factory(edition, AssignmentType.Solo, name="Quiz1", ordinal=2)
        pe1 = assignment_factory(edition, AssignmentType.Peer, name="PE1")
        assert [a.name for a in state.assignments.entities] == ["HW1", "Quiz1", "PE1"]

        state.swap_order(hw1, pe1)

        assert [(a.name, a.ordinal) for a in state.assignments.entities] == [("PE1", 1), ("Quiz1", 2), ("HW1", 3)]
        assert [p.ordinal for p in state.peer.entities] == [1]

    def test_swap_order_with_stale_snapshot(
        self,
        state: EditionState,
        edition: Edition,
        assignment_factory: t.Callable[..., Assignment],
    ) -> None:
        """Swapping twice from the same snapshot reads current ordinals, so it undoes the first swap."""
        hw1 = assignment_factory(edition, AssignmentType.Solo, name="HW1", ordinal=1)
        hw2 = assignment_factory(edition, AssignmentType.Solo, name="HW2", ordinal=2)

        state.swap_order(hw1, hw2)
        state.swap_order(hw1, hw2)

        assert [(a.name, a.ordinal) for a in state.assignments.entities] == [("HW1", 1), ("HW2", 2)]

    def test_set_title_and_delete(self, state: EditionState) -> None:
        hw1 = state.new_assignment(AssignmentType.Solo, "HW1")

        state.set_assignment_title(hw1, "Homework 1")
        assert [a.name for a in state.solo.entities] == ["Homework 1"]

        state.delete_assignment(hw1)
        assert state.solo.entities == ()
        assert state.assignments.entities == []

    def test_assignment_state_per_variant(self, state: EditionState) -> None:
        hw1 = state.new_assignment(AssignmentType.Solo, "HW1")
        proj = state.new_assignment(AssignmentType.Group, "Proj")
        pe1 = state.new_assignment(AssignmentType.Peer, "PE1")

        assert isinstance(state.assignment(hw1), SoloAssignmentState)
        assert isinstance(state.assignment(proj), GroupAssignmentState)
        assert isinstance(state.assignment(t.cast(PeerEvaluation, pe1)), PeerEvaluationState)

    def test_course(self, state: EditionState, db_session: Session, edition: Edition) -> None:
        with db_session.begin():
            course = storage.course.get(edition.course_id, session=db_session)

        assert state.course.entities == course


class TestNavigation(object):
    """Tests for the edition's navigation history."""

    def test_starts_on_assignments(self, state: EditionState) -> None:
        assert state.history == [(-1, OpenPanel.Assignment)]
        assert state.location == (-1, OpenPanel.Assignment)

    def test_back_on_single_entry_is_a_no_op(self, state: EditionState) -> None:
        state.back()

        assert state.history == [(-1, OpenPanel.Assignment)]

    def test_nav_to_index_keeps_panel(self, state: EditionState) -> None:
        state.nav_to(OpenPanel.Student)
        state.nav_to_index(2)

        assert state.location == (2, OpenPanel.Student)

    def test_back_skips_panel_only_entries(self, state: EditionState) -> None:
        state.nav_to(OpenPanel.Group, 0)
        state.nav_to(OpenPanel.Student)
        state.nav_to_index(3)

        state.back()

        assert state.history == [(-1, OpenPanel.Assignment), (0, OpenPanel.Group)]

    def test_back_keeps_first_entry(self, state: EditionState) -> None:
        state.nav_to(OpenPanel.Student)
        state.nav_to(OpenPanel.Group)

        state.back()

        assert state.history == [(-1, OpenPanel.Assignment)]
