"""Tests for grader.state.group.GroupState."""

from __future__ import annotations

import typing as t

import pytest
from sqlalchemy.orm import Session

from grader.model import Edition, Group, GroupMember, Student
from grader.state import GroupState


@pytest.fixture
def g1(edition: Edition, group_factory: t.Callable[..., Group]) -> Group:
    return group_factory(edition, name="G1")


class TestGroupState(object):
    def test_add_and_remove(self, db_session: Session, g1: Group, alice: Student, bob: Student) -> None:
        state = GroupState(g1, session=db_session)
        assert state.available_students.entities == (alice, bob)

        state.add_student(alice, role="lead")

        assert state.members.entities == (GroupMember(student=alice, role="lead"),)
        assert state.available_students.entities == (bob,)

        state.remove_student(alice)

        assert state.members.entities == ()
        assert state.available_students.entities == (alice, bob)

    def test_available_students_are_enrolled_only(
        self,
        db_session: Session,
        g1: Group,
        alice: Student,
        student_factory: t.Callable[..., Student],
    ) -> None:
        student_factory(name="Outsider")

        state = GroupState(g1, session=db_session)

        assert state.available_students.entities == (alice,)

    def test_update_role(self, db_session: Session, g1: Group, alice: Student) -> None:
        state = GroupState(g1, session=db_session)
        state.add_student(alice)
        assert state.roles.entities == ()

        state.update_role(alice, "scribe")

        assert state.members.entities == (GroupMember(student=alice, role="scribe"),)
        assert state.roles.entities == ("scribe",)

    def test_blank_role_clears(self, db_session: Session, g1: Group, alice: Student) -> None:
        state = GroupState(g1, session=db_session)
        state.add_student(alice, role="lead")

        state.update_role(alice, "")

        assert state.members.entities == (GroupMember(student=alice, role=None),)
        assert state.roles.entities == ()
