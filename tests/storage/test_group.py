"""Tests for grader.storage.group."""

from __future__ import annotations

import typing as t

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from grader.model import Edition, Group, GroupMember, Student
from grader.storage import group as group_storage


class TestGroup(object):
    def test_find_by_edition_orders_by_name(
        self,
        db_session: Session,
        edition: Edition,
        group_factory: t.Callable[..., Group],
    ) -> None:
        group_factory(edition, name="G2")
        group_factory(edition, name="G1")

        with db_session.begin():
            result = group_storage.find(edition_id=edition.edition_id, session=db_session)

        assert [g.name for g in result] == ["G1", "G2"]

    def test_names_are_unique_per_edition(
        self,
        db_session: Session,
        edition_factory: t.Callable[..., Edition],
        group_factory: t.Callable[..., Group],
    ) -> None:
        edition = edition_factory(name="2024")
        group_factory(edition, name="G1")

        with pytest.raises(IntegrityError):
            group_factory(edition, name="G1")

    def test_find_by_student(
        self,
        db_session: Session,
        edition: Edition,
        alice: Student,
        bob: Student,
        group_factory: t.Callable[..., Group],
    ) -> None:
        g1 = group_factory(edition, name="G1", members=[alice, bob])
        group_factory(edition, name="G2", members=[bob])

        with db_session.begin():
            result = group_storage.find(student_id=alice.student_id, session=db_session)

        assert result == (g1,)


class TestMembers(object):
    """Tests for group membership and roles."""

    def test_find_members_by_name(
        self,
        db_session: Session,
        edition: Edition,
        alice: Student,
        bob: Student,
        group_factory: t.Callable[..., Group],
    ) -> None:
        group = group_factory(edition, members=[bob, alice], roles={"Bob": "lead"})

        with db_session.begin():
            result = group_storage.find_members(group.group_id, session=db_session)

        assert result == (GroupMember(student=alice), GroupMember(student=bob, role="lead"))

    def test_add_member_is_idempotent(
        self,
        db_session: Session,
        edition: Edition,
        alice: Student,
        group_factory: t.Callable[..., Group],
    ) -> None:
        group = group_factory(edition)

        with db_session.begin():
            assert group_storage.add_member(group.group_id, alice.student_id, session=db_session) is True
            assert group_storage.add_member(group.group_id, alice.student_id, session=db_session) is False

    def test_remove_member(
        self,
        db_session: Session,
        edition: Edition,
        alice: Student,
        group_factory: t.Callable[..., Group],
    ) -> None:
        group = group_factory(edition, members=[alice])

        with db_session.begin():
            assert group_storage.remove_member(group.group_id, alice.student_id, session=db_session) is True
            assert group_storage.find_members(group.group_id, session=db_session) == ()

    def test_set_role_requires_membership(
        self,
        db_session: Session,
        edition: Edition,
        alice: Student,
        group_factory: t.Callable[..., Group],
    ) -> None:
        group = group_factory(edition)

        with pytest.raises(KeyError):
            with db_session.begin():
                group_storage.set_role(group.group_id, alice.student_id, "lead", session=db_session)

    def test_roles_are_distinct_and_sorted(
        self,
        db_session: Session,
        edition: Edition,
        alice: Student,
        bob: Student,
        student_factory: t.Callable[..., Student],
        group_factory: t.Callable[..., Group],
    ) -> None:
        carol = student_factory(name="Carol", edition=edition)
        group_factory(edition, name="G1", members=[alice, bob], roles={"Alice": "scribe", "Bob": "lead"})
        group_factory(edition, name="G2", members=[carol], roles={"Carol": "lead"})

        with db_session.begin():
            result = group_storage.roles(session=db_session)

        assert result == ("lead", "scribe")
