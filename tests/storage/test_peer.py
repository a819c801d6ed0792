"""Tests for grader.storage.peer."""

from __future__ import annotations

import typing as t

import pytest
from sqlalchemy.orm import Session

from grader.model import Assignment, AssignmentType, Edition, Group, PeerEvaluation, Student
from grader.storage import peer as peer_storage


@pytest.fixture
def pe1(edition: Edition, assignment_factory: t.Callable[..., Assignment]) -> PeerEvaluation:
    return t.cast(PeerEvaluation, assignment_factory(edition, AssignmentType.Peer, name="PE1"))


class TestPeer(object):
    def test_upsert_content_replaces(
        self,
        db_session: Session,
        edition: Edition,
        pe1: PeerEvaluation,
        group_factory: t.Callable[..., Group],
    ) -> None:
        g1 = group_factory(edition)

        with db_session.begin():
            peer_storage.upsert_content(pe1.evaluation_id, g1.group_id, "draft", session=db_session)
            peer_storage.upsert_content(pe1.evaluation_id, g1.group_id, "final", session=db_session)
            result = peer_storage.find_contents(pe1.evaluation_id, session=db_session)

        assert [c.content for c in result] == ["final"]

    def test_pair_ratings_are_directed(
        self,
        db_session: Session,
        pe1: PeerEvaluation,
        alice: Student,
        bob: Student,
    ) -> None:
        """A rating of Bob by Alice is distinct from one of Alice by Bob, and self-ratings are allowed."""
        with db_session.begin():
            peer_storage.upsert_pair_rating(
                pe1.evaluation_id, alice.student_id, bob.student_id, grade="A", note="helpful", session=db_session
            )
            peer_storage.upsert_pair_rating(
                pe1.evaluation_id, bob.student_id, alice.student_id, grade="B", session=db_session
            )
            peer_storage.upsert_pair_rating(
                pe1.evaluation_id, alice.student_id, alice.student_id, grade="A", session=db_session
            )
            peer_storage.upsert_pair_rating(
                pe1.evaluation_id, alice.student_id, bob.student_id, grade="A+", note="very helpful", session=db_session
            )
            result = peer_storage.find_pair_ratings(pe1.evaluation_id, session=db_session)

        ratings = {(r.from_student_id, r.to_student_id): (r.grade, r.note) for r in result}
        assert ratings == {
            (alice.student_id, bob.student_id): ("A+", "very helpful"),
            (bob.student_id, alice.student_id): ("B", ""),
            (alice.student_id, alice.student_id): ("A", ""),
        }

    def test_group_rating(self, db_session: Session, pe1: PeerEvaluation, alice: Student) -> None:
        with db_session.begin():
            peer_storage.upsert_group_rating(pe1.evaluation_id, alice.student_id, grade="B", session=db_session)
            peer_storage.upsert_group_rating(
                pe1.evaluation_id, alice.student_id, grade="A", note="recovered", session=db_session
            )
            result = peer_storage.find_group_ratings(pe1.evaluation_id, session=db_session)

        assert [(r.grade, r.note) for r in result] == [("A", "recovered")]
