"""Tests for grader.aggregate.peer."""

from __future__ import annotations

import typing as t

import pytest
from sqlalchemy.orm import Session

from grader import storage
from grader.aggregate.peer import load_peer_matrix
from grader.model import Assignment, AssignmentType, Edition, Group, PeerEvaluation, PeerRating, Student


@pytest.fixture
def pe1(edition: Edition, assignment_factory: t.Callable[..., Assignment]) -> PeerEvaluation:
    return t.cast(PeerEvaluation, assignment_factory(edition, AssignmentType.Peer, name="PE1"))


class TestLoadPeerMatrix(object):
    """Tests for load_peer_matrix()."""

    def test_no_ratings_gives_full_empty_grid(
        self,
        db_session: Session,
        edition: Edition,
        alice: Student,
        bob: Student,
        pe1: PeerEvaluation,
        group_factory: t.Callable[..., Group],
    ) -> None:
        """G1 of Alice and Bob without ratings has 4 empty cells, 2 empty group ratings and no content."""
        group_factory(edition, name="G1", members=[bob, alice])

        with db_session.begin():
            (matrix,) = load_peer_matrix(pe1, session=db_session)

        assert matrix.content == ""
        assert [row.student for row in matrix.students] == [alice, bob]
        assert [row.group_rating for row in matrix.students] == [None, None]
        cells = [(row.student.name, cell.to.name, cell.rating) for row in matrix.students for cell in row.ratings]
        assert cells == [
            ("Alice", "Alice", None),
            ("Alice", "Bob", None),
            ("Bob", "Alice", None),
            ("Bob", "Bob", None),
        ]

    def test_ratings_fill_their_cells(
        self,
        db_session: Session,
        edition: Edition,
        alice: Student,
        bob: Student,
        pe1: PeerEvaluation,
        group_factory: t.Callable[..., Group],
    ) -> None:
        g1 = group_factory(edition, name="G1", members=[alice, bob])

        with db_session.begin():
            storage.peer.upsert_content(pe1.evaluation_id, g1.group_id, "Compiler project", session=db_session)
            storage.peer.upsert_pair_rating(
                pe1.evaluation_id, alice.student_id, bob.student_id, grade="A", note="reliable", session=db_session
            )
            storage.peer.upsert_group_rating(pe1.evaluation_id, bob.student_id, grade="B", session=db_session)
            (matrix,) = load_peer_matrix(pe1, session=db_session)

        alice_row, bob_row = matrix.students
        assert matrix.content == "Compiler project"
        assert [c.rating for c in alice_row.ratings] == [None, PeerRating(grade="A", note="reliable")]
        assert [c.rating for c in bob_row.ratings] == [None, None]
        assert alice_row.group_rating is None
        assert bob_row.group_rating == PeerRating(grade="B", note="")

    def test_groups_by_name_including_empty(
        self,
        db_session: Session,
        edition: Edition,
        alice: Student,
        pe1: PeerEvaluation,
        group_factory: t.Callable[..., Group],
    ) -> None:
        group_factory(edition, name="G2", members=[alice])
        group_factory(edition, name="G1")

        with db_session.begin():
            matrix = load_peer_matrix(pe1, session=db_session)

        assert [m.group.name for m in matrix] == ["G1", "G2"]
        assert matrix[0].students == []
        assert len(matrix[1].students) == 1
