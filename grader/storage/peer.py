"""
Peer evaluation records: a free-text content per group, a group-level
rating per student, and a rating per ordered pair of students.
"""

from __future__ import annotations

import sqlalchemy as sqla

from grader.core import di
from grader.model import GroupID, PeerEvaluationID, PeerGroupContent, PeerGroupRating, PeerPairRating, StudentID

from . import Session
from .row import upsert as upsert_row
from .table import peer_group_contents, peer_group_ratings, peer_pair_ratings


def find_contents(
    evaluation_id: PeerEvaluationID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[PeerGroupContent, ...]:
    stmt = sqla.select(peer_group_contents.__table__).where(peer_group_contents.evaluation_id == evaluation_id)
    rows = session.execute(stmt).mappings().all()
    return tuple(PeerGroupContent(**row) for row in rows)


def find_group_ratings(
    evaluation_id: PeerEvaluationID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[PeerGroupRating, ...]:
    stmt = sqla.select(peer_group_ratings.__table__).where(peer_group_ratings.evaluation_id == evaluation_id)
    rows = session.execute(stmt).mappings().all()
    return tuple(PeerGroupRating(**row) for row in rows)


def find_pair_ratings(
    evaluation_id: PeerEvaluationID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[PeerPairRating, ...]:
    stmt = sqla.select(peer_pair_ratings.__table__).where(peer_pair_ratings.evaluation_id == evaluation_id)
    rows = session.execute(stmt).mappings().all()
    return tuple(PeerPairRating(**row) for row in rows)


def upsert_content(
    evaluation_id: PeerEvaluationID,
    group_id: GroupID,
    content: str,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    key = {"evaluation_id": evaluation_id, "group_id": group_id}
    upsert_row(peer_group_contents, key, {"content": content}, session=session)


def upsert_group_rating(
    evaluation_id: PeerEvaluationID,
    student_id: StudentID,
    *,
    grade: str = "",
    note: str = "",
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    key = {"evaluation_id": evaluation_id, "student_id": student_id}
    upsert_row(peer_group_ratings, key, {"grade": grade, "note": note}, session=session)


def upsert_pair_rating(
    evaluation_id: PeerEvaluationID,
    from_student_id: StudentID,
    to_student_id: StudentID,
    *,
    grade: str = "",
    note: str = "",
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    key = {"evaluation_id": evaluation_id, "from_student_id": from_student_id, "to_student_id": to_student_id}
    upsert_row(peer_pair_ratings, key, {"grade": grade, "note": note}, session=session)
