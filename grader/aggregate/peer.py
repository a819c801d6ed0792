"""
The peer evaluation matrix: per group, every member's rating of every
member (themselves included) and of the group as a whole, plus the group's
free-text content. Cells without a stored rating are `None`.
"""

from __future__ import annotations

import logging

from grader import storage
from grader.core import di
from grader.model import PeerCell, PeerEvaluation, PeerGroupMatrix, PeerRating, PeerStudentRow, StudentID
from grader.storage import Session

logger = logging.getLogger(__name__)


@di.inject
def load_peer_matrix(
    evaluation: PeerEvaluation,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> list[PeerGroupMatrix]:
    """Build the matrix of every group of the evaluation's edition, groups and members by name.

    The grid is rebuilt from the stored rows each time; a group of N
    members always yields N rows of N cells, and empty groups are included.
    """
    evaluation_id = evaluation.evaluation_id
    contents = {c.group_id: c.content for c in storage.peer.find_contents(evaluation_id, session=session)}
    group_ratings = {
        r.student_id: PeerRating(grade=r.grade, note=r.note)
        for r in storage.peer.find_group_ratings(evaluation_id, session=session)
    }
    pair_ratings: dict[tuple[StudentID, StudentID], PeerRating] = {
        (r.from_student_id, r.to_student_id): PeerRating(grade=r.grade, note=r.note)
        for r in storage.peer.find_pair_ratings(evaluation_id, session=session)
    }

    matrix: list[PeerGroupMatrix] = []
    for group in storage.group.find(edition_id=evaluation.edition_id, session=session):
        members = [m.student for m in storage.group.find_members(group.group_id, session=session)]
        matrix.append(
            PeerGroupMatrix(
                group=group,
                content=contents.get(group.group_id, ""),
                students=[
                    PeerStudentRow(
                        student=src,
                        group_rating=group_ratings.get(src.student_id),
                        ratings=[
                            PeerCell(to=dst, rating=pair_ratings.get((src.student_id, dst.student_id)))
                            for dst in members
                        ],
                    )
                    for src in members
                ],
            )
        )

    logger.debug(
        "built peer evaluation matrix",
        extra={
            "evaluation_id": evaluation_id,
            "groups": len(matrix),
            "ratings": len(pair_ratings),
        },
    )
    return matrix
