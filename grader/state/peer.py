from __future__ import annotations

import logging

from grader import storage
from grader.aggregate.peer import load_peer_matrix
from grader.model import Group, PeerEvaluation, PeerGroupMatrix, Student
from grader.storage import Session

from .cache import View

logger = logging.getLogger(__name__)


class PeerEvaluationState(object):
    evaluation: PeerEvaluation
    contents: View[list[PeerGroupMatrix]]

    def __init__(self, evaluation: PeerEvaluation, *, session: Session):
        self.evaluation = evaluation
        self.session = session
        self.contents = View("contents", lambda s: load_peer_matrix(evaluation, session=s), session=session)

    def upsert_group_content(self, group: Group, content: str) -> None:
        with self.session.begin():
            storage.peer.upsert_content(
                self.evaluation.evaluation_id, group.group_id, content, session=self.session
            )
        self.contents.refresh()

    def upsert_rating(self, from_: Student, to: Student | None, grade: str, note: str) -> None:
        """Record `from_`'s rating of `to`, or of their group as a whole when `to` is None"""
        evaluation_id = self.evaluation.evaluation_id
        with self.session.begin():
            if to is None:
                storage.peer.upsert_group_rating(
                    evaluation_id, from_.student_id, grade=grade, note=note, session=self.session
                )
            else:
                storage.peer.upsert_pair_rating(
                    evaluation_id, from_.student_id, to.student_id, grade=grade, note=note, session=self.session
                )
        logger.debug(
            "recorded peer rating",
            extra={
                "evaluation_id": evaluation_id,
                "from": from_.student_id,
                "to": to.student_id if to else None,
            },
        )
        self.contents.refresh()
