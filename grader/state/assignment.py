"""
States for the two graded assignment variants. Both share the criteria,
task and deadline handling; they differ in who feedback is given to.
"""

from __future__ import annotations

import datetime
import logging
import typing as t

from grader import storage
from grader.aggregate import feedback
from grader.model import GroupAssignment, GroupCriterion, GroupFeedbackRow, Group, SoloAssignment, SoloCriterion, \
    SoloFeedbackRow, Student
from grader.storage import Session

from .cache import View

logger = logging.getLogger(__name__)

TAssignment = t.TypeVar("TAssignment", SoloAssignment, GroupAssignment)
TCriterion = t.TypeVar("TCriterion", SoloCriterion, GroupCriterion)
TRow = t.TypeVar("TRow", SoloFeedbackRow, GroupFeedbackRow)


class GradedAssignmentState(t.Generic[TAssignment, TCriterion, TRow]):
    assignment: View[TAssignment]
    criteria: View[tuple[TCriterion, ...]]
    feedback: View[list[TRow]]
    autofill: View[list[str]]

    def __init__(self, assignment: TAssignment, *, session: Session):
        self.assignment_id = assignment.assignment_id
        self.session = session

        self.assignment = View("assignment", self._load_assignment, session=session)
        self.criteria = View(
            "criteria", lambda s: storage.criterion.find(self.assignment_id, session=s), session=session
        )
        self.feedback = View("feedback", self._load_feedback, session=session)
        self.autofill = View("autofill", self._load_autofill, session=session)

    def _load_assignment(self, session: Session) -> TAssignment:
        assignment = storage.assignment.get(self.assignment_id, session=session)
        if assignment is None:
            raise KeyError(f"Assignment {self.assignment_id} not found")
        return t.cast(TAssignment, assignment)

    def _load_feedback(self, session: Session) -> list[TRow]:
        raise NotImplementedError

    def _load_autofill(self, session: Session) -> list[str]:
        raise NotImplementedError

    @property
    def task(self) -> str:
        return self.assignment.entities.task

    @property
    def deadline(self) -> datetime.datetime:
        return self.assignment.entities.deadline

    def update_task(self, task: str) -> None:
        with self.session.begin():
            storage.assignment.update(self.assignment_id, task=task, session=self.session)
        self.assignment.refresh()

    def update_deadline(self, deadline: datetime.datetime) -> None:
        with self.session.begin():
            storage.assignment.update(self.assignment_id, deadline=deadline, session=self.session)
        self.assignment.refresh()

    def add_criterion(self, name: str, description: str = "") -> TCriterion:
        with self.session.begin():
            criterion = storage.criterion.create(
                self.assignment_id, name=name, description=description, session=self.session
            )
        logger.info(
            "added criterion", extra={"assignment_id": self.assignment_id, "criterion_id": criterion.criterion_id}
        )
        self.criteria.refresh()
        self.feedback.refresh()
        return t.cast(TCriterion, criterion)

    def update_criterion(self, criterion: TCriterion, name: str, description: str) -> None:
        with self.session.begin():
            storage.criterion.update(criterion.criterion_id, name=name, description=description, session=self.session)
        self.criteria.refresh()
        self.feedback.refresh()

    def delete_criterion(self, criterion: TCriterion) -> None:
        """Delete the criterion and all feedback given against it"""
        with self.session.begin():
            storage.criterion.delete(criterion.criterion_id, session=self.session)
        logger.info(
            "deleted criterion", extra={"assignment_id": self.assignment_id, "criterion_id": criterion.criterion_id}
        )
        self.criteria.refresh()
        self.feedback.refresh()
        self.autofill.refresh()


class SoloAssignmentState(GradedAssignmentState[SoloAssignment, SoloCriterion, SoloFeedbackRow]):
    def _load_feedback(self, session: Session) -> list[SoloFeedbackRow]:
        return feedback.load_solo_feedback(self._load_assignment(session), session=session)

    def _load_autofill(self, session: Session) -> list[str]:
        return feedback.load_solo_autofill(self.assignment_id, session=session)

    def upsert_feedback(
        self,
        student: Student,
        text: str | None = None,
        grade: str | None = None,
        criterion: SoloCriterion | None = None,
    ) -> None:
        """Set the student's feedback, globally or for one criterion"""
        with self.session.begin():
            storage.feedback.upsert_solo(
                self.assignment_id,
                student.student_id,
                criterion_id=criterion.criterion_id if criterion else None,
                text=text or "",
                grade=grade or "",
                session=self.session,
            )
        self.feedback.refresh()
        self.autofill.refresh()


class GroupAssignmentState(GradedAssignmentState[GroupAssignment, GroupCriterion, GroupFeedbackRow]):
    def _load_feedback(self, session: Session) -> list[GroupFeedbackRow]:
        return feedback.load_group_feedback(self._load_assignment(session), session=session)

    def _load_autofill(self, session: Session) -> list[str]:
        return feedback.load_group_autofill(self.assignment_id, session=session)

    def upsert_group_feedback(
        self,
        group: Group,
        text: str | None = None,
        grade: str | None = None,
        criterion: GroupCriterion | None = None,
    ) -> None:
        """Set the group's feedback, globally or for one criterion"""
        with self.session.begin():
            storage.feedback.upsert_group(
                self.assignment_id,
                group.group_id,
                criterion_id=criterion.criterion_id if criterion else None,
                text=text or "",
                grade=grade or "",
                session=self.session,
            )
        self.feedback.refresh()
        self.autofill.refresh()

    def upsert_individual_feedback(
        self,
        student: Student,
        group: Group,
        text: str | None = None,
        grade: str | None = None,
        criterion: GroupCriterion | None = None,
    ) -> None:
        """Set one member's own feedback within the group"""
        with self.session.begin():
            storage.feedback.upsert_individual(
                self.assignment_id,
                group.group_id,
                student.student_id,
                criterion_id=criterion.criterion_id if criterion else None,
                text=text or "",
                grade=grade or "",
                session=self.session,
            )
        self.feedback.refresh()
        self.autofill.refresh()
