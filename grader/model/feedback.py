from __future__ import annotations

import typing as t

import pydantic as p

from .assignment import GroupCriterion, SoloCriterion
from .base import BaseModel
from .id import GroupAssignmentID, GroupCriterionID, GroupID, SoloAssignmentID, SoloCriterionID, StudentID
from .student import Group, Student

TCriterion = t.TypeVar("TCriterion", SoloCriterion, GroupCriterion)


# Stored rows


class SoloFeedback(BaseModel):
    assignment_id: SoloAssignmentID
    student_id: StudentID
    criterion_id: SoloCriterionID | None = None
    text: str
    grade: str


class GroupFeedback(BaseModel):
    assignment_id: GroupAssignmentID
    group_id: GroupID
    criterion_id: GroupCriterionID | None = None
    text: str
    grade: str


class IndividualFeedback(BaseModel):
    assignment_id: GroupAssignmentID
    group_id: GroupID
    student_id: StudentID
    criterion_id: GroupCriterionID | None = None
    text: str
    grade: str


# Aggregates


class FeedbackEntry(BaseModel):
    model_config = p.ConfigDict(frozen=True)

    text: str
    grade: str


class CriterionFeedback(BaseModel, t.Generic[TCriterion]):
    criterion: TCriterion
    entry: FeedbackEntry | None = None


class Feedback(BaseModel, t.Generic[TCriterion]):
    """Feedback for one subject, split into the global entry and one entry per criterion.

    The global entry is the row whose criterion is null; it is exposed as
    ``global`` when serialized.
    """

    model_config = p.ConfigDict(populate_by_name=True)

    global_: FeedbackEntry | None = p.Field(default=None, alias="global")
    by_criterion: list[CriterionFeedback[TCriterion]] = []


class SoloFeedbackRow(BaseModel):
    student: Student
    feedback: Feedback[SoloCriterion]


class MemberFeedback(BaseModel):
    student: Student
    role: str | None = None
    feedback: Feedback[GroupCriterion]


class GroupFeedbackRow(BaseModel):
    group: Group
    feedback: Feedback[GroupCriterion]
    individuals: list[MemberFeedback] = []
