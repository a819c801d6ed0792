from __future__ import annotations

import datetime
import typing as t

import pydantic as p

from .base import BaseModel
from .id import EditionID, GroupAssignmentID, GroupCriterionID, PeerEvaluationID, SoloAssignmentID, SoloCriterionID


class SoloAssignment(BaseModel):
    kind: t.Literal["solo"] = "solo"
    assignment_id: SoloAssignmentID
    edition_id: EditionID

    ordinal: int | None = None
    name: str
    task: str = ""
    deadline: datetime.datetime


class GroupAssignment(BaseModel):
    kind: t.Literal["group"] = "group"
    assignment_id: GroupAssignmentID
    edition_id: EditionID

    ordinal: int | None = None
    name: str
    task: str = ""
    deadline: datetime.datetime


class PeerEvaluation(BaseModel):
    kind: t.Literal["peer"] = "peer"
    evaluation_id: PeerEvaluationID
    edition_id: EditionID

    ordinal: int | None = None
    name: str


Assignment: t.TypeAlias = t.Annotated[SoloAssignment | GroupAssignment | PeerEvaluation, p.Field(discriminator="kind")]
AssignmentKey: t.TypeAlias = SoloAssignmentID | GroupAssignmentID | PeerEvaluationID


class SoloCriterion(BaseModel):
    criterion_id: SoloCriterionID
    assignment_id: SoloAssignmentID

    name: str
    description: str = ""


class GroupCriterion(BaseModel):
    criterion_id: GroupCriterionID
    assignment_id: GroupAssignmentID

    name: str
    description: str = ""


Criterion: t.TypeAlias = SoloCriterion | GroupCriterion
CriterionKey: t.TypeAlias = SoloCriterionID | GroupCriterionID
