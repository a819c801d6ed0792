from __future__ import annotations

import pydantic as p

from .base import BaseModel
from .id import GroupID, PeerEvaluationID, StudentID
from .student import Group, Student

# Stored rows


class PeerGroupContent(BaseModel):
    evaluation_id: PeerEvaluationID
    group_id: GroupID
    content: str


class PeerGroupRating(BaseModel):
    evaluation_id: PeerEvaluationID
    student_id: StudentID
    grade: str
    note: str


class PeerPairRating(BaseModel):
    evaluation_id: PeerEvaluationID
    from_student_id: StudentID
    to_student_id: StudentID
    grade: str
    note: str


# Matrix


class PeerRating(BaseModel):
    model_config = p.ConfigDict(frozen=True)

    grade: str
    note: str


class PeerCell(BaseModel):
    to: Student
    rating: PeerRating | None = None


class PeerStudentRow(BaseModel):
    """One "from" row of the matrix: the student's rating of the group and of every member."""

    student: Student
    group_rating: PeerRating | None = None
    ratings: list[PeerCell] = []


class PeerGroupMatrix(BaseModel):
    group: Group
    content: str = ""
    students: list[PeerStudentRow] = []
