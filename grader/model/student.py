from .base import BaseModel
from .id import EditionID, GroupID, StudentID


class Student(BaseModel):
    student_id: StudentID
    name: str
    contact: str = ""
    note: str = ""


class Group(BaseModel):
    group_id: GroupID
    edition_id: EditionID
    name: str


class GroupMembership(BaseModel):
    group_id: GroupID
    student_id: StudentID
    role: str | None = None


class GroupMember(BaseModel):
    """A student as currently seen from inside one group."""

    student: Student
    role: str | None = None


class EditionEnrollment(BaseModel):
    edition_id: EditionID
    student_id: StudentID
