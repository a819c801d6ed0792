from .base import BaseModel


class SoloGrade(BaseModel):
    assignment_name: str
    grade: str


class GroupGrade(BaseModel):
    group_name: str
    assignment_name: str
    group_grade: str | None = None
    individual_grade: str | None = None
