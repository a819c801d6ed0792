from .base import BaseModel
from .id import CourseID, EditionID


class Course(BaseModel):
    course_id: CourseID
    name: str


class Edition(BaseModel):
    edition_id: EditionID
    course_id: CourseID
    name: str
