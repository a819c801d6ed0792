__all__ = [
    "CourseListState",
    "EditionListState",
    "EditionState",
    "GroupAssignmentState",
    "GroupState",
    "PeerEvaluationState",
    "SoloAssignmentState",
    "StudentState",
    "View",
]

from .assignment import GroupAssignmentState, SoloAssignmentState
from .cache import View
from .course import CourseListState, EditionListState
from .edition import EditionState
from .group import GroupState
from .peer import PeerEvaluationState
from .student import StudentState
