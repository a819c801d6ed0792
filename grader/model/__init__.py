__all__ = [
    # Base
    "BaseModel",
    # Enums
    "AssignmentType",
    "DeploymentEnvironment",
    "OpenPanel",
    # ID Types
    "CourseID",
    "EditionID",
    "GroupID",
    "StudentID",
    "SoloAssignmentID",
    "GroupAssignmentID",
    "PeerEvaluationID",
    "SoloCriterionID",
    "GroupCriterionID",
    # Courses
    "Course",
    "Edition",
    # Students & Groups
    "Student",
    "Group",
    "GroupMembership",
    "GroupMember",
    "EditionEnrollment",
    # Assignments
    "Assignment",
    "AssignmentKey",
    "SoloAssignment",
    "GroupAssignment",
    "PeerEvaluation",
    "Criterion",
    "CriterionKey",
    "SoloCriterion",
    "GroupCriterion",
    # Feedback
    "SoloFeedback",
    "GroupFeedback",
    "IndividualFeedback",
    "FeedbackEntry",
    "CriterionFeedback",
    "Feedback",
    "SoloFeedbackRow",
    "MemberFeedback",
    "GroupFeedbackRow",
    # Peer evaluation
    "PeerGroupContent",
    "PeerGroupRating",
    "PeerPairRating",
    "PeerRating",
    "PeerCell",
    "PeerStudentRow",
    "PeerGroupMatrix",
    # Grades
    "SoloGrade",
    "GroupGrade",
]

from .assignment import Assignment, AssignmentKey, Criterion, CriterionKey, GroupAssignment, GroupCriterion, \
    PeerEvaluation, SoloAssignment, SoloCriterion
from .base import BaseModel
from .course import Course, Edition
from .enum import AssignmentType, DeploymentEnvironment, OpenPanel
from .feedback import CriterionFeedback, Feedback, FeedbackEntry, GroupFeedback, GroupFeedbackRow, \
    IndividualFeedback, MemberFeedback, SoloFeedback, SoloFeedbackRow
from .grade import GroupGrade, SoloGrade
from .id import CourseID, EditionID, GroupAssignmentID, GroupCriterionID, GroupID, PeerEvaluationID, \
    SoloAssignmentID, SoloCriterionID, StudentID
from .peer import PeerCell, PeerGroupContent, PeerGroupMatrix, PeerGroupRating, PeerPairRating, PeerRating, \
    PeerStudentRow
from .student import EditionEnrollment, Group, GroupMember, GroupMembership, Student
