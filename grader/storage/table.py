import datetime

from sqlalchemy import ForeignKey, Index, literal_column, MetaData, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, MappedAsDataclass
from sqlalchemy.types import Text

from grader.model import CourseID, EditionID, GroupAssignmentID, GroupCriterionID, GroupID, PeerEvaluationID, \
    SoloAssignmentID, SoloCriterionID, StudentID

from .type import ShortUUIDKeyType

metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_name)s",
        "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)


class base(MappedAsDataclass, DeclarativeBase):
    metadata = metadata
    type_annotation_map = {
        CourseID: ShortUUIDKeyType(CourseID),
        EditionID: ShortUUIDKeyType(EditionID),
        GroupID: ShortUUIDKeyType(GroupID),
        StudentID: ShortUUIDKeyType(StudentID),
        SoloAssignmentID: ShortUUIDKeyType(SoloAssignmentID),
        GroupAssignmentID: ShortUUIDKeyType(GroupAssignmentID),
        PeerEvaluationID: ShortUUIDKeyType(PeerEvaluationID),
        SoloCriterionID: ShortUUIDKeyType(SoloCriterionID),
        GroupCriterionID: ShortUUIDKeyType(GroupCriterionID),
    }


# Courses & Editions


class courses(base):
    __tablename__ = "courses"

    course_id: Mapped[CourseID] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(unique=True)


class editions(base):
    __tablename__ = "editions"
    __table_args__ = (UniqueConstraint("course_id", "name"),)

    edition_id: Mapped[EditionID] = mapped_column(primary_key=True)
    course_id: Mapped[CourseID] = mapped_column(ForeignKey("courses.course_id"))
    name: Mapped[str]


# Students & Groups


class students(base):
    __tablename__ = "students"

    student_id: Mapped[StudentID] = mapped_column(primary_key=True)
    name: Mapped[str]
    contact: Mapped[str] = mapped_column(default="")
    note: Mapped[str] = mapped_column(Text, default="")


class edition_students(base):
    __tablename__ = "edition_students"

    edition_id: Mapped[EditionID] = mapped_column(ForeignKey("editions.edition_id"), primary_key=True)
    student_id: Mapped[StudentID] = mapped_column(ForeignKey("students.student_id"), primary_key=True)


class groups(base):
    __tablename__ = "groups"
    __table_args__ = (UniqueConstraint("edition_id", "name"),)

    group_id: Mapped[GroupID] = mapped_column(primary_key=True)
    edition_id: Mapped[EditionID] = mapped_column(ForeignKey("editions.edition_id"))
    name: Mapped[str]


class group_members(base):
    __tablename__ = "group_members"

    group_id: Mapped[GroupID] = mapped_column(ForeignKey("groups.group_id"), primary_key=True)
    student_id: Mapped[StudentID] = mapped_column(ForeignKey("students.student_id"), primary_key=True)
    role: Mapped[str | None] = mapped_column(default=None)


# Assignments & Criteria


class solo_assignments(base):
    __tablename__ = "solo_assignments"
    __table_args__ = (UniqueConstraint("edition_id", "name"),)

    assignment_id: Mapped[SoloAssignmentID] = mapped_column(primary_key=True)
    edition_id: Mapped[EditionID] = mapped_column(ForeignKey("editions.edition_id"))
    name: Mapped[str]
    deadline: Mapped[datetime.datetime]
    ordinal: Mapped[int | None] = mapped_column(default=None)
    task: Mapped[str] = mapped_column(Text, default="")


class group_assignments(base):
    __tablename__ = "group_assignments"
    __table_args__ = (UniqueConstraint("edition_id", "name"),)

    assignment_id: Mapped[GroupAssignmentID] = mapped_column(primary_key=True)
    edition_id: Mapped[EditionID] = mapped_column(ForeignKey("editions.edition_id"))
    name: Mapped[str]
    deadline: Mapped[datetime.datetime]
    ordinal: Mapped[int | None] = mapped_column(default=None)
    task: Mapped[str] = mapped_column(Text, default="")


class peer_evaluations(base):
    __tablename__ = "peer_evaluations"
    __table_args__ = (UniqueConstraint("edition_id", "name"),)

    evaluation_id: Mapped[PeerEvaluationID] = mapped_column(primary_key=True)
    edition_id: Mapped[EditionID] = mapped_column(ForeignKey("editions.edition_id"))
    name: Mapped[str]
    ordinal: Mapped[int | None] = mapped_column(default=None)


class solo_criteria(base):
    __tablename__ = "solo_criteria"
    __table_args__ = (UniqueConstraint("assignment_id", "name"),)

    criterion_id: Mapped[SoloCriterionID] = mapped_column(primary_key=True)
    assignment_id: Mapped[SoloAssignmentID] = mapped_column(ForeignKey("solo_assignments.assignment_id"))
    name: Mapped[str]
    description: Mapped[str] = mapped_column(Text, default="")


class group_criteria(base):
    __tablename__ = "group_criteria"
    __table_args__ = (UniqueConstraint("assignment_id", "name"),)

    criterion_id: Mapped[GroupCriterionID] = mapped_column(primary_key=True)
    assignment_id: Mapped[GroupAssignmentID] = mapped_column(ForeignKey("group_assignments.assignment_id"))
    name: Mapped[str]
    description: Mapped[str] = mapped_column(Text, default="")


# Feedback
#
# One row per (subject, criterion); the row with a null criterion is the
# global entry. SQLite treats nulls as distinct in unique constraints, so each
# table carries a pair of partial unique indexes instead.


class solo_feedbacks(base):
    __tablename__ = "solo_feedbacks"
    __table_args__ = (
        Index(
            "uq_solo_feedbacks_global",
            "assignment_id",
            "student_id",
            unique=True,
            sqlite_where=literal_column("criterion_id").is_(None),
        ),
        Index(
            "uq_solo_feedbacks_criterion",
            "assignment_id",
            "student_id",
            "criterion_id",
            unique=True,
            sqlite_where=literal_column("criterion_id").is_not(None),
        ),
    )

    feedback_id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True, init=False)
    assignment_id: Mapped[SoloAssignmentID] = mapped_column(ForeignKey("solo_assignments.assignment_id"))
    student_id: Mapped[StudentID] = mapped_column(ForeignKey("students.student_id"))
    text: Mapped[str] = mapped_column(Text)
    grade: Mapped[str]
    criterion_id: Mapped[SoloCriterionID | None] = mapped_column(ForeignKey("solo_criteria.criterion_id"), default=None)


class group_feedbacks(base):
    __tablename__ = "group_feedbacks"
    __table_args__ = (
        Index(
            "uq_group_feedbacks_global",
            "assignment_id",
            "group_id",
            unique=True,
            sqlite_where=literal_column("criterion_id").is_(None),
        ),
        Index(
            "uq_group_feedbacks_criterion",
            "assignment_id",
            "group_id",
            "criterion_id",
            unique=True,
            sqlite_where=literal_column("criterion_id").is_not(None),
        ),
    )

    feedback_id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True, init=False)
    assignment_id: Mapped[GroupAssignmentID] = mapped_column(ForeignKey("group_assignments.assignment_id"))
    group_id: Mapped[GroupID] = mapped_column(ForeignKey("groups.group_id"))
    text: Mapped[str] = mapped_column(Text)
    grade: Mapped[str]
    criterion_id: Mapped[GroupCriterionID | None] = mapped_column(
        ForeignKey("group_criteria.criterion_id"), default=None
    )


class individual_feedbacks(base):
    __tablename__ = "individual_feedbacks"
    __table_args__ = (
        Index(
            "uq_individual_feedbacks_global",
            "assignment_id",
            "group_id",
            "student_id",
            unique=True,
            sqlite_where=literal_column("criterion_id").is_(None),
        ),
        Index(
            "uq_individual_feedbacks_criterion",
            "assignment_id",
            "group_id",
            "student_id",
            "criterion_id",
            unique=True,
            sqlite_where=literal_column("criterion_id").is_not(None),
        ),
    )

    feedback_id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True, init=False)
    assignment_id: Mapped[GroupAssignmentID] = mapped_column(ForeignKey("group_assignments.assignment_id"))
    group_id: Mapped[GroupID] = mapped_column(ForeignKey("groups.group_id"))
    student_id: Mapped[StudentID] = mapped_column(ForeignKey("students.student_id"))
    text: Mapped[str] = mapped_column(Text)
    grade: Mapped[str]
    criterion_id: Mapped[GroupCriterionID | None] = mapped_column(
        ForeignKey("group_criteria.criterion_id"), default=None
    )


# Peer evaluation


class peer_group_contents(base):
    __tablename__ = "peer_group_contents"

    evaluation_id: Mapped[PeerEvaluationID] = mapped_column(
        ForeignKey("peer_evaluations.evaluation_id"), primary_key=True
    )
    group_id: Mapped[GroupID] = mapped_column(ForeignKey("groups.group_id"), primary_key=True)
    content: Mapped[str] = mapped_column(Text)


class peer_group_ratings(base):
    __tablename__ = "peer_group_ratings"

    evaluation_id: Mapped[PeerEvaluationID] = mapped_column(
        ForeignKey("peer_evaluations.evaluation_id"), primary_key=True
    )
    student_id: Mapped[StudentID] = mapped_column(ForeignKey("students.student_id"), primary_key=True)
    grade: Mapped[str]
    note: Mapped[str] = mapped_column(Text)


class peer_pair_ratings(base):
    __tablename__ = "peer_pair_ratings"

    evaluation_id: Mapped[PeerEvaluationID] = mapped_column(
        ForeignKey("peer_evaluations.evaluation_id"), primary_key=True
    )
    from_student_id: Mapped[StudentID] = mapped_column(ForeignKey("students.student_id"), primary_key=True)
    to_student_id: Mapped[StudentID] = mapped_column(ForeignKey("students.student_id"), primary_key=True)
    grade: Mapped[str]
    note: Mapped[str] = mapped_column(Text)
