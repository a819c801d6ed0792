"""Initial schema: courses, editions, students, groups, assignments, feedback
and peer evaluations

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

"""

import typing as t

from alembic import op
from sqlalchemy import literal_column
from sqlalchemy.schema import Column, ForeignKey, UniqueConstraint
from sqlalchemy.types import DateTime, Integer, String, Text

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | t.Sequence[str] | None = None
depends_on: str | t.Sequence[str] | None = None

Key = String(22)


def feedback_indexes(table: str, *subject: str) -> None:
    op.create_index(
        f"uq_{table}_global",
        table,
        ["assignment_id", *subject],
        unique=True,
        sqlite_where=literal_column("criterion_id").is_(None),
    )
    op.create_index(
        f"uq_{table}_criterion",
        table,
        ["assignment_id", *subject, "criterion_id"],
        unique=True,
        sqlite_where=literal_column("criterion_id").is_not(None),
    )


def upgrade() -> None:
    # Courses & Editions
    op.create_table(
        "courses",
        Column("course_id", Key, primary_key=True),
        Column("name", String, nullable=False, unique=True),
    )
    op.create_table(
        "editions",
        Column("edition_id", Key, primary_key=True),
        Column("course_id", Key, ForeignKey("courses.course_id"), nullable=False),
        Column("name", String, nullable=False),
        UniqueConstraint("course_id", "name"),
    )

    # Students & Groups
    op.create_table(
        "students",
        Column("student_id", Key, primary_key=True),
        Column("name", String, nullable=False),
        Column("contact", String, nullable=False),
        Column("note", Text, nullable=False),
    )
    op.create_table(
        "edition_students",
        Column("edition_id", Key, ForeignKey("editions.edition_id"), primary_key=True),
        Column("student_id", Key, ForeignKey("students.student_id"), primary_key=True),
    )
    op.create_table(
        "groups",
        Column("group_id", Key, primary_key=True),
        Column("edition_id", Key, ForeignKey("editions.edition_id"), nullable=False),
        Column("name", String, nullable=False),
        UniqueConstraint("edition_id", "name"),
    )
    op.create_table(
        "group_members",
        Column("group_id", Key, ForeignKey("groups.group_id"), primary_key=True),
        Column("student_id", Key, ForeignKey("students.student_id"), primary_key=True),
        Column("role", String, nullable=True),
    )

    # Assignments & Criteria
    for kind in ("solo", "group"):
        op.create_table(
            f"{kind}_assignments",
            Column("assignment_id", Key, primary_key=True),
            Column("edition_id", Key, ForeignKey("editions.edition_id"), nullable=False),
            Column("name", String, nullable=False),
            Column("deadline", DateTime, nullable=False),
            Column("ordinal", Integer, nullable=True),
            Column("task", Text, nullable=False),
            UniqueConstraint("edition_id", "name"),
        )
        op.create_table(
            f"{kind}_criteria",
            Column("criterion_id", Key, primary_key=True),
            Column("assignment_id", Key, ForeignKey(f"{kind}_assignments.assignment_id"), nullable=False),
            Column("name", String, nullable=False),
            Column("description", Text, nullable=False),
            UniqueConstraint("assignment_id", "name"),
        )
    op.create_table(
        "peer_evaluations",
        Column("evaluation_id", Key, primary_key=True),
        Column("edition_id", Key, ForeignKey("editions.edition_id"), nullable=False),
        Column("name", String, nullable=False),
        Column("ordinal", Integer, nullable=True),
        UniqueConstraint("edition_id", "name"),
    )

    # Feedback
    op.create_table(
        "solo_feedbacks",
        Column("feedback_id", Integer, primary_key=True, autoincrement=True),
        Column("assignment_id", Key, ForeignKey("solo_assignments.assignment_id"), nullable=False),
        Column("student_id", Key, ForeignKey("students.student_id"), nullable=False),
        Column("text", Text, nullable=False),
        Column("grade", String, nullable=False),
        Column("criterion_id", Key, ForeignKey("solo_criteria.criterion_id"), nullable=True),
    )
    feedback_indexes("solo_feedbacks", "student_id")

    op.create_table(
        "group_feedbacks",
        Column("feedback_id", Integer, primary_key=True, autoincrement=True),
        Column("assignment_id", Key, ForeignKey("group_assignments.assignment_id"), nullable=False),
        Column("group_id", Key, ForeignKey("groups.group_id"), nullable=False),
        Column("text", Text, nullable=False),
        Column("grade", String, nullable=False),
        Column("criterion_id", Key, ForeignKey("group_criteria.criterion_id"), nullable=True),
    )
    feedback_indexes("group_feedbacks", "group_id")

    op.create_table(
        "individual_feedbacks",
        Column("feedback_id", Integer, primary_key=True, autoincrement=True),
        Column("assignment_id", Key, ForeignKey("group_assignments.assignment_id"), nullable=False),
        Column("group_id", Key, ForeignKey("groups.group_id"), nullable=False),
        Column("student_id", Key, ForeignKey("students.student_id"), nullable=False),
        Column("text", Text, nullable=False),
        Column("grade", String, nullable=False),
        Column("criterion_id", Key, ForeignKey("group_criteria.criterion_id"), nullable=True),
    )
    feedback_indexes("individual_feedbacks", "group_id", "student_id")

    # Peer evaluation
    op.create_table(
        "peer_group_contents",
        Column("evaluation_id", Key, ForeignKey("peer_evaluations.evaluation_id"), primary_key=True),
        Column("group_id", Key, ForeignKey("groups.group_id"), primary_key=True),
        Column("content", Text, nullable=False),
    )
    op.create_table(
        "peer_group_ratings",
        Column("evaluation_id", Key, ForeignKey("peer_evaluations.evaluation_id"), primary_key=True),
        Column("student_id", Key, ForeignKey("students.student_id"), primary_key=True),
        Column("grade", String, nullable=False),
        Column("note", Text, nullable=False),
    )
    op.create_table(
        "peer_pair_ratings",
        Column("evaluation_id", Key, ForeignKey("peer_evaluations.evaluation_id"), primary_key=True),
        Column("from_student_id", Key, ForeignKey("students.student_id"), primary_key=True),
        Column("to_student_id", Key, ForeignKey("students.student_id"), primary_key=True),
        Column("grade", String, nullable=False),
        Column("note", Text, nullable=False),
    )


def downgrade() -> None:
    for table in (
        "peer_pair_ratings",
        "peer_group_ratings",
        "peer_group_contents",
        "individual_feedbacks",
        "group_feedbacks",
        "solo_feedbacks",
        "peer_evaluations",
        "group_criteria",
        "group_assignments",
        "solo_criteria",
        "solo_assignments",
        "group_members",
        "groups",
        "edition_students",
        "students",
        "editions",
        "courses",
    ):
        op.drop_table(table)
