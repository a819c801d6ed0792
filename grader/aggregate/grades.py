"""Per-student grade summaries for an edition, from global feedback only."""

from __future__ import annotations

from grader import storage
from grader.core import di
from grader.model import AssignmentType, EditionID, GroupGrade, SoloGrade, StudentID
from grader.storage import Session

from .ordering import sort_key


@di.inject
def load_solo_grades(
    student_id: StudentID,
    edition_id: EditionID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> list[SoloGrade]:
    """Graded solo assignments of the edition, in assignment order."""
    assignments = storage.assignment.find(AssignmentType.Solo, edition_id=edition_id, session=session)
    grades = {
        f.assignment_id: f.grade
        for f in storage.feedback.find_solo(student_id=student_id, global_only=True, session=session)
    }
    return [
        SoloGrade(assignment_name=a.name, grade=grades[a.assignment_id])
        for a in sorted(assignments, key=sort_key)
        if a.assignment_id in grades
    ]


@di.inject
def load_group_grades(
    student_id: StudentID,
    edition_id: EditionID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> list[GroupGrade]:
    """Grades of every group assignment where the student's group or the student was graded.

    Only the student's current groups in the edition count; rows are by
    group name, then assignment order.
    """
    groups = storage.group.find(edition_id=edition_id, student_id=student_id, session=session)
    assignments = sorted(
        storage.assignment.find(AssignmentType.Group, edition_id=edition_id, session=session), key=sort_key
    )

    grades: list[GroupGrade] = []
    for group in groups:
        group_grades = {
            f.assignment_id: f.grade
            for f in storage.feedback.find_group(group_id=group.group_id, global_only=True, session=session)
        }
        individual_grades = {
            f.assignment_id: f.grade
            for f in storage.feedback.find_individual(
                group_id=group.group_id, student_id=student_id, global_only=True, session=session
            )
        }
        for assignment in assignments:
            group_grade = group_grades.get(assignment.assignment_id)
            individual_grade = individual_grades.get(assignment.assignment_id)
            if group_grade is None and individual_grade is None:
                continue
            grades.append(
                GroupGrade(
                    group_name=group.name,
                    assignment_name=assignment.name,
                    group_grade=group_grade,
                    individual_grade=individual_grade,
                )
            )
    return grades
