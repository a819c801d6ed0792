"""
Criterion-scoped feedback aggregates.

Feedback is stored as flat rows keyed on (subject, criterion or null). The
loaders here fold them into one `Feedback` per subject: the global entry,
then one entry per live criterion of the assignment, in criterion name
order. Missing rows are `None`; rows graded against a criterion the
assignment no longer has are dropped.
"""

from __future__ import annotations

import logging
import typing as t

from grader import storage
from grader.core import di
from grader.lib.util import fragments
from grader.model import CriterionFeedback, Feedback, FeedbackEntry, GroupAssignment, GroupAssignmentID, \
    GroupCriterion, GroupFeedbackRow, MemberFeedback, SoloAssignment, SoloAssignmentID, SoloCriterion, SoloFeedbackRow
from grader.model.feedback import TCriterion
from grader.storage import Session

logger = logging.getLogger(__name__)

K = t.TypeVar("K", bound=t.Hashable)


class FeedbackRow(t.Protocol):
    @property
    def criterion_id(self) -> t.Any: ...

    @property
    def text(self) -> str: ...

    @property
    def grade(self) -> str: ...


def index(rows: t.Iterable[FeedbackRow], subject: t.Callable[[t.Any], K]) -> dict[tuple[K, t.Any], FeedbackEntry]:
    """Entries keyed on (subject, criterion id), the global entry under a None criterion"""
    return {(subject(r), r.criterion_id): FeedbackEntry(text=r.text, grade=r.grade) for r in rows}


def fold(
    entries: t.Mapping[tuple[K, t.Any], FeedbackEntry],
    subject: K,
    criteria: t.Sequence[TCriterion],
    criterion_type: type[TCriterion],
) -> Feedback[TCriterion]:
    return Feedback[criterion_type](
        global_=entries.get((subject, None)),
        by_criterion=[
            CriterionFeedback[criterion_type](criterion=c, entry=entries.get((subject, c.criterion_id)))
            for c in criteria
        ],
    )


@di.inject
def load_solo_feedback(
    assignment: SoloAssignment,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> list[SoloFeedbackRow]:
    """Feedback of every student enrolled in the assignment's edition, by student name."""
    criteria = storage.criterion.find(assignment.assignment_id, session=session)
    students = storage.student.find(edition_id=assignment.edition_id, session=session)
    entries = index(
        storage.feedback.find_solo(assignment_id=assignment.assignment_id, session=session),
        lambda r: r.student_id,
    )

    logger.debug(
        "loaded solo feedback",
        extra={
            "assignment_id": assignment.assignment_id,
            "students": len(students),
            "criteria": len(criteria),
            "entries": len(entries),
        },
    )
    return [
        SoloFeedbackRow(student=s, feedback=fold(entries, s.student_id, criteria, SoloCriterion)) for s in students
    ]


@di.inject
def load_group_feedback(
    assignment: GroupAssignment,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> list[GroupFeedbackRow]:
    """Feedback of every group of the assignment's edition, by group name.

    Each group carries the individual feedback of its current members, by
    name. Feedback given to students who have since left the group stays in
    storage but is not part of the aggregate.
    """
    criteria = storage.criterion.find(assignment.assignment_id, session=session)
    groups = storage.group.find(edition_id=assignment.edition_id, session=session)
    group_entries = index(
        storage.feedback.find_group(assignment_id=assignment.assignment_id, session=session),
        lambda r: r.group_id,
    )
    individual_entries = index(
        storage.feedback.find_individual(assignment_id=assignment.assignment_id, session=session),
        lambda r: (r.group_id, r.student_id),
    )

    rows: list[GroupFeedbackRow] = []
    for group in groups:
        members = storage.group.find_members(group.group_id, session=session)
        rows.append(
            GroupFeedbackRow(
                group=group,
                feedback=fold(group_entries, group.group_id, criteria, GroupCriterion),
                individuals=[
                    MemberFeedback(
                        student=m.student,
                        role=m.role,
                        feedback=fold(
                            individual_entries, (group.group_id, m.student.student_id), criteria, GroupCriterion
                        ),
                    )
                    for m in members
                ],
            )
        )

    logger.debug(
        "loaded group feedback",
        extra={
            "assignment_id": assignment.assignment_id,
            "groups": len(groups),
            "criteria": len(criteria),
        },
    )
    return rows


@di.inject
def load_solo_autofill(
    assignment_id: SoloAssignmentID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> list[str]:
    """Distinct lines of every feedback text of the assignment, sorted, for suggestions."""
    return fragments(storage.feedback.texts(assignment_id, session=session))


@di.inject
def load_group_autofill(
    assignment_id: GroupAssignmentID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> list[str]:
    return fragments(storage.feedback.texts(assignment_id, session=session))
