from __future__ import annotations

import datetime
import logging
import typing as t

from grader import storage
from grader.aggregate import ordering
from grader.core import TimestampProvider
from grader.model import Assignment, AssignmentType, Course, Edition, GroupAssignment, Group, OpenPanel, \
    PeerEvaluation, SoloAssignment, Student
from grader.storage import Session

from .assignment import GroupAssignmentState, SoloAssignmentState
from .cache import View
from .group import GroupState
from .peer import PeerEvaluationState
from .student import StudentState

logger = logging.getLogger(__name__)

HistoryEntry: t.TypeAlias = tuple[int, OpenPanel]


class EditionState(object):
    """
    Everything shown for one edition: its students, groups and assignments,
    and the navigation history between its panels
    """

    edition: Edition
    course: View[Course]
    students: View[tuple[Student, ...]]
    available_students: View[tuple[Student, ...]]
    groups: View[tuple[Group, ...]]
    solo: View[tuple[SoloAssignment, ...]]
    group_assignments: View[tuple[GroupAssignment, ...]]
    peer: View[tuple[PeerEvaluation, ...]]
    assignments: View[list[Assignment]]
    history: list[HistoryEntry]

    def __init__(self, edition: Edition, *, session: Session, now: TimestampProvider = datetime.datetime.now):
        self.edition = edition
        self.session = session
        self.now = now
        edition_id = edition.edition_id

        self.course = View("course", self._load_course, session=session)
        self.students = View(
            "students", lambda s: storage.student.find(edition_id=edition_id, session=s), session=session
        )
        self.available_students = View(
            "available_students",
            lambda s: storage.student.find(not_in_edition_id=edition_id, session=s),
            session=session,
        )
        self.groups = View("groups", lambda s: storage.group.find(edition_id=edition_id, session=s), session=session)
        self.solo = View(
            "solo",
            lambda s: storage.assignment.find(AssignmentType.Solo, edition_id=edition_id, session=s),
            session=session,
        )
        self.group_assignments = View(
            "group_assignments",
            lambda s: storage.assignment.find(AssignmentType.Group, edition_id=edition_id, session=s),
            session=session,
        )
        self.peer = View(
            "peer",
            lambda s: storage.assignment.find(AssignmentType.Peer, edition_id=edition_id, session=s),
            session=session,
        )
        self.assignments = View("assignments", self._load_assignments, session=session)
        self.history = [(-1, OpenPanel.Assignment)]

    def _load_course(self, session: Session) -> Course:
        course = storage.course.get(self.edition.course_id, session=session)
        if course is None:
            raise KeyError(f"Course {self.edition.course_id} not found")
        return course

    def _load_assignments(self, session: Session) -> list[Assignment]:
        edition_id = self.edition.edition_id
        return ordering.merge(
            storage.assignment.find(AssignmentType.Group, edition_id=edition_id, session=session),
            storage.assignment.find(AssignmentType.Solo, edition_id=edition_id, session=session),
            storage.assignment.find(AssignmentType.Peer, edition_id=edition_id, session=session),
        )

    def _variant_view(self, kind: AssignmentType) -> View[t.Any]:
        match kind:
            case AssignmentType.Solo:
                return self.solo
            case AssignmentType.Group:
                return self.group_assignments
            case AssignmentType.Peer:
                return self.peer

    # Students

    def new_student(self, name: str, contact: str = "", note: str = "", add_to_edition: bool = True) -> Student:
        with self.session.begin():
            student = storage.student.create(name=name, contact=contact, note=note, session=self.session)
            if add_to_edition:
                storage.edition.enroll(self.edition.edition_id, student.student_id, session=self.session)
        logger.info("created student", extra={"student_id": student.student_id, "enrolled": add_to_edition})

        if add_to_edition:
            self.students.refresh()
        else:
            self.available_students.refresh()
        return student

    def set_student_name(self, student: Student, name: str) -> None:
        with self.session.begin():
            storage.student.update(student.student_id, name=name, session=self.session)
        self.students.refresh()

    def add_to_edition(self, students: t.Iterable[Student]) -> None:
        with self.session.begin():
            for student in students:
                storage.edition.enroll(self.edition.edition_id, student.student_id, session=self.session)
        self.students.refresh()
        self.available_students.refresh()

    def delete_student(self, student: Student) -> None:
        """Delete the student altogether, along with all their feedback and ratings"""
        with self.session.begin():
            storage.student.delete(student.student_id, session=self.session)
        logger.info("deleted student", extra={"student_id": student.student_id})
        self.students.refresh()
        self.available_students.refresh()
        self.groups.refresh()

    # Groups

    def new_group(self, name: str) -> Group:
        with self.session.begin():
            group = storage.group.create(edition_id=self.edition.edition_id, name=name, session=self.session)
        self.groups.refresh()
        return group

    def set_group_name(self, group: Group, name: str) -> None:
        with self.session.begin():
            storage.group.update(group.group_id, name=name, session=self.session)
        self.groups.refresh()

    def delete_group(self, group: Group) -> None:
        with self.session.begin():
            storage.group.delete(group.group_id, session=self.session)
        logger.info("deleted group", extra={"group_id": group.group_id})
        self.groups.refresh()
        self.group_assignments.refresh()

    # Assignments

    def next_ordinal(self) -> int:
        if self.session.in_transaction():
            ordinals = storage.assignment.ordinals(edition_id=self.edition.edition_id, session=self.session)
            return ordering.next_ordinal(ordinals)
        with self.session.begin():
            return self.next_ordinal()

    def new_assignment(self, kind: AssignmentType, name: str) -> Assignment:
        """Create an assignment numbered after every existing one"""
        with self.session.begin():
            ordinal = self.next_ordinal()
            match kind:
                case AssignmentType.Solo | AssignmentType.Group:
                    assignment = storage.assignment.create(
                        kind,
                        edition_id=self.edition.edition_id,
                        name=name,
                        ordinal=ordinal,
                        deadline=self.now(),
                        session=self.session,
                    )
                case AssignmentType.Peer:
                    assignment = storage.assignment.create(
                        kind, edition_id=self.edition.edition_id, name=name, ordinal=ordinal, session=self.session
                    )
        logger.info(
            "created assignment",
            extra={"kind": kind.value, "assignment_id": ordering.assignment_key(assignment), "ordinal": ordinal},
        )

        self._variant_view(kind).refresh()
        self.assignments.refresh()
        return assignment

    def set_assignment_title(self, assignment: Assignment, title: str) -> None:
        with self.session.begin():
            storage.assignment.update(ordering.assignment_key(assignment), name=title, session=self.session)
        self._variant_view(AssignmentType(assignment.kind)).refresh()
        self.assignments.refresh()

    def swap_order(self, a: Assignment, b: Assignment) -> None:
        """Exchange the positions of two assignments, numbering either first if needed"""
        with self.session.begin():
            # read both back so a stale snapshot cannot undo an earlier swap
            current = self._load_assignments(self.session)
            by_key = {ordering.assignment_key(e): e for e in current}
            a = by_key.get(ordering.assignment_key(a), a)
            b = by_key.get(ordering.assignment_key(b), b)

            a, b = ordering.swap(a, b, current)
            for swapped in (a, b):
                storage.assignment.update(
                    ordering.assignment_key(swapped), ordinal=ordering.ordinal_of(swapped), session=self.session
                )

        self.solo.refresh()
        self.group_assignments.refresh()
        self.peer.refresh()
        self.assignments.refresh()

    def delete_assignment(self, assignment: Assignment) -> None:
        with self.session.begin():
            storage.assignment.delete(ordering.assignment_key(assignment), session=self.session)
        logger.info("deleted assignment", extra={"assignment_id": ordering.assignment_key(assignment)})
        self._variant_view(AssignmentType(assignment.kind)).refresh()
        self.assignments.refresh()

    # Navigation

    def nav_to(self, panel: OpenPanel, index: int = -1) -> None:
        self.history.append((index, panel))

    def nav_to_index(self, index: int) -> None:
        self.nav_to(self.history[-1][1], index)

    def back(self) -> None:
        """Drop the current entry, then any panel-only entries, keeping at least one"""
        if len(self.history) < 2:
            return
        history = self.history[:-1]
        while len(history) >= 2 and history[-1][0] == -1:
            history.pop()
        self.history = history

    @property
    def location(self) -> HistoryEntry:
        return self.history[-1]

    # Detail states

    def student(self, student: Student) -> StudentState:
        return StudentState(student, self.edition, session=self.session)

    def group(self, group: Group) -> GroupState:
        return GroupState(group, session=self.session)

    @t.overload
    def assignment(self, assignment: SoloAssignment) -> SoloAssignmentState: ...

    @t.overload
    def assignment(self, assignment: GroupAssignment) -> GroupAssignmentState: ...

    @t.overload
    def assignment(self, assignment: PeerEvaluation) -> PeerEvaluationState: ...

    def assignment(self, assignment: Assignment) -> SoloAssignmentState | GroupAssignmentState | PeerEvaluationState:
        match assignment:
            case SoloAssignment():
                return SoloAssignmentState(assignment, session=self.session)
            case GroupAssignment():
                return GroupAssignmentState(assignment, session=self.session)
            case PeerEvaluation():
                return PeerEvaluationState(assignment, session=self.session)
