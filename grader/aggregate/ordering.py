"""
Ordering of an edition's assignments across all three variants.

Ordinals are optional and not unique; the merged order is nevertheless
total: by ordinal with absent ordinals last, then by name, then by variant
and identifier.
"""

from __future__ import annotations

import logging
import typing as t

from grader.model import Assignment, AssignmentKey, GroupAssignment, PeerEvaluation, SoloAssignment

logger = logging.getLogger(__name__)

TAssignment = t.TypeVar("TAssignment", SoloAssignment, GroupAssignment, PeerEvaluation)


def assignment_key(assignment: Assignment) -> AssignmentKey:
    match assignment:
        case SoloAssignment(assignment_id=key) | GroupAssignment(assignment_id=key):
            return key
        case PeerEvaluation(evaluation_id=key):
            return key


def ordinal_of(assignment: Assignment) -> int | None:
    match assignment:
        case SoloAssignment() | GroupAssignment() | PeerEvaluation():
            return assignment.ordinal


def with_ordinal(assignment: TAssignment, ordinal: int | None) -> TAssignment:
    match assignment:
        case SoloAssignment() | GroupAssignment() | PeerEvaluation():
            return assignment.model_copy(update={"ordinal": ordinal})


def sort_key(assignment: Assignment) -> tuple[bool, int, str, str, str]:
    ordinal = ordinal_of(assignment)
    return (ordinal is None, ordinal or 0, assignment.name, assignment.kind, assignment_key(assignment))


def merge(
    group_assignments: t.Iterable[GroupAssignment],
    solo_assignments: t.Iterable[SoloAssignment],
    peer_evaluations: t.Iterable[PeerEvaluation],
) -> list[Assignment]:
    merged: list[Assignment] = [*group_assignments, *solo_assignments, *peer_evaluations]
    return sorted(merged, key=sort_key)


def next_ordinal(existing: t.Iterable[Assignment | int | None]) -> int:
    """One more than the highest ordinal in use, or 1 if there is none"""
    ordinals = (e if isinstance(e, int) or e is None else ordinal_of(e) for e in existing)
    return max((o for o in ordinals if o is not None), default=0) + 1


def swap(a: TAssignment, b: Assignment, existing: t.Iterable[Assignment]) -> tuple[TAssignment, Assignment]:
    """Exchange the ordinals of `a` and `b`.

    A side without an ordinal is first given `next_ordinal()`, `a` before
    `b`, so both sides always end up numbered. `existing` should hold every
    assignment of the edition; `a` and `b` may or may not be among them.
    Swapping an assignment with itself returns it unchanged.
    """
    if assignment_key(a) == assignment_key(b):
        return a, b

    pool = [e for e in existing if assignment_key(e) not in (assignment_key(a), assignment_key(b))]
    a_ordinal, b_ordinal = ordinal_of(a), ordinal_of(b)
    if a_ordinal is None:
        a_ordinal = next_ordinal([*pool, b])
    if b_ordinal is None:
        b_ordinal = next_ordinal([*pool, a_ordinal])

    logger.debug(
        "swapping ordinals",
        extra={"a": assignment_key(a), "b": assignment_key(b), "a_ordinal": a_ordinal, "b_ordinal": b_ordinal},
    )
    return with_ordinal(a, b_ordinal), with_ordinal(b, a_ordinal)
