"""Tests for grader.aggregate.ordering."""

from __future__ import annotations

import datetime

from grader.aggregate import ordering
from grader.model import EditionID, GroupAssignment, GroupAssignmentID, PeerEvaluation, PeerEvaluationID, \
    SoloAssignment, SoloAssignmentID

EDITION = EditionID()
DEADLINE = datetime.datetime(2024, 10, 1, 23, 59)


def solo(name: str, ordinal: int | None = None) -> SoloAssignment:
    return SoloAssignment(
        assignment_id=SoloAssignmentID(), edition_id=EDITION, name=name, ordinal=ordinal, deadline=DEADLINE
    )


def group(name: str, ordinal: int | None = None) -> GroupAssignment:
    return GroupAssignment(
        assignment_id=GroupAssignmentID(), edition_id=EDITION, name=name, ordinal=ordinal, deadline=DEADLINE
    )


def peer(name: str, ordinal: int | None = None) -> PeerEvaluation:
    return PeerEvaluation(evaluation_id=PeerEvaluationID(), edition_id=EDITION, name=name, ordinal=ordinal)


class TestMerge(object):
    """Tests for ordering.merge()."""

    def test_absent_ordinals_sort_last(self) -> None:
        hw1, quiz1, pe1 = group("HW1", 1), solo("Quiz1", 2), peer("PE1")

        result = ordering.merge([hw1], [quiz1], [pe1])

        assert [a.name for a in result] == ["HW1", "Quiz1", "PE1"]

    def test_ties_break_by_name_then_kind(self) -> None:
        """Equal ordinals fall back to name; equal names fall back to the variant."""
        b = solo("B", 1)
        a_solo = solo("A", 1)
        a_group = group("A", 1)

        result = ordering.merge([a_group], [b, a_solo], [])

        assert result == [a_group, a_solo, b]

    def test_order_is_independent_of_input_order(self) -> None:
        assignments = [solo("HW1", 3), solo("HW2"), solo("HW3", 1), solo("HW4")]

        forward = ordering.merge([], assignments, [])
        backward = ordering.merge([], list(reversed(assignments)), [])

        assert forward == backward
        assert [a.name for a in forward] == ["HW3", "HW1", "HW2", "HW4"]


class TestNextOrdinal(object):
    def test_empty(self) -> None:
        assert ordering.next_ordinal([]) == 1

    def test_spans_variants_and_skips_absent(self) -> None:
        assert ordering.next_ordinal([solo("HW1", 4), group("Proj", 7), peer("PE1")]) == 8

    def test_accepts_bare_ordinals(self) -> None:
        assert ordering.next_ordinal([2, None, 5]) == 6


class TestSwap(object):
    """Tests for ordering.swap()."""

    def test_swap_fills_missing_ordinal_then_exchanges(self) -> None:
        """HW1 (1) swapped with PE1 (absent) gives PE1 the next ordinal first, then exchanges."""
        hw1, quiz1, pe1 = solo("HW1", 1), solo("Quiz1", 2), peer("PE1")

        new_hw1, new_pe1 = ordering.swap(hw1, pe1, [hw1, quiz1, pe1])

        assert (new_hw1.ordinal, new_pe1.ordinal) == (3, 1)
        assert [a.name for a in ordering.merge([], [new_hw1, quiz1], [new_pe1])] == ["PE1", "Quiz1", "HW1"]

    def test_swap_fills_both_sides(self) -> None:
        hw1, hw2, hw3 = solo("HW1", 1), solo("HW2"), solo("HW3")

        new_hw2, new_hw3 = ordering.swap(hw2, hw3, [hw1, hw2, hw3])

        # HW2 is numbered 2, then HW3 is numbered 3, then they exchange
        assert (new_hw2.ordinal, new_hw3.ordinal) == (3, 2)

    def test_swap_is_its_own_inverse(self) -> None:
        hw1, pe1 = solo("HW1", 1), peer("PE1", 2)

        once = ordering.swap(hw1, pe1, [hw1, pe1])
        twice = ordering.swap(*once, list(once))

        assert twice == (hw1, pe1)

    def test_swap_with_itself_is_a_no_op(self) -> None:
        hw1 = solo("HW1")

        assert ordering.swap(hw1, hw1, [hw1]) == (hw1, hw1)

    def test_swap_keeps_identity(self) -> None:
        hw1, proj = solo("HW1", 1), group("Proj", 2)

        new_hw1, new_proj = ordering.swap(hw1, proj, [hw1, proj])

        assert ordering.assignment_key(new_hw1) == hw1.assignment_id
        assert ordering.assignment_key(new_proj) == proj.assignment_id
        assert new_hw1.name == "HW1"
