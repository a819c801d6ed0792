"""Tests for the grader command line."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner, Result

from grader.cli.__main__ import main
from grader.core import GraderContainer


class Grader(object):
    """Runs commands against one database, each with a freshly booted container.

    Log records go to stderr, so command output is read from stdout alone.
    """

    def __init__(self, database: Path):
        self.database = database
        self.runner = CliRunner()

    def __call__(self, *args: str, input: str | None = None) -> Result:
        ct = GraderContainer()
        try:
            return self.runner.invoke(
                main,
                ["-E", "test", "-o", f"storage.persistent.sqlite.database={self.database}", *args],
                obj=ct,
                input=input,
            )
        finally:
            ct.shutdown_resources()

    def ok(self, *args: str) -> str:
        result = self(*args)
        assert result.exit_code == 0, result.output
        return result.stdout


@pytest.fixture
def grader(tmp_path: Path) -> Grader:
    g = Grader(tmp_path / "cli.sqlite3")
    g.ok("schema", "create", "--no-stamp")
    return g


class TestCourse(object):
    def test_create_and_list(self, grader: Grader) -> None:
        course_id = grader.ok("course", "create", "CS101").strip()

        assert grader.ok("course", "list").splitlines() == [f"{course_id}  CS101"]

    def test_duplicate_name_is_refused(self, grader: Grader) -> None:
        grader.ok("course", "create", "CS101")

        result = grader("course", "create", "CS101")

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_malformed_identifier(self, grader: Grader) -> None:
        result = grader("course", "delete", "--yes", "student$nope")

        assert result.exit_code == 2
        assert "is not a valid CourseID" in result.output


class TestAssignment(object):
    """Creating and reordering assignments through the command line."""

    def test_create_swap_and_feedback(self, grader: Grader) -> None:
        course_id = grader.ok("course", "create", "CS101").strip()
        edition_id = grader.ok("edition", "create", course_id, "2024").strip()

        grader.ok("assignment", "create", edition_id, "solo", "HW1")
        grader.ok("assignment", "create", edition_id, "peer", "PE1")
        shown = grader.ok("edition", "show", edition_id)
        assert shown.index("HW1") < shown.index("PE1")

        keys = [token for token in shown.split() if token.startswith(("soloasg$", "peereval$"))]
        hw1, pe1 = keys
        swapped = grader.ok("assignment", "swap", hw1, pe1)
        assert [line.split()[-1] for line in swapped.splitlines()] == ["PE1", "HW1"]

        feedback = json.loads(grader.ok("assignment", "feedback", hw1, "--json"))
        assert feedback == []
