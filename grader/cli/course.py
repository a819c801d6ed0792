"""CLI commands for managing courses."""

from __future__ import annotations

from sqlalchemy.orm import Session

import grader.lib.cli as click
from grader import storage
from grader.core import di
from grader.model import CourseID
from grader.state import CourseListState


@click.group("course")
def course():
    """Manage courses."""
    ...


@course.command("list")
@di.inject
def course_list(session: Session = di.Provide["storage.persistent.session"]) -> None:
    """List courses by name."""
    for c in CourseListState(session=session).courses.entities:
        click.echo(f"{c.course_id}  {c.name}")


@course.command("create")
@click.argument("name")
@di.inject
def course_create(name: str, session: Session = di.Provide["storage.persistent.session"]) -> None:
    """Create a course named NAME."""
    state = CourseListState(session=session)
    if any(c.name == name for c in state.courses.entities):
        raise click.ClickException(f"course {name!r} already exists")
    created = state.new(name)
    click.echo(created.course_id)


@course.command("delete")
@click.argument("course_id", type=click.KeyParamType(CourseID))
@click.confirmation_option(prompt="Delete the course with all its editions, groups and feedback?")
@di.inject
def course_delete(course_id: CourseID, session: Session = di.Provide["storage.persistent.session"]) -> None:
    """Delete a course and everything in it."""
    with session.begin():
        found = storage.course.get(course_id, session=session)
    if found is None:
        raise click.ClickException(f"no such course: {course_id}")
    CourseListState(session=session).delete(found)
    click.echo(f"deleted {found.name}")
