"""CLI commands for managing editions of a course."""

from __future__ import annotations

from sqlalchemy.orm import Session

import grader.lib.cli as click
from grader import storage
from grader.aggregate.ordering import assignment_key
from grader.core import di
from grader.model import AssignmentType, Course, CourseID, EditionID
from grader.state import EditionListState, EditionState


def get_course(course_id: CourseID, session: Session) -> Course:
    with session.begin():
        found = storage.course.get(course_id, session=session)
    if found is None:
        raise click.ClickException(f"no such course: {course_id}")
    return found


@click.group("edition")
def edition():
    """Manage editions of a course."""
    ...


@edition.command("list")
@click.argument("course_id", type=click.KeyParamType(CourseID))
@di.inject
def edition_list(course_id: CourseID, session: Session = di.Provide["storage.persistent.session"]) -> None:
    state = EditionListState(get_course(course_id, session), session=session)
    for e in state.editions.entities:
        click.echo(f"{e.edition_id}  {e.name}")


@edition.command("create")
@click.argument("course_id", type=click.KeyParamType(CourseID))
@click.argument("name")
@di.inject
def edition_create(
    course_id: CourseID, name: str, session: Session = di.Provide["storage.persistent.session"]
) -> None:
    """Create an edition NAME of the course."""
    state = EditionListState(get_course(course_id, session), session=session)
    if any(e.name == name for e in state.editions.entities):
        raise click.ClickException(f"edition {name!r} already exists in {state.course.name}")
    click.echo(state.new(name).edition_id)


@edition.command("show")
@click.argument("edition_id", type=click.KeyParamType(EditionID))
@di.inject
def edition_show(edition_id: EditionID, session: Session = di.Provide["storage.persistent.session"]) -> None:
    """Show the students, groups and assignment order of an edition."""
    with session.begin():
        found = storage.edition.get(edition_id, session=session)
    if found is None:
        raise click.ClickException(f"no such edition: {edition_id}")

    state = EditionState(found, session=session)
    click.secho(f"{state.course.entities.name} {found.name}", bold=True)

    click.secho("\nStudents", underline=True)
    for s in state.students.entities:
        click.echo(f"  {s.student_id}  {s.name}")

    click.secho("\nGroups", underline=True)
    for g in state.groups.entities:
        members = state.group(g).members.entities
        names = ", ".join(f"{m.student.name} ({m.role})" if m.role else m.student.name for m in members)
        click.echo(f"  {g.group_id}  {g.name}: {names}")

    click.secho("\nAssignments", underline=True)
    for a in state.assignments.entities:
        ordinal = "-" if a.ordinal is None else str(a.ordinal)
        click.echo(f"  {ordinal:>3}  {assignment_key(a)}  {a.name} [{AssignmentType(a.kind).show}]")
