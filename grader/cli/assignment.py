"""CLI commands for assignments: creation, ordering and feedback."""

from __future__ import annotations

from sqlalchemy.orm import Session

import grader.lib.cli as click
import grader.lib.json as json
from grader import storage
from grader.core import di
from grader.model import Assignment, AssignmentKey, AssignmentType, EditionID, Feedback, GroupAssignment, \
    GroupAssignmentID, PeerEvaluationID, SoloAssignment, SoloAssignmentID
from grader.state import EditionState, GroupAssignmentState, SoloAssignmentState

AssignmentKeyType = click.KeyParamType(SoloAssignmentID, GroupAssignmentID, PeerEvaluationID)


def get_assignment(assignment_id: AssignmentKey, session: Session) -> Assignment:
    with session.begin():
        found = storage.assignment.get(assignment_id, session=session)
    if found is None:
        raise click.ClickException(f"no such assignment: {assignment_id}")
    return found


def edition_state(edition_id: EditionID, session: Session) -> EditionState:
    with session.begin():
        found = storage.edition.get(edition_id, session=session)
    if found is None:
        raise click.ClickException(f"no such edition: {edition_id}")
    return EditionState(found, session=session)


def echo_feedback(feedback: Feedback, indent: str) -> None:
    entry = feedback.global_
    click.echo(f"{indent}global: " + (f"[{entry.grade}] {entry.text}" if entry else "ungraded"))
    for cf in feedback.by_criterion:
        entry = cf.entry
        click.echo(f"{indent}{cf.criterion.name}: " + (f"[{entry.grade}] {entry.text}" if entry else "ungraded"))


@click.group("assignment")
def assignment():
    """Manage the assignments of an edition."""
    ...


@assignment.command("create")
@click.argument("edition_id", type=click.KeyParamType(EditionID))
@click.argument("kind", type=click.EnumType(AssignmentType))
@click.argument("name")
@di.inject
def assignment_create(
    edition_id: EditionID,
    kind: AssignmentType,
    name: str,
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """Create a KIND assignment called NAME, ordered after all others."""
    state = edition_state(edition_id, session)
    if any(a.name == name for a in state.assignments.entities if a.kind == kind.value):
        raise click.ClickException(f"{kind.show} {name!r} already exists")
    created = state.new_assignment(kind, name)
    click.echo(f"{created.ordinal}  {created.name}")


@assignment.command("swap")
@click.argument("first", type=AssignmentKeyType)
@click.argument("second", type=AssignmentKeyType)
@di.inject
def assignment_swap(
    first: AssignmentKey,
    second: AssignmentKey,
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """Exchange the order of two assignments of the same edition."""
    a, b = get_assignment(first, session), get_assignment(second, session)
    if a.edition_id != b.edition_id:
        raise click.ClickException("assignments belong to different editions")

    state = edition_state(a.edition_id, session)
    state.swap_order(a, b)
    for e in state.assignments.entities:
        click.echo(f"{'-' if e.ordinal is None else e.ordinal:>3}  {e.name}")


@assignment.command("feedback")
@click.argument("assignment_id", type=click.KeyParamType(SoloAssignmentID, GroupAssignmentID))
@click.option("--json", "as_json", is_flag=True, default=False, help="print the aggregate as JSON")
@di.inject
def assignment_feedback(
    assignment_id: SoloAssignmentID | GroupAssignmentID,
    as_json: bool,
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """Print the feedback of every student or group, per criterion."""
    found = get_assignment(assignment_id, session)
    match found:
        case SoloAssignment():
            solo = SoloAssignmentState(found, session=session).feedback.entities
            if as_json:
                click.echo(json.dumps(solo, indent=2))
                return
            for row in solo:
                click.secho(row.student.name, bold=True)
                echo_feedback(row.feedback, "  ")
        case GroupAssignment():
            groups = GroupAssignmentState(found, session=session).feedback.entities
            if as_json:
                click.echo(json.dumps(groups, indent=2))
                return
            for row in groups:
                click.secho(row.group.name, bold=True)
                echo_feedback(row.feedback, "  ")
                for member in row.individuals:
                    click.echo(f"  {member.student.name}" + (f" ({member.role})" if member.role else ""))
                    echo_feedback(member.feedback, "    ")
        case _:
            raise click.ClickException(f"{found.name} is not graded with feedback")
