"""CLI commands for peer evaluations."""

from __future__ import annotations

from sqlalchemy.orm import Session

import grader.lib.cli as click
import grader.lib.json as json
from grader import storage
from grader.core import di
from grader.model import PeerEvaluationID, PeerRating
from grader.state import PeerEvaluationState


def show(rating: PeerRating | None) -> str:
    return "-" if rating is None else rating.grade or "?"


@click.group("peer")
def peer():
    """Inspect peer evaluations."""
    ...


@peer.command("matrix")
@click.argument("evaluation_id", type=click.KeyParamType(PeerEvaluationID))
@click.option("--json", "as_json", is_flag=True, default=False, help="print the matrix as JSON")
@di.inject
def peer_matrix(
    evaluation_id: PeerEvaluationID,
    as_json: bool,
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """Print each group's from x to grid of grades, with the group-level grade last."""
    with session.begin():
        evaluation = storage.assignment.get(evaluation_id, session=session)
    if evaluation is None:
        raise click.ClickException(f"no such peer evaluation: {evaluation_id}")

    matrix = PeerEvaluationState(evaluation, session=session).contents.entities
    if as_json:
        click.echo(json.dumps(matrix, indent=2))
        return

    for group in matrix:
        click.secho(group.group.name, bold=True)
        if group.content:
            click.echo(f"  {group.content}")
        width = max((len(row.student.name) for row in group.students), default=0)
        for row in group.students:
            cells = "  ".join(show(cell.rating) for cell in row.ratings)
            click.echo(f"  {row.student.name:<{width}}  {cells}  | {show(row.group_rating)}")
