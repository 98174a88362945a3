# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape

from beeline.repository.beeminder import BEEMINDER_REPO, BeeminderError
from beeline.service.goal import sort_goals
from beeline.service.table import format_value
from beeline.terminal.error import exit_with_error, require_api_key
from beeline.view.goal import goals_view


def list_goals() -> None:
    """List all goals, the ones needing attention first."""
    require_api_key()
    try:
        goals = BEEMINDER_REPO.get_goals()
    except BeeminderError as e:
        exit_with_error(f"Failed to fetch goals: {e}")

    goals_view(sort_goals(goals))


def add(
    goal: Annotated[str, typer.Argument(help="The name of the goal")],
    value: Annotated[float, typer.Argument(help="The value of the datapoint")],
    comment: Annotated[
        Optional[str],
        typer.Argument(help="An optional comment for the datapoint"),
    ] = None,
) -> None:
    """Add a datapoint."""
    require_api_key()
    try:
        datapoint = BEEMINDER_REPO.create_datapoint(goal, value, comment=comment)
    except BeeminderError as e:
        exit_with_error(f"Failed to add datapoint to goal '{goal}': {e}")

    console = Console()
    console.print(
        f"Added datapoint [bold]{format_value(datapoint['value'])}[/bold] "
        f"to [plum1]{escape(goal)}[/plum1] ({escape(datapoint['id'])})"
    )
