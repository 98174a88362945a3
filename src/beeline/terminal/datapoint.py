# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape

from beeline.configuration import resolve_editor
from beeline.model.operation import ReconcilePlan
from beeline.repository.beeminder import BEEMINDER_REPO, BeeminderError
from beeline.repository.configuration import CONFIGURATION_REPO
from beeline.service.edit import EditorError, describe_operation, edit_datapoints
from beeline.service.reconcile import DuplicateDatapointIdError
from beeline.service.table import TableParseError
from beeline.terminal.error import exit_with_error, require_api_key


def _plan_view(plan: ReconcilePlan, console: Console) -> None:
    console.print("[sandy_brown]Dry run, nothing was sent:[/sandy_brown]")
    for operation in plan["operations"]:
        console.print(f"  {escape(describe_operation(operation))}")


def edit(
    goal: Annotated[str, typer.Argument(help="The name of the goal")],
    limit: Annotated[
        Optional[int],
        typer.Option(
            "--limit",
            "-n",
            min=1,
            help="How many recent datapoints to edit (default from config)",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show the changes without applying them"),
    ] = False,
) -> None:
    """Edit recent datapoints for a goal."""
    require_api_key()
    config = CONFIGURATION_REPO.get_config()
    editor = resolve_editor(config)
    console = Console()

    try:
        result = edit_datapoints(
            BEEMINDER_REPO,
            goal,
            editor,
            limit=limit if limit is not None else config["edit_limit"],
            dry_run=dry_run,
            console=console,
        )
    except TableParseError as e:
        exit_with_error(f"Could not read the edited table, nothing was changed. {e}")
    except DuplicateDatapointIdError as e:
        exit_with_error(f"{e} Nothing was changed.")
    except EditorError as e:
        exit_with_error(str(e))
    except BeeminderError as e:
        exit_with_error(f"Failed to fetch datapoints for goal '{goal}': {e}")

    plan = result["plan"]
    if len(plan["operations"]) == 0:
        console.print("No changes.")
        return

    if dry_run:
        _plan_view(plan, console)
        return

    failed = [outcome for outcome in result["outcomes"] if outcome["status"] == "failed"]
    if len(failed) > 0:
        exit_with_error(
            f"{len(failed)} of {len(result['outcomes'])} changes to goal "
            f"'{goal}' failed; see above"
        )
