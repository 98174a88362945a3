# SPDX-License-Identifier: MIT

import logging
import shlex
import subprocess
import tempfile
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape

from beeline.configuration import DEFAULT_EDIT_LIMIT
from beeline.model.operation import (
    EditResult,
    Operation,
    OperationOutcome,
    ReconcilePlan,
)
from beeline.repository.beeminder import BeeminderError, BeeminderRepository
from beeline.service.reconcile import reconcile
from beeline.service.table import (
    format_value,
    read_datapoints_table,
    write_datapoints_table,
)
from beeline.time import TimezoneLike, resolve_utc_offset

logger = logging.getLogger(__name__)


class EditorError(Exception):
    """Raised when the external editor cannot be started or exits with an error."""

    pass


def open_editor(editor: str, path: Path) -> None:
    """
    Run the editor on `path` and block until it exits.

    The editor setting may carry its own arguments, e.g. "code --wait".
    """
    command = shlex.split(editor)
    if len(command) == 0:
        raise EditorError("No editor configured")

    logger.debug("Running editor: %s", command + [str(path)])
    try:
        subprocess.run(command + [str(path)], check=True)
    except subprocess.CalledProcessError as e:
        raise EditorError(
            f"Editor '{editor}' exited with status {e.returncode}; edit discarded"
        ) from e
    except OSError as e:
        raise EditorError(f"Failed to open editor '{editor}': {e}") from e


def edit_text_in_editor(text: str, editor: str) -> str:
    """
    Let the user edit `text` in a temporary file and return the result.

    The file is removed when this returns or raises.
    """
    with tempfile.NamedTemporaryFile(
        mode="w", prefix="beeline-", suffix=".tsv", encoding="utf-8"
    ) as tf:
        tf.write(text)
        tf.flush()

        path = Path(tf.name)
        open_editor(editor, path)

        # Re-open by name; editors often replace the file rather than rewrite it
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise EditorError(
                f"The edited file is not valid UTF-8 ({e.reason} at byte {e.start}); "
                "nothing was changed"
            ) from e
        except OSError as e:
            raise EditorError(
                f"Could not read the edited file: {e}; nothing was changed"
            ) from e


def describe_operation(operation: Operation) -> str:
    if operation["kind"] == "create":
        return f"Creating new datapoint with value '{format_value(operation['value'])}'."
    if operation["kind"] == "update":
        return f"Updating datapoint '{operation['id']}'."
    return f"Deleting datapoint '{operation['id']}'."


def order_for_apply(operations: list[Operation]) -> list[Operation]:
    """Updates and creates in their original order, then every delete."""
    writes = [operation for operation in operations if operation["kind"] != "delete"]
    deletes = [operation for operation in operations if operation["kind"] == "delete"]
    return writes + deletes


def apply_operation(
    repository: BeeminderRepository, goal: str, operation: Operation
) -> None:
    if operation["kind"] == "create":
        repository.create_datapoint(
            goal,
            operation["value"],
            timestamp=operation["timestamp"],
            comment=operation["comment"],
        )
    elif operation["kind"] == "update":
        repository.update_datapoint(
            goal,
            operation["id"],
            timestamp=operation["timestamp"],
            value=operation["value"],
            comment=operation["comment"],
        )
    else:
        repository.delete_datapoint(goal, operation["id"])


def apply_plan(
    repository: BeeminderRepository,
    goal: str,
    plan: ReconcilePlan,
    console: Optional[Console] = None,
) -> list[OperationOutcome]:
    """
    Send the planned changes to Beeminder one at a time.

    A failed request is recorded and the remaining operations are still
    attempted. Nothing is rolled back.
    """
    console = console if console is not None else Console()

    outcomes: list[OperationOutcome] = []
    for operation in order_for_apply(plan["operations"]):
        console.print(escape(describe_operation(operation)))
        try:
            apply_operation(repository, goal, operation)
        except BeeminderError as e:
            row = operation.get("id", "new row")
            logger.error(
                "Failed to %s datapoint %s in goal '%s': %s",
                operation["kind"],
                row,
                goal,
                e,
            )
            console.print(
                f"[red]Failed to {operation['kind']} datapoint "
                f"'{escape(str(row))}' in goal '{escape(goal)}': {escape(str(e))}[/red]"
            )
            outcomes.append({"operation": operation, "status": "failed", "error": str(e)})
        else:
            outcomes.append({"operation": operation, "status": "applied", "error": None})

    return outcomes


def report_orphans(goal: str, plan: ReconcilePlan, console: Console) -> None:
    for orphan in plan["orphans"]:
        where = f" (line {orphan['line']})" if orphan["line"] is not None else ""
        logger.warning("Orphan row for goal '%s': %s%s", goal, orphan["id"], where)
        console.print(
            f"[yellow]No datapoint with ID '{escape(orphan['id'])}' in goal "
            f"'{escape(goal)}'{where}; row skipped.[/yellow]"
        )


def edit_datapoints(
    repository: BeeminderRepository,
    goal: str,
    editor: str,
    tz: TimezoneLike = "local",
    limit: int = DEFAULT_EDIT_LIMIT,
    dry_run: bool = False,
    console: Optional[Console] = None,
) -> EditResult:
    """
    Edit the most recent datapoints of a goal in an external editor and push
    the differences back to Beeminder.

    Parse errors, duplicate ids and editor failures abort before any change is
    sent. Once applying starts, each operation is attempted independently.
    """
    console = console if console is not None else Console()

    datapoints = repository.get_datapoints(goal, sort="timestamp", count=limit)
    datapoints = sorted(datapoints, key=lambda datapoint: datapoint["timestamp"])
    logger.info("Fetched %d datapoints for goal '%s'", len(datapoints), goal)

    # Written and read back with the same offset, even across a DST change
    offset = resolve_utc_offset(tz)
    table = write_datapoints_table(datapoints, offset)
    edited_table = edit_text_in_editor(table, editor)
    edited = read_datapoints_table(edited_table, offset)

    plan = reconcile(datapoints, edited)
    report_orphans(goal, plan, console)

    if dry_run or len(plan["operations"]) == 0:
        return {"plan": plan, "outcomes": []}

    outcomes = apply_plan(repository, goal, plan, console)
    return {"plan": plan, "outcomes": outcomes}
