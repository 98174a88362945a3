# SPDX-License-Identifier: MIT

from collections import Counter

from beeline.model.datapoint import Datapoint, DatapointId, EditableDatapoint
from beeline.model.operation import Create, Delete, ReconcilePlan, Update
from beeline.template.operation import get_reconcile_plan_template


class DuplicateDatapointIdError(Exception):
    """Raised when more than one edited row carries the same datapoint id."""

    def __init__(self, id: DatapointId, lines: list[int]) -> None:
        self.id = id
        self.lines = lines
        where = ", ".join(str(line) for line in lines)
        super().__init__(
            f"Datapoint '{id}' appears on more than one line ({where}). "
            "Each existing datapoint may only be listed once."
        )


def reconcile(
    before: list[Datapoint], after: list[EditableDatapoint]
) -> ReconcilePlan:
    """
    Work out the remote changes that turn `before` into `after`.

    - an edited row whose id matches an original datapoint becomes an update,
      but only if its timestamp, value or comment changed
    - an edited row without an id becomes a create
    - an original datapoint whose id is on no edited row becomes a delete
    - an edited row with an id that matches no original datapoint is reported
      as an orphan and otherwise ignored

    Creates and updates keep the order of the edited rows. Deletes come last.

    Raises:
        DuplicateDatapointIdError: If two edited rows carry the same id.
        ValueError: If an edited row is missing its timestamp or value.
    """
    _ensure_unique_ids(after)

    originals: dict[DatapointId, Datapoint] = {
        datapoint["id"]: datapoint for datapoint in before
    }
    ids_to_delete: set[DatapointId] = set(originals)

    plan = get_reconcile_plan_template()
    for edited in after:
        timestamp = edited["timestamp"]
        value = edited["value"]
        comment = edited["comment"] if edited["comment"] is not None else ""
        if timestamp is None or value is None:
            raise ValueError(
                f"Edited datapoint on line {edited['line']} is missing its "
                "timestamp or value"
            )

        id = edited["id"]
        if id is None:
            create: Create = {
                "kind": "create",
                "timestamp": timestamp,
                "value": value,
                "comment": comment,
            }
            plan["operations"].append(create)
            continue

        original = originals.get(id)
        if original is None:
            plan["orphans"].append({"id": id, "line": edited["line"]})
            continue

        ids_to_delete.discard(id)
        needs_update = (
            value != original["value"]
            or timestamp != original["timestamp"]
            or comment != (original["comment"] or "")
        )
        if needs_update:
            update: Update = {
                "kind": "update",
                "id": id,
                "timestamp": timestamp,
                "value": value,
                "comment": comment,
            }
            plan["operations"].append(update)

    # Follow the fetched order so the plan is deterministic
    for datapoint in before:
        if datapoint["id"] in ids_to_delete:
            delete: Delete = {"kind": "delete", "id": datapoint["id"]}
            plan["operations"].append(delete)
            ids_to_delete.discard(datapoint["id"])

    return plan


def _ensure_unique_ids(after: list[EditableDatapoint]) -> None:
    counts = Counter(edited["id"] for edited in after if edited["id"] is not None)
    for id, count in counts.items():
        if count > 1:
            lines = [
                edited["line"]
                for edited in after
                if edited["id"] == id and edited["line"] is not None
            ]
            raise DuplicateDatapointIdError(id, lines)
