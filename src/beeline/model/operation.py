# SPDX-License-Identifier: MIT

from typing import Literal, Optional, TypeAlias, TypedDict, Union

import pendulum

from beeline.model.datapoint import DatapointId

OutcomeStatus = Literal["applied", "failed"]


class Create(TypedDict):
    kind: Literal["create"]
    timestamp: pendulum.DateTime
    value: float
    comment: str


class Update(TypedDict):
    kind: Literal["update"]
    id: DatapointId
    timestamp: pendulum.DateTime
    value: float
    comment: str


class Delete(TypedDict):
    kind: Literal["delete"]
    id: DatapointId


Operation: TypeAlias = Union[Create, Update, Delete]


class OrphanReport(TypedDict):
    id: DatapointId
    line: Optional[int]


class ReconcilePlan(TypedDict):
    # Creates and updates in the order they were edited, then deletes
    operations: list[Operation]
    orphans: list[OrphanReport]


class OperationOutcome(TypedDict):
    operation: Operation
    status: OutcomeStatus
    error: Optional[str]


class EditResult(TypedDict):
    plan: ReconcilePlan
    outcomes: list[OperationOutcome]  # Empty when the plan was not applied
