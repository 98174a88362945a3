# SPDX-License-Identifier: MIT

from typing import Optional, TypeAlias, TypedDict

import pendulum

DatapointId: TypeAlias = str


class Datapoint(TypedDict):
    id: DatapointId  # Assigned by Beeminder, stable
    timestamp: pendulum.DateTime  # UTC
    value: float
    comment: Optional[str]  # Never contains tab or newline in the edit table
    daystamp: Optional[str]  # YYYYMMDD, the goal's day the datapoint counts for
    updated_at: Optional[pendulum.DateTime]
    requestid: Optional[str]


class EditableDatapoint(TypedDict):
    id: Optional[DatapointId]  # None means "create"
    timestamp: Optional[pendulum.DateTime]
    value: Optional[float]
    comment: Optional[str]
    line: Optional[int]  # 1-based line in the edited table, for error reports
