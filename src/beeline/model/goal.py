# SPDX-License-Identifier: MIT

from typing import Optional, TypedDict

import pendulum


class GoalSummary(TypedDict):
    slug: str
    title: str
    goal_type: Optional[str]
    units: Optional[str]
    safebuf: int  # Days of slack before derailing
    limsum: str  # e.g. "+2 within 1 day"
    lastday: pendulum.DateTime  # Timestamp of the most recent datapoint
    losedate: Optional[pendulum.DateTime]
    archived: bool
