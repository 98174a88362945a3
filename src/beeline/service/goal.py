# SPDX-License-Identifier: MIT

from typing import Optional

import pendulum

from beeline.model.goal import GoalSummary
from beeline.time import TimezoneLike, local_date, now_utc, resolve_timezone


def has_entry_today(
    goal: GoalSummary,
    tz: TimezoneLike = "local",
    now: Optional[pendulum.DateTime] = None,
) -> bool:
    """True if the goal's latest datapoint falls on today's local date."""
    timezone = resolve_timezone(tz)
    now = now if now is not None else now_utc()
    return local_date(goal["lastday"], timezone) == local_date(now, timezone)


def sort_goals(
    goals: list[GoalSummary],
    tz: TimezoneLike = "local",
    now: Optional[pendulum.DateTime] = None,
) -> list[GoalSummary]:
    """
    Order goals so the ones needing attention come first: goals without an
    entry today, then by fewest days of safety buffer.
    """
    timezone = resolve_timezone(tz)
    now = now if now is not None else now_utc()
    return sorted(
        goals,
        key=lambda goal: (has_entry_today(goal, timezone, now), goal["safebuf"]),
    )
