# SPDX-License-Identifier: MIT

from typing import Optional

import pendulum
from rich.console import Console
from rich.markup import escape

from beeline.model.goal import GoalSummary
from beeline.service.goal import has_entry_today
from beeline.time import TimezoneLike

ENTRY_TODAY_MARK = "✓"


def safebuf_color(safebuf: int) -> str:
    if safebuf <= 0:
        return "red"
    if safebuf == 1:
        return "yellow"
    if safebuf == 2:
        return "blue"
    if safebuf <= 6:
        return "green"
    return "white"


def format_goal(
    goal: GoalSummary,
    tz: TimezoneLike = "local",
    now: Optional[pendulum.DateTime] = None,
) -> str:
    """Render one goal as a rich markup line colored by its safety buffer."""
    mark = ENTRY_TODAY_MARK if has_entry_today(goal, tz, now) else " "
    slug_padded = f"{goal['slug']:20}"
    color = safebuf_color(goal["safebuf"])
    return f"[{color}]{mark} {escape(slug_padded)} \\[{escape(goal['limsum'])}][/{color}]"


def goals_view(goals: list[GoalSummary], console: Optional[Console] = None) -> None:
    console = console if console is not None else Console()
    for goal in goals:
        console.print(format_goal(goal), highlight=False)
