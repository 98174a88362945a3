# SPDX-License-Identifier: MIT

import json
import logging
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any, Literal, Optional, TypedDict

from rich.console import Console

from beeline.repository.beeminder import BeeminderError, BeeminderRepository
from beeline.time import datetime_to_iso_str, now_utc

logger = logging.getLogger(__name__)

GoalKind = Literal["active", "archived"]


class BackupError(Exception):
    """Raised when a backup cannot be fetched or written."""

    pass


class GoalWithDatapoints(TypedDict):
    goal: dict[str, Any]
    datapoints: list[dict[str, Any]]


def get_beeline_version() -> str:
    try:
        return version("beeline")
    except PackageNotFoundError:
        return "unknown"


def fetch_goal_datapoints(
    repository: BeeminderRepository,
    goals: list[dict[str, Any]],
    kind: GoalKind,
    processed: int,
    total: int,
    console: Console,
) -> list[GoalWithDatapoints]:
    goals_with_data: list[GoalWithDatapoints] = []
    for goal in goals:
        processed += 1
        slug = goal["slug"]
        console.print(
            f"Fetching datapoints for {kind} goal: {slug} ({processed}/{total})",
            markup=False,
        )
        try:
            datapoints = repository.get_datapoints_raw(slug, sort="timestamp")
        except BeeminderError as e:
            raise BackupError(
                f"Failed to fetch datapoints for {kind} goal: {slug}: {e}"
            ) from e
        console.print(f"  Found {len(datapoints)} datapoints")
        goals_with_data.append({"goal": goal, "datapoints": datapoints})
    return goals_with_data


def build_backup(
    repository: BeeminderRepository, console: Optional[Console] = None
) -> dict[str, Any]:
    """
    Fetch every active and archived goal together with its full datapoint
    history. Goals and datapoints are kept exactly as the API returned them.
    """
    console = console if console is not None else Console()

    console.print("Fetching active goals...")
    try:
        active_goals = repository.get_goals_raw()
    except BeeminderError as e:
        raise BackupError(f"Failed to fetch active goals: {e}") from e

    console.print("Fetching archived goals...")
    try:
        archived_goals = repository.get_archived_goals_raw()
    except BeeminderError as e:
        raise BackupError(f"Failed to fetch archived goals: {e}") from e

    total = len(active_goals) + len(archived_goals)
    console.print(
        f"Found {len(active_goals)} active goals and "
        f"{len(archived_goals)} archived goals"
    )

    active = fetch_goal_datapoints(
        repository, active_goals, "active", 0, total, console
    )
    archived = fetch_goal_datapoints(
        repository, archived_goals, "archived", len(active_goals), total, console
    )

    return {
        "metadata": {
            "backup_timestamp": datetime_to_iso_str(now_utc()),
            "beeline_version": get_beeline_version(),
        },
        "goals": {
            "active": active,
            "archived": archived,
        },
    }


def write_backup(backup: dict[str, Any], filename: str | Path) -> Path:
    path = Path(filename)
    try:
        json_data = json.dumps(backup, indent=2, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise BackupError(f"Failed to serialize backup data to JSON: {e}") from e
    try:
        path.write_text(json_data + "\n", encoding="utf-8")
    except OSError as e:
        raise BackupError(f"Failed to write backup file: {path}: {e}") from e
    return path


def backup_user_data(
    repository: BeeminderRepository,
    filename: str | Path,
    console: Optional[Console] = None,
) -> Path:
    console = console if console is not None else Console()

    console.print("Starting backup...")
    backup = build_backup(repository, console)

    console.print(f"Writing backup to file: {filename}", markup=False)
    path = write_backup(backup, filename)
    logger.info("Backup written to %s", path)

    console.print(f"Backup completed successfully! Saved to: {path}", markup=False)
    return path
