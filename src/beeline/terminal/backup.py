# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer

from beeline.repository.beeminder import BEEMINDER_REPO
from beeline.repository.configuration import CONFIGURATION_REPO
from beeline.service.backup import BackupError, backup_user_data
from beeline.terminal.error import exit_with_error, require_api_key


def backup(
    filename: Annotated[
        Optional[str],
        typer.Argument(help="Output file name (default: beedata.json)"),
    ] = None,
) -> None:
    """Backup all user data to JSON file."""
    require_api_key()
    if filename is None:
        filename = CONFIGURATION_REPO.get_config()["backup_filename"]

    try:
        backup_user_data(BEEMINDER_REPO, filename)
    except BackupError as e:
        exit_with_error(str(e))
