# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer

from beeline.logging import configure_logging, parse_log_level
from beeline.repository.configuration import CONFIGURATION_REPO
from beeline.terminal import configuration
from beeline.terminal.backup import backup
from beeline.terminal.custom_typer import AliasedTyperGroup
from beeline.terminal.datapoint import edit
from beeline.terminal.error import exit_with_error
from beeline.terminal.goal import add, list_goals

app = typer.Typer(
    cls=AliasedTyperGroup,
    help="beeline - Beeminder in the CLI",
    no_args_is_help=True,
)
app.command(name="list, ls")(list_goals)
app.command(name="add, a", no_args_is_help=True)(add)
app.command(name="edit, e", no_args_is_help=True)(edit)
app.command(name="backup, b")(backup)
app.add_typer(configuration.app, name="config, c")


@app.callback()
def main_callback(
    log_level: Annotated[
        Optional[str],
        typer.Option(
            "--log-level",
            "-l",
            help="DEBUG, INFO, WARNING or ERROR (default from config)",
        ),
    ] = None,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Verbose logging with source locations"),
    ] = False,
) -> None:
    """
    beeline - Beeminder in the CLI

    Set BEEMINDER_API_KEY to your personal auth token.
    """
    config = CONFIGURATION_REPO.get_config()
    try:
        level = parse_log_level(
            log_level if log_level is not None else config["log_level"]
        )
    except ValueError as e:
        exit_with_error(str(e))
    configure_logging(level=level, debug_mode=debug)


def run() -> None:
    app()
