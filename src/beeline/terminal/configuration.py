# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from beeline import configuration
from beeline.logging import parse_log_level
from beeline.repository.configuration import CONFIGURATION_REPO
from beeline.terminal.custom_typer import AliasedTyperGroup
from beeline.terminal.error import exit_with_error

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


def _config_table(config: configuration.Configuration, title: Optional[str]) -> Table:
    table = Table(title=title)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")

    table.add_row(
        "editor",
        config["editor"]
        if config["editor"]
        else f"None (using {configuration.resolve_editor(config)})",
    )
    table.add_row("edit_limit", str(config["edit_limit"]))
    table.add_row("backup_filename", config["backup_filename"])
    table.add_row("api_base_url", config["api_base_url"])
    table.add_row("timeout", str(config["timeout"]))
    table.add_row("log_level", config["log_level"])
    table.add_row("config_path", str(configuration.APP_CONFIG_PATH))
    return table


@app.command("view, v")
def view() -> None:
    """Display current configuration settings."""
    config = CONFIGURATION_REPO.get_config()

    console = Console()
    console.print(_config_table(config, None))


@app.command("set, s")
def set(
    editor: Annotated[
        Optional[str],
        typer.Option("--editor", help="Editor command, overrides $EDITOR"),
    ] = None,
    remove_editor: Annotated[
        bool, typer.Option("--remove-editor", help="Fall back to $EDITOR")
    ] = False,
    edit_limit: Annotated[
        Optional[int],
        typer.Option(
            "--edit-limit", min=1, help="Number of recent datapoints to edit"
        ),
    ] = None,
    backup_filename: Annotated[
        Optional[str],
        typer.Option("--backup-filename", help="Default backup output file"),
    ] = None,
    api_base_url: Annotated[
        Optional[str],
        typer.Option("--api-base-url", help="Beeminder API base URL"),
    ] = None,
    timeout: Annotated[
        Optional[float],
        typer.Option("--timeout", min=0.1, help="HTTP timeout in seconds"),
    ] = None,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="DEBUG, INFO, WARNING or ERROR"),
    ] = None,
) -> None:
    """
    Update configuration settings.
    """
    if log_level is not None:
        try:
            parse_log_level(log_level)
        except ValueError as e:
            exit_with_error(str(e))

    CONFIGURATION_REPO.update_config(
        editor=editor,
        remove_editor=remove_editor,
        edit_limit=edit_limit,
        backup_filename=backup_filename,
        api_base_url=api_base_url,
        timeout=timeout,
        log_level=log_level,
    )
    CONFIGURATION_REPO.flush()

    config = CONFIGURATION_REPO.get_config()

    console = Console()
    console.print("[green]Configuration updated successfully![/green]\n")
    console.print(_config_table(config, "Updated Configuration"))
