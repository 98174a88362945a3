# SPDX-License-Identifier: MIT

from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from beeline import configuration

err_console = Console(stderr=True)


def exit_with_error(message: str, code: int = 1) -> NoReturn:
    err_console.print(f"[red]Error:[/red] {escape(message)}")
    raise typer.Exit(code)


def require_api_key() -> None:
    """Stop before any network call when BEEMINDER_API_KEY is missing."""
    try:
        configuration.get_api_key()
    except configuration.MissingApiKeyError as e:
        exit_with_error(str(e))
