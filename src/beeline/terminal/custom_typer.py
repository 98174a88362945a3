# SPDX-License-Identifier: MIT

import re
from typing import Optional

import click
import typer.core

ALIAS_SEPARATOR = re.compile(r" ?, ?")


class AliasedTyperGroup(typer.core.TyperGroup):
    """
    Group whose commands are registered as "name, alias", e.g. "edit, e".
    Any of the comma separated names invokes the command.
    """

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        return super().get_command(ctx, self.aliases().get(cmd_name, cmd_name))

    def aliases(self) -> dict[str, str]:
        """Map every short or long name to the registered command name."""
        resolved: dict[str, str] = {}
        for registered in self.commands:
            for alias in ALIAS_SEPARATOR.split(registered):
                resolved.setdefault(alias, registered)
        return resolved

    def list_commands(self, ctx: click.Context) -> list[str]:
        # Registration order: list, add, edit, backup, config
        return list(self.commands)
