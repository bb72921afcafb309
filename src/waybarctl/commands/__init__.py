"""Subcommand modules for waybarctl.

Provides register_commands() which uses deferred imports to keep
``waybarctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from waybarctl.commands.backup import backup
    from waybarctl.commands.bar import bar
    from waybarctl.commands.export import export
    from waybarctl.commands.module import module
    from waybarctl.commands.style import style
    from waybarctl.commands.waybar import waybar

    cli.add_command(bar)
    cli.add_command(module)
    cli.add_command(style)
    cli.add_command(export)
    cli.add_command(backup)
    cli.add_command(waybar)

    # --- Standalone commands ---
    from waybarctl.commands.files import import_cmd, load, reset, save, validate
    from waybarctl.commands.history import history_cmd, redo, undo

    cli.add_command(load)
    cli.add_command(save)
    cli.add_command(validate)
    cli.add_command(import_cmd)
    cli.add_command(reset)
    cli.add_command(undo)
    cli.add_command(redo)
    cli.add_command(history_cmd)
