"""Command-line interface for shikiview.

- app: The Typer application object used by the ``shikiview`` entry point.
- console: Rich Console instance shared by all commands.
"""

from shikiview.cli.commands import app, console

__all__ = ["app", "console"]
