"""One module per ``buildlens`` subcommand, plus shared result handling."""

from __future__ import annotations

import typer

from buildlens.display.renderer import ViewRenderer
from buildlens.models.views import Redirect, ViewResult


def print_and_exit_on_redirect(result: ViewResult, renderer: ViewRenderer) -> None:
    """Print *result*; a ``Redirect`` ends the command with exit code 1."""
    renderer.print_result(result)
    if isinstance(result, Redirect):
        raise typer.Exit(code=1)
