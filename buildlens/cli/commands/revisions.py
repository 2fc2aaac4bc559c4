"""``buildlens revisions PROJECT PACKAGE`` — page through source revisions.

Shows one page of revision numbers, newest first.  ``--rev`` pins the
ceiling instead of asking the backend for the current revision, ``--all``
lists every revision in one page.
"""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console

from buildlens.bridge.http_backend import HttpBackend
from buildlens.cli.commands import print_and_exit_on_redirect
from buildlens.config import ViewerConfig
from buildlens.core.artifact_view import ArtifactView
from buildlens.display.renderer import ViewRenderer
from buildlens.models.views import Redirect

console = Console()


def revisions_cmd(
    project: str = typer.Argument(..., help="Project name."),
    package: str = typer.Argument(..., help="Package name."),
    rev: Optional[str] = typer.Option(
        None, "--rev", "-r", help="Newest revision to list (defaults to the current one)."
    ),
    page: int = typer.Option(1, "--page", "-p", min=1, help="Page number, 1 is newest."),
    show_all: bool = typer.Option(False, "--all", "-a", help="List every revision."),
    details: bool = typer.Option(
        False, "--details", "-d", help="Fetch user, time and comment per revision."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the raw view result as JSON."),
) -> None:
    """List source revisions of a package, newest first."""
    config = ViewerConfig()
    with HttpBackend(config) as backend:
        view = ArtifactView(backend, config)
        result = view.revisions(
            project, package, rev, page, show_all, with_details=details
        )

    if as_json:
        console.print_json(result.model_dump_json())
        if isinstance(result, Redirect):
            raise typer.Exit(code=1)
        return
    print_and_exit_on_redirect(result, ViewRenderer(console=console))
