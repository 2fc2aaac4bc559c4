"""``buildlens log PROJECT PACKAGE REPOSITORY ARCH`` — show a build log.

Prints the live build log page (status, worker, build time and the first
chunk of the log).  With ``--follow`` it keeps polling for appended output
in Rich Live mode until the build finishes or Ctrl+C.
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
from buildlens.models.views import Success

console = Console()


def log_cmd(
    project: str = typer.Argument(..., help="Project name."),
    package: str = typer.Argument(..., help="Package name, or base:flavor."),
    repository: str = typer.Argument(..., help="Repository name."),
    arch: str = typer.Argument(..., help="Architecture."),
    follow: bool = typer.Option(
        False,
        "--follow",
        "-F",
        help="Keep polling for new log output (Ctrl+C to exit).",
    ),
    refresh_seconds: Optional[float] = typer.Option(
        None,
        "--refresh",
        help="Seconds between polls in follow mode.",
    ),
) -> None:
    """Show the build log of a package in one repository/architecture."""
    config = ViewerConfig()
    renderer = ViewRenderer(console=console)
    with HttpBackend(config) as backend:
        view = ArtifactView(backend, config)
        result = view.live_build_log(project, package, repository, arch)
        print_and_exit_on_redirect(result, renderer)

        if follow and isinstance(result, Success):
            offset = renderer.follow_log(
                view,
                project,
                package,
                repository,
                arch,
                offset=result.page.offset,
                refresh_seconds=refresh_seconds or config.follow_refresh_seconds,
            )
            console.print(f"[dim]Stopped at offset {offset}.[/dim]")
