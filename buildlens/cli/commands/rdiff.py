"""``buildlens rdiff PROJECT PACKAGE`` — show a bounded source diff.

Without ``--full`` each changed file shows at most the configured number of
diff lines; truncated files are flagged in the output.
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

console = Console()


def rdiff_cmd(
    project: str = typer.Argument(..., help="Project name."),
    package: str = typer.Argument(..., help="Package name."),
    rev: Optional[str] = typer.Option(None, "--rev", "-r", help="Revision to diff."),
    other_project: Optional[str] = typer.Option(
        None, "--oproject", help="Project to diff against."
    ),
    other_package: Optional[str] = typer.Option(
        None, "--opackage", help="Package to diff against."
    ),
    other_rev: Optional[str] = typer.Option(
        None, "--orev", help="Revision to diff against."
    ),
    full_diff: bool = typer.Option(
        False, "--full", "-f", help="Show every line of every file."
    ),
) -> None:
    """Show the source diff of a package revision."""
    config = ViewerConfig()
    with HttpBackend(config) as backend:
        view = ArtifactView(backend, config)
        result = view.rdiff(
            project,
            package,
            rev,
            other_project,
            other_package,
            other_rev,
            full_diff=full_diff,
        )
    print_and_exit_on_redirect(result, ViewRenderer(console=console))
