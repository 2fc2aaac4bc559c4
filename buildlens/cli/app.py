"""Main Typer application — imports and registers all CLI commands.

Entry point: ``buildlens`` (configured via pyproject.toml console_scripts).

Commands: revisions, rdiff, log, demo.
"""

from __future__ import annotations

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from buildlens.cli.commands.demo import demo_cmd
from buildlens.cli.commands.log_cmd import log_cmd
from buildlens.cli.commands.rdiff import rdiff_cmd
from buildlens.cli.commands.revisions import revisions_cmd
from buildlens.config import ViewerConfig

app = typer.Typer(
    name="buildlens",
    help="buildlens: bounded, paginated views over a remote build service.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="revisions", help="List source revisions of a package, newest first.")(revisions_cmd)
app.command(name="rdiff", help="Show a bounded source diff.")(rdiff_cmd)
app.command(name="log", help="Show (or follow) a build log.")(log_cmd)
app.command(name="demo", help="Render every view against seeded sample data.")(demo_cmd)


@app.callback()
def main_callback(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (defaults to BUILDLENS_LOG_LEVEL or INFO).",
    ),
) -> None:
    """Configure logging before any subcommand runs."""
    level = (log_level or ViewerConfig().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
