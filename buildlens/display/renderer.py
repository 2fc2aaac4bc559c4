"""Rich terminal renderer for buildlens view results.

Turns page models into Rich renderables, and follows a growing build log
in ``Rich.Live`` mode by polling ``ArtifactView.update_build_log``.

Color scheme
------------
- green     : succeeded builds, added diff lines
- red       : failed builds, removed diff lines, errors
- yellow    : building / scheduled, truncation hints
- cyan      : hunk headers
- dim       : unknown values
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from rich.console import Console, Group
from rich.live import Live
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from buildlens.models.diff import DiffFile, RdiffPage
from buildlens.models.revisions import RevisionsPage
from buildlens.models.views import (
    InlineError,
    LiveLogPage,
    LogUpdate,
    Redirect,
    Success,
    ViewResult,
)

if TYPE_CHECKING:
    from buildlens.core.artifact_view import ArtifactView


# ---------------------------------------------------------------------------
# Status code -> Rich style mapping
# ---------------------------------------------------------------------------

_STATUS_STYLES: dict[str, str] = {
    "succeeded": "bold green",
    "failed": "bold red",
    "unresolvable": "bold red",
    "broken": "bold red",
    "building": "bold yellow",
    "scheduled": "yellow",
    "signing": "yellow",
    "finished": "green",
    "disabled": "dim",
    "excluded": "dim",
}


def _format_duration(seconds: int | None) -> str:
    if seconds is None:
        return "[dim]unknown[/dim]"
    minutes, secs = divmod(max(seconds, 0), 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes:02d}m {secs:02d}s"
    return f"{minutes}m {secs:02d}s"


class ViewRenderer:
    """Renders view results as Rich terminal output.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def print_result(self, result: ViewResult) -> None:
        """Print any view result, choosing the renderable by page type."""
        if isinstance(result, Redirect):
            self.console.print(f"[bold red]Error:[/bold red] {escape(result.message)}")
            self.console.print(f"[dim]-> {result.target.value}[/dim]")
            return
        if isinstance(result, InlineError):
            self.console.print(self.render_log_update(result.page))
            return

        page = result.page
        if isinstance(page, LiveLogPage):
            self.console.print(self.render_live_log(page))
        elif isinstance(page, LogUpdate):
            self.console.print(self.render_log_update(page))
        elif isinstance(page, RevisionsPage):
            self.console.print(self.render_revisions(page))
        elif isinstance(page, RdiffPage):
            self.console.print(self.render_rdiff(page))

    # ------------------------------------------------------------------
    # Revisions
    # ------------------------------------------------------------------

    def render_revisions(self, page: RevisionsPage) -> Panel:
        table = Table(show_header=True, header_style="bold cyan", expand=True)
        table.add_column("Rev", style="bold", width=6, justify="right")
        table.add_column("User", min_width=10)
        table.add_column("Time", min_width=19)
        table.add_column("Comment", min_width=20)

        details = {d.rev: d for d in page.details}
        for rev in page.revisions:
            info = details.get(rev)
            table.add_row(
                str(rev),
                (escape(info.user) if info and info.user else "[dim]-[/dim]"),
                (
                    info.time.strftime("%Y-%m-%d %H:%M:%S")
                    if info and info.time
                    else "[dim]-[/dim]"
                ),
                (escape(info.comment) if info and info.comment else "[dim]-[/dim]"),
            )

        if page.page.show_all:
            footer = f"[bold]All revisions[/bold] ({len(page.revisions)})"
        else:
            footer = f"[bold]Page:[/bold] {page.page.number}/{max(page.page_count, 1)}"
            if page.has_next_page:
                footer += "  |  [dim]--page {} for older revisions[/dim]".format(
                    page.page.number + 1
                )

        return Panel(
            Group(table, Text(""), Text.from_markup(footer)),
            title=f"[bold]Revisions of {escape(page.project)}/{escape(page.package)}[/bold]",
            border_style="blue",
        )

    # ------------------------------------------------------------------
    # Rdiff
    # ------------------------------------------------------------------

    def render_rdiff(self, page: RdiffPage) -> Group:
        if not page.files:
            return Group(Text("No differences.", style="dim"))

        parts: list[Panel | Text] = []
        for diff_file in page.files:
            parts.append(self._render_diff_file(diff_file))
        if page.not_full_diff:
            parts.append(
                Text.from_markup(
                    "[yellow]Some diffs are truncated. "
                    "Use --full to show the complete diff.[/yellow]"
                )
            )
        return Group(*parts)

    def _render_diff_file(self, diff_file: DiffFile) -> Panel:
        body = Text()
        for line in diff_file.lines:
            if line.startswith("@@"):
                style = "cyan"
            elif line.startswith(("+++", "---")):
                style = "bold"
            elif line.startswith("+"):
                style = "green"
            elif line.startswith("-"):
                style = "red"
            else:
                style = ""
            body.append(line, style=style)
        subtitle = "[yellow]truncated[/yellow]" if diff_file.truncated else None
        return Panel(
            body,
            title=f"[bold]{escape(diff_file.path)}[/bold] ({diff_file.state.value})",
            subtitle=subtitle,
            border_style="blue",
        )

    # ------------------------------------------------------------------
    # Build logs
    # ------------------------------------------------------------------

    def render_live_log(self, page: LiveLogPage) -> Panel:
        status = page.status or "unknown"
        style = _STATUS_STYLES.get(status, "")
        worker = escape(page.worker_id) if page.worker_id else "[dim]-[/dim]"
        summary_parts = [
            f"[bold]Status:[/bold] [{style}]{status}[/{style}]" if style
            else f"[bold]Status:[/bold] {escape(status)}",
            f"[bold]Worker:[/bold] {worker}",
            f"[bold]Build time:[/bold] {_format_duration(page.build_time)}",
            f"[bold]Log:[/bold] {page.offset}/{page.size} bytes ({page.log_state.value})",
        ]
        if page.what_depends_on:
            summary_parts.append(
                f"[bold]Depends on:[/bold] {escape(', '.join(page.what_depends_on))}"
            )

        return Panel(
            Group(
                Text.from_markup("  |  ".join(summary_parts)),
                Text(""),
                Text(page.log_chunk or "(no log output yet)"),
            ),
            title=(
                f"[bold]{escape(page.project)}/{escape(page.package_name)}[/bold] "
                f"{escape(page.repository)}/{escape(page.architecture)}"
            ),
            border_style="blue",
        )

    def render_log_update(self, page: LogUpdate) -> Text:
        if page.errors:
            return Text(page.errors, style="bold red")
        return Text(page.log_chunk)

    def follow_log(
        self,
        view: ArtifactView,
        project: str,
        package: str,
        repository: str,
        arch: str,
        *,
        offset: int = 0,
        refresh_seconds: float = 2.0,
        max_polls: int | None = None,
    ) -> int:
        """Poll a build log until the build finishes or Ctrl+C.

        Inline errors are shown and polling continues from the last good
        offset.  Returns the final offset.
        """
        buffer = Text()
        status_line = Text("")
        polls = 0

        with Live(
            Group(buffer, status_line),
            console=self.console,
            refresh_per_second=max(1.0 / refresh_seconds, 0.1),
            transient=False,
        ) as live:
            try:
                while max_polls is None or polls < max_polls:
                    polls += 1
                    result = view.update_build_log(
                        project, package, repository, arch, offset=offset
                    )
                    if isinstance(result, Success):
                        update = result.page
                        buffer.append(update.log_chunk)
                        offset = update.offset
                        status_line = Text(
                            f"{offset} bytes read", style="dim"
                        )
                        live.update(Group(buffer, status_line))
                        if update.finished:
                            break
                    else:
                        status_line = Text(result.message, style="bold red")
                        live.update(Group(buffer, status_line))
                    time.sleep(refresh_seconds)
            except KeyboardInterrupt:
                pass
        return offset
