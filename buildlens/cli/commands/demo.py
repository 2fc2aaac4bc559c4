"""``buildlens demo`` — render every view against seeded sample data.

Seeds an ``InMemoryBackend`` with one project, a multibuild package, a
revision history, a diff with one oversized file, and a build log that
keeps growing while the demo polls it.  No network access is needed.
"""

from __future__ import annotations

import time
from datetime import datetime, timedelta, timezone

import typer
from rich.console import Console
from rich.panel import Panel

from buildlens.bridge.memory_backend import InMemoryBackend
from buildlens.config import ViewerConfig
from buildlens.core.artifact_view import ArtifactView
from buildlens.display.renderer import ViewRenderer
from buildlens.models.diff import DiffFile, DiffFileState, DiffKind
from buildlens.models.jobs import BuildStatus
from buildlens.models.views import Success

console = Console()

DEMO_PROJECT = "home:demo"
DEMO_REPOSITORY = "openSUSE_Tumbleweed"
DEMO_ARCH = "x86_64"
DEMO_PACKAGE = "hello"
DEMO_FLAVOR = "doc"
_STARTED = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def seed_demo_backend() -> InMemoryBackend:
    """Build the sample backend used by ``buildlens demo``."""
    backend = InMemoryBackend()
    backend.add_project(DEMO_PROJECT, {DEMO_REPOSITORY: [DEMO_ARCH, "aarch64"]})
    backend.add_package(
        DEMO_PROJECT, DEMO_PACKAGE, revisions=45, flavors=[DEMO_FLAVOR]
    )
    backend.add_package(DEMO_PROJECT, "hello-data", revisions=3)

    for rev in range(26, 46):
        backend.set_revision_info(
            DEMO_PROJECT,
            DEMO_PACKAGE,
            rev,
            user="demo",
            time=_STARTED - timedelta(days=46 - rev),
            comment=f"Update to 2.{rev}",
        )

    spec_diff = (
        "--- hello.spec\n+++ hello.spec\n@@ -1,3 +1,3 @@\n"
        " Name: hello\n-Version: 2.44\n+Version: 2.45\n Release: 0\n"
    )
    generated = "--- generated.c\n+++ generated.c\n@@ -0,0 +1,400 @@\n" + "".join(
        f"+int value_{i} = {i};\n" for i in range(400)
    )
    backend.set_diff(
        DEMO_PROJECT,
        DEMO_PACKAGE,
        [
            DiffFile(path="hello.spec", content=spec_diff.encode()),
            DiffFile(
                path="generated.c",
                state=DiffFileState.ADDED,
                content=generated.encode(),
            ),
            DiffFile(
                path="hello-2.45.tar.gz",
                kind=DiffKind.BINARY_OR_ARCHIVE,
                content=b"--- hello-2.45.tar.gz\n+++ hello-2.45.tar.gz\n"
                b"Binary archives differ\n",
            ),
        ],
        rev=45,
    )

    name = f"{DEMO_PACKAGE}:{DEMO_FLAVOR}"
    backend.append_log(
        DEMO_PROJECT,
        name,
        DEMO_REPOSITORY,
        DEMO_ARCH,
        b"[    1s] starting build of hello:doc\n[    2s] installing dependencies\n",
    )
    backend.set_job_status(
        DEMO_PROJECT,
        name,
        DEMO_REPOSITORY,
        DEMO_ARCH,
        {"workerid": "worker-7:3", "starttime": str(int(_STARTED.timestamp())), "code": "building"},
    )
    backend.set_build_status(
        DEMO_PROJECT,
        name,
        DEMO_REPOSITORY,
        DEMO_ARCH,
        [
            BuildStatus(package_name=DEMO_PACKAGE, code="succeeded"),
            BuildStatus(package_name=name, code="building"),
        ],
    )
    backend.set_dependents(
        DEMO_PROJECT, name, DEMO_REPOSITORY, DEMO_ARCH, ["hello-data"]
    )
    return backend


def demo_cmd(
    delay: float = typer.Option(
        0.5,
        "--delay",
        "-d",
        help="Delay in seconds between log polls for visual effect.",
    ),
) -> None:
    """Render every view against seeded sample data.

    Shows a revisions page, a bounded diff, the live build log of a
    multibuild flavor, and a short polling session as the log grows.
    """
    backend = seed_demo_backend()
    view = ArtifactView(
        backend,
        ViewerConfig(),
        clock=lambda: _STARTED + timedelta(minutes=12, seconds=34),
    )
    renderer = ViewRenderer(console=console)
    name = f"{DEMO_PACKAGE}:{DEMO_FLAVOR}"

    console.print()
    console.print(
        Panel(
            "[bold]buildlens demo[/bold]\n\n"
            "Every view below runs against an in-memory backend.",
            border_style="cyan",
            padding=(1, 2),
        )
    )

    console.print("\n[cyan]>>> revisions[/cyan] (page 1)")
    renderer.print_result(
        view.revisions(DEMO_PROJECT, DEMO_PACKAGE, with_details=True)
    )

    console.print("\n[cyan]>>> rdiff[/cyan] (rev 45, bounded)")
    renderer.print_result(view.rdiff(DEMO_PROJECT, DEMO_PACKAGE, "45"))

    console.print(f"\n[cyan]>>> live build log[/cyan] ({name})")
    result = view.live_build_log(DEMO_PROJECT, name, DEMO_REPOSITORY, DEMO_ARCH)
    renderer.print_result(result)
    if not isinstance(result, Success):
        raise typer.Exit(code=1)

    console.print("\n[cyan]>>> polling for new log output[/cyan]")
    offset = result.page.offset
    appended = [
        b"[   10s] running make\n",
        b"[   42s] build succeeded\n",
    ]
    for step in range(len(appended) + 1):
        if step < len(appended):
            backend.append_log(
                DEMO_PROJECT, name, DEMO_REPOSITORY, DEMO_ARCH, appended[step]
            )
        else:
            backend.set_job_status(
                DEMO_PROJECT, name, DEMO_REPOSITORY, DEMO_ARCH, None
            )
        update = view.update_build_log(
            DEMO_PROJECT, name, DEMO_REPOSITORY, DEMO_ARCH, offset=offset
        )
        renderer.print_result(update)
        offset = update.page.offset
        if isinstance(update, Success) and update.page.finished:
            console.print(f"[bold green]Build finished[/bold green] at offset {offset}.")
            break
        time.sleep(delay)
