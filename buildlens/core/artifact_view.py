"""ArtifactView — the orchestrator behind every artifact page.

ArtifactView wires the pure calculators (revision window, diff budget,
multibuild names), the log chunk reader and the job status summarizer to a
``BuildBackend`` and an ``AccessGate``.  Each public method serves one view
and returns a tagged result; nothing here renders or redirects by itself.

Failure policy
--------------
Synchronous views (revisions, rdiff, live build log) collapse any
``ViewError`` into ``Redirect(target, message)``.  The polling view
(update build log) collapses the same errors into ``InlineError`` so the
outer response stays successful and the polling loop keeps going.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from buildlens.bridge.access import AccessGate, AllowAllAccessGate
from buildlens.bridge.backend import BuildBackend
from buildlens.config import ViewerConfig
from buildlens.core import diff_budget, multibuild, revision_window
from buildlens.core.errors import (
    AccessDeniedError,
    NotFoundError,
    ValidationError,
    ViewError,
)
from buildlens.core.job_status import JobStatusSummarizer
from buildlens.core.log_reader import LogChunkReader
from buildlens.core.naming import elide
from buildlens.models.diff import RdiffPage
from buildlens.models.logs import LogCursor, LogTarget, PollState
from buildlens.models.packages import PackageRef
from buildlens.models.revisions import Page, RevisionInfo, RevisionsPage
from buildlens.models.views import (
    InlineError,
    LiveLogPage,
    LogUpdate,
    Redirect,
    RedirectTarget,
    Success,
    ViewResult,
)

logger = logging.getLogger(__name__)


class ArtifactView:
    """Serves revision, diff and build log views for one backend.

    Parameters
    ----------
    backend:
        The build backend every view queries.
    config:
        Paging, budget and chunking settings.  Uses defaults if not provided.
    access_gate:
        Source and build log access checks.  Allows everything if not
        provided.
    clock:
        Returns the current UTC time; used for elapsed build time.
    """

    def __init__(
        self,
        backend: BuildBackend,
        config: ViewerConfig | None = None,
        *,
        access_gate: AccessGate | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.backend = backend
        self.config = config or ViewerConfig()
        self.access_gate = access_gate or AllowAllAccessGate()
        self.log_reader = LogChunkReader(
            backend, max_chunk_bytes=self.config.chunk_cap
        )
        self.job_summarizer = JobStatusSummarizer()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # ------------------------------------------------------------------
    # Revisions
    # ------------------------------------------------------------------

    def revisions(
        self,
        project: str,
        package: str,
        rev: str | int | None = None,
        page: int = 1,
        show_all: bool = False,
        *,
        with_details: bool = False,
    ) -> ViewResult:
        """List one page of a package's source revisions, newest first.

        The ceiling is *rev* when given, otherwise the backend's live
        revision count.  Access is checked before anything is fetched.
        """
        params = {"project": project, "package": package}
        try:
            explicit = _parse_rev(rev, context="Error getting revisions")
            if not self.access_gate.can_read_sources(project, package):
                raise AccessDeniedError(
                    "You don't have access to the sources of this package: "
                    f'"{elide(package, self.config.name_elide_length)}"',
                    redirect=RedirectTarget.PROJECT_SHOW,
                )
            ceiling = (
                explicit
                if explicit is not None
                else self.backend.list_revisions(project, package)
            )
            page_model = Page(
                number=max(page, 1), size=self.config.page_size, show_all=show_all
            )
            revisions = revision_window.window(
                ceiling, page, show_all, page_size=self.config.page_size
            )
            details = (
                self._revision_details(project, package, revisions)
                if with_details
                else []
            )
        except ViewError as exc:
            return self._redirect(exc, params)

        return Success(
            page=RevisionsPage(
                project=project,
                package=package,
                ceiling=ceiling,
                page=page_model,
                revisions=revisions,
                details=details,
                page_count=(
                    1 if show_all and ceiling > 0
                    else revision_window.page_count(
                        ceiling, page_size=self.config.page_size
                    )
                ),
                has_next_page=(
                    not show_all
                    and revision_window.has_next_page(
                        ceiling, page, page_size=self.config.page_size
                    )
                ),
            )
        )

    def _revision_details(
        self, project: str, package: str, revisions: list[int]
    ) -> list[RevisionInfo]:
        details: list[RevisionInfo] = []
        for rev in revisions:
            raw = self.backend.revision_info(project, package, rev)
            if raw is not None:
                details.append(RevisionInfo.model_validate({**raw, "rev": rev}))
        return details

    # ------------------------------------------------------------------
    # Rdiff
    # ------------------------------------------------------------------

    def rdiff(
        self,
        project: str,
        package: str,
        rev: str | int | None = None,
        other_project: str | None = None,
        other_package: str | None = None,
        other_rev: str | int | None = None,
        full_diff: bool = False,
    ) -> ViewResult:
        """Diff two source states, bounding each file unless *full_diff*.

        An empty *rev* is rejected before anything is fetched.  No
        differences is an empty file list, not an error.
        """
        params = {"project": project, "package": package}
        try:
            parsed_rev = _parse_rev(rev, context="Error getting diff")
            parsed_other = _parse_rev(other_rev, context="Error getting diff")
            if not self.access_gate.can_read_sources(project, package):
                raise AccessDeniedError(
                    "You don't have access to the sources of this package: "
                    f'"{elide(package, self.config.name_elide_length)}"',
                    redirect=RedirectTarget.PROJECT_SHOW,
                )
            files = self.backend.fetch_diff(
                project,
                package,
                parsed_rev,
                other_project,
                other_package,
                parsed_other,
            )
        except ViewError as exc:
            return self._redirect(exc, params)

        files = diff_budget.apply_budget(
            files,
            full_diff,
            body_lines=self.config.diff_body_lines,
            header_lines=self.config.diff_header_lines,
        )
        return Success(
            page=RdiffPage(
                project=project,
                package=package,
                rev=parsed_rev,
                other_project=other_project,
                other_package=other_package,
                other_rev=parsed_other,
                full_diff=full_diff,
                files=files,
            )
        )

    # ------------------------------------------------------------------
    # Build logs
    # ------------------------------------------------------------------

    def live_build_log(
        self, project: str, package: str, repository: str, arch: str
    ) -> ViewResult:
        """Assemble the synchronous build log page.

        Any failure redirects to a fallback view with a flash-style message.
        """
        params = {"project": project, "package": package}
        try:
            target = self._resolve_log_target(project, package, repository, arch)
            name = target.package_name
            chunk = self.log_reader.full_page_chunk(
                target, self.config.log_initial_chunk_bytes
            )
            job = self.job_summarizer.summarize(
                self.backend.job_status(project, name, repository, arch)
            )
            status = multibuild.select_status(
                self.backend.build_status(project, name, repository, arch),
                target.package,
            )
            dependents = self.backend.dependents_of(project, name, repository, arch)
        except ViewError as exc:
            return self._redirect(exc, params)

        return Success(
            page=LiveLogPage(
                project=project,
                package=target.package.base_name,
                package_name=name,
                repository=repository,
                architecture=arch,
                status=status.code if status is not None else None,
                worker_id=job.worker_id,
                build_time=self.job_summarizer.elapsed_seconds(job, self._clock()),
                what_depends_on=dependents,
                log_state=chunk.state,
                log_chunk=chunk.text,
                offset=chunk.cursor.offset,
                size=chunk.remote_size,
            )
        )

    def update_build_log(
        self,
        project: str,
        package: str,
        repository: str,
        arch: str,
        offset: int = 0,
    ) -> ViewResult:
        """Fetch what was appended to a build log since *offset*.

        Failures never redirect: they come back as ``InlineError`` whose
        page carries the message in ``errors`` and the caller's offset, so
        the next poll can resume where this one left off.
        """
        try:
            target = self._resolve_log_target(project, package, repository, arch)
            result = self.log_reader.poll_next_chunk(
                target, LogCursor.start(max(offset, 0))
            )
            job = self.job_summarizer.summarize(
                self.backend.job_status(
                    project, target.package_name, repository, arch
                )
            )
        except ViewError as exc:
            logger.warning(
                "update_build_log %s/%s %s/%s: %s",
                project,
                package,
                repository,
                arch,
                exc.message,
            )
            return InlineError(
                message=exc.message,
                page=LogUpdate(
                    project=project,
                    package=package,
                    package_name=package,
                    repository=repository,
                    architecture=arch,
                    offset=max(offset, 0),
                    errors=exc.message,
                ),
            )

        cursor = result.cursor
        finished = not job.is_building and result.state is not PollState.NEW_DATA
        return Success(
            page=LogUpdate(
                project=project,
                package=target.package.base_name,
                package_name=target.package_name,
                repository=repository,
                architecture=arch,
                log_chunk=result.text,
                offset=cursor.offset,
                size=cursor.remote_size,
                finished=finished,
            )
        )

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve_package(self, project: str, name: str) -> PackageRef:
        """Resolve *name* to a ``PackageRef``, recognizing multibuild flavors.

        A name the backend knows as a package is never split.  Otherwise
        each shorter ``:``-prefix that is a known package is asked for its
        flavor list, and the name splits only on a listed flavor.
        """
        if not self.backend.project_exists(project):
            raise NotFoundError.project(project)
        if self.backend.package_exists(project, name):
            return PackageRef(project=project, base_name=name)
        for base in multibuild.base_name_candidates(name)[1:]:
            if not self.backend.package_exists(project, base):
                continue
            ref = multibuild.parse(
                project, name, self.backend.multibuild_flavors(project, base)
            )
            if ref.base_name == base:
                return ref
        raise NotFoundError.package(project, name)

    def _resolve_log_target(
        self, project: str, package: str, repository: str, arch: str
    ) -> LogTarget:
        ref = self.resolve_package(project, package)
        if not self.access_gate.can_read_build_log(project, ref.base_name):
            raise AccessDeniedError("Could not access build log")

        repositories = self.backend.repository_architectures(project)
        if repository not in repositories:
            raise NotFoundError.repository(project, repository)
        if arch not in repositories[repository]:
            raise NotFoundError.architecture(repository, arch)

        return LogTarget(
            project=project, package=ref, repository=repository, architecture=arch
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    @staticmethod
    def _redirect(exc: ViewError, params: dict[str, str]) -> Redirect:
        logger.warning("%s: %s", type(exc).__name__, exc.message)
        if exc.redirect is RedirectTarget.ROOT:
            params = {}
        elif exc.redirect is RedirectTarget.PROJECT_SHOW:
            params = {"project": params["project"]}
        return Redirect(target=exc.redirect, params=params, message=exc.message)


def _parse_rev(value: str | int | None, *, context: str) -> int | None:
    """Validate a revision parameter; ``None`` means "not given"."""
    if value is None:
        return None
    if isinstance(value, int):
        if value < 1:
            raise ValidationError(f"{context}: revision must be positive")
        return value
    text = value.strip()
    if not text:
        raise ValidationError(f"{context}: revision is empty")
    if not (text.isascii() and text.isdigit()):
        raise ValidationError(f"{context}: revision is not a number")
    if int(text) < 1:
        raise ValidationError(f"{context}: revision must be positive")
    return int(text)
