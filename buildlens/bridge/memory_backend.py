"""In-memory build backend — seeded data, no network.

Serves the same ``BuildBackend`` protocol as ``HttpBackend`` from plain
dictionaries.  Used by the test suite and by ``buildlens demo``.  Logs are
growable byte buffers so a polling session can watch them change, and
every call is counted so tests can assert which remote calls a view made.
"""

from __future__ import annotations

import collections
import logging
from datetime import datetime
from typing import Any

from buildlens.core.errors import BackendUnavailableError, NotFoundError
from buildlens.models.diff import DiffFile
from buildlens.models.jobs import BuildStatus
from buildlens.models.logs import LogEntryInfo

logger = logging.getLogger(__name__)

_DiffKey = tuple[str, str, int | None, str | None, str | None, int | None]
_BuildKey = tuple[str, str, str, str]


class InMemoryBackend:
    """A ``BuildBackend`` backed by in-process dictionaries."""

    def __init__(self) -> None:
        self._repositories: dict[str, dict[str, list[str]]] = {}
        self._packages: dict[str, dict[str, int]] = {}
        self._flavors: dict[tuple[str, str], list[str]] = {}
        self._revision_infos: dict[tuple[str, str, int], dict[str, Any]] = {}
        self._diffs: dict[_DiffKey, list[DiffFile]] = {}
        self._logs: dict[_BuildKey, bytearray] = {}
        self._log_mtimes: dict[_BuildKey, datetime] = {}
        self._job_statuses: dict[_BuildKey, dict[str, Any]] = {}
        self._build_statuses: dict[_BuildKey, list[BuildStatus]] = {}
        self._dependents: dict[_BuildKey, list[str]] = {}
        self._failures: dict[str, Exception] = {}
        self.calls: collections.Counter[str] = collections.Counter()

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------

    def add_project(
        self, project: str, repositories: dict[str, list[str]] | None = None
    ) -> None:
        self._repositories[project] = {
            repo: list(archs) for repo, archs in (repositories or {}).items()
        }
        self._packages.setdefault(project, {})

    def add_package(
        self,
        project: str,
        package: str,
        *,
        revisions: int = 0,
        flavors: list[str] | None = None,
    ) -> None:
        if project not in self._repositories:
            self.add_project(project)
        self._packages[project][package] = revisions
        if flavors:
            self._flavors[(project, package)] = list(flavors)

    def set_revision_info(
        self, project: str, package: str, rev: int, **fields: Any
    ) -> None:
        self._revision_infos[(project, package, rev)] = {"rev": rev, **fields}

    def set_diff(
        self,
        project: str,
        package: str,
        files: list[DiffFile],
        *,
        rev: int | None = None,
        other_project: str | None = None,
        other_package: str | None = None,
        other_rev: int | None = None,
    ) -> None:
        key = (project, package, rev, other_project, other_package, other_rev)
        self._diffs[key] = list(files)

    def append_log(
        self,
        project: str,
        package: str,
        repository: str,
        arch: str,
        data: bytes,
        *,
        mtime: datetime | None = None,
    ) -> None:
        """Create the log if needed and append *data* to it."""
        key = (project, package, repository, arch)
        self._logs.setdefault(key, bytearray()).extend(data)
        if mtime is not None:
            self._log_mtimes[key] = mtime

    def set_job_status(
        self,
        project: str,
        package: str,
        repository: str,
        arch: str,
        raw: dict[str, Any] | None,
    ) -> None:
        key = (project, package, repository, arch)
        if raw is None:
            self._job_statuses.pop(key, None)
        else:
            self._job_statuses[key] = dict(raw)

    def set_build_status(
        self,
        project: str,
        package: str,
        repository: str,
        arch: str,
        statuses: list[BuildStatus],
    ) -> None:
        self._build_statuses[(project, package, repository, arch)] = list(statuses)

    def set_dependents(
        self,
        project: str,
        package: str,
        repository: str,
        arch: str,
        dependents: list[str],
    ) -> None:
        self._dependents[(project, package, repository, arch)] = list(dependents)

    def fail_next(self, method: str, exc: Exception | None = None) -> None:
        """Make the next call to *method* raise *exc* (default: unavailable)."""
        self._failures[method] = exc or BackendUnavailableError(
            f"Simulated failure in {method}"
        )

    # ------------------------------------------------------------------
    # BuildBackend protocol
    # ------------------------------------------------------------------

    def project_exists(self, project: str) -> bool:
        self._record("project_exists")
        return project in self._repositories

    def package_exists(self, project: str, package: str) -> bool:
        self._record("package_exists")
        return package in self._packages.get(project, {})

    def repository_architectures(self, project: str) -> dict[str, list[str]]:
        self._record("repository_architectures")
        self._require_project(project)
        return {repo: list(archs) for repo, archs in self._repositories[project].items()}

    def multibuild_flavors(self, project: str, package: str) -> list[str]:
        self._record("multibuild_flavors")
        return list(self._flavors.get((project, package), []))

    def list_revisions(self, project: str, package: str) -> int:
        self._record("list_revisions")
        self._require_package(project, package)
        return self._packages[project][package]

    def revision_info(
        self, project: str, package: str, rev: int
    ) -> dict[str, Any] | None:
        self._record("revision_info")
        info = self._revision_infos.get((project, package, rev))
        return dict(info) if info is not None else None

    def fetch_diff(
        self,
        project: str,
        package: str,
        rev: int | None = None,
        other_project: str | None = None,
        other_package: str | None = None,
        other_rev: int | None = None,
    ) -> list[DiffFile]:
        self._record("fetch_diff")
        self._require_package(project, package)
        key = (project, package, rev, other_project, other_package, other_rev)
        return list(self._diffs.get(key, []))

    def log_entry_info(
        self, project: str, package: str, repository: str, arch: str
    ) -> LogEntryInfo | None:
        self._record("log_entry_info")
        key = (project, package, repository, arch)
        log = self._logs.get(key)
        if log is None:
            return None
        return LogEntryInfo(size=len(log), mtime=self._log_mtimes.get(key))

    def fetch_log_chunk(
        self,
        project: str,
        package: str,
        repository: str,
        arch: str,
        offset: int,
        length: int,
    ) -> bytes:
        self._record("fetch_log_chunk")
        log = self._logs.get((project, package, repository, arch))
        if log is None:
            raise NotFoundError(
                f"No build log for {project}/{package} in {repository}/{arch}.",
                what="log",
            )
        return bytes(log[offset : offset + length])

    def job_status(
        self, project: str, package: str, repository: str, arch: str
    ) -> dict[str, Any] | None:
        self._record("job_status")
        raw = self._job_statuses.get((project, package, repository, arch))
        return dict(raw) if raw is not None else None

    def build_status(
        self, project: str, package: str, repository: str, arch: str
    ) -> list[BuildStatus]:
        self._record("build_status")
        return list(self._build_statuses.get((project, package, repository, arch), []))

    def dependents_of(
        self, project: str, package: str, repository: str, arch: str
    ) -> list[str]:
        self._record("dependents_of")
        return list(self._dependents.get((project, package, repository, arch), []))

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _record(self, method: str) -> None:
        self.calls[method] += 1
        exc = self._failures.pop(method, None)
        if exc is not None:
            logger.debug("InMemoryBackend.%s: raising injected %r.", method, exc)
            raise exc

    def _require_project(self, project: str) -> None:
        if project not in self._repositories:
            raise NotFoundError.project(project)

    def _require_package(self, project: str, package: str) -> None:
        self._require_project(project)
        if package not in self._packages[project]:
            raise NotFoundError.package(project, package)

    def __repr__(self) -> str:
        return (
            f"InMemoryBackend(projects={len(self._repositories)}, "
            f"logs={len(self._logs)})"
        )
