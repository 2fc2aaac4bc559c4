"""The ``BuildBackend`` protocol — single-shot queries against the build service.

Every method answers exactly one question with one remote call.  Absence
that is an expected outcome (no log yet, no running job, no multibuild
flavors) is returned as ``None`` or an empty value.  Transport problems
raise ``BackendUnavailableError``; permission and existence problems raise
``AccessDeniedError`` and ``NotFoundError``.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from buildlens.models.diff import DiffFile
from buildlens.models.jobs import BuildStatus
from buildlens.models.logs import LogEntryInfo


@runtime_checkable
class BuildBackend(Protocol):
    """Protocol every backend implementation must satisfy.

    ``HttpBackend`` talks to a live build service; ``InMemoryBackend``
    serves seeded data for tests and the demo command.
    """

    # ------------------------------------------------------------------
    # Existence
    # ------------------------------------------------------------------

    def project_exists(self, project: str) -> bool: ...

    def package_exists(self, project: str, package: str) -> bool: ...

    def repository_architectures(self, project: str) -> dict[str, list[str]]:
        """Map each repository of *project* to its architectures."""
        ...

    def multibuild_flavors(self, project: str, package: str) -> list[str]:
        """Flavor names the backend reports for *package*; empty if none."""
        ...

    # ------------------------------------------------------------------
    # Sources
    # ------------------------------------------------------------------

    def list_revisions(self, project: str, package: str) -> int:
        """Number of the newest source revision (0 for no revisions)."""
        ...

    def revision_info(
        self, project: str, package: str, rev: int
    ) -> dict[str, Any] | None:
        """Raw commit details for one revision, or ``None``."""
        ...

    def fetch_diff(
        self,
        project: str,
        package: str,
        rev: int | None = None,
        other_project: str | None = None,
        other_package: str | None = None,
        other_rev: int | None = None,
    ) -> list[DiffFile]:
        """Changed files between two source states, in backend order."""
        ...

    # ------------------------------------------------------------------
    # Builds
    # ------------------------------------------------------------------

    def log_entry_info(
        self, project: str, package: str, repository: str, arch: str
    ) -> LogEntryInfo | None: ...

    def fetch_log_chunk(
        self,
        project: str,
        package: str,
        repository: str,
        arch: str,
        offset: int,
        length: int,
    ) -> bytes: ...

    def job_status(
        self, project: str, package: str, repository: str, arch: str
    ) -> dict[str, Any] | None:
        """Raw job status snapshot, or ``None`` when nothing is building."""
        ...

    def build_status(
        self, project: str, package: str, repository: str, arch: str
    ) -> list[BuildStatus]: ...

    def dependents_of(
        self, project: str, package: str, repository: str, arch: str
    ) -> list[str]: ...
