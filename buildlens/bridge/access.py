"""Access gates — who may read a package's sources and build logs.

Permission decisions are made elsewhere; views only consult a gate before
touching the backend.  Any object with the two ``can_*`` methods satisfies
``AccessGate``.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, runtime_checkable


@runtime_checkable
class AccessGate(Protocol):
    """Protocol for source and build log access checks."""

    def can_read_sources(self, project: str, package: str) -> bool:
        """Return ``True`` if the sources of *package* may be shown."""
        ...

    def can_read_build_log(self, project: str, package: str) -> bool:
        """Return ``True`` if the build logs of *package* may be shown."""
        ...


class AllowAllAccessGate:
    """Permissive gate that allows every read.

    Suitable when the backend itself enforces permissions.
    """

    def can_read_sources(self, project: str, package: str) -> bool:
        return True

    def can_read_build_log(self, project: str, package: str) -> bool:
        return True


class DenylistAccessGate:
    """Gate that hides the sources of listed packages or whole projects.

    Parameters
    ----------
    protected:
        Entries of the form ``"project"`` (every package in it) or
        ``"project/package"``.  Build logs of protected packages are
        hidden too, since they echo the sources.
    """

    def __init__(self, protected: Iterable[str]) -> None:
        self._protected: set[str] = set(protected)

    def _is_protected(self, project: str, package: str) -> bool:
        return project in self._protected or f"{project}/{package}" in self._protected

    def can_read_sources(self, project: str, package: str) -> bool:
        return not self._is_protected(project, package)

    def can_read_build_log(self, project: str, package: str) -> bool:
        return not self._is_protected(project, package)
