"""Error taxonomy for artifact views.

Every error carries the user-facing ``message`` and the fallback view a
synchronous request should be sent to.  ``ArtifactView`` is the only place
these are collapsed into view results; everywhere else they propagate.
"""

from __future__ import annotations

from buildlens.models.views import RedirectTarget


class ViewError(RuntimeError):
    """Base class for failures a view reports to the user."""

    default_redirect: RedirectTarget = RedirectTarget.PACKAGE_SHOW

    def __init__(
        self, message: str, *, redirect: RedirectTarget | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.redirect = redirect or self.default_redirect


class ValidationError(ViewError):
    """Raised for a malformed or empty revision parameter, before any fetch."""


class AccessDeniedError(ViewError):
    """Raised when the caller may not read the requested sources or logs."""


class NotFoundError(ViewError):
    """Raised for an unknown project, package, repository or architecture.

    ``what`` names the missing kind of object so callers can tell an
    unknown repository apart from an unknown package.
    """

    def __init__(
        self,
        message: str,
        *,
        what: str = "resource",
        redirect: RedirectTarget | None = None,
    ) -> None:
        super().__init__(message, redirect=redirect)
        self.what = what

    @classmethod
    def project(cls, project: str) -> NotFoundError:
        return cls(
            f"Couldn't find project '{project}'. Are you sure it still exists?",
            what="project",
            redirect=RedirectTarget.ROOT,
        )

    @classmethod
    def package(cls, project: str, package: str) -> NotFoundError:
        return cls(
            f"Couldn't find package '{package}' in project '{project}'. "
            "Are you sure it exists?",
            what="package",
            redirect=RedirectTarget.PROJECT_SHOW,
        )

    @classmethod
    def repository(cls, project: str, repository: str) -> NotFoundError:
        return cls(
            f"Couldn't find repository '{repository}' in project '{project}'.",
            what="repository",
        )

    @classmethod
    def architecture(cls, repository: str, architecture: str) -> NotFoundError:
        return cls(
            f"Couldn't find architecture '{architecture}' "
            f"in repository '{repository}'.",
            what="architecture",
        )


class BackendUnavailableError(ViewError):
    """Raised on transport failure or timeout.  Never retried here."""
