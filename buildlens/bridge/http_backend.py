"""HTTP build backend — single-shot REST calls against the build service.

Bridge boundary
---------------
The build service answers with small XML documents (``<directory>``,
``<revisionlist>``, ``<sourcediff>``, ``<jobstatus>``, ``<resultlist>``,
``<builddepinfo>``).  ``HttpBackend`` parses each of them right here into
the fixed entities of ``buildlens.models``; nothing past this module looks
at raw payload shape.

Status mapping
--------------
- 401, 403 → ``AccessDeniedError``
- 404 → ``NotFoundError``, or ``None``/empty where absence is expected
  (no log yet, nothing building, no multibuild flavors)
- timeouts, connection errors and 5xx → ``BackendUnavailableError``

No retries happen here; one method call is one request.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from typing import Any
from urllib.parse import quote

import requests

from buildlens.config import ViewerConfig
from buildlens.core.diff_budget import classify_kind
from buildlens.core.errors import (
    AccessDeniedError,
    BackendUnavailableError,
    NotFoundError,
)
from buildlens.models.diff import DiffFile, DiffFileState
from buildlens.models.jobs import BuildStatus
from buildlens.models.logs import LogEntryInfo

logger = logging.getLogger(__name__)

USER_AGENT = "buildlens/0.1"


def _seg(value: str) -> str:
    """Quote one path segment; ``:`` and ``+`` stay literal."""
    return quote(value, safe=":+")


class HttpBackend:
    """``BuildBackend`` implementation over the build service REST API.

    Parameters
    ----------
    config:
        Supplies ``backend_url`` and ``request_timeout_seconds``.
    session:
        Optional pre-configured ``requests.Session`` (auth, proxies, TLS).
        One is created when omitted and closed by ``close()``.
    """

    def __init__(
        self,
        config: ViewerConfig,
        *,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = config.backend_url.rstrip("/")
        self._timeout = config.request_timeout_seconds
        self._owns_session = session is None
        self._session = session or requests.Session()
        self._session.headers.setdefault("User-Agent", USER_AGENT)
        logger.info(
            "HttpBackend: using %s (timeout=%.1fs).", self._base_url, self._timeout
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    # ------------------------------------------------------------------
    # Existence
    # ------------------------------------------------------------------

    def project_exists(self, project: str) -> bool:
        return self._exists(f"/source/{_seg(project)}/_meta")

    def package_exists(self, project: str, package: str) -> bool:
        return self._exists(f"/source/{_seg(project)}/{_seg(package)}/_meta")

    def repository_architectures(self, project: str) -> dict[str, list[str]]:
        root = self._get_xml(f"/source/{_seg(project)}/_meta", what="project")
        repositories: dict[str, list[str]] = {}
        for repo in root.iter("repository"):
            name = repo.get("name")
            if name:
                repositories[name] = [a.text.strip() for a in repo.iter("arch") if a.text]
        return repositories

    def multibuild_flavors(self, project: str, package: str) -> list[str]:
        response = self._request(
            "GET", f"/source/{_seg(project)}/{_seg(package)}/_multibuild"
        )
        if response.status_code == 404:
            return []
        root = self._xml(response)
        # Older services list flavors as <package>, newer as <flavor>.
        return [
            el.text.strip()
            for el in root
            if el.tag in ("flavor", "package") and el.text and el.text.strip()
        ]

    # ------------------------------------------------------------------
    # Sources
    # ------------------------------------------------------------------

    def list_revisions(self, project: str, package: str) -> int:
        root = self._get_xml(
            f"/source/{_seg(project)}/{_seg(package)}", what="package"
        )
        return _int(root.get("rev")) or 0

    def revision_info(
        self, project: str, package: str, rev: int
    ) -> dict[str, Any] | None:
        response = self._request(
            "GET",
            f"/source/{_seg(project)}/{_seg(package)}/_history",
            params={"rev": rev},
        )
        if response.status_code == 404:
            return None
        root = self._xml(response)
        for revision in root.iter("revision"):
            if _int(revision.get("rev")) != rev:
                continue
            info: dict[str, Any] = {"rev": rev}
            for field in ("srcmd5", "version", "user", "comment"):
                el = revision.find(field)
                if el is not None and el.text:
                    info[field] = el.text
            time_el = revision.find("time")
            if time_el is not None and _int(time_el.text) is not None:
                info["time"] = datetime.fromtimestamp(
                    _int(time_el.text), tz=timezone.utc
                )
            return info
        return None

    def fetch_diff(
        self,
        project: str,
        package: str,
        rev: int | None = None,
        other_project: str | None = None,
        other_package: str | None = None,
        other_rev: int | None = None,
    ) -> list[DiffFile]:
        params: dict[str, Any] = {"cmd": "diff", "view": "xml", "filelimit": 0}
        for key, value in (
            ("rev", rev),
            ("oproject", other_project),
            ("opackage", other_package),
            ("orev", other_rev),
        ):
            if value is not None:
                params[key] = value
        response = self._request(
            "POST", f"/source/{_seg(project)}/{_seg(package)}", params=params
        )
        self._raise_for_status(response, what="package")
        return _parse_sourcediff(self._xml(response))

    # ------------------------------------------------------------------
    # Builds
    # ------------------------------------------------------------------

    def log_entry_info(
        self, project: str, package: str, repository: str, arch: str
    ) -> LogEntryInfo | None:
        response = self._request(
            "GET",
            self._build_path(project, repository, arch, package, "_log"),
            params={"view": "entry"},
        )
        if response.status_code == 404:
            return None
        root = self._xml(response)
        entry = root.find("entry")
        if entry is None:
            return None
        mtime = _int(entry.get("mtime"))
        return LogEntryInfo(
            size=_int(entry.get("size")) or 0,
            mtime=datetime.fromtimestamp(mtime, tz=timezone.utc) if mtime else None,
        )

    def fetch_log_chunk(
        self,
        project: str,
        package: str,
        repository: str,
        arch: str,
        offset: int,
        length: int,
    ) -> bytes:
        response = self._request(
            "GET",
            self._build_path(project, repository, arch, package, "_log"),
            params={"nostream": 1, "start": offset, "end": offset + length},
        )
        self._raise_for_status(response, what="log")
        return response.content

    def job_status(
        self, project: str, package: str, repository: str, arch: str
    ) -> dict[str, Any] | None:
        response = self._request(
            "GET", self._build_path(project, repository, arch, package, "_jobstatus")
        )
        if response.status_code == 404 or not response.content.strip():
            return None
        root = self._xml(response)
        return dict(root.attrib) or None

    def build_status(
        self, project: str, package: str, repository: str, arch: str
    ) -> list[BuildStatus]:
        response = self._request(
            "GET",
            f"/build/{_seg(project)}/_result",
            params={
                "view": "status",
                "package": package,
                "repository": repository,
                "arch": arch,
            },
        )
        self._raise_for_status(response, what="project")
        statuses: list[BuildStatus] = []
        for status in self._xml(response).iter("status"):
            name = status.get("package")
            code = status.get("code")
            if name and code:
                details = status.find("details")
                statuses.append(
                    BuildStatus(
                        package_name=name,
                        code=code,
                        details=details.text if details is not None else None,
                    )
                )
        return statuses

    def dependents_of(
        self, project: str, package: str, repository: str, arch: str
    ) -> list[str]:
        response = self._request(
            "GET",
            f"/build/{_seg(project)}/{_seg(repository)}/{_seg(arch)}/_builddepinfo",
            params={"package": package, "view": "revpkgnames"},
        )
        if response.status_code == 404:
            return []
        root = self._xml(response)
        for entry in root.iter("package"):
            if entry.get("name") == package:
                return [dep.text for dep in entry.iter("pkgdep") if dep.text]
        return []

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> HttpBackend:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"HttpBackend(base_url={self._base_url!r})"

    # ------------------------------------------------------------------
    # Internal: requests
    # ------------------------------------------------------------------

    def _build_path(
        self, project: str, repository: str, arch: str, package: str, leaf: str
    ) -> str:
        return (
            f"/build/{_seg(project)}/{_seg(repository)}/{_seg(arch)}/"
            f"{_seg(package)}/{leaf}"
        )

    def _request(
        self, method: str, path: str, *, params: dict[str, Any] | None = None
    ) -> requests.Response:
        url = f"{self._base_url}{path}"
        try:
            response = self._session.request(
                method, url, params=params, timeout=self._timeout
            )
        except requests.exceptions.Timeout as exc:
            raise BackendUnavailableError(
                f"Build backend timed out on {method} {path}."
            ) from exc
        except requests.exceptions.ConnectionError as exc:
            raise BackendUnavailableError(
                f"Could not connect to the build backend at {self._base_url}."
            ) from exc
        except requests.exceptions.RequestException as exc:
            raise BackendUnavailableError(
                f"Build backend request failed: {exc}"
            ) from exc

        logger.debug("%s %s -> %d", method, path, response.status_code)
        if response.status_code in (401, 403):
            raise AccessDeniedError(f"Access to {path} was denied by the backend.")
        if response.status_code >= 500:
            raise BackendUnavailableError(
                f"Build backend answered {response.status_code} for {path}."
            )
        return response

    def _exists(self, path: str) -> bool:
        response = self._request("GET", path)
        if response.status_code == 404:
            return False
        self._raise_for_status(response, what="resource")
        return True

    def _get_xml(self, path: str, *, what: str) -> ET.Element:
        response = self._request("GET", path)
        self._raise_for_status(response, what=what)
        return self._xml(response)

    @staticmethod
    def _raise_for_status(response: requests.Response, *, what: str) -> None:
        if response.status_code == 404:
            raise NotFoundError(
                f"The build backend has no such {what}: {response.url}", what=what
            )
        if response.status_code >= 400:
            raise BackendUnavailableError(
                f"Build backend answered {response.status_code} for {response.url}."
            )

    @staticmethod
    def _xml(response: requests.Response) -> ET.Element:
        try:
            return ET.fromstring(response.content)
        except ET.ParseError as exc:
            raise BackendUnavailableError(
                f"Malformed payload from the build backend: {exc}"
            ) from exc


# ---------------------------------------------------------------------------
# Payload parsing
# ---------------------------------------------------------------------------


def _int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def _parse_sourcediff(root: ET.Element) -> list[DiffFile]:
    """Turn a ``<sourcediff>`` document into ``DiffFile`` entries."""
    files: list[DiffFile] = []
    for file_el in root.iter("file"):
        new = file_el.find("new")
        old = file_el.find("old")
        path = (
            (new.get("name") if new is not None else None)
            or (old.get("name") if old is not None else None)
            or ""
        )
        state = {
            "added": DiffFileState.ADDED,
            "deleted": DiffFileState.DELETED,
        }.get(file_el.get("state", ""), DiffFileState.CHANGED)
        diff_el = file_el.find("diff")
        content = (diff_el.text or "").encode("utf-8") if diff_el is not None else b""
        files.append(
            DiffFile(
                path=path,
                kind=classify_kind(path, content),
                state=state,
                content=content,
            )
        )
    return files
