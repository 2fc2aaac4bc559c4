"""Build log page models and tagged view results.

Views never perform presentation I/O.  They return one of three results:

- ``Success``     — render ``page``.
- ``Redirect``    — go to ``target`` and show ``message`` (flash-style).
- ``InlineError`` — keep the response successful, show ``message`` inline.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict

from buildlens.models.diff import RdiffPage
from buildlens.models.logs import LogChunkState
from buildlens.models.revisions import RevisionsPage


class RedirectTarget(str, Enum):
    """Fallback views a synchronous failure can send the caller to."""

    ROOT = "root"
    PROJECT_SHOW = "project_show"
    PACKAGE_SHOW = "package_show"


class LiveLogPage(BaseModel):
    """Page model for the synchronous build log view."""

    model_config = ConfigDict(frozen=True)

    project: str
    package: str  # base name
    package_name: str  # composite identifier
    repository: str
    architecture: str
    status: str | None = None
    worker_id: str | None = None
    build_time: int | None = None  # elapsed seconds, None when unknown
    what_depends_on: list[str] = []
    log_state: LogChunkState = LogChunkState.ABSENT
    log_chunk: str = ""
    offset: int = 0
    size: int = 0

    @property
    def is_building(self) -> bool:
        return self.worker_id is not None


class LogUpdate(BaseModel):
    """Page model for one asynchronous build log poll.

    ``errors`` is the inline-error slot: populated instead of redirecting
    so the polling loop can continue.
    """

    model_config = ConfigDict(frozen=True)

    project: str
    package: str
    package_name: str
    repository: str
    architecture: str
    log_chunk: str = ""
    offset: int = 0
    size: int = 0
    finished: bool = False
    errors: str | None = None


PageModel = Union[RevisionsPage, RdiffPage, LiveLogPage, LogUpdate]


class Success(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["success"] = "success"
    page: PageModel

    @property
    def http_status(self) -> int:
        return 200


class Redirect(BaseModel):
    """A flash-style failure: show ``message`` on the ``target`` view."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["redirect"] = "redirect"
    target: RedirectTarget
    params: dict[str, Any] = {}
    message: str

    @property
    def http_status(self) -> int:
        return 302


class InlineError(BaseModel):
    """A non-fatal failure reported inside a successful response."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["inline_error"] = "inline_error"
    message: str
    page: LogUpdate

    @property
    def http_status(self) -> int:
        return 200


ViewResult = Union[Success, Redirect, InlineError]
