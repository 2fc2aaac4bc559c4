"""buildlens data models — all Pydantic v2, all frozen (immutable)."""

from buildlens.models.diff import DiffFile, DiffFileState, DiffKind, RdiffPage
from buildlens.models.jobs import BuildStatus, JobStatus
from buildlens.models.logs import (
    LogChunk,
    LogChunkState,
    LogCursor,
    LogEntryInfo,
    LogTarget,
    PollResult,
    PollState,
)
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

__all__ = [
    # revisions
    "Page",
    "RevisionInfo",
    "RevisionsPage",
    # diff
    "DiffKind",
    "DiffFileState",
    "DiffFile",
    "RdiffPage",
    # packages
    "PackageRef",
    # logs
    "LogTarget",
    "LogEntryInfo",
    "LogCursor",
    "LogChunkState",
    "LogChunk",
    "PollState",
    "PollResult",
    # jobs
    "JobStatus",
    "BuildStatus",
    # views
    "RedirectTarget",
    "LiveLogPage",
    "LogUpdate",
    "Success",
    "Redirect",
    "InlineError",
    "ViewResult",
]
