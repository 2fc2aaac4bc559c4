"""Build log models — targets, cursors and chunk results.

A build log may still be growing while it is read.  ``LogCursor`` records
how far a caller has read; it is never stored server-side, the caller
carries it between polls.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from buildlens.models.packages import PackageRef


class LogTarget(BaseModel):
    """Addresses one build log: package result for a repository/arch."""

    model_config = ConfigDict(frozen=True)

    project: str
    package: PackageRef
    repository: str
    architecture: str

    @property
    def package_name(self) -> str:
        """The composite identifier used for every backend call."""
        return str(self.package)


class LogEntryInfo(BaseModel):
    """Size and modification time of a remote log entry."""

    model_config = ConfigDict(frozen=True)

    size: int = Field(default=0, ge=0)
    mtime: datetime | None = None


class LogCursor(BaseModel):
    """Read position within a remote log.

    ``offset == remote_size`` means no new data right now, not that the
    log is finished.
    """

    model_config = ConfigDict(frozen=True)

    remote_size: int = Field(default=0, ge=0)
    offset: int = Field(default=0, ge=0)
    chunk: bytes = b""

    @model_validator(mode="after")
    def _offset_within_remote_size(self) -> LogCursor:
        if self.offset > self.remote_size:
            raise ValueError(
                f"offset {self.offset} exceeds remote_size {self.remote_size}"
            )
        return self

    @classmethod
    def start(cls, offset: int = 0) -> LogCursor:
        """A cursor for a poll session resuming at *offset*."""
        return cls(remote_size=offset, offset=offset)

    @property
    def at_end(self) -> bool:
        return self.offset >= self.remote_size


class LogChunkState(str, Enum):
    """Outcome of the synchronous first-page log read."""

    COMPLETE = "complete"
    PARTIAL = "partial"
    ABSENT = "absent"  # no log produced yet
    EMPTY = "empty"  # log exists but has no bytes


class LogChunk(BaseModel):
    """Result of ``LogChunkReader.full_page_chunk``."""

    model_config = ConfigDict(frozen=True)

    state: LogChunkState
    data: bytes = b""
    remote_size: int = 0
    cursor: LogCursor = LogCursor()

    @property
    def text(self) -> str:
        return self.data.decode("utf-8", errors="replace")


class PollState(str, Enum):
    """Outcome of one incremental log poll."""

    NEW_DATA = "new_data"
    NO_NEW_DATA = "no_new_data"
    ABSENT = "absent"


class PollResult(BaseModel):
    """Result of ``LogChunkReader.poll_next_chunk``."""

    model_config = ConfigDict(frozen=True)

    state: PollState
    cursor: LogCursor
    data: bytes = b""

    @property
    def text(self) -> str:
        return self.data.decode("utf-8", errors="replace")
