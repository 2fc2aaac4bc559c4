"""Source diff models — one request's worth of changed files."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class DiffKind(str, Enum):
    """How a changed file's diff body was produced by the backend."""

    TEXT = "text"
    BINARY_OR_ARCHIVE = "binary_or_archive"


class DiffFileState(str, Enum):
    """Change state of a file between the two compared revisions."""

    ADDED = "added"
    DELETED = "deleted"
    CHANGED = "changed"


class DiffFile(BaseModel):
    """A single file's unified diff.

    ``content`` holds the rendered unified-diff representation (headers
    first).  ``truncated`` is set only by the diff budget.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    kind: DiffKind = DiffKind.TEXT
    state: DiffFileState = DiffFileState.CHANGED
    content: bytes = b""
    truncated: bool = False

    @property
    def text(self) -> str:
        """The diff body decoded for display."""
        return self.content.decode("utf-8", errors="replace")

    @property
    def byte_lines(self) -> list[bytes]:
        """Rendered diff lines as raw bytes, split on ``\\n`` only.

        Form feeds and other characters ``str.splitlines`` treats as line
        breaks stay inside their line.  A last line without a newline is
        kept as is.
        """
        parts = self.content.split(b"\n")
        lines = [part + b"\n" for part in parts[:-1]]
        if parts[-1]:
            lines.append(parts[-1])
        return lines

    @property
    def lines(self) -> list[str]:
        """Rendered diff lines decoded for display, line endings kept."""
        return [line.decode("utf-8", errors="replace") for line in self.byte_lines]

    @property
    def line_count(self) -> int:
        return len(self.byte_lines)


class RdiffPage(BaseModel):
    """Page model for the rdiff view.

    ``filenames`` lists every changed file in backend order and is never
    affected by truncation.
    """

    model_config = ConfigDict(frozen=True)

    project: str
    package: str
    rev: int | None = None
    other_project: str | None = None
    other_package: str | None = None
    other_rev: int | None = None
    full_diff: bool = False
    files: list[DiffFile] = []

    @property
    def filenames(self) -> list[str]:
        return [f.path for f in self.files]

    @property
    def not_full_diff(self) -> bool:
        """``True`` when at least one file is shown truncated."""
        return any(f.truncated for f in self.files)
