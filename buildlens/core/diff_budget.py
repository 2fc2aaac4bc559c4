"""Diff budget — bound how much of each changed file's diff is rendered.

The budget counts lines of the rendered unified diff (headers included),
not raw bytes.  Text files and binary/archive entries share one budget.
A full-diff request bypasses the budget entirely.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from buildlens.models.diff import DiffFile, DiffKind

logger = logging.getLogger(__name__)

DEFAULT_BODY_LINES = 199
DEFAULT_HEADER_LINES = 4

# A path segment ending in one of these is an archive; the backend expands
# archives and diffs their members as "archive.tar.gz/member".
_ARCHIVE_SUFFIX = re.compile(
    r"\.(tar|tar\.gz|tgz|tar\.bz2|tbz2|tar\.xz|txz|tar\.zst|zip|gem|obscpio|"
    r"cpio|rpm|deb|jar|war|7z)(/|$)",
    re.IGNORECASE,
)


def classify_kind(path: str, content: bytes = b"") -> DiffKind:
    """Tell a text diff from one produced for a binary or archive member."""
    if _ARCHIVE_SUFFIX.search(path):
        return DiffKind.BINARY_OR_ARCHIVE
    if content.startswith(b"Binary files"):
        return DiffKind.BINARY_OR_ARCHIVE
    return DiffKind.TEXT


def truncate(
    file: DiffFile,
    full_requested: bool,
    *,
    body_lines: int = DEFAULT_BODY_LINES,
    header_lines: int = DEFAULT_HEADER_LINES,
) -> DiffFile:
    """Return *file* bounded to the line budget, with ``truncated`` set.

    Parameters
    ----------
    file:
        The changed file as returned by the backend.
    full_requested:
        When ``True`` the file is returned whole and ``truncated`` is
        ``False`` regardless of size.
    body_lines, header_lines:
        Budget components; the file may show ``body_lines + header_lines``
        rendered lines in total, headers first.
    """
    if full_requested:
        return file.model_copy(update={"truncated": False})

    budget = body_lines + header_lines
    lines = file.byte_lines
    if len(lines) <= budget:
        return file.model_copy(update={"truncated": False})

    logger.debug(
        "Truncating diff for %s: %d lines > budget %d.",
        file.path,
        len(lines),
        budget,
    )
    kept = b"".join(lines[:budget])
    return file.model_copy(update={"content": kept, "truncated": True})


def apply_budget(
    files: Iterable[DiffFile],
    full_requested: bool,
    *,
    body_lines: int = DEFAULT_BODY_LINES,
    header_lines: int = DEFAULT_HEADER_LINES,
) -> list[DiffFile]:
    """Apply ``truncate`` to every file, keeping order and membership."""
    return [
        truncate(
            f,
            full_requested,
            body_lines=body_lines,
            header_lines=header_lines,
        )
        for f in files
    ]
