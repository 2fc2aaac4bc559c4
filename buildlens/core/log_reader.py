"""LogChunkReader — incremental reads of a remote, possibly growing log.

The reader holds no per-session state.  Callers carry a ``LogCursor``
between calls; the reader only computes the next byte range, fetches it,
and hands back an advanced cursor.

Invariants
----------
- The remote size is re-queried on every call; the log may still grow.
- A cursor advances only after a successful fetch, and only by the bytes
  actually received.  A failed, timed-out or aborted fetch raises and the
  caller keeps its previous cursor.
- ``offset >= remote_size`` is "no new data now", reported as a result,
  not an error.
- Repository/architecture existence is the caller's check and happens
  before any method here is called.
- A UTF-8 character cut by a chunk boundary is withheld until its
  remaining bytes can be read in the same call; offsets always land on
  character boundaries of well-formed logs.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from buildlens.models.logs import (
    LogChunk,
    LogChunkState,
    LogCursor,
    LogTarget,
    PollResult,
    PollState,
)

if TYPE_CHECKING:
    from buildlens.bridge.backend import BuildBackend

logger = logging.getLogger(__name__)

_MAX_UTF8_SEQUENCE = 4


class LogChunkReader:
    """Computes and fetches the next byte range of a build log.

    Parameters
    ----------
    backend:
        The build backend to read log entries and chunks from.
    max_chunk_bytes:
        Upper bound on bytes fetched per poll.  ``None`` reads up to the
        current remote size in one call.
    """

    def __init__(
        self, backend: BuildBackend, *, max_chunk_bytes: int | None = None
    ) -> None:
        self._backend = backend
        self._max_chunk_bytes = max_chunk_bytes or None

    # ------------------------------------------------------------------
    # Synchronous first page
    # ------------------------------------------------------------------

    def full_page_chunk(self, target: LogTarget, size_hint: int) -> LogChunk:
        """Read bytes ``[0, size_hint)`` for the initial page load.

        The read ends early rather than split a UTF-8 character, and is
        never shorter than one whole character.

        Returns a ``LogChunk`` whose state distinguishes a log that does
        not exist yet (``ABSENT``), an existing empty log (``EMPTY``), a
        log read to its current end (``COMPLETE``) and one with more bytes
        beyond ``size_hint`` (``PARTIAL``).
        """
        info = self._backend.log_entry_info(
            target.project, target.package_name, target.repository, target.architecture
        )
        if info is None:
            return LogChunk(state=LogChunkState.ABSENT)
        if info.size == 0:
            return LogChunk(state=LogChunkState.EMPTY)

        length = min(max(size_hint, _MAX_UTF8_SEQUENCE), info.size)
        data = _complete_utf8(self._fetch(target, 0, length))
        cursor = LogCursor(remote_size=info.size, offset=len(data), chunk=data)
        state = LogChunkState.COMPLETE if cursor.at_end else LogChunkState.PARTIAL
        return LogChunk(
            state=state, data=data, remote_size=info.size, cursor=cursor
        )

    # ------------------------------------------------------------------
    # Incremental polling
    # ------------------------------------------------------------------

    def poll_next_chunk(self, target: LogTarget, cursor: LogCursor) -> PollResult:
        """Fetch whatever was appended since *cursor*.

        Re-queries the remote size first.  If nothing new is there the
        cursor comes back unchanged with ``NO_NEW_DATA``.
        """
        info = self._backend.log_entry_info(
            target.project, target.package_name, target.repository, target.architecture
        )
        if info is None:
            return PollResult(state=PollState.ABSENT, cursor=cursor)
        if cursor.offset >= info.size:
            return PollResult(state=PollState.NO_NEW_DATA, cursor=cursor)

        end = info.size
        if self._max_chunk_bytes is not None:
            end = min(
                end,
                cursor.offset + max(self._max_chunk_bytes, _MAX_UTF8_SEQUENCE),
            )

        data = _complete_utf8(
            self._fetch(target, cursor.offset, end - cursor.offset)
        )
        if not data:
            return PollResult(state=PollState.NO_NEW_DATA, cursor=cursor)

        advanced = LogCursor(
            remote_size=info.size,
            offset=cursor.offset + len(data),
            chunk=data,
        )
        return PollResult(state=PollState.NEW_DATA, cursor=advanced, data=data)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _fetch(self, target: LogTarget, offset: int, length: int) -> bytes:
        """Fetch one range; surplus bytes beyond *length* are dropped."""
        logger.debug(
            "Fetching log chunk %s/%s/%s/%s [%d, %d).",
            target.project,
            target.package_name,
            target.repository,
            target.architecture,
            offset,
            offset + length,
        )
        data = self._backend.fetch_log_chunk(
            target.project,
            target.package_name,
            target.repository,
            target.architecture,
            offset,
            length,
        )
        return bytes(data[:length])


def _complete_utf8(data: bytes) -> bytes:
    """Drop a trailing UTF-8 sequence that is cut short.

    Only the last few bytes are inspected; invalid bytes elsewhere are left
    for the decoder to replace.
    """
    for back in range(1, min(_MAX_UTF8_SEQUENCE, len(data)) + 1):
        byte = data[-back]
        if byte & 0xC0 == 0x80:  # continuation byte
            continue
        if byte >= 0xF0:
            needed = 4
        elif byte >= 0xE0:
            needed = 3
        elif byte >= 0xC0:
            needed = 2
        else:
            return data
        return data[:-back] if back < needed else data
    return data
