"""JobStatusSummarizer — worker id and elapsed time from a job snapshot.

The backend reports a running job as a loosely structured mapping
(``workerid``, ``starttime`` in epoch seconds, ``code``).  A missing or
empty snapshot means "not building" and is never an error.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from buildlens.models.jobs import JobStatus

logger = logging.getLogger(__name__)


class JobStatusSummarizer:
    """Parses raw job status snapshots into ``JobStatus``."""

    def summarize(self, raw: Mapping[str, Any] | None) -> JobStatus:
        if not raw:
            return JobStatus()
        return JobStatus(
            worker_id=_text(raw.get("workerid")),
            start_time=_epoch(raw.get("starttime")),
            code=_text(raw.get("code")),
        )

    @staticmethod
    def elapsed_seconds(
        status: JobStatus, now: datetime | None = None
    ) -> int | None:
        """Seconds since the job started, or ``None`` when unknown."""
        if status.start_time is None:
            return None
        now = now or datetime.now(timezone.utc)
        return int((now - status.start_time).total_seconds())


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _epoch(value: Any) -> datetime | None:
    text = _text(value)
    if text is None:
        return None
    try:
        return datetime.fromtimestamp(int(text), tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        logger.debug("Ignoring malformed job start time %r.", value)
        return None
