"""Build job models — worker assignment and result status codes."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class JobStatus(BaseModel):
    """Summary of a remote job status snapshot.

    Both fields absent means the package is not currently building.
    An absent ``start_time`` is unknown, never zero.
    """

    model_config = ConfigDict(frozen=True)

    worker_id: str | None = None
    start_time: datetime | None = None
    code: str | None = None

    @property
    def is_building(self) -> bool:
        return self.worker_id is not None


class BuildStatus(BaseModel):
    """One ``<status>`` entry of a build result listing."""

    model_config = ConfigDict(frozen=True)

    package_name: str
    code: str
    details: str | None = None
