"""Revision paging models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Page(BaseModel):
    """One page request over a package's revision history."""

    model_config = ConfigDict(frozen=True)

    number: int = Field(default=1, ge=1)
    size: int = Field(default=20, ge=1)
    show_all: bool = False


class RevisionInfo(BaseModel):
    """Commit details for a single source revision.

    Parsed from the backend's ``<revision>`` entry at the boundary; every
    field except ``rev`` may be missing on older backends.
    """

    model_config = ConfigDict(frozen=True)

    rev: int = Field(ge=1)
    srcmd5: str | None = None
    version: str | None = None
    time: datetime | None = None
    user: str | None = None
    comment: str | None = None


class RevisionsPage(BaseModel):
    """Page model for the revisions view."""

    model_config = ConfigDict(frozen=True)

    project: str
    package: str
    ceiling: int
    page: Page
    revisions: list[int] = []
    details: list[RevisionInfo] = []
    page_count: int = 0
    has_next_page: bool = False
