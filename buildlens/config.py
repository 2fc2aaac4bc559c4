"""Viewer configuration — env-driven, injected at construction.

Centralized settings using pydantic-settings for environment variable
support.  Reads from a .env file and BUILDLENS_* environment variables.

There is deliberately no module-level instance: every ``ArtifactView`` and
``HttpBackend`` receives its ``ViewerConfig`` explicitly.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ViewerConfig(BaseSettings):
    """Backend location, paging and budget settings.

    All settings can be overridden via BUILDLENS_* environment variables
    or a .env file in the working directory.

    Examples
    --------
    Override via environment::

        export BUILDLENS_BACKEND_URL=http://backend.example.org:5352
        export BUILDLENS_LOG_LEVEL=DEBUG
        export BUILDLENS_LOG_CHUNK_MAX_BYTES=0

    Or via .env file::

        BUILDLENS_BACKEND_URL=http://localhost:5352
        BUILDLENS_REQUEST_TIMEOUT_SECONDS=10
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BUILDLENS_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging (applied by the CLI)
    log_level: str = "INFO"

    # Backend location
    backend_url: str = "http://localhost:5352"
    request_timeout_seconds: float = Field(default=30.0, gt=0)

    # Revision paging
    page_size: int = Field(default=20, ge=1)

    # Diff budget: body lines plus unified-diff header lines
    diff_body_lines: int = Field(default=199, ge=0)
    diff_header_lines: int = Field(default=4, ge=0)

    # Build log chunking
    log_initial_chunk_bytes: int = Field(default=64 * 1024, ge=1)
    log_chunk_max_bytes: int = Field(default=64 * 1024, ge=0)  # 0 = unbounded
    follow_refresh_seconds: float = Field(default=2.0, gt=0)

    # Display
    name_elide_length: int = Field(default=20, ge=5)

    @property
    def chunk_cap(self) -> int | None:
        """Per-poll byte cap, or ``None`` when polls read to the remote end."""
        return self.log_chunk_max_bytes or None
