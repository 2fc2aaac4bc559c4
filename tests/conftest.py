"""Shared test fixtures for buildlens."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from buildlens.bridge.memory_backend import InMemoryBackend
from buildlens.config import ViewerConfig
from buildlens.core.artifact_view import ArtifactView
from buildlens.models.jobs import BuildStatus

PROJECT = "home:alice"
REPO = "openSUSE_Tumbleweed"
ARCH = "x86_64"
NOW = datetime(2024, 5, 1, 13, 0, tzinfo=timezone.utc)
STARTED = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def config() -> ViewerConfig:
    """Provide a ViewerConfig with defaults, ignoring any local .env."""
    return ViewerConfig(_env_file=None)


@pytest.fixture
def backend() -> InMemoryBackend:
    """Provide an InMemoryBackend seeded with one project.

    - ``hello``: 45 revisions, multibuild flavor ``doc``
    - ``apache2``: 3 revisions
    - ``hello:doc`` build on openSUSE_Tumbleweed/x86_64, worker "42",
      started one hour before ``NOW``
    """
    b = InMemoryBackend()
    b.add_project(PROJECT, {REPO: [ARCH, "aarch64"]})
    b.add_package(PROJECT, "hello", revisions=45, flavors=["doc"])
    b.add_package(PROJECT, "apache2", revisions=3)
    b.append_log(PROJECT, "hello:doc", REPO, ARCH, b"line 1\nline 2\n")
    b.set_job_status(
        PROJECT,
        "hello:doc",
        REPO,
        ARCH,
        {"workerid": "42", "starttime": str(int(STARTED.timestamp())), "code": "building"},
    )
    b.set_build_status(
        PROJECT,
        "hello:doc",
        REPO,
        ARCH,
        [
            BuildStatus(package_name="hello", code="failed"),
            BuildStatus(package_name="hello:doc", code="succeeded"),
        ],
    )
    b.set_dependents(PROJECT, "hello:doc", REPO, ARCH, ["apache2"])
    return b


@pytest.fixture
def view(backend: InMemoryBackend, config: ViewerConfig) -> ArtifactView:
    """Provide an ArtifactView over the seeded backend with a fixed clock."""
    return ArtifactView(backend, config, clock=lambda: NOW)
