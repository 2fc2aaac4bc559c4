"""Unit tests for ArtifactView — views over a seeded InMemoryBackend.

Fixtures ``backend``, ``config`` and ``view`` come from tests/conftest.py.
"""

from __future__ import annotations

import pytest

from buildlens.bridge.access import DenylistAccessGate
from buildlens.core.artifact_view import ArtifactView
from buildlens.core.errors import NotFoundError
from buildlens.models.diff import DiffFile
from buildlens.models.logs import LogChunkState
from buildlens.models.views import (
    InlineError,
    LiveLogPage,
    LogUpdate,
    Redirect,
    RedirectTarget,
    Success,
)

PROJECT = "home:alice"
REPO = "openSUSE_Tumbleweed"
ARCH = "x86_64"


# ---------------------------------------------------------------------------
# Test: revisions
# ---------------------------------------------------------------------------


class TestRevisions:
    def test_first_page_is_newest_first(self, view):
        result = view.revisions(PROJECT, "hello")
        assert isinstance(result, Success)
        assert result.http_status == 200
        page = result.page
        assert page.ceiling == 45
        assert page.revisions == list(range(45, 25, -1))
        assert page.page_count == 3
        assert page.has_next_page is True

    def test_last_page(self, view):
        page = view.revisions(PROJECT, "hello", page=3).page
        assert page.revisions == [5, 4, 3, 2, 1]
        assert page.has_next_page is False

    def test_explicit_ceiling_is_not_clamped(self, view, backend):
        page = view.revisions(PROJECT, "hello", rev="60").page
        assert page.ceiling == 60
        assert page.revisions[0] == 60
        assert backend.calls["list_revisions"] == 0

    def test_show_all(self, view):
        page = view.revisions(PROJECT, "apache2", show_all=True).page
        assert page.revisions == [3, 2, 1]
        assert page.page_count == 1

    def test_no_revisions_is_an_empty_page(self, view, backend):
        backend.add_package(PROJECT, "fresh", revisions=0)
        page = view.revisions(PROJECT, "fresh").page
        assert page.revisions == []
        assert page.page_count == 0

    def test_details_are_fetched_per_revision(self, view, backend):
        backend.set_revision_info(PROJECT, "apache2", 3, user="alice", comment="bump")
        page = view.revisions(PROJECT, "apache2", with_details=True).page
        assert [d.rev for d in page.details] == [3]
        assert page.details[0].user == "alice"

    def test_access_denied_redirects_without_backend_calls(self, backend, config):
        long_name = "package_with_one_revision"
        backend.add_package(PROJECT, long_name, revisions=1)
        backend.calls.clear()
        gated = ArtifactView(
            backend,
            config,
            access_gate=DenylistAccessGate([f"{PROJECT}/{long_name}"]),
        )

        result = gated.revisions(PROJECT, long_name)

        assert isinstance(result, Redirect)
        assert result.http_status == 302
        assert result.target is RedirectTarget.PROJECT_SHOW
        assert result.params == {"project": PROJECT}
        assert result.message == (
            "You don't have access to the sources of this package: "
            '"package_w...revision"'
        )
        assert sum(backend.calls.values()) == 0

    @pytest.mark.parametrize(
        "rev, reason",
        [
            ("", "revision is empty"),
            ("abc", "revision is not a number"),
            ("\u00b2", "revision is not a number"),
            ("0", "revision must be positive"),
        ],
    )
    def test_invalid_rev_redirects(self, view, rev, reason):
        result = view.revisions(PROJECT, "hello", rev=rev)
        assert isinstance(result, Redirect)
        assert result.message.endswith(reason)

    def test_unknown_package_redirects_to_project(self, view):
        result = view.revisions(PROJECT, "nope")
        assert isinstance(result, Redirect)
        assert result.target is RedirectTarget.PROJECT_SHOW


# ---------------------------------------------------------------------------
# Test: rdiff
# ---------------------------------------------------------------------------


class TestRdiff:
    def test_empty_rev_is_rejected_before_fetching(self, view, backend):
        result = view.rdiff(PROJECT, "hello", rev="")
        assert isinstance(result, Redirect)
        assert result.target is RedirectTarget.PACKAGE_SHOW
        assert result.message == "Error getting diff: revision is empty"
        assert backend.calls["fetch_diff"] == 0

    def test_unicode_digit_rev_is_rejected_before_fetching(self, view, backend):
        result = view.rdiff(PROJECT, "hello", rev="\u00b2")
        assert isinstance(result, Redirect)
        assert result.message == "Error getting diff: revision is not a number"
        assert backend.calls["fetch_diff"] == 0

    def test_no_differences_is_an_empty_list(self, view):
        result = view.rdiff(PROJECT, "hello", rev="45")
        assert isinstance(result, Success)
        assert result.page.files == []
        assert result.page.not_full_diff is False

    def test_large_files_are_bounded(self, view, backend):
        big = "".join(f"+{i}\n" for i in range(1000)).encode()
        backend.set_diff(
            PROJECT,
            "hello",
            [DiffFile(path="small.c", content=b"+a\n"), DiffFile(path="big.c", content=big)],
            rev=45,
        )
        page = view.rdiff(PROJECT, "hello", rev=45).page
        assert page.filenames == ["small.c", "big.c"]
        assert [f.truncated for f in page.files] == [False, True]
        assert page.files[1].line_count == 203
        assert page.not_full_diff is True

    def test_full_diff_is_never_truncated(self, view, backend):
        big = "".join(f"+{i}\n" for i in range(1000)).encode()
        backend.set_diff(PROJECT, "hello", [DiffFile(path="big.c", content=big)], rev=45)
        page = view.rdiff(PROJECT, "hello", rev=45, full_diff=True).page
        assert page.files[0].line_count == 1000
        assert page.not_full_diff is False

    def test_backend_failure_redirects(self, view, backend):
        backend.fail_next("fetch_diff")
        result = view.rdiff(PROJECT, "hello", rev="45")
        assert isinstance(result, Redirect)
        assert result.target is RedirectTarget.PACKAGE_SHOW


# ---------------------------------------------------------------------------
# Test: live build log
# ---------------------------------------------------------------------------


class TestLiveBuildLog:
    def test_multibuild_flavor_page(self, view):
        result = view.live_build_log(PROJECT, "hello:doc", REPO, ARCH)
        assert isinstance(result, Success)
        page = result.page
        assert isinstance(page, LiveLogPage)
        assert page.package == "hello"
        assert page.package_name == "hello:doc"
        assert page.worker_id == "42"
        assert page.build_time == 3600
        assert page.status == "succeeded"
        assert page.what_depends_on == ["apache2"]
        assert page.log_chunk == "line 1\nline 2\n"
        assert page.log_state is LogChunkState.COMPLETE
        assert page.offset == page.size == 14

    def test_not_building_has_no_build_time(self, view, backend):
        backend.set_job_status(PROJECT, "hello:doc", REPO, ARCH, None)
        page = view.live_build_log(PROJECT, "hello:doc", REPO, ARCH).page
        assert page.worker_id is None
        assert page.build_time is None

    def test_no_log_yet(self, view):
        page = view.live_build_log(PROJECT, "apache2", REPO, ARCH).page
        assert page.log_state is LogChunkState.ABSENT
        assert page.log_chunk == ""

    @pytest.mark.parametrize("repo, arch", [("nope", ARCH), (REPO, "s390x")])
    def test_unknown_repository_or_arch_redirects_without_reading(
        self, view, backend, repo, arch
    ):
        result = view.live_build_log(PROJECT, "hello:doc", repo, arch)
        assert isinstance(result, Redirect)
        assert result.target is RedirectTarget.PACKAGE_SHOW
        assert result.params == {"project": PROJECT, "package": "hello:doc"}
        assert backend.calls["fetch_log_chunk"] == 0
        assert backend.calls["log_entry_info"] == 0

    def test_unknown_project_redirects_to_root(self, view):
        result = view.live_build_log("home:nobody", "hello", REPO, ARCH)
        assert isinstance(result, Redirect)
        assert result.target is RedirectTarget.ROOT
        assert result.params == {}

    def test_unknown_package_redirects_to_project(self, view):
        result = view.live_build_log(PROJECT, "hello:tests", REPO, ARCH)
        assert isinstance(result, Redirect)
        assert result.target is RedirectTarget.PROJECT_SHOW
        assert "hello:tests" in result.message

    def test_denied_build_log(self, backend, config):
        gated = ArtifactView(backend, config, access_gate=DenylistAccessGate([PROJECT]))
        result = gated.live_build_log(PROJECT, "hello:doc", REPO, ARCH)
        assert isinstance(result, Redirect)
        assert result.message == "Could not access build log"


# ---------------------------------------------------------------------------
# Test: update build log (polling)
# ---------------------------------------------------------------------------


class TestUpdateBuildLog:
    def test_returns_new_bytes_since_offset(self, view, backend):
        backend.append_log(PROJECT, "hello:doc", REPO, ARCH, b"line 3\n")
        result = view.update_build_log(PROJECT, "hello:doc", REPO, ARCH, offset=14)
        assert isinstance(result, Success)
        update = result.page
        assert isinstance(update, LogUpdate)
        assert update.log_chunk == "line 3\n"
        assert update.offset == 21
        assert update.finished is False

    def test_finished_when_idle_and_nothing_new(self, view, backend):
        backend.set_job_status(PROJECT, "hello:doc", REPO, ARCH, None)
        update = view.update_build_log(PROJECT, "hello:doc", REPO, ARCH, offset=14).page
        assert update.log_chunk == ""
        assert update.offset == 14
        assert update.finished is True

    def test_still_building_is_not_finished(self, view):
        update = view.update_build_log(PROJECT, "hello:doc", REPO, ARCH, offset=14).page
        assert update.finished is False

    @pytest.mark.parametrize("repo, arch", [("nope", ARCH), (REPO, "s390x")])
    def test_unknown_repository_or_arch_is_an_inline_error(
        self, view, backend, repo, arch
    ):
        result = view.update_build_log(PROJECT, "hello:doc", repo, arch, offset=7)
        assert isinstance(result, InlineError)
        assert result.http_status == 200
        assert result.page.errors == result.message
        assert result.page.offset == 7
        assert backend.calls["fetch_log_chunk"] == 0

    def test_unknown_package_never_redirects(self, view):
        result = view.update_build_log(PROJECT, "nope", REPO, ARCH)
        assert isinstance(result, InlineError)
        assert "nope" in result.message

    def test_backend_failure_keeps_offset(self, view, backend):
        backend.fail_next("fetch_log_chunk")
        result = view.update_build_log(PROJECT, "hello:doc", REPO, ARCH, offset=0)
        assert isinstance(result, InlineError)
        assert result.page.offset == 0

        retry = view.update_build_log(PROJECT, "hello:doc", REPO, ARCH, offset=0)
        assert isinstance(retry, Success)
        assert retry.page.offset == 14


# ---------------------------------------------------------------------------
# Test: package resolution
# ---------------------------------------------------------------------------


class TestResolvePackage:
    def test_plain_package(self, view):
        ref = view.resolve_package(PROJECT, "apache2")
        assert ref.base_name == "apache2"
        assert ref.flavor is None

    def test_flavor(self, view):
        ref = view.resolve_package(PROJECT, "hello:doc")
        assert (ref.base_name, ref.flavor) == ("hello", "doc")

    def test_exact_package_with_colon_is_never_split(self, view, backend):
        backend.add_package(PROJECT, "hello:doc")
        ref = view.resolve_package(PROJECT, "hello:doc")
        assert ref.base_name == "hello:doc"
        assert ref.flavor is None

    def test_unknown_project(self, view):
        with pytest.raises(NotFoundError) as excinfo:
            view.resolve_package("home:nobody", "hello")
        assert excinfo.value.what == "project"
        assert excinfo.value.redirect is RedirectTarget.ROOT

    def test_unknown_flavor(self, view):
        with pytest.raises(NotFoundError) as excinfo:
            view.resolve_package(PROJECT, "hello:tests")
        assert excinfo.value.what == "package"
