"""Unit tests for buildlens models — immutability and invariants."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from buildlens.models import (
    DiffFile,
    LogCursor,
    LogUpdate,
    PackageRef,
    Page,
    RdiffPage,
    Redirect,
    RedirectTarget,
    Success,
)


class TestFrozenModels:
    def test_package_ref_is_frozen(self):
        ref = PackageRef(project="p", base_name="pkg")
        with pytest.raises(ValidationError):
            ref.base_name = "other"

    def test_page_number_must_be_positive(self):
        with pytest.raises(ValidationError):
            Page(number=0)


class TestLogCursor:
    def test_offset_cannot_exceed_remote_size(self):
        with pytest.raises(ValidationError):
            LogCursor(remote_size=3, offset=4)

    def test_start(self):
        cursor = LogCursor.start(10)
        assert cursor.offset == cursor.remote_size == 10
        assert cursor.at_end is True


class TestDiffModels:
    def test_lines_keep_line_endings(self):
        f = DiffFile(path="a", content=b"one\ntwo\n")
        assert f.lines == ["one\n", "two\n"]
        assert f.line_count == 2

    def test_not_full_diff_reflects_truncation(self):
        page = RdiffPage(
            project="p",
            package="pkg",
            files=[DiffFile(path="a"), DiffFile(path="b", truncated=True)],
        )
        assert page.filenames == ["a", "b"]
        assert page.not_full_diff is True


class TestViewResults:
    def test_success_wraps_a_page(self):
        update = LogUpdate(
            project="p", package="pkg", package_name="pkg", repository="r", architecture="a"
        )
        result = Success(page=update)
        assert result.kind == "success"
        assert result.page == update

    def test_redirect_status(self):
        result = Redirect(target=RedirectTarget.ROOT, message="gone")
        assert result.http_status == 302
        assert result.params == {}
