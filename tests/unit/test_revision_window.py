"""Unit tests for revision windowing — page math over 1..N, newest first."""

from __future__ import annotations

import pytest

from buildlens.core.revision_window import PAGE_SIZE, has_next_page, page_count, window


# ---------------------------------------------------------------------------
# Test: window
# ---------------------------------------------------------------------------


class TestWindow:
    """Pages are descending, contiguous and never raise on bad input."""

    def test_first_page_of_25(self):
        assert window(25, 1) == list(range(25, 5, -1))

    def test_second_page_of_25_is_the_remainder(self):
        assert window(25, 2) == [5, 4, 3, 2, 1]

    def test_page_past_the_end_is_empty(self):
        assert window(25, 3) == []

    def test_23_revisions_page_2(self):
        assert window(23, 2) == [3, 2, 1]

    def test_zero_revisions_is_empty(self):
        assert window(0, 1) == []
        assert window(0, 1, show_all=True) == []

    def test_none_ceiling_is_empty(self):
        assert window(None) == []

    def test_exact_multiple_of_page_size(self):
        assert window(40, 2) == list(range(20, 0, -1))
        assert window(40, 3) == []

    def test_show_all_ignores_page(self):
        assert window(25, 7, show_all=True) == list(range(25, 0, -1))

    @pytest.mark.parametrize("page", [0, -1])
    def test_non_positive_page_is_empty(self, page):
        assert window(25, page) == []

    def test_custom_page_size(self):
        assert window(10, 2, page_size=4) == [6, 5, 4, 3]

    @pytest.mark.parametrize("ceiling", [1, 19, 20, 21, 45, 100])
    def test_pages_partition_the_history(self, ceiling):
        """Concatenated pages cover 1..ceiling exactly once, newest first."""
        pages = [window(ceiling, p) for p in range(1, page_count(ceiling) + 2)]
        flat = [rev for page in pages for rev in page]
        assert flat == list(range(ceiling, 0, -1))
        assert all(len(page) <= PAGE_SIZE for page in pages)


# ---------------------------------------------------------------------------
# Test: page_count / has_next_page
# ---------------------------------------------------------------------------


class TestPageCount:
    def test_counts(self):
        assert page_count(0) == 0
        assert page_count(1) == 1
        assert page_count(20) == 1
        assert page_count(21) == 2
        assert page_count(45) == 3

    def test_has_next_page(self):
        assert has_next_page(25, 1) is True
        assert has_next_page(25, 2) is False
        assert has_next_page(20, 1) is False
        assert has_next_page(0, 1) is False
