"""Unit tests for cursor pagination helpers."""

from __future__ import annotations

from wanderlust.social.pagination import clamp_limit, paginate_after, take_page


def _ident(x: int) -> int:
    return x


class TestClampLimit:
    def test_default_when_missing(self):
        assert clamp_limit(None, 20, 100) == 20
        assert clamp_limit(0, 20, 100) == 20

    def test_capped_at_maximum(self):
        assert clamp_limit(500, 20, 100) == 100

    def test_passthrough(self):
        assert clamp_limit(7, 20, 100) == 7


class TestTakePage:
    def test_exact_fit_has_no_more(self):
        page = take_page([5, 4, 3], 3, _ident)
        assert page.items == [5, 4, 3]
        assert page.has_more is False
        assert page.next_cursor is None

    def test_extra_row_detects_more(self):
        page = take_page([5, 4, 3, 2], 3, _ident)
        assert page.items == [5, 4, 3]
        assert page.has_more is True
        assert page.next_cursor == 3

    def test_empty(self):
        page = take_page([], 10, _ident)
        assert page.items == []
        assert page.next_cursor is None


class TestPaginateAfter:
    def test_resumes_after_cursor(self):
        items = [9, 8, 7, 6, 5]
        first = paginate_after(items, None, 2, _ident)
        second = paginate_after(items, first.next_cursor, 2, _ident)
        third = paginate_after(items, second.next_cursor, 2, _ident)
        assert first.items + second.items + third.items == items
        assert third.has_more is False

    def test_stale_cursor_fails_open(self):
        page = paginate_after([9, 8, 7], 42, 2, _ident)
        assert page.items == [9, 8]
        assert page.has_more is True

    def test_cursor_on_last_item(self):
        page = paginate_after([9, 8, 7], 7, 2, _ident)
        assert page.items == []
        assert page.has_more is False
