"""
Unit tests for in-memory pagination.
"""

from catalog.utils.pagination import build_pagination_links, clamp_page, paginate_rows, resolve_page


def test_empty_sequence_gives_empty_first_page():
    page = paginate_rows([], 1)
    assert page.items == []
    assert page.page == 1
    assert page.pages == 0
    assert not page.has_next


def test_slices_fixed_size_pages():
    rows = list(range(25))
    page = paginate_rows(rows, 3)
    assert page.items == [20, 21, 22, 23, 24]
    assert page.pages == 3
    assert page.prev_num == 2
    assert page.next_num is None


def test_out_of_range_pages_are_clamped():
    rows = list(range(25))
    assert paginate_rows(rows, 99).page == 3
    assert paginate_rows(rows, 0).page == 1
    assert paginate_rows(rows, -4).items == list(range(10))
    assert clamp_page(5, 0) == 1


def test_new_listing_signature_restarts_at_first_page():
    assert resolve_page(4, ["", "", "default"], ["", "", "default"]) == 4
    assert resolve_page(4, ["", "", "default"], ["gui", "", "default"]) == 1
    assert resolve_page(4, ["gui", "", "default"], ["gui", "name", "asc"]) == 1
    assert resolve_page(2, None, ["gui", "", "default"]) == 2


def test_pagination_links_work_with_in_memory_pages():
    page = paginate_rows(list(range(95)), 5)
    assert build_pagination_links(page) == [1, None, 4, 5, 6, None, 10]
