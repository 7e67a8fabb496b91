import pytest

from taskops.pagination import (
    clamp_page,
    page_window,
    paginate,
    results_label,
    selection_label,
    total_pages,
)


def test_forty_five_records_make_three_pages():
    items = list(range(1, 46))
    assert total_pages(len(items), 20) == 3
    last = paginate(items, 3, 20)
    assert last.items == [41, 42, 43, 44, 45]
    assert (last.start, last.end) == (40, 45)


def test_pages_partition_the_list():
    items = list(range(57))
    pages = [paginate(items, p, 20) for p in range(1, total_pages(len(items), 20) + 1)]
    assert all(len(p.items) <= 20 for p in pages)
    assert [x for p in pages for x in p.items] == items


@pytest.mark.parametrize(
    "page, count, expected",
    [
        (0, 45, 1),
        (-3, 45, 1),
        (2, 45, 2),
        (9, 45, 3),
        (1, 0, 1),
        (5, 0, 1),
    ],
)
def test_clamp_page(page, count, expected):
    assert clamp_page(page, count, 20) == expected


def test_empty_list_is_a_single_empty_page():
    page = paginate([], 4, 20)
    assert page.page == 1
    assert page.items == []
    assert page.total_pages == 0


def test_results_label():
    page = paginate(list(range(45)), 3, 20)
    assert results_label(page, 45) == "Showing 41-45 of 45 tasks"
    assert results_label(paginate(list(range(45)), 1, 20), 120) == "Showing 1-20 of 45 tasks (filtered from 120)"
    assert results_label(paginate([], 1, 20), 7) == "Showing 0-0 of 0 tasks (filtered from 7)"


def test_selection_label():
    assert selection_label(1) == "1 task selected"
    assert selection_label(3) == "3 tasks selected"


def test_page_window():
    assert page_window(1, 1) == [1]
    assert page_window(1, 3) == [1, 2, 3]
    assert page_window(5, 10) == [1, None, 4, 5, 6, None, 10]
    assert page_window(1, 10) == [1, 2, None, 10]
    assert page_window(10, 10) == [1, None, 9, 10]
    assert page_window(3, 10) == [1, 2, 3, 4, None, 10]
    assert page_window(1, 0) == []
