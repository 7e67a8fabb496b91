from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, List, Optional, Sequence, TypeVar

PAGE_SIZE = 20

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    items: List[T]
    page: int
    total_pages: int
    start: int  # 0-based index of the first item
    end: int  # exclusive
    count: int  # size of the whole list


def total_pages(count: int, page_size: int = PAGE_SIZE) -> int:
    return math.ceil(count / page_size) if count > 0 else 0


def clamp_page(page: int, count: int, page_size: int = PAGE_SIZE) -> int:
    return max(1, min(int(page), total_pages(count, page_size)))


def paginate(items: Sequence[T], page: int, page_size: int = PAGE_SIZE) -> Page[T]:
    page = clamp_page(page, len(items), page_size)
    start = (page - 1) * page_size
    end = min(start + page_size, len(items))
    return Page(
        items=list(items[start:end]),
        page=page,
        total_pages=total_pages(len(items), page_size),
        start=start,
        end=end,
        count=len(items),
    )


def results_label(page: Page, total_count: int) -> str:
    first = page.start + 1 if page.count > 0 else 0
    label = f"Showing {first}-{page.end} of {page.count} tasks"
    if page.count != total_count:
        label += f" (filtered from {total_count})"
    return label


def selection_label(count: int) -> str:
    return f"{count} task{'' if count == 1 else 's'} selected"


def page_window(current: int, total: int) -> List[Optional[int]]:
    """Page buttons to show: first, last and current +/- 1.

    ``None`` marks a gap where an ellipsis goes.
    """
    window: List[Optional[int]] = []
    prev = 0
    for p in range(1, total + 1):
        if p == 1 or p == total or abs(p - current) <= 1:
            if window and prev != p - 1:
                window.append(None)
            window.append(p)
            prev = p
    return window
