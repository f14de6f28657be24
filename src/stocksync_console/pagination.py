from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

from .config import PAGE_SIZE_OPTIONS

T = TypeVar("T")


@dataclass
class PaginationState:
    page: int = 1
    page_size: int = 10

    def total_pages(self, total: int) -> int:
        return max(1, (total + self.page_size - 1) // self.page_size)


def goto_page(state: PaginationState, page: int, total: int) -> PaginationState:
    state.page = min(max(1, page), state.total_pages(total))
    return state


def set_page_size(state: PaginationState, page_size: int) -> PaginationState:
    if page_size not in PAGE_SIZE_OPTIONS:
        raise ValueError(f"page_size must be one of {PAGE_SIZE_OPTIONS}")
    state.page_size = page_size
    state.page = 1
    return state


def paginate(rows: Sequence[T], state: PaginationState) -> dict[str, Any]:
    total = len(rows)
    page = min(max(1, state.page), state.total_pages(total))
    start = (page - 1) * state.page_size
    return {
        "rows": list(rows[start : start + state.page_size]),
        "page": page,
        "page_size": state.page_size,
        "total": total,
        "total_pages": state.total_pages(total),
    }
