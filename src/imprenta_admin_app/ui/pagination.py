from __future__ import annotations

from dataclasses import dataclass


@dataclass
class PaginationState:
    page: int = 1
    page_size: int = 10
    total_pages: int = 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1


def page_count(total_rows: int, page_size: int) -> int:
    if total_rows <= 0:
        return 1
    return (total_rows + page_size - 1) // page_size


def next_page(state: PaginationState) -> PaginationState:
    if state.has_next:
        state.page += 1
    return state


def prev_page(state: PaginationState) -> PaginationState:
    state.page = max(1, state.page - 1)
    return state


def goto_page(state: PaginationState, page: int) -> PaginationState:
    state.page = min(max(1, page), max(1, state.total_pages))
    return state
