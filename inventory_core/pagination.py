"""Pagination parameters and result envelopes."""

import math
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from .constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

T = TypeVar("T")


@dataclass
class PaginationMeta:
    current_page: int
    page_size: int
    total_count: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool

    def to_dict(self) -> dict:
        return {
            "currentPage": self.current_page,
            "pageSize": self.page_size,
            "totalCount": self.total_count,
            "totalPages": self.total_pages,
            "hasNextPage": self.has_next_page,
            "hasPreviousPage": self.has_previous_page,
        }


@dataclass
class PaginatedResult(Generic[T]):
    data: list[T]
    pagination: PaginationMeta


@dataclass
class OrderBy:
    field: str
    direction: str = "asc"


@dataclass
class ListParams:
    """Query parameters accepted by every list operation."""

    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE
    order_by: list[OrderBy] = field(default_factory=list)
    filters: dict = field(default_factory=dict)
    search_term: str | None = None


def normalize_page(page: int | None, page_size: int | None, max_page_size: int = MAX_PAGE_SIZE) -> tuple[int, int]:
    """Apply defaults and clamp page/page_size into their valid ranges."""
    page = page if page and page > 0 else DEFAULT_PAGE
    page_size = page_size if page_size and page_size > 0 else DEFAULT_PAGE_SIZE
    return page, min(page_size, max_page_size)


def offset_for(page: int, page_size: int) -> int:
    return (page - 1) * page_size


def create_pagination_meta(total_count: int, page: int, page_size: int) -> PaginationMeta:
    total_pages = math.ceil(total_count / page_size) if page_size else 0
    return PaginationMeta(
        current_page=page,
        page_size=page_size,
        total_count=total_count,
        total_pages=total_pages,
        has_next_page=page < total_pages,
        has_previous_page=page > 1,
    )


__all__ = [
    "PaginationMeta",
    "PaginatedResult",
    "OrderBy",
    "ListParams",
    "normalize_page",
    "offset_for",
    "create_pagination_meta",
]
