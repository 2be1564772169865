"""Pagination primitives shared by repositories and services."""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_PAGE_LIMIT = 20


@dataclass(frozen=True)
class PaginationOptions:
    """Window into an ordered result set."""

    limit: int = DEFAULT_PAGE_LIMIT
    offset: int = 0


@dataclass(frozen=True)
class PaginatedResult(Generic[T]):
    """One page of results with the total match count."""

    items: list[T]
    total: int
    limit: int
    offset: int

    @property
    def has_more(self) -> bool:
        return self.offset + len(self.items) < self.total
