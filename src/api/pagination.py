# This file handles pagination and search parsing for list endpoints.
# It exists so every router uses the same deterministic rules for page size, search, and totals.
# A single scoped predicate renders both the count query and the page query.
# Pages past the end never reach the store, so arbitrarily large page numbers stay empty.

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from src.api.db_access import DatabaseClient

LIKE_ESCAPE_CHAR = "\\"


class PaginationParamError(ValueError):
    """Raised for an out-of-range page, limit, or search value."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(message)


@dataclass(frozen=True)
class PaginationSpec:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class ScopedQuery:
    """FROM/WHERE/ORDER BY fragments for one owner-scoped listing."""

    from_sql: str
    where_sql: str
    order_by: str
    columns: str = "*"
    params: dict[str, Any] = field(default_factory=dict)

    def count_sql(self) -> str:
        return f"SELECT COUNT(*) AS total_count FROM {self.from_sql} WHERE {self.where_sql}"

    def page_sql(self) -> str:
        return (
            f"SELECT {self.columns} FROM {self.from_sql} WHERE {self.where_sql} "
            f"ORDER BY {self.order_by} LIMIT :page_limit OFFSET :page_offset"
        )


@dataclass(frozen=True)
class PageResult:
    items: list[dict[str, Any]]
    total_items: int
    pagination: PaginationSpec

    @property
    def total_pages(self) -> int:
        return compute_total_pages(total_count=self.total_items, page_size=self.pagination.limit)

    def metadata(self) -> dict[str, int]:
        return {
            "currentPage": self.pagination.page,
            "totalPages": self.total_pages,
            "totalItems": self.total_items,
            "limit": self.pagination.limit,
        }


def normalize_pagination(
    *,
    page: int | None,
    limit: int | None,
    default_page_size: int,
    max_page_size: int,
) -> PaginationSpec:
    """Validate and normalize page/limit values."""

    resolved_page = 1 if page is None else page
    resolved_limit = default_page_size if limit is None else limit
    if resolved_page < 1:
        raise PaginationParamError("page", "Page must be a positive integer")
    if resolved_limit < 1 or resolved_limit > max_page_size:
        raise PaginationParamError("limit", f"Limit must be between 1 and {max_page_size}")
    return PaginationSpec(page=resolved_page, limit=resolved_limit)


def normalize_search(term: str | None, *, max_length: int) -> str | None:
    """Trim a free-text search term; blank terms disable the filter."""

    if term is None:
        return None
    cleaned = term.strip()
    if not cleaned:
        return None
    if len(cleaned) > max_length:
        raise PaginationParamError("search", f"Search term must not exceed {max_length} characters")
    return cleaned


def contains_pattern(term: str) -> str:
    """Build a lower-cased LIKE pattern that matches `term` as a literal substring."""

    escaped = (
        term.lower()
        .replace(LIKE_ESCAPE_CHAR, LIKE_ESCAPE_CHAR * 2)
        .replace("%", f"{LIKE_ESCAPE_CHAR}%")
        .replace("_", f"{LIKE_ESCAPE_CHAR}_")
    )
    return f"%{escaped}%"


def compute_total_pages(*, total_count: int, page_size: int) -> int:
    """Compute deterministic total page count."""

    if total_count <= 0:
        return 0
    return ((total_count - 1) // page_size) + 1


def paginate(db: DatabaseClient, query: ScopedQuery, pagination: PaginationSpec) -> PageResult:
    """Run the count and page queries for one scoped listing."""

    total_items = int(db.fetch_scalar(query.count_sql(), query.params) or 0)
    if pagination.offset >= total_items:
        return PageResult(items=[], total_items=total_items, pagination=pagination)

    rows = db.fetch_all(
        query.page_sql(),
        {**query.params, "page_limit": pagination.limit, "page_offset": pagination.offset},
    )
    return PageResult(items=rows, total_items=total_items, pagination=pagination)
