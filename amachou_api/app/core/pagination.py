"""
Page requests, result pages and pagination headers.

``PageRequest`` is built from the ``page``/``size``/``sort`` query
parameters by the ``get_page_request`` dependency.  Services return a
``Page`` and the REST layer turns it into ``X-Total-Count`` and ``Link``
headers, e.g.::

    X-Total-Count: 42
    Link: </api/diseases?page=1&size=20>; rel="next",</api/diseases?page=2&size=20>; rel="last",</api/diseases?page=0&size=20>; rel="first"
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Generic, List, Optional, Tuple, TypeVar
from urllib.parse import quote_plus

from fastapi import Query

from .config import settings
from .db import SQLITE_MAX_INTEGER

# Keeps ``page * size`` a valid SQLite OFFSET for every allowed size.
MAX_PAGE_NUMBER = SQLITE_MAX_INTEGER // settings.max_page_size

T = TypeVar("T")

ASC = "asc"
DESC = "desc"


@dataclass(frozen=True)
class PageRequest:
    """Zero‑based page number, page size and sort orders."""

    page: int = 0
    size: int = 20
    sort: Tuple[Tuple[str, str], ...] = ()

    @property
    def offset(self) -> int:
        return self.page * self.size

    def order_by(self, allowed: set[str], default: str = "id ASC") -> str:
        """Render the sort orders as an SQL ``ORDER BY`` body.

        Fields outside ``allowed`` are dropped so that user input never
        reaches the query text.
        """
        parts = [f"{name} {direction.upper()}" for name, direction in self.sort if name in allowed]
        return ", ".join(parts) if parts else default


def parse_sort(values: Optional[List[str]]) -> Tuple[Tuple[str, str], ...]:
    """Parse ``field[,asc|desc]`` descriptors.

    A descriptor may also list several fields sharing one direction, as
    in ``name,description,desc``.  Unknown directions default to ``asc``.
    """
    orders: list[tuple[str, str]] = []
    for value in values or []:
        tokens = [token.strip() for token in value.split(",") if token.strip()]
        if not tokens:
            continue
        direction = ASC
        if tokens[-1].lower() in {ASC, DESC}:
            direction = tokens.pop().lower()
        for name in tokens:
            orders.append((name, direction))
    return tuple(orders)


def get_page_request(
    page: int = Query(0, ge=0, le=MAX_PAGE_NUMBER, description="Zero‑based page index"),
    size: int = Query(
        settings.default_page_size,
        ge=1,
        le=settings.max_page_size,
        description="Number of items per page",
    ),
    sort: Optional[List[str]] = Query(
        None, description="Sort descriptor `field[,asc|desc]`; repeatable"
    ),
) -> PageRequest:
    """FastAPI dependency building a ``PageRequest`` from query parameters."""
    return PageRequest(page=page, size=size, sort=parse_sort(sort))


@dataclass
class Page(Generic[T]):
    """One slice of a larger result set."""

    content: List[T] = field(default_factory=list)
    number: int = 0
    size: int = 20
    total_elements: int = 0

    @classmethod
    def of(cls, content: List[T], request: PageRequest, total: int) -> "Page[T]":
        return cls(content=list(content), number=request.page, size=request.size, total_elements=total)

    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 1
        return math.ceil(self.total_elements / self.size)


def _generate_uri(base_url: str, page: int, size: int) -> str:
    return f"{base_url}?page={page}&size={size}"


def _link_header(page: Page, uri_for) -> str:
    links: list[str] = []
    if page.number + 1 < page.total_pages:
        links.append(f'<{uri_for(page.number + 1)}>; rel="next"')
    if page.number > 0:
        links.append(f'<{uri_for(page.number - 1)}>; rel="prev"')
    last_page = page.total_pages - 1 if page.total_pages > 0 else 0
    links.append(f'<{uri_for(last_page)}>; rel="last"')
    links.append(f'<{uri_for(0)}>; rel="first"')
    return ",".join(links)


def generate_pagination_headers(page: Page, base_url: str) -> dict[str, str]:
    """Build ``X-Total-Count`` and ``Link`` headers for a listing."""
    return {
        "X-Total-Count": str(page.total_elements),
        "Link": _link_header(page, lambda n: _generate_uri(base_url, n, page.size)),
    }


def generate_search_pagination_headers(query: str, page: Page, base_url: str) -> dict[str, str]:
    """Same as ``generate_pagination_headers`` with the query kept in every link."""
    escaped_query = quote_plus(query)
    return {
        "X-Total-Count": str(page.total_elements),
        "Link": _link_header(
            page,
            lambda n: f"{_generate_uri(base_url, n, page.size)}&query={escaped_query}",
        ),
    }
