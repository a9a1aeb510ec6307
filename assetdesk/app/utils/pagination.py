"""Pagination utilities for list endpoints.

This module provides:
- ``PaginationFilter``: the normalized page number / page size of a request
- ``UriService``: builds page links from a base URL and a route
- ``create_paged_response``: wraps one page of results in a ``PagedResponse``

Invalid paging input is never an error: a page number below 1 becomes 1, a
non-positive page size becomes the default and an oversized one is clamped
to the maximum.
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, TypeVar
from urllib.parse import parse_qsl, urlencode, urljoin, urlsplit, urlunsplit

from app.models.domain.common import PagedResponse

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

@dataclass(frozen=True)
class PaginationFilter:
    """Requested page, normalized on construction.

    Args:
        page_number: 1-based page number; values below 1 become 1
        page_size: Items per page; values below 1 become ``default_page_size``,
            values above ``max_page_size`` are clamped
    """

    page_number: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    default_page_size: int = field(default=DEFAULT_PAGE_SIZE, repr=False, compare=False)
    max_page_size: int = field(default=MAX_PAGE_SIZE, repr=False, compare=False)

    def __post_init__(self):
        page_number = self.page_number if self.page_number and self.page_number > 0 else 1
        page_size = self.page_size if self.page_size and self.page_size > 0 else self.default_page_size
        page_size = min(page_size, self.max_page_size)
        object.__setattr__(self, "page_number", page_number)
        object.__setattr__(self, "page_size", page_size)

    @property
    def skip(self) -> int:
        return (self.page_number - 1) * self.page_size

    @property
    def take(self) -> int:
        return self.page_size

    def for_page(self, page_number: int) -> "PaginationFilter":
        """Same page size, different page."""
        return PaginationFilter(
            page_number,
            self.page_size,
            default_page_size=self.default_page_size,
            max_page_size=self.max_page_size
        )

class UriService:
    """Build absolute page links for a route."""

    def __init__(self, base_url: str):
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"

    def get_page_uri(self, pagination: PaginationFilter, route: str) -> str:
        """Return ``route`` on the base URL with paging query values replaced.

        Other query parameters of the route (search, filters, sort) are kept
        so links page through the same result set.
        """
        url = urljoin(self.base_url, route.lstrip("/"))
        scheme, netloc, path, query, fragment = urlsplit(url)
        params = [
            (key, value) for key, value in parse_qsl(query, keep_blank_values=True)
            if key.lower() not in ("pagenumber", "pagesize")
        ]
        params.append(("pageNumber", str(pagination.page_number)))
        params.append(("pageSize", str(pagination.page_size)))
        return urlunsplit((scheme, netloc, path, urlencode(params), fragment))

def total_pages_for(total_records: int, page_size: int) -> int:
    if page_size <= 0:
        return 0
    return math.ceil(total_records / page_size)

def create_paged_response(
    data: Sequence[T],
    pagination: PaginationFilter,
    total_records: int,
    uri_service: UriService,
    route: str,
    message: Optional[str] = None
) -> PagedResponse[T]:
    """Wrap one page of results with paging metadata and links.

    ``first_page`` is always set. ``last_page`` is omitted when there are no
    records. ``next_page`` is set only below the last page, and
    ``previous_page`` only for pages 2 through ``total_pages``, so a page
    number past the end gets no previous link.

    Args:
        data: Items of the current page (not modified)
        pagination: The normalized filter the page was produced with
        total_records: Count of matching items before paging
        uri_service: Link builder
        route: Request path (and query) the links are based on
        message: Optional envelope message

    Returns:
        A succeeded ``PagedResponse``
    """
    total_pages = total_pages_for(total_records, pagination.page_size)
    page_number = pagination.page_number

    def link(number: int) -> str:
        return uri_service.get_page_uri(pagination.for_page(number), route)

    items: List[T] = list(data)
    return PagedResponse(
        data=items,
        message=message,
        page_number=page_number,
        page_size=pagination.page_size,
        total_records=total_records,
        total_pages=total_pages,
        first_page=link(1),
        last_page=link(total_pages) if total_pages > 0 else None,
        next_page=link(page_number + 1) if page_number < total_pages else None,
        previous_page=link(page_number - 1) if 1 < page_number <= total_pages else None
    )
