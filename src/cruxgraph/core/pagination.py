"""
Page-link computation for list endpoints.

List endpoints are paged by number rather than by cursor. For every page the
response carries two derived headers:

- ``Link``: ``<url>; rel="first", <url>; rel="prev", <url>; rel="next", <url>; rel="last"``
- ``Pagination``: ``{"currentPage": ..., "perPage": ..., "total": ...}``

The builder is a pure function of the request coordinates and the total
count. Page numbers are always clamped into ``[1, last_page]``; no link is
ever omitted or points outside that range.
"""

import json
import math
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Mapping, Optional, Tuple, TypeVar
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

PAGE_PARAM = "page"
PER_PAGE_PARAMS = ("perPage", "per_page")
DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 25

LINK_HEADER = "Link"
PAGINATION_HEADER = "Pagination"

T = TypeVar("T")


@dataclass(frozen=True)
class PageParams:
    """
    Paging coordinates resolved from a request's query string.

    Attributes:
        page (int): Requested page number (1-based)
        per_page (int): Items per page
        per_page_param (str): Query-string spelling of the per-page parameter
    """

    page: int
    per_page: int
    per_page_param: str = PER_PAGE_PARAMS[1]

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page

    @property
    def limit(self) -> int:
        return self.per_page


@dataclass
class Page(Generic[T]):
    """One page of a list: the items served and the total across all pages."""

    items: List[T]
    total: int
    page: int
    per_page: int

    @property
    def last_page(self) -> int:
        return last_page_for(self.total, self.per_page)


@dataclass(frozen=True)
class PageLink:
    """One navigation link: the relation, the target page and its URL."""

    rel: str
    page: int
    per_page: int
    url: str

    def render(self) -> str:
        return f'<{self.url}>; rel="{self.rel}"'


@dataclass(frozen=True)
class PageLinks:
    """
    Navigation descriptors and summary for one page of a list.

    Attributes:
        first, prev, next, last (PageLink): Clamped navigation links
        current_page (int): Page that was served
        per_page (int): Items per page
        total (int): Total number of items across all pages
    """

    first: PageLink
    prev: PageLink
    next: PageLink
    last: PageLink
    current_page: int
    per_page: int
    total: int

    @property
    def last_page(self) -> int:
        return self.last.page

    @property
    def summary(self) -> Dict[str, int]:
        return {"currentPage": self.current_page, "perPage": self.per_page, "total": self.total}

    def links(self) -> List[PageLink]:
        return [self.first, self.prev, self.next, self.last]

    def link_header(self) -> str:
        return ", ".join(link.render() for link in self.links())

    def pagination_header(self) -> str:
        return json.dumps(self.summary, separators=(",", ":"))

    def headers(self) -> Dict[str, str]:
        """Both response headers keyed by header name."""
        return {
            LINK_HEADER: self.link_header(),
            PAGINATION_HEADER: self.pagination_header(),
        }


def last_page_for(total_count: int, per_page: int) -> int:
    """Number of the last page, never less than 1."""
    if per_page < 1:
        raise ValueError("per_page must be positive")
    return max(1, math.ceil(max(total_count, 0) / per_page))


def _with_params(url: str, overrides: Dict[str, Any]) -> str:
    """Clone ``url`` with the given query parameters set, keeping all others in place."""
    parts = urlsplit(url)
    pairs: List[Tuple[str, str]] = parse_qsl(parts.query, keep_blank_values=True)
    pending = {name: str(value) for name, value in overrides.items()}

    rewritten = []
    for name, value in pairs:
        if name in pending:
            # Later duplicates of an overridden parameter are dropped
            if pending[name] is not None:
                rewritten.append((name, pending[name]))
                pending[name] = None
        else:
            rewritten.append((name, value))
    rewritten.extend((name, value) for name, value in pending.items() if value is not None)

    return urlunsplit(parts._replace(query=urlencode(rewritten)))


def build_page_links(
    current_page: int,
    per_page: int,
    total_count: int,
    request_url: str,
    per_page_param: str = PER_PAGE_PARAMS[1],
) -> PageLinks:
    """
    Compute first/prev/next/last links for one page of results.

    The per-page parameter is rewritten only when the request URL already
    carried it under ``per_page_param``; the page parameter is always set.

    Args:
        current_page: Page being served (1-based)
        per_page: Items per page
        total_count: Total number of items in the list
        request_url: Absolute URL of the inbound request
        per_page_param: Spelling of the per-page parameter to rewrite

    Returns:
        PageLinks with clamped page numbers

    Example:
        >>> links = build_page_links(1, 2, 10, "http://x/cruxes?page=1")
        >>> links.last.page, links.next.page
        (5, 2)
    """
    last_page = last_page_for(total_count, per_page)
    current_page = max(1, current_page)
    has_per_page = any(
        name == per_page_param
        for name, _ in parse_qsl(urlsplit(request_url).query, keep_blank_values=True)
    )

    def link(rel: str, page: int) -> PageLink:
        overrides: Dict[str, Any] = {PAGE_PARAM: page}
        if has_per_page:
            overrides[per_page_param] = per_page
        return PageLink(rel=rel, page=page, per_page=per_page, url=_with_params(request_url, overrides))

    return PageLinks(
        first=link("first", 1),
        prev=link("prev", max(1, min(current_page - 1, last_page))),
        next=link("next", min(last_page, current_page + 1)),
        last=link("last", last_page),
        current_page=current_page,
        per_page=per_page,
        total=total_count,
    )


def _positive_int(raw: Optional[Any]) -> Optional[int]:
    if raw is None:
        return None
    try:
        value = int(str(raw).strip())
    except ValueError:
        return None
    return value if value >= 1 else None


def resolve_page_params(
    query: Mapping[str, Any],
    default_per_page: int = DEFAULT_PER_PAGE,
    max_per_page: Optional[int] = None,
) -> PageParams:
    """
    Read paging coordinates from a query-string mapping.

    ``perPage`` wins over ``per_page`` when both are present. Missing,
    non-numeric or non-positive values fall back to the defaults.

    Args:
        query: Query parameters of the inbound request
        default_per_page: Page size when none is requested
        max_per_page: Optional upper bound on the page size

    Returns:
        PageParams for the request
    """
    per_page_param = PER_PAGE_PARAMS[0] if query.get(PER_PAGE_PARAMS[0]) else PER_PAGE_PARAMS[1]
    page = _positive_int(query.get(PAGE_PARAM)) or DEFAULT_PAGE
    per_page = _positive_int(query.get(per_page_param)) or default_per_page
    if max_per_page is not None:
        per_page = min(per_page, max_per_page)
    return PageParams(page=page, per_page=per_page, per_page_param=per_page_param)
