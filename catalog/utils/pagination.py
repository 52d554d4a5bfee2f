"""Pagination utilities shared across views and templates."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, Hashable, List, Optional, Sequence, TypeVar

from flask import Request, request, session, url_for

from ..constants import PAGE_SIZE

T = TypeVar("T")

SESSION_SIGNATURE_KEY = "pagination_signature"


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of an in-memory sequence.

    Mirrors the attributes of Flask-SQLAlchemy's ``Pagination`` so the same
    template helpers render both.
    """

    items: List[T]
    page: int
    per_page: int
    total: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.per_page) if self.per_page else 0

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.pages

    @property
    def prev_num(self) -> Optional[int]:
        return self.page - 1 if self.has_prev else None

    @property
    def next_num(self) -> Optional[int]:
        return self.page + 1 if self.has_next else None


def clamp_page(page: int, total: int, per_page: int = PAGE_SIZE) -> int:
    """Clamp ``page`` into ``1..pages`` (at least 1 when there is nothing to show)."""

    pages = math.ceil(total / per_page) if per_page > 0 else 0
    return min(max(page, 1), max(pages, 1))


def paginate_rows(rows: Sequence[T], page: int, per_page: int = PAGE_SIZE) -> Page[T]:
    """Slice ``rows`` for the requested 1-indexed page."""

    total = len(rows)
    page = clamp_page(page, total, per_page)
    start = (page - 1) * per_page
    return Page(items=list(rows[start:start + per_page]), page=page, per_page=per_page, total=total)


def resolve_page(requested: int, previous_signature: Optional[Hashable], signature: Hashable) -> int:
    """Return the page to show, restarting at 1 when the listing changed."""

    if previous_signature is not None and previous_signature != signature:
        return 1
    return max(requested, 1)


def get_page_arg(signature: Sequence[str], req: Request | None = None) -> int:
    """Return the sanitized page number from the given request.

    ``signature`` identifies the ordered sequence being paged (search term,
    sort field, sort direction). It is remembered in the session so a new
    search or sort starts again on the first page.
    """

    req = req or request
    page = req.args.get("page", 1, type=int) or 1
    current = list(signature)
    previous = session.get(SESSION_SIGNATURE_KEY)
    session[SESSION_SIGNATURE_KEY] = current
    return resolve_page(page, previous, current)


def build_pagination_links(pagination) -> List[int | None]:
    """Generate a compact list of page numbers (with gaps) for navigation."""

    total_pages = pagination.pages or 1
    current_page = pagination.page or 1

    if total_pages <= 1:
        return [1]

    block_start = max(min(current_page - 1, total_pages - 2), 1)
    block_end = min(block_start + 2, total_pages)

    pages = {1, total_pages}
    pages.update(range(block_start, block_end + 1))

    ordered_pages = sorted(pages)
    result: List[int | None] = []
    last_number: int | None = None
    for number in ordered_pages:
        if last_number is not None and number - last_number > 1:
            result.append(None)
        result.append(number)
        last_number = number
    return result


def build_pagination_url(page: int, **overrides) -> str:
    """Build a URL pointing to a specific page while preserving query args."""

    args = request.args.to_dict()
    args.update({key: value for key, value in overrides.items() if value is not None})
    args["page"] = page
    view_args = dict(request.view_args or {})
    return url_for(request.endpoint, **view_args, **args)
