"""Compose the category listing from search, sort and page state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List

from ..constants import PAGE_SIZE
from ..utils.category_search import SearchResult, filtered_rows, search_categories
from ..utils.category_sort import SortState, sort_rows
from ..utils.category_tree import CategoryRecord, FlattenedCategory, resolve_parent_key, index_categories
from ..utils.pagination import Page, paginate_rows
from ..utils.text import category_key

MODE_HIERARCHICAL = "hierarchical"
MODE_FILTERED = "filtered"
MODE_SORTED = "sorted"


@dataclass(frozen=True)
class CategoryStats:
    total: int
    enabled: int
    roots: int
    matches: int


@dataclass(frozen=True)
class CategoryListing:
    page: Page[FlattenedCategory]
    mode: str
    search: SearchResult
    sort: SortState
    stats: CategoryStats

    @property
    def signature(self) -> List[str]:
        return listing_signature(self.search.term, self.sort)

    def is_direct_match(self, category: CategoryRecord) -> bool:
        return category_key(category.get("id")) in self.search.direct_matches

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode,
            "page": self.page.page,
            "pages": self.page.pages,
            "total": self.page.total,
            "rows": [
                {"category": row["category"], "level": row["level"], "hasChildren": row["has_children"]}
                for row in self.page.items
            ],
            "directMatches": sorted(self.search.direct_matches),
            "sort": {"field": self.sort.field, "direction": self.sort.direction},
            "stats": {
                "total": self.stats.total,
                "enabled": self.stats.enabled,
                "roots": self.stats.roots,
                "matches": self.stats.matches,
            },
        }


def listing_signature(term: str, sort: SortState) -> List[str]:
    return [term, sort.field or "", sort.direction]


def category_stats(records: Iterable[CategoryRecord], search: SearchResult) -> CategoryStats:
    records = list(records)
    by_id = index_categories(records)
    return CategoryStats(
        total=len(records),
        enabled=sum(1 for record in records if record.get("enabled")),
        roots=sum(1 for record in records if resolve_parent_key(record, by_id) is None),
        matches=len(search.direct_matches),
    )


def ordered_rows(records: Iterable[CategoryRecord], search: SearchResult, sort: SortState) -> List[FlattenedCategory]:
    """The ordered sequence for the current display mode, before paging."""

    rows = filtered_rows(records, search)
    return sort_rows(rows, sort)


def build_listing(
    records: Iterable[CategoryRecord],
    term: str | None,
    sort: SortState,
    page: int,
    per_page: int = PAGE_SIZE,
) -> CategoryListing:
    records = list(records)
    search = search_categories(records, term)
    if sort.active:
        mode = MODE_SORTED
    elif search.active:
        mode = MODE_FILTERED
    else:
        mode = MODE_HIERARCHICAL
    rows = ordered_rows(records, search, sort)
    return CategoryListing(
        page=paginate_rows(rows, page, per_page),
        mode=mode,
        search=search,
        sort=sort,
        stats=category_stats(records, search),
    )
