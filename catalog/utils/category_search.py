"""Text search over a category hierarchy."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Set

from markupsafe import Markup, escape

from .category_tree import (
    CategoryRecord,
    FlattenedCategory,
    group_children,
    hierarchical_rows,
    index_categories,
    resolve_parent_key,
)
from .text import category_key, normalize_search_text


@dataclass(frozen=True)
class SearchResult:
    """Ids matched by a search term.

    ``direct_matches`` are highlighted; ``context_ids`` decide which rows are
    shown (matches plus all their ancestors and descendants).
    """

    term: str
    direct_matches: Set[str] = field(default_factory=set)
    context_ids: Set[str] = field(default_factory=set)

    @property
    def active(self) -> bool:
        return bool(self.term)


def clean_search_term(term: str | None) -> str:
    return (term or "").strip()


def search_categories(records: Iterable[CategoryRecord], term: str | None) -> SearchResult:
    """Expand direct name matches with their ancestors and descendants."""

    term = clean_search_term(term)
    if not term:
        return SearchResult(term="")

    records = list(records)
    needle = normalize_search_text(term)
    direct = {
        category_key(record.get("id"))
        for record in records
        if needle in normalize_search_text(record.get("name"))
    }
    direct.discard(None)
    by_id = index_categories(records)
    grouped = group_children(records)

    # Descendants: one worklist seeded with every match.
    descendants: Set[str] = set(direct)  # type: ignore[arg-type]
    stack = list(descendants)
    while stack:
        for child in grouped.get(stack.pop(), []):
            child_key = category_key(child.get("id"))
            if child_key not in descendants:
                descendants.add(child_key)  # type: ignore[arg-type]
                stack.append(child_key)  # type: ignore[arg-type]

    # Ancestors: each parent chain stops at the first id already visited.
    ancestors: Set[str] = set()
    for match_id in direct:
        parent_key = resolve_parent_key(by_id[match_id], by_id)  # type: ignore[index]
        while parent_key is not None and parent_key not in ancestors:
            ancestors.add(parent_key)
            parent_key = resolve_parent_key(by_id[parent_key], by_id)

    return SearchResult(term=term, direct_matches=direct, context_ids=descendants | ancestors)  # type: ignore[arg-type]


def filtered_rows(records: Iterable[CategoryRecord], result: SearchResult) -> List[FlattenedCategory]:
    """Hierarchical rows restricted to the search context.

    Every ancestor of a kept row is kept too, so levels stay meaningful.
    """

    rows = hierarchical_rows(records)
    if not result.active:
        return rows
    return [row for row in rows if category_key(row["category"].get("id")) in result.context_ids]


def highlight_match(name: str | None, term: str | None) -> Markup:
    """Wrap the first accent-insensitive occurrence of ``term`` in ``<mark>``."""

    name = name or ""
    term = clean_search_term(term)
    if not term:
        return escape(name)
    # Fold one character at a time; owners[i] is the name index behind folded[i].
    folded_parts: List[str] = []
    owners: List[int] = []
    for position, char in enumerate(name):
        part = normalize_search_text(char)
        folded_parts.append(part)
        owners.extend([position] * len(part))
    folded = "".join(folded_parts)
    needle = normalize_search_text(term)
    index = folded.find(needle) if needle else -1
    if index < 0:
        return escape(name)
    start = owners[index]
    end = owners[index + len(needle) - 1] + 1
    return escape(name[:start]) + Markup("<mark>") + escape(name[start:end]) + Markup("</mark>") + escape(name[end:])
