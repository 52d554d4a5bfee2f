"""Helpers for working with category hierarchies.

Records are plain dictionaries in the shape the category store returns
(``id``, ``name``, ``image``, ``parentId``, ``enabled``, ``creationTime``).
Structure is always derived from ``parentId``; nested ``children`` arrays
are accepted on input but never trusted.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Optional, Set, Tuple, TypedDict

from .text import category_key, name_sort_key


class CategoryRecord(TypedDict, total=False):
    """A category as exchanged with the store."""

    id: Any
    name: str
    image: Optional[str]
    parentId: Any
    parentName: Optional[str]
    enabled: bool
    creationTime: Optional[str]
    children: List["CategoryRecord"]


class CategoryNode(TypedDict):
    """Represents a node in a category tree."""

    category: CategoryRecord
    children: List["CategoryNode"]


class FlattenedCategory(TypedDict):
    """A flattened tree item with hierarchy metadata."""

    category: CategoryRecord
    level: int
    has_children: bool


ChildIndex = Dict[Optional[str], List[CategoryRecord]]


def ingest_categories(payload: Any) -> List[CategoryRecord]:
    """Normalize a store response into a flat list of records.

    Accepts a bare list or a ``{"content": [...]}`` envelope, with records
    either flat or nested under ``children``. Nested records inherit their
    container's id as ``parentId`` when they do not carry one. The first
    occurrence of an id wins so nodes are never duplicated.
    """

    if isinstance(payload, dict):
        payload = payload.get("content")
    if not isinstance(payload, (list, tuple)):
        return []

    records: List[CategoryRecord] = []
    seen: Set[str] = set()
    stack: List[Tuple[Any, Optional[Any]]] = [(item, None) for item in reversed(payload)]
    while stack:
        item, nesting_parent = stack.pop()
        if not isinstance(item, dict):
            continue
        key = category_key(item.get("id"))
        if key is None:
            continue
        children = item.get("children") or []
        if key not in seen:
            seen.add(key)
            record: CategoryRecord = {k: v for k, v in item.items() if k != "children"}  # type: ignore[assignment]
            if category_key(record.get("parentId")) is None:
                record["parentId"] = nesting_parent
            records.append(record)
        for child in reversed(children):
            stack.append((child, item.get("id")))
    return records


def index_categories(records: Iterable[CategoryRecord]) -> Dict[str, CategoryRecord]:
    """Map string ids to records."""

    return {category_key(record.get("id")): record for record in records}  # type: ignore[misc]


def resolve_parent_key(record: CategoryRecord, by_id: Dict[str, CategoryRecord]) -> Optional[str]:
    """Return the parent id of ``record`` or ``None`` when it should be a root.

    Missing parents and self references are treated as roots.
    """

    parent_key = category_key(record.get("parentId"))
    if parent_key is None or parent_key not in by_id:
        return None
    if parent_key == category_key(record.get("id")):
        return None
    return parent_key


def sibling_sort_key(record: CategoryRecord) -> Tuple[Tuple[str, str], str]:
    return name_sort_key(record.get("name")), category_key(record.get("id")) or ""


def group_children(records: Iterable[CategoryRecord]) -> ChildIndex:
    """Group records by parent id; roots live under the ``None`` key."""

    records = list(records)
    by_id = index_categories(records)
    grouped: ChildIndex = {None: []}
    for record in records:
        grouped.setdefault(resolve_parent_key(record, by_id), []).append(record)
    for siblings in grouped.values():
        siblings.sort(key=sibling_sort_key)
    return grouped


def build_category_tree(records: Iterable[CategoryRecord]) -> List[CategoryNode]:
    """Build a nested tree from the provided categories.

    Records caught in a parent cycle are unreachable from any root; they are
    attached as extra roots, in name order, so every record appears once.
    """

    records = list(records)
    grouped = group_children(records)
    visited: Set[str] = set()
    roots: List[CategoryNode] = []

    def _attach(start: CategoryRecord) -> CategoryNode:
        root: CategoryNode = {"category": start, "children": []}
        visited.add(category_key(start.get("id")))  # type: ignore[arg-type]
        stack = [root]
        while stack:
            node = stack.pop()
            for child in grouped.get(category_key(node["category"].get("id")), []):
                child_key = category_key(child.get("id"))
                if child_key in visited:
                    continue
                visited.add(child_key)  # type: ignore[arg-type]
                child_node: CategoryNode = {"category": child, "children": []}
                node["children"].append(child_node)
                stack.append(child_node)
        return root

    for record in grouped[None]:
        roots.append(_attach(record))

    detached = [r for r in records if category_key(r.get("id")) not in visited]
    for record in sorted(detached, key=sibling_sort_key):
        if category_key(record.get("id")) not in visited:
            roots.append(_attach(record))
    return roots


def find_cyclic_ids(records: Iterable[CategoryRecord]) -> Set[str]:
    """Return ids that cannot reach a root by following ``parentId``."""

    records = list(records)
    grouped = group_children(records)
    reachable: Set[str] = set()
    stack = list(grouped[None])
    while stack:
        record = stack.pop()
        key = category_key(record.get("id"))
        if key in reachable:
            continue
        reachable.add(key)  # type: ignore[arg-type]
        stack.extend(grouped.get(key, []))
    return {category_key(r.get("id")) for r in records} - reachable  # type: ignore[misc]


def flatten_category_tree(nodes: Iterable[CategoryNode], level: int = 0) -> Iterator[FlattenedCategory]:
    """Yield flattened nodes with level metadata for rendering (pre-order)."""

    stack: List[Tuple[CategoryNode, int]] = [(node, level) for node in reversed(list(nodes))]
    while stack:
        node, depth = stack.pop()
        children = node["children"]
        yield FlattenedCategory(
            category=node["category"],
            level=depth,
            has_children=bool(children),
        )
        stack.extend((child, depth + 1) for child in reversed(children))


def hierarchical_rows(records: Iterable[CategoryRecord]) -> List[FlattenedCategory]:
    """Build and flatten in one step."""

    return list(flatten_category_tree(build_category_tree(records)))


def collect_subtree_ids(records: Iterable[CategoryRecord], target_id: Any) -> Set[str]:
    """Return ``target_id`` and the ids of all its transitive descendants."""

    target = category_key(target_id)
    if target is None:
        return set()
    grouped = group_children(records)
    ids: Set[str] = {target}
    stack = [target]
    while stack:
        for child in grouped.get(stack.pop(), []):
            child_key = category_key(child.get("id"))
            if child_key not in ids:
                ids.add(child_key)  # type: ignore[arg-type]
                stack.append(child_key)  # type: ignore[arg-type]
    return ids


def direct_children(records: Iterable[CategoryRecord], target_id: Any) -> List[CategoryRecord]:
    """Records whose ``parentId`` references ``target_id``, in display order."""

    target = category_key(target_id)
    if target is None:
        return []
    children = [
        r
        for r in records
        if category_key(r.get("parentId")) == target and category_key(r.get("id")) != target
    ]
    children.sort(key=sibling_sort_key)
    return children
