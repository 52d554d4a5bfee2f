"""Structural rules checked locally before the store is called."""

from __future__ import annotations

from typing import Any, Iterable, List, Optional, TypedDict

from ..constants import DUPLICATE_NAME_MARKERS
from ..errors import (
    CategoryConflictError,
    CategoryCycleError,
    CategoryStoreError,
    CategoryValidationError,
    DuplicateCategoryNameError,
)
from .category_tree import (
    CategoryRecord,
    FlattenedCategory,
    collect_subtree_ids,
    direct_children,
    hierarchical_rows,
    index_categories,
)
from .text import category_key


class CategoryPayload(TypedDict):
    """Body of a create or update request."""

    name: str
    parentId: Optional[str]
    enabled: bool
    image: Optional[str]


def eligible_parent_options(
    records: Iterable[CategoryRecord], editing_id: Any = None
) -> List[FlattenedCategory]:
    """Categories that may become the parent of ``editing_id``.

    The edited category and its whole subtree are left out, since choosing
    any of them would close a cycle. Without ``editing_id`` every category
    is eligible.
    """

    records = list(records)
    excluded = collect_subtree_ids(records, editing_id)
    return [
        row for row in hierarchical_rows(records)
        if category_key(row["category"].get("id")) not in excluded
    ]


def validate_parent_choice(records: Iterable[CategoryRecord], editing_id: Any, parent_id: Any) -> Optional[str]:
    """Return the normalized parent id or raise when it is not allowed."""

    parent_key = category_key(parent_id)
    if parent_key is None:
        return None
    records = list(records)
    if parent_key not in index_categories(records):
        raise CategoryValidationError("The selected parent category does not exist.")
    if editing_id is not None and parent_key in collect_subtree_ids(records, editing_id):
        raise CategoryCycleError(
            "A category cannot be moved under itself or one of its subcategories."
        )
    return parent_key


def validate_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    if not name:
        raise CategoryValidationError("The category name is required.")
    return name


def build_payload(
    records: Iterable[CategoryRecord],
    form: dict,
    editing_id: Any = None,
) -> CategoryPayload:
    """Validate submitted fields and build the store payload."""

    records = list(records)
    name = validate_name(form.get("name"))
    parent_id = validate_parent_choice(records, editing_id, form.get("parentId"))
    image = (form.get("image") or "").strip() or None
    return CategoryPayload(
        name=name,
        parentId=parent_id,
        enabled=bool(form.get("enabled")),
        image=image,
    )


def ensure_deletable(records: Iterable[CategoryRecord], category_id: Any) -> CategoryRecord:
    """Return the record for ``category_id`` if it has no subcategories."""

    records = list(records)
    record = index_categories(records).get(category_key(category_id))  # type: ignore[arg-type]
    if record is None:
        raise CategoryValidationError("The category no longer exists.")
    if direct_children(records, category_id):
        raise CategoryConflictError(
            f'The category "{record.get("name")}" has subcategories. Remove them first.'
        )
    return record


def is_duplicate_name_error(error: Exception) -> bool:
    """Tell name collisions apart from other store failures.

    A structured ``duplicate_name`` code wins; otherwise the message text is
    inspected.
    """

    if getattr(error, "code", None) == "duplicate_name":
        return True
    message = str(error).lower()
    return any(marker in message for marker in DUPLICATE_NAME_MARKERS)


def classify_save_error(error: CategoryStoreError, name: str) -> Exception:
    if is_duplicate_name_error(error):
        return DuplicateCategoryNameError(name)
    return CategoryStoreError("Could not save the category.", code=error.code)
