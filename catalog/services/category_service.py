"""Category actions: local checks first, then the store, then a full reload."""

from __future__ import annotations

from typing import Any, List, Optional

from flask import current_app

from ..errors import CategoryStoreError
from ..utils.category_rules import build_payload, classify_save_error, ensure_deletable
from ..utils.category_tree import CategoryRecord, find_cyclic_ids
from .category_store import CategoryStore


class CategoryService:
    def __init__(self, store: Optional[CategoryStore] = None) -> None:
        self.store = store or CategoryStore()

    def load(self) -> List[CategoryRecord]:
        try:
            records = self.store.fetch_all()
        except CategoryStoreError as exc:
            raise CategoryStoreError(
                "Could not load the categories.", code=exc.code
            ) from exc
        cyclic = find_cyclic_ids(records)
        if cyclic:
            current_app.logger.warning(
                "Categories %s form a parent cycle; showing them as roots", sorted(cyclic)
            )
        return records

    def save(self, records: List[CategoryRecord], form: dict, editing_id: Any = None) -> List[CategoryRecord]:
        """Create or update a category and return the reloaded records."""

        payload = build_payload(records, form, editing_id)
        try:
            if editing_id is None:
                self.store.create(payload)
            else:
                self.store.update(editing_id, payload)
        except CategoryStoreError as exc:
            current_app.logger.warning("Saving category %r failed: %s", payload["name"], exc)
            raise classify_save_error(exc, payload["name"]) from exc
        current_app.logger.info(
            "Category %r %s", payload["name"], "created" if editing_id is None else "updated"
        )
        return self.load()

    def delete(self, records: List[CategoryRecord], category_id: Any) -> List[CategoryRecord]:
        record = ensure_deletable(records, category_id)
        try:
            self.store.delete(category_id)
        except CategoryStoreError as exc:
            current_app.logger.warning("Deleting category %s failed: %s", category_id, exc)
            raise CategoryStoreError("Could not delete the category.", code=exc.code) from exc
        current_app.logger.info("Category %r deleted", record.get("name"))
        return self.load()

    def reset(self) -> List[CategoryRecord]:
        try:
            count = self.store.reset()
        except CategoryStoreError as exc:
            raise CategoryStoreError("Could not reset the categories.", code=exc.code) from exc
        current_app.logger.info("Categories reset to %d factory entries", count)
        return self.load()
