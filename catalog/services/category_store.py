"""SQLAlchemy-backed category store.

The store owns persistence and uniqueness. Every failure is reported as a
:class:`~catalog.errors.CategoryStoreError`; the session is rolled back so
previously committed data stays intact.
"""

from __future__ import annotations

from typing import Any, List

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import CategoryStoreError
from ..extensions import db
from ..models import Category, find_category_by_name, seed_categories
from ..utils.category_rules import CategoryPayload
from ..utils.category_tree import CategoryRecord, ingest_categories


class CategoryStore:
    def fetch_all(self) -> List[CategoryRecord]:
        try:
            categories = Category.query.order_by(Category.name, Category.id).all()
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.exception("Loading categories failed")
            raise CategoryStoreError("Could not load the categories.") from exc
        return ingest_categories([category.to_record() for category in categories])

    def create(self, payload: CategoryPayload) -> CategoryRecord:
        self._ensure_unique_name(payload["name"])
        category = Category()
        self._apply(category, payload)
        db.session.add(category)
        self._commit("Could not create the category.")
        return category.to_record()

    def update(self, category_id: Any, payload: CategoryPayload) -> CategoryRecord:
        category = self._get(category_id)
        self._ensure_unique_name(payload["name"], exclude_id=category.id)
        self._apply(category, payload)
        self._commit("Could not update the category.")
        return category.to_record()

    def delete(self, category_id: Any) -> None:
        category = self._get(category_id)
        if Category.query.filter_by(parent_id=category.id).first() is not None:
            raise CategoryStoreError(
                f'Category "{category.name}" has subcategories.', code="has_children"
            )
        db.session.delete(category)
        self._commit("Could not delete the category.")

    def reset(self) -> int:
        """Replace every category with the factory data set.

        Clearing and seeding share one transaction, so a failed seed leaves
        the previous categories in place.
        """

        try:
            Category.query.update({Category.parent_id: None})
            Category.query.delete()
            count = seed_categories(commit=False)
            db.session.commit()
            return count
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.exception("Resetting categories failed")
            raise CategoryStoreError("Could not reset the categories.") from exc

    def _get(self, category_id: Any) -> Category:
        try:
            category = db.session.get(Category, int(category_id))
        except (TypeError, ValueError):
            category = None
        if category is None:
            raise CategoryStoreError("Category not found.", code="not_found")
        return category

    def _ensure_unique_name(self, name: str, exclude_id: Any = None) -> None:
        existing = find_category_by_name(name)
        if existing is not None and existing.id != exclude_id:
            raise CategoryStoreError(
                f'Category "{name}" already exists.', code="duplicate_name"
            )

    @staticmethod
    def _apply(category: Category, payload: CategoryPayload) -> None:
        category.name = payload["name"]
        category.parent_id = int(payload["parentId"]) if payload["parentId"] else None
        category.enabled = payload["enabled"]
        category.image = payload["image"]

    def _commit(self, message: str) -> None:
        try:
            db.session.commit()
        except IntegrityError as exc:
            db.session.rollback()
            current_app.logger.warning("Category integrity error: %s", exc.orig)
            raise CategoryStoreError(str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.exception(message)
            raise CategoryStoreError(message) from exc
