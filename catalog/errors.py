"""Errors raised by category operations.

Every error carries a short ``title`` and a human readable ``description`` so
views can hand them to the notification layer without further formatting.
"""

from __future__ import annotations

from typing import Optional


class CategoryError(Exception):
    """Base class for failures of a category action."""

    title = "Category error"

    def __init__(self, description: str, title: Optional[str] = None) -> None:
        super().__init__(description)
        self.description = description
        if title is not None:
            self.title = title


class CategoryValidationError(CategoryError):
    title = "Invalid category"


class CategoryConflictError(CategoryError):
    title = "Cannot delete category"


class CategoryCycleError(CategoryError):
    title = "Invalid parent category"


class DuplicateCategoryNameError(CategoryError):
    title = "Duplicate name"

    def __init__(self, name: str) -> None:
        super().__init__(
            f'A category named "{name}" already exists. Please choose another name.'
        )
        self.name = name


class CategoryStoreError(CategoryError):
    """Failure reported by the category store.

    ``code`` is a stable identifier for failures callers may want to tell
    apart (``duplicate_name``); it is ``None`` for generic failures.
    """

    title = "Store error"

    def __init__(self, description: str, code: Optional[str] = None) -> None:
        super().__init__(description)
        self.code = code


class EmptyExportError(CategoryError):
    title = "No data"

    def __init__(self) -> None:
        super().__init__("There are no categories to export.")
