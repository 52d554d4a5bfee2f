"""
Unit tests for parent selection, delete guards and payload validation.
"""

import pytest

from catalog.errors import (
    CategoryConflictError,
    CategoryCycleError,
    CategoryStoreError,
    CategoryValidationError,
    DuplicateCategoryNameError,
)
from catalog.utils.category_rules import (
    build_payload,
    classify_save_error,
    eligible_parent_options,
    ensure_deletable,
    is_duplicate_name_error,
    validate_parent_choice,
)


def _option_ids(options):
    return [row["category"]["id"] for row in options]


def test_editing_excludes_self_and_descendants(chain):
    assert _option_ids(eligible_parent_options(chain, "B")) == ["A"]
    assert _option_ids(eligible_parent_options(chain, "A")) == []
    assert _option_ids(eligible_parent_options(chain, "C")) == ["A", "B"]


def test_creating_offers_every_category(chain):
    options = eligible_parent_options(chain)
    assert _option_ids(options) == ["A", "B", "C"]
    assert [row["level"] for row in options] == [0, 1, 2]


def test_editing_never_lists_itself(chain):
    for record in chain:
        assert record["id"] not in _option_ids(eligible_parent_options(chain, record["id"]))


def test_parent_choice_rejects_cycles(chain):
    with pytest.raises(CategoryCycleError):
        validate_parent_choice(chain, "B", "C")
    with pytest.raises(CategoryCycleError):
        validate_parent_choice(chain, "B", "B")
    assert validate_parent_choice(chain, "C", "A") == "A"
    assert validate_parent_choice(chain, "C", "") is None


def test_parent_choice_rejects_unknown_parent(chain):
    with pytest.raises(CategoryValidationError):
        validate_parent_choice(chain, None, "Z")


def test_build_payload_validates_name(chain):
    with pytest.raises(CategoryValidationError):
        build_payload(chain, {"name": "   ", "parentId": None, "enabled": True})

    payload = build_payload(chain, {"name": " D ", "parentId": "C", "enabled": "on", "image": ""})
    assert payload == {"name": "D", "parentId": "C", "enabled": True, "image": None}


def test_delete_with_subcategories_is_rejected(chain):
    with pytest.raises(CategoryConflictError) as excinfo:
        ensure_deletable(chain, "A")
    assert "subcategories" in excinfo.value.description
    assert ensure_deletable(chain, "C")["name"] == "C"


def test_delete_unknown_category_is_rejected(chain):
    with pytest.raises(CategoryValidationError):
        ensure_deletable(chain, "missing")


@pytest.mark.parametrize(
    "message",
    [
        'duplicate key value violates unique constraint "categories_name_key"',
        "UNIQUE constraint failed: categories.name",
        "Categoria já existe",
        "Category already exists",
    ],
)
def test_duplicate_messages_are_recognised(message):
    assert is_duplicate_name_error(CategoryStoreError(message))


def test_structured_duplicate_code_wins():
    error = CategoryStoreError("conflict", code="duplicate_name")
    assert isinstance(classify_save_error(error, "Cordas"), DuplicateCategoryNameError)


def test_other_store_errors_stay_generic():
    error = CategoryStoreError("connection refused")
    assert not is_duplicate_name_error(error)
    classified = classify_save_error(error, "Cordas")
    assert type(classified) is CategoryStoreError
