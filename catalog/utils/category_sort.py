"""Column sorting for the flat category listing."""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, NamedTuple, Optional, Tuple

from ..constants import SORT_ASC, SORT_DEFAULT, SORT_DESC, SORT_DIRECTIONS, SORT_FIELDS
from .category_tree import FlattenedCategory
from .text import category_key, name_sort_key


class SortState(NamedTuple):
    field: Optional[str] = None
    direction: str = SORT_DEFAULT

    @property
    def active(self) -> bool:
        return self.field is not None and self.direction != SORT_DEFAULT


DEFAULT_SORT = SortState()

_NEXT_DIRECTION = {
    SORT_DEFAULT: SORT_ASC,
    SORT_ASC: SORT_DESC,
    SORT_DESC: SORT_DEFAULT,
}


def toggle_sort(state: SortState, column: str) -> SortState:
    """Advance the sort state after a click on ``column``.

    The same column cycles default -> asc -> desc -> default; another column
    starts again at ascending.
    """

    if column not in SORT_FIELDS:
        return state
    if state.field != column:
        return SortState(column, SORT_ASC)
    direction = _NEXT_DIRECTION[state.direction]
    if direction == SORT_DEFAULT:
        return DEFAULT_SORT
    return SortState(column, direction)


def parse_sort_args(args: Mapping[str, Any]) -> SortState:
    """Read ``sort``/``dir`` query arguments, ignoring anything unknown."""

    field = (args.get("sort") or "").strip()
    direction = (args.get("dir") or "").strip().lower()
    if field not in SORT_FIELDS or direction not in SORT_DIRECTIONS or direction == SORT_DEFAULT:
        return DEFAULT_SORT
    return SortState(field, direction)


def _numeric_id_key(value: Any) -> Tuple[int, float, str]:
    key = category_key(value) or ""
    try:
        return 0, float(key), key
    except ValueError:
        return 1, 0.0, key


def sort_rows(rows: Iterable[FlattenedCategory], state: SortState) -> List[FlattenedCategory]:
    """Return a flat projection ordered by the active column.

    Levels are reset to 0 because a global order has no hierarchy. With the
    default state the rows are returned unchanged.
    """

    rows = list(rows)
    if not state.active:
        return rows
    if state.field == "id":
        key = lambda row: _numeric_id_key(row["category"].get("id"))  # noqa: E731
    else:
        key = lambda row: (name_sort_key(row["category"].get("name")), _numeric_id_key(row["category"].get("id")))  # noqa: E731
    ordered = sorted(rows, key=key, reverse=state.direction == SORT_DESC)
    return [
        FlattenedCategory(category=row["category"], level=0, has_children=row["has_children"])
        for row in ordered
    ]
