"""Hierarchical CSV export of the category tree."""

from __future__ import annotations

import io
from datetime import datetime
from typing import Any, Iterable, List, Optional

from ..constants import EXPORT_HEADER, EXPORT_INDENT
from ..errors import EmptyExportError
from .category_tree import CategoryRecord, hierarchical_rows

BOM = "\ufeff"


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def _id_cell(value: Any) -> str:
    text = "" if value is None else str(value)
    if any(char in text for char in ',"\n\r'):
        return _quote(text)
    return text


def export_lines(records: Iterable[CategoryRecord]) -> List[str]:
    """Return the CSV lines (header first) for ``records``.

    Names are indented with two spaces per level and always quoted.
    """

    lines = [",".join(EXPORT_HEADER)]
    for row in hierarchical_rows(records):
        category = row["category"]
        name = f"{EXPORT_INDENT * row['level']}{category.get('name') or ''}"
        lines.append(f"{_id_cell(category.get('id'))},{_quote(name)}")
    return lines


def export_categories_csv(records: Iterable[CategoryRecord]) -> str:
    records = list(records)
    if not records:
        raise EmptyExportError()
    return "\n".join(export_lines(records))


def export_filename(moment: Optional[datetime] = None) -> str:
    """``categories_<YYYY-MM-DD>_<HH-MM-SS>.csv``"""

    moment = moment or datetime.now()
    return f"categories_{moment.strftime('%Y-%m-%d')}_{moment.strftime('%H-%M-%S')}.csv"


def export_stream(records: Iterable[CategoryRecord]) -> io.BytesIO:
    """UTF-8 bytes with a byte-order mark so spreadsheet tools detect the encoding."""

    stream = io.BytesIO((BOM + export_categories_csv(records)).encode("utf-8"))
    stream.seek(0)
    return stream

