from __future__ import annotations

from datetime import datetime
from functools import cmp_to_key
from typing import Sequence

from homedash.grid.types import CellKind, SortDir, SortEntry, Tab
from homedash.models import DATE_LAYOUT

_DATE_KINDS = {CellKind.DATE, CellKind.URGENCY, CellKind.WARRANTY}
_NUMERIC_KINDS = {CellKind.READONLY, CellKind.DRILLDOWN}


def toggle_sort(tab: Tab, col: int) -> None:
    """Cycle ``col`` through none -> asc -> desc -> none."""
    for index, entry in enumerate(tab.sorts):
        if entry.col != col:
            continue
        if entry.dir == SortDir.ASC:
            tab.sorts[index] = SortEntry(col=col, dir=SortDir.DESC)
        else:
            del tab.sorts[index]
        return
    tab.sorts.append(SortEntry(col=col, dir=SortDir.ASC))


def clear_sorts(tab: Tab) -> None:
    tab.sorts = []


def with_pk_tiebreaker(sorts: Sequence[SortEntry]) -> list[SortEntry]:
    entries = list(sorts)
    if all(entry.col != 0 for entry in entries):
        entries.append(SortEntry(col=0, dir=SortDir.ASC))
    return entries


def apply_sorts(tab: Tab) -> None:
    """Stable-sort the displayed rows by the sort stack, ID ascending last.

    Empty values sort last regardless of direction.
    """
    if len(tab.cell_rows) <= 1:
        return
    sorts = with_pk_tiebreaker(tab.sorts)

    def compare_rows(a: int, b: int) -> int:
        for entry in sorts:
            left = cell_value_at(tab, a, entry.col)
            right = cell_value_at(tab, b, entry.col)
            if not left and not right:
                continue
            if not left:
                return 1
            if not right:
                return -1
            result = compare_values(_column_kind(tab, entry.col), left, right)
            if result == 0:
                continue
            return -result if entry.dir == SortDir.DESC else result
        return 0

    order = sorted(range(len(tab.cell_rows)), key=cmp_to_key(compare_rows))
    tab.cell_rows = [tab.cell_rows[index] for index in order]
    tab.rows = [tab.rows[index] for index in order]


def cell_value_at(tab: Tab, row: int, col: int) -> str:
    if row < 0 or row >= len(tab.cell_rows):
        return ""
    cells = tab.cell_rows[row]
    if col < 0 or col >= len(cells):
        return ""
    return cells[col].value.strip()


def _column_kind(tab: Tab, col: int) -> CellKind:
    if 0 <= col < len(tab.specs):
        return tab.specs[col].kind
    return CellKind.TEXT


def compare_values(kind: CellKind, left: str, right: str) -> int:
    if left == right:
        return 0
    if kind == CellKind.MONEY:
        return _cmp(parse_money(left), parse_money(right))
    if kind in _DATE_KINDS:
        return compare_dates(left, right)
    if kind in _NUMERIC_KINDS:
        return compare_numeric(left, right)
    return compare_strings(left, right)


def compare_dates(left: str, right: str) -> int:
    try:
        return _cmp(datetime.strptime(left, DATE_LAYOUT), datetime.strptime(right, DATE_LAYOUT))
    except ValueError:
        return compare_strings(left, right)


def compare_numeric(left: str, right: str) -> int:
    try:
        return _cmp(float(left), float(right))
    except ValueError:
        return compare_strings(left, right)


def compare_strings(left: str, right: str) -> int:
    return _cmp(left.lower(), right.lower())


def parse_money(value: str) -> float:
    text = value.replace("$", "").replace(",", "").strip()
    try:
        return float(text)
    except ValueError:
        return 0.0


def _cmp(left, right) -> int:
    return (left > right) - (left < right)
