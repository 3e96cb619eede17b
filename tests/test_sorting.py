from __future__ import annotations

from homedash.grid.sorting import (
    apply_sorts,
    clear_sorts,
    compare_values,
    parse_money,
    toggle_sort,
    with_pk_tiebreaker,
)
from homedash.grid.types import Cell, CellKind, ColumnSpec, RowMeta, SortDir, SortEntry, Tab
from homedash.models import TabKind


def _tab() -> Tab:
    specs = [
        ColumnSpec("ID", kind=CellKind.READONLY),
        ColumnSpec("Name"),
        ColumnSpec("Budget", kind=CellKind.MONEY),
        ColumnSpec("Start", kind=CellKind.DATE),
    ]
    rows = [
        (1, "b", "$20.00", "2026-03-01"),
        (2, "a", "", "2025-12-31"),
        (3, "c", "$100.00", ""),
        (4, "A", "$20.00", "2026-01-15"),
    ]
    tab = Tab(kind=TabKind.PROJECTS, name="Projects", specs=specs)
    tab.rows = [RowMeta(id=row[0]) for row in rows]
    tab.cell_rows = [
        [Cell(str(row[0]), CellKind.READONLY), Cell(row[1]), Cell(row[2], CellKind.MONEY), Cell(row[3], CellKind.DATE)]
        for row in rows
    ]
    return tab


def _ids(tab: Tab) -> list[int]:
    return [meta.id for meta in tab.rows]


def test_toggle_sort_cycles_none_asc_desc_none() -> None:
    tab = _tab()

    toggle_sort(tab, 2)
    assert tab.sorts == [SortEntry(2, SortDir.ASC)]
    toggle_sort(tab, 2)
    assert tab.sorts == [SortEntry(2, SortDir.DESC)]
    toggle_sort(tab, 2)
    assert tab.sorts == []


def test_money_sort_puts_empty_values_last_in_both_directions() -> None:
    tab = _tab()
    toggle_sort(tab, 2)
    apply_sorts(tab)
    assert _ids(tab) == [1, 4, 3, 2]

    toggle_sort(tab, 2)
    apply_sorts(tab)
    assert _ids(tab) == [3, 1, 4, 2]


def test_sort_keeps_row_meta_aligned_with_cells() -> None:
    tab = _tab()
    toggle_sort(tab, 3)
    apply_sorts(tab)

    assert _ids(tab) == [2, 4, 1, 3]
    assert [int(row[0].value) for row in tab.cell_rows] == _ids(tab)


def test_text_sort_is_case_insensitive_with_id_tiebreaker() -> None:
    tab = _tab()
    toggle_sort(tab, 1)
    apply_sorts(tab)

    assert _ids(tab) == [2, 4, 1, 3]


def test_multi_column_sort() -> None:
    tab = _tab()
    toggle_sort(tab, 1)
    toggle_sort(tab, 2)
    toggle_sort(tab, 2)
    apply_sorts(tab)

    assert _ids(tab) == [4, 2, 1, 3]


def test_clear_sorts_empties_stack() -> None:
    tab = _tab()
    toggle_sort(tab, 1)
    clear_sorts(tab)

    assert tab.sorts == []


def test_id_tiebreaker_only_added_when_missing() -> None:
    assert with_pk_tiebreaker([SortEntry(2)]) == [SortEntry(2), SortEntry(0)]
    assert with_pk_tiebreaker([SortEntry(0, SortDir.DESC)]) == [SortEntry(0, SortDir.DESC)]


def test_compare_values_by_kind() -> None:
    assert compare_values(CellKind.MONEY, "$9.00", "$10.00") == -1
    assert compare_values(CellKind.READONLY, "9", "10") == -1
    assert compare_values(CellKind.TEXT, "9", "10") == 1
    assert compare_values(CellKind.DATE, "2026-01-02", "2025-12-31") == 1
    assert parse_money("-$1,250.50") == -1250.5
    assert parse_money("n/a") == 0.0
