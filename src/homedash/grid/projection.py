from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from homedash.grid.pins import clear_pins_for_column
from homedash.grid.types import Cell, ColumnSpec, SortEntry, Tab


@dataclass(frozen=True)
class VisibleProjection:
    specs: list[ColumnSpec]
    cell_rows: list[list[Cell]]
    col_cursor: int  # -1 when the cursor's column is hidden
    sorts: list[SortEntry]
    vis_to_full: list[int]


def visible_projection(tab: Tab) -> VisibleProjection:
    """Strip hidden columns from the tab's specs, displayed cells, cursor and sorts."""
    vis_to_full: list[int] = []
    full_to_vis: dict[int, int] = {}
    specs: list[ColumnSpec] = []
    for index, spec in enumerate(tab.specs):
        if spec.hide_order > 0:
            continue
        full_to_vis[index] = len(vis_to_full)
        vis_to_full.append(index)
        specs.append(spec)

    cell_rows = [project_row(row, vis_to_full) for row in tab.cell_rows]
    sorts = [
        SortEntry(col=full_to_vis[entry.col], dir=entry.dir)
        for entry in tab.sorts
        if entry.col in full_to_vis
    ]
    return VisibleProjection(
        specs=specs,
        cell_rows=cell_rows,
        col_cursor=full_to_vis.get(tab.col_cursor, -1),
        sorts=sorts,
        vis_to_full=vis_to_full,
    )


def project_row(row: Sequence[Cell], indices: Sequence[int]) -> list[Cell]:
    return [row[index] for index in indices if index < len(row)]


def next_visible_col(specs: Sequence[ColumnSpec], current: int, forward: bool) -> int:
    """Nearest visible column in the given direction, or ``current`` at the edge."""
    step = 1 if forward else -1
    index = current + step
    while 0 <= index < len(specs):
        if specs[index].hide_order == 0:
            return index
        index += step
    return current


def first_visible_col(specs: Sequence[ColumnSpec]) -> int:
    for index, spec in enumerate(specs):
        if spec.hide_order == 0:
            return index
    return 0


def last_visible_col(specs: Sequence[ColumnSpec]) -> int:
    for index in range(len(specs) - 1, -1, -1):
        if specs[index].hide_order == 0:
            return index
    return 0


def visible_count(specs: Sequence[ColumnSpec]) -> int:
    return sum(1 for spec in specs if spec.hide_order == 0)


def next_hide_order(specs: Sequence[ColumnSpec]) -> int:
    return max((spec.hide_order for spec in specs), default=0) + 1


def hidden_column_names(specs: Sequence[ColumnSpec]) -> list[str]:
    """Titles of hidden columns, most recently hidden last."""
    hidden = [spec for spec in specs if spec.hide_order > 0]
    return [spec.title for spec in sorted(hidden, key=lambda spec: spec.hide_order)]


def hide_column(tab: Tab, col: int) -> bool:
    """Hide ``col`` and drop its pins. Callers refuse the last visible column first."""
    if col < 0 or col >= len(tab.specs) or tab.specs[col].hide_order > 0:
        return False
    tab.specs[col].hide_order = next_hide_order(tab.specs)
    clear_pins_for_column(tab, col)
    return True


def show_all_columns(tab: Tab) -> bool:
    changed = False
    for spec in tab.specs:
        if spec.hide_order > 0:
            spec.hide_order = 0
            changed = True
    return changed
