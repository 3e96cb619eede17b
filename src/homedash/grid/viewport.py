from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple, Sequence, TypeVar

from rich.cells import cell_len

from homedash.grid.projection import VisibleProjection, project_row, visible_projection
from homedash.grid.types import Cell, ColumnSpec, SortEntry, Tab
from homedash.grid.widths import column_widths

T = TypeVar("T")

# Width reserved for the "◀ " / " ▶" markers that signal off-screen columns.
SCROLL_INDICATOR_WIDTH = 2

DEFAULT_SEPARATOR = " │ "
COLLAPSED_SEPARATOR = " ⋯ "


class ViewportRange(NamedTuple):
    start: int
    end: int
    has_left: bool
    has_right: bool


@dataclass
class TableViewport:
    specs: list[ColumnSpec] = field(default_factory=list)
    cells: list[list[Cell]] = field(default_factory=list)
    widths: list[int] = field(default_factory=list)
    plain_seps: list[str] = field(default_factory=list)
    collapsed_seps: list[str] = field(default_factory=list)
    cursor: int = -1  # window-relative; -1 when the cursor is outside the window
    sorts: list[SortEntry] = field(default_factory=list)
    vis_to_full: list[int] = field(default_factory=list)  # window column -> Tab.specs index
    start: int = 0
    end: int = 0
    has_left: bool = False
    has_right: bool = False


def ensure_cursor_visible(tab: Tab, vis_cursor: int, vis_count: int) -> None:
    """Cheap pre-adjustment of ``tab.view_offset``.

    Only guarantees the offset is not right of the cursor; ``viewport_range``
    decides what actually fits.
    """
    if vis_count == 0:
        tab.view_offset = 0
        return
    if tab.view_offset > vis_cursor:
        tab.view_offset = vis_cursor
    tab.view_offset = max(0, min(tab.view_offset, vis_count - 1))


def _fill_right(widths: Sequence[int], sep_width: int, start: int, budget: int) -> tuple[int, int]:
    """Greedily take columns from ``start``; the first one is always taken."""
    end = start
    while end < len(widths):
        column_width = widths[end]
        if end > start:
            column_width += sep_width
        if budget - column_width < 0 and end > start:
            break
        budget -= column_width
        end += 1
    return end, budget


def viewport_range(
    widths: Sequence[int],
    sep_width: int,
    term_width: int,
    view_offset: int,
    vis_cursor: int,
) -> ViewportRange:
    count = len(widths)
    if count == 0:
        return ViewportRange(0, 0, False, False)

    total = sum(widths) + sep_width * (count - 1)
    if total <= term_width:
        return ViewportRange(0, count, False, False)

    start = max(0, min(view_offset, count - 1))
    if 0 <= vis_cursor < start:
        start = vis_cursor
    has_left = start > 0
    budget = term_width - (SCROLL_INDICATOR_WIDTH if has_left else 0)
    end, budget = _fill_right(widths, sep_width, start, budget)
    has_right = end < count
    if has_right and budget < SCROLL_INDICATOR_WIDTH and end > start + 1:
        end -= 1

    # Walk right until the cursor column is inside the window.
    while vis_cursor >= end and end < count:
        start += 1
        has_left = True
        end, budget = _fill_right(widths, sep_width, start, term_width - SCROLL_INDICATOR_WIDTH)
        has_right = end < count
        if has_right and budget < SCROLL_INDICATOR_WIDTH and end > start + 1:
            end -= 1

    return ViewportRange(start, end, has_left, has_right)


def slice_viewport(items: Sequence[T], start: int, end: int) -> list[T]:
    if start >= len(items):
        return []
    return list(items[start:min(end, len(items))])


def slice_viewport_rows(rows: Sequence[Sequence[Cell]], start: int, end: int) -> list[list[Cell]]:
    return [slice_viewport(row, start, end) for row in rows]


def project_cell_rows(
    full_cell_rows: Sequence[Sequence[Cell]],
    vis_to_full: Sequence[int],
    start: int,
    end: int,
) -> list[list[Cell]]:
    """Project rows through the visible map and the ``[start, end)`` window."""
    window = list(vis_to_full[start:end])
    return [project_row(row, window) for row in full_cell_rows]


def viewport_sorts(sorts: Sequence[SortEntry], start: int) -> list[SortEntry]:
    if start == 0:
        return list(sorts)
    return [SortEntry(col=entry.col - start, dir=entry.dir) for entry in sorts]


def gap_separators(
    vis_to_full: Sequence[int],
    normal_sep: str = DEFAULT_SEPARATOR,
    collapsed_sep: str = COLLAPSED_SEPARATOR,
) -> tuple[list[str], list[str]]:
    """One separator per gap; the collapsed variant marks hidden columns in between."""
    if len(vis_to_full) <= 1:
        return [], []
    plain: list[str] = []
    collapsed: list[str] = []
    for left, right in zip(vis_to_full, vis_to_full[1:]):
        plain.append(normal_sep)
        collapsed.append(collapsed_sep if right > left + 1 else normal_sep)
    return plain, collapsed


def width_source_rows(tab: Tab, projection: VisibleProjection) -> list[list[Cell]]:
    """Rows to size columns from: unfiltered while pins exist, displayed otherwise.

    Sizing from the unfiltered rows keeps columns still when the filter toggles.
    """
    if tab.pins and tab.full_cell_rows:
        return project_cell_rows(tab.full_cell_rows, projection.vis_to_full, 0, len(projection.vis_to_full))
    return projection.cell_rows


def compute_table_viewport(
    tab: Tab | None,
    term_width: int,
    normal_sep: str = DEFAULT_SEPARATOR,
    collapsed_sep: str = COLLAPSED_SEPARATOR,
) -> TableViewport:
    viewport = TableViewport()
    if tab is None:
        return viewport
    projection = visible_projection(tab)
    if not projection.specs:
        return viewport

    sep_width = cell_len(normal_sep)
    full_widths = column_widths(projection.specs, width_source_rows(tab, projection), term_width, sep_width)

    window = viewport_range(full_widths, sep_width, term_width, tab.view_offset, projection.col_cursor)
    start, end = window.start, window.end
    viewport.start, viewport.end = start, end
    viewport.has_left, viewport.has_right = window.has_left, window.has_right
    viewport.specs = slice_viewport(projection.specs, start, end)
    viewport.cells = slice_viewport_rows(projection.cell_rows, start, end)
    viewport.sorts = viewport_sorts(projection.sorts, start)
    viewport.vis_to_full = slice_viewport(projection.vis_to_full, start, end)
    if start <= projection.col_cursor < end:
        viewport.cursor = projection.col_cursor - start

    width_rows = viewport.cells
    if tab.pins and tab.full_cell_rows:
        width_rows = project_cell_rows(tab.full_cell_rows, projection.vis_to_full, start, end)
    viewport.widths = column_widths(viewport.specs, width_rows, term_width, sep_width)
    viewport.plain_seps, viewport.collapsed_seps = gap_separators(
        viewport.vis_to_full, normal_sep, collapsed_sep
    )
    return viewport
