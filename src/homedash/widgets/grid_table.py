from __future__ import annotations

from typing import Sequence

from rich.cells import cell_len, set_cell_size
from rich.text import Text
from textual.widgets import Static

from homedash.grid.magnitude import mag_transform_cells
from homedash.grid.pins import cell_matches_pin
from homedash.grid.types import Align, Cell, CellKind, ColumnSpec, FilterPin, RowMeta, SortDir, SortEntry, Tab
from homedash.grid.viewport import (
    COLLAPSED_SEPARATOR,
    DEFAULT_SEPARATOR,
    TableViewport,
    compute_table_viewport,
)
from homedash.grid.widths import DRILLDOWN_ARROW, LINK_ARROW, safe_width

EMPTY_CELL = "—"

HEADER_STYLE = "bold #bbbbbb"
ACTIVE_HEADER_STYLE = "bold #ffffff on #333333"
ARROW_STYLE = "#5f87af"
SEPARATOR_STYLE = "#444444"
DIVIDER_STYLE = "#444444"
EMPTY_STYLE = "#555555"
PINNED_STYLE = "bold #d7af00"
DIM_STYLE = "#5c5c5c"
ROW_STYLE = "on #262626"

STATUS_STYLES = {
    "ideating": "#af87d7",
    "planned": "#5fafd7",
    "quoted": "#d7af5f",
    "underway": "#5fd75f",
    "delayed": "#d75f5f",
    "completed": "#878787",
    "abandoned": "#5f5f5f",
}

KIND_STYLES = {
    CellKind.MONEY: "#87d787",
    CellKind.READONLY: "#808080",
    CellKind.DATE: "#afafaf",
    CellKind.DRILLDOWN: "#5fafff",
    CellKind.NOTES: "#9e9e9e",
}


def sort_indicator(sorts: Sequence[SortEntry], col: int) -> str:
    for index, entry in enumerate(sorts):
        if entry.col != col:
            continue
        arrow = "▼" if entry.dir == SortDir.DESC else "▲"
        if len(sorts) == 1:
            return arrow
        return f"{arrow}{index + 1}"
    return ""


def truncate(value: str, width: int) -> str:
    if width < 1:
        return ""
    if cell_len(value) <= width:
        return value
    text = Text(value)
    text.truncate(width, overflow="ellipsis")
    return text.plain


def format_cell(value: str, width: int, align: Align) -> str:
    """Truncate with an ellipsis and pad to ``width`` on the aligned side."""
    if width < 1:
        return ""
    truncated = truncate(value, width)
    padding = width - cell_len(truncated)
    if padding <= 0:
        return truncated
    if align == Align.RIGHT:
        return " " * padding + truncated
    return truncated + " " * padding


def format_header_cell(title: str, indicator: str, width: int) -> str:
    if not indicator:
        return format_cell(title, width, Align.LEFT)
    gap = width - cell_len(title) - cell_len(indicator)
    if gap < 0:
        available = width - cell_len(indicator)
        if available < 1:
            return format_cell(title, width, Align.LEFT)
        title = set_cell_size(title, available)
        gap = width - cell_len(title) - cell_len(indicator)
    return title + " " * gap + indicator


def visible_range(total: int, height: int, cursor: int) -> tuple[int, int]:
    """Row window of ``height`` rows centred on the cursor where possible."""
    if total <= height:
        return 0, total
    cursor = max(0, min(cursor, total - 1))
    start = max(0, cursor - height // 2)
    end = start + height
    if end > total:
        end = total
        start = max(0, end - height)
    return start, end


def _join(line: Text, parts: Sequence[Text], separators: Sequence[str]) -> None:
    for index, part in enumerate(parts):
        if index > 0:
            gap = index - 1
            if gap < len(separators):
                line.append(separators[gap], style=SEPARATOR_STYLE)
            elif separators:
                line.append(separators[-1], style=SEPARATOR_STYLE)
        line.append_text(part)


def _header_title(spec: ColumnSpec) -> str:
    if spec.link is not None:
        return f"{spec.title} {LINK_ARROW}"
    if spec.kind == CellKind.DRILLDOWN:
        return f"{spec.title} {DRILLDOWN_ARROW}"
    return spec.title


def render_header(viewport: TableViewport) -> Text:
    parts: list[Text] = []
    last = len(viewport.specs) - 1
    for index, spec in enumerate(viewport.specs):
        width = safe_width(viewport.widths, index)
        title = _header_title(spec)
        if index == 0 and viewport.has_left:
            title = f"◀ {title}"
        if index == last and viewport.has_right:
            title = f"{title} ▶"
        text = format_header_cell(title, sort_indicator(viewport.sorts, index), width)
        part = Text(text, style=ACTIVE_HEADER_STYLE if index == viewport.cursor else HEADER_STYLE)
        for glyph in ("◀", "▶", LINK_ARROW, DRILLDOWN_ARROW):
            part.highlight_words([glyph], style=ARROW_STYLE)
        parts.append(part)
    line = Text()
    _join(line, parts, viewport.plain_seps)
    return line


def render_divider(viewport: TableViewport) -> Text:
    parts = [Text("─" * max(width, 1), style=DIVIDER_STYLE) for width in viewport.widths]
    line = Text()
    # The divider never shows the collapsed marker.
    _join(line, parts, [divider_separator(sep) for sep in viewport.plain_seps])
    return line


def divider_separator(sep: str) -> str:
    return "".join("┼" if char == "│" else "─" for char in sep)


def _cell_style(cell: Cell, value: str) -> str:
    if cell.kind == CellKind.STATUS:
        return STATUS_STYLES.get(value, "")
    return KIND_STYLES.get(cell.kind, "")


def render_cell(
    cell: Cell,
    spec: ColumnSpec,
    width: int,
    selected: bool,
    cursor: bool,
    meta: RowMeta | None,
    pinned: bool,
) -> Text:
    width = max(width, 1)
    value = cell.value.strip()
    if not value:
        value = EMPTY_CELL
        style = EMPTY_STYLE
    else:
        style = _cell_style(cell, value)
    if pinned:
        style = PINNED_STYLE
    deleted = meta is not None and meta.deleted
    if deleted:
        style = f"{style} {DIM_STYLE} strike italic".strip()
    elif meta is not None and meta.dimmed:
        style = f"{style} {DIM_STYLE}".strip()
    if selected:
        style = f"{style} bold {ROW_STYLE}".strip()

    if not (cursor or deleted):
        return Text(format_cell(value, width, spec.align), style=style)

    # Decorations cover the text only, not the padding.
    if cursor:
        style = f"{style} underline bold"
    truncated = truncate(value, width)
    padding = " " * max(0, width - cell_len(truncated))
    text = Text()
    if spec.align == Align.RIGHT:
        text.append(padding)
    text.append(truncated, style=style)
    if spec.align != Align.RIGHT:
        text.append(padding)
    return text


def render_grid(
    viewport: TableViewport,
    rows_meta: Sequence[RowMeta],
    row_cursor: int,
    height: int = 0,
    pins: Sequence[FilterPin] = (),
    mag_mode: bool = False,
    raw_cells: Sequence[Sequence[Cell]] | None = None,
) -> Text:
    """Render a computed viewport as a rich ``Text`` block.

    ``viewport.cells`` hold what is displayed (possibly magnitude-transformed);
    ``raw_cells`` are the matching untransformed cells used for pin matching.
    ``height`` limits the number of body rows; 0 shows all of them.
    """
    if not viewport.specs:
        return Text("No visible columns.", style=EMPTY_STYLE)

    lines = [render_header(viewport), render_divider(viewport)]
    rows = viewport.cells
    total = len(rows)
    if total == 0:
        lines.append(Text("No rows.", style=EMPTY_STYLE))
        return Text("\n").join(lines)

    raw_rows = raw_cells if raw_cells is not None else rows
    start, end = visible_range(total, height if height > 0 else total, row_cursor)
    middle = start + (end - start) // 2
    for row_index in range(start, end):
        meta = rows_meta[row_index] if row_index < len(rows_meta) else None
        selected = row_index == row_cursor
        row = rows[row_index]
        raw_row = raw_rows[row_index] if row_index < len(raw_rows) else row
        parts: list[Text] = []
        for col, spec in enumerate(viewport.specs):
            cell = row[col] if col < len(row) else Cell()
            pinned = False
            if pins and col < len(viewport.vis_to_full):
                raw = raw_row[col] if col < len(raw_row) else cell
                pinned = cell_matches_pin(pins, viewport.vis_to_full[col], raw, mag_mode)
            parts.append(
                render_cell(
                    cell,
                    spec,
                    safe_width(viewport.widths, col),
                    selected,
                    selected and col == viewport.cursor,
                    meta,
                    pinned,
                )
            )
        separators = viewport.plain_seps
        if row_index in (start, middle, end - 1):
            separators = viewport.collapsed_seps
        line = Text()
        _join(line, parts, separators)
        lines.append(line)
    return Text("\n").join(lines)


def render_tab(
    tab: Tab,
    width: int,
    height: int = 0,
    mag_mode: bool = False,
    normal_sep: str = DEFAULT_SEPARATOR,
    collapsed_sep: str = COLLAPSED_SEPARATOR,
) -> Text:
    viewport = compute_table_viewport(tab, width, normal_sep, collapsed_sep)
    raw_cells = viewport.cells
    if mag_mode:
        viewport.cells = mag_transform_cells(viewport.cells)
    return render_grid(viewport, tab.rows, tab.row_cursor, height, tab.pins, mag_mode, raw_cells)


class GridTable(Static):
    """Static that shows a pre-rendered grid."""

    def __init__(self, **kwargs):
        super().__init__("", **kwargs)
        self.grid_text = Text()

    def show(self, text: Text) -> None:
        self.grid_text = text
        self.update(text)
