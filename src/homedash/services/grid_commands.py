"""Update functions for grid events.

Each function handles one user event against a single ``Tab`` and returns an
``(ok, message)`` pair for the status line. The caller owns the tab and calls
exactly one of these per event, then re-renders from scratch.
"""

from __future__ import annotations

import logging
from typing import Optional

from rich.cells import cell_len

from homedash.grid.magnitude import cell_display_value, translate_pins
from homedash.grid.pins import (
    apply_row_filter,
    clear_pins,
    clear_pins_for_column,
    has_column_pins,
    has_pins,
    set_filter_active,
    set_filter_inverted,
    status_column_index,
    toggle_pin,
)
from homedash.grid.projection import (
    first_visible_col,
    hide_column,
    last_visible_col,
    next_visible_col,
    show_all_columns,
    visible_count,
    visible_projection,
)
from homedash.grid.sorting import apply_sorts, clear_sorts, toggle_sort
from homedash.grid.types import Cell, Tab
from homedash.grid.viewport import DEFAULT_SEPARATOR, ensure_cursor_visible, viewport_range, width_source_rows
from homedash.grid.widths import column_widths
from homedash.models import ACTIVE_PROJECT_STATUSES, TabKind

logger = logging.getLogger(__name__)

CommandResult = tuple[bool, str]


def refresh_rows(tab: Tab, mag_mode: bool) -> None:
    apply_row_filter(tab, mag_mode)
    apply_sorts(tab)
    tab.row_cursor = max(0, min(tab.row_cursor, len(tab.rows) - 1))


def selected_cell(tab: Tab, col: int) -> Optional[Cell]:
    if not tab.cell_rows or not 0 <= tab.row_cursor < len(tab.cell_rows):
        return None
    row = tab.cell_rows[tab.row_cursor]
    if not 0 <= col < len(row):
        return None
    return row[col]


def update_tab_viewport(tab: Tab, term_width: int, separator: str = DEFAULT_SEPARATOR) -> None:
    """Store the window start that keeps the cursor visible as the next offset hint."""
    projection = visible_projection(tab)
    if not projection.specs or projection.col_cursor < 0:
        tab.view_offset = 0
        return
    sep_width = cell_len(separator)
    widths = column_widths(projection.specs, width_source_rows(tab, projection), term_width, sep_width)
    ensure_cursor_visible(tab, projection.col_cursor, len(projection.specs))
    window = viewport_range(widths, sep_width, term_width, tab.view_offset, projection.col_cursor)
    tab.view_offset = window.start


def toggle_pin_at_cursor(tab: Tab, mag_mode: bool) -> CommandResult:
    col = tab.col_cursor
    if not 0 <= col < len(tab.specs):
        return False, "No column selected."
    cell = selected_cell(tab, col)
    if cell is None:
        return False, "Nothing to pin."
    # Pin what is on screen: the NULL sentinel, the magnitude bucket, or the raw value.
    pinned = toggle_pin(tab, col, cell_display_value(cell, mag_mode))
    refresh_rows(tab, mag_mode)
    logger.debug("pin %s on %s col=%d", "added" if pinned else "removed", tab.name, col)
    return True, "Pinned." if pinned else "Unpinned."


def toggle_filter_activation(tab: Tab, mag_mode: bool) -> CommandResult:
    # Works without pins too: an armed filter applies as soon as a pin lands.
    set_filter_active(tab, not tab.filter_active)
    if has_pins(tab):
        refresh_rows(tab, mag_mode)
    return True, "Filter on." if tab.filter_active else "Filter preview."


def toggle_filter_invert(tab: Tab, mag_mode: bool) -> CommandResult:
    set_filter_inverted(tab, not tab.filter_inverted)
    if has_pins(tab):
        refresh_rows(tab, mag_mode)
    return True, "Filter inverted." if tab.filter_inverted else "Filter normal."


def clear_all_pins(tab: Tab, mag_mode: bool) -> CommandResult:
    if not has_pins(tab) and not tab.filter_active:
        return False, "No pins to clear."
    clear_pins(tab)
    refresh_rows(tab, mag_mode)
    return True, "Pins cleared."


def hide_current_column(tab: Tab, mag_mode: bool) -> CommandResult:
    col = tab.col_cursor
    if not 0 <= col < len(tab.specs) or tab.specs[col].hide_order > 0:
        return False, "No visible column selected."
    if visible_count(tab.specs) <= 1:
        return False, "Cannot hide the last visible column."
    hide_column(tab, col)
    # Pins on the hidden column are dropped, which may change the filtered rows.
    refresh_rows(tab, mag_mode)
    target = next_visible_col(tab.specs, col, forward=True)
    if target == col:
        target = next_visible_col(tab.specs, col, forward=False)
    tab.col_cursor = target
    return True, f"Hidden: {tab.specs[col].title}. Press C to show all."


def unhide_all_columns(tab: Tab) -> CommandResult:
    if not show_all_columns(tab):
        return False, "No hidden columns."
    return True, "All columns visible."


def toggle_mag_mode(tab: Tab, now_mag_mode: bool) -> CommandResult:
    if has_pins(tab):
        translate_pins(tab, now_mag_mode)
        refresh_rows(tab, now_mag_mode)
    return True, "Magnitude mode on." if now_mag_mode else "Magnitude mode off."


def move_column_cursor(tab: Tab, forward: bool) -> CommandResult:
    target = next_visible_col(tab.specs, tab.col_cursor, forward)
    if target == tab.col_cursor:
        return False, ""
    tab.col_cursor = target
    return True, ""


def jump_column_edge(tab: Tab, last: bool) -> CommandResult:
    tab.col_cursor = last_visible_col(tab.specs) if last else first_visible_col(tab.specs)
    return True, ""


def move_row_cursor(tab: Tab, delta: int) -> CommandResult:
    if not tab.rows:
        return False, ""
    tab.row_cursor = max(0, min(tab.row_cursor + delta, len(tab.rows) - 1))
    return True, ""


def toggle_sort_at_cursor(tab: Tab) -> CommandResult:
    if not 0 <= tab.col_cursor < len(tab.specs):
        return False, "No column selected."
    toggle_sort(tab, tab.col_cursor)
    apply_sorts(tab)
    return True, f"Sorted by {tab.specs[tab.col_cursor].title}."


def clear_all_sorts(tab: Tab, mag_mode: bool) -> CommandResult:
    clear_sorts(tab)
    refresh_rows(tab, mag_mode)
    return True, "Sorts cleared."


def toggle_settled_filter(tab: Tab, mag_mode: bool) -> CommandResult:
    """Projects only: hide completed and abandoned projects, or show them again."""
    if tab.kind != TabKind.PROJECTS:
        return False, "Settled filter only applies to projects."
    col = status_column_index(tab.specs)
    if col < 0:
        return False, "No status column."
    if has_column_pins(tab, col):
        clear_pins_for_column(tab, col)
        refresh_rows(tab, mag_mode)
        return True, "Settled shown."
    for status in ACTIVE_PROJECT_STATUSES:
        toggle_pin(tab, col, status)
    set_filter_active(tab, True)
    refresh_rows(tab, mag_mode)
    return True, "Settled hidden."
