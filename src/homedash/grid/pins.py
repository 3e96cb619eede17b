"""Column-scoped pin filter.

Pins are AND-ed across columns and OR-ed within a column. With the filter
active, rows that fail the predicate are removed; otherwise (preview) every row
stays and the failing ones are marked dimmed. ``filter_inverted`` flips which
side of the predicate is kept.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Sequence

from homedash.grid.magnitude import cell_display_value
from homedash.grid.types import NULL_PIN_KEY, Cell, ColumnSpec, FilterPin, RowMeta, Tab

logger = logging.getLogger(__name__)


def pin_key(value: Optional[str]) -> str:
    if value is None:
        return NULL_PIN_KEY
    return value.strip().lower()


def has_pins(tab: Optional[Tab]) -> bool:
    return tab is not None and len(tab.pins) > 0


def _find_pin(tab: Tab, col: int) -> Optional[FilterPin]:
    for pin in tab.pins:
        if pin.col == col:
            return pin
    return None


def toggle_pin(tab: Tab, col: int, value: Optional[str]) -> bool:
    """Toggle ``value`` on ``col``. Returns True if the value ended up pinned."""
    key = pin_key(value)
    pin = _find_pin(tab, col)
    if pin is None:
        tab.pins.append(FilterPin(col=col, values={key: None}))
        return True
    if key in pin.values:
        del pin.values[key]
        if not pin.values:
            tab.pins.remove(pin)
        return False
    pin.values[key] = None
    return True


def clear_pins(tab: Tab) -> None:
    tab.pins = []
    tab.filter_active = False
    tab.filter_inverted = False


def clear_pins_for_column(tab: Tab, col: int) -> None:
    tab.pins = [pin for pin in tab.pins if pin.col != col]
    if not tab.pins:
        tab.filter_active = False
        tab.filter_inverted = False


def set_filter_active(tab: Tab, active: bool) -> None:
    tab.filter_active = active


def set_filter_inverted(tab: Tab, inverted: bool) -> None:
    tab.filter_inverted = inverted


def is_pinned(tab: Tab, col: int, value: Optional[str]) -> bool:
    pin = _find_pin(tab, col)
    return pin is not None and pin_key(value) in pin.values


def has_column_pins(tab: Tab, col: int) -> bool:
    pin = _find_pin(tab, col)
    return pin is not None and len(pin.values) > 0


def matches_all_pins(cell_row: Sequence[Cell], pins: Sequence[FilterPin], mag_mode: bool) -> bool:
    for pin in pins:
        if pin.col < 0 or pin.col >= len(cell_row):
            return False
        if cell_display_value(cell_row[pin.col], mag_mode) not in pin.values:
            return False
    return True


def cell_matches_pin(pins: Sequence[FilterPin], full_col: int, cell: Cell, mag_mode: bool) -> bool:
    """Whether ``cell`` (sitting in full-spec column ``full_col``) is a pinned value."""
    key = cell_display_value(cell, mag_mode)
    for pin in pins:
        if pin.col == full_col:
            return key in pin.values
    return False


def apply_row_filter(tab: Tab, mag_mode: bool) -> None:
    if not tab.pins:
        tab.rows = list(tab.full_meta)
        tab.cell_rows = list(tab.full_cell_rows)
        return

    if tab.filter_active:
        rows: list[RowMeta] = []
        cells: list[list[Cell]] = []
        for meta, cell_row in zip(tab.full_meta, tab.full_cell_rows):
            if matches_all_pins(cell_row, tab.pins, mag_mode) != tab.filter_inverted:
                rows.append(meta)
                cells.append(cell_row)
        tab.rows = rows
        tab.cell_rows = cells
        logger.debug("filter kept %d of %d rows on %s", len(rows), len(tab.full_meta), tab.name)
        return

    preview: list[RowMeta] = []
    for meta, cell_row in zip(tab.full_meta, tab.full_cell_rows):
        keep = matches_all_pins(cell_row, tab.pins, mag_mode) != tab.filter_inverted
        preview.append(meta if keep else replace(meta, dimmed=True))
    tab.rows = preview
    tab.cell_rows = list(tab.full_cell_rows)


def status_column_index(specs: Sequence[ColumnSpec]) -> int:
    for index, spec in enumerate(specs):
        if spec.title == "Status":
            return index
    return -1


def pin_summary(tab: Tab) -> str:
    """Human-readable pin list, e.g. "Status: plan, active · Vendor: bob's"."""
    parts: list[str] = []
    for pin in tab.pins:
        title = tab.specs[pin.col].title if 0 <= pin.col < len(tab.specs) else ""
        values = ["∅" if value == NULL_PIN_KEY else value for value in pin.values]
        parts.append(f"{title}: {', '.join(values)}")
    return " · ".join(parts)
