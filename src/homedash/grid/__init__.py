from homedash.grid.magnitude import cell_display_value, mag_format, translate_pins
from homedash.grid.pins import (
    apply_row_filter,
    clear_pins,
    clear_pins_for_column,
    has_column_pins,
    has_pins,
    is_pinned,
    matches_all_pins,
    set_filter_active,
    set_filter_inverted,
    toggle_pin,
)
from homedash.grid.projection import hide_column, show_all_columns, visible_projection
from homedash.grid.types import (
    NULL_PIN_KEY,
    Align,
    Cell,
    CellKind,
    ColumnLink,
    ColumnSpec,
    FilterPin,
    RowMeta,
    SortDir,
    SortEntry,
    Tab,
)
from homedash.grid.viewport import TableViewport, compute_table_viewport, ensure_cursor_visible, viewport_range
from homedash.grid.widths import column_widths

__all__ = [
    "NULL_PIN_KEY",
    "Align",
    "Cell",
    "CellKind",
    "ColumnLink",
    "ColumnSpec",
    "FilterPin",
    "RowMeta",
    "SortDir",
    "SortEntry",
    "Tab",
    "TableViewport",
    "apply_row_filter",
    "cell_display_value",
    "clear_pins",
    "clear_pins_for_column",
    "column_widths",
    "compute_table_viewport",
    "ensure_cursor_visible",
    "has_column_pins",
    "has_pins",
    "hide_column",
    "is_pinned",
    "mag_format",
    "matches_all_pins",
    "set_filter_active",
    "set_filter_inverted",
    "show_all_columns",
    "toggle_pin",
    "translate_pins",
    "viewport_range",
    "visible_projection",
]
