from __future__ import annotations

import logging
from typing import Callable

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.css.query import NoMatches
from textual.widgets import Static

from homedash.grid.pins import pin_summary
from homedash.grid.projection import hidden_column_names
from homedash.grid.types import Tab
from homedash.models import TabKind
from homedash.services import grid_commands
from homedash.services.tables import new_tab
from homedash.widgets.grid_table import GridTable, render_tab

logger = logging.getLogger(__name__)

# Header, divider and summary line.
CHROME_HEIGHT = 3


class TableView(Static):
    def __init__(self, kind: TabKind, show_deleted: bool = False, **kwargs):
        super().__init__(**kwargs)
        self.kind = kind
        self.tab: Tab = new_tab(kind, show_deleted)
        self.tab.stale = True

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static(f"🏠 {self.kind.label.upper()}", id="view-header")
            yield Static("", classes="section-label grid-summary")
            yield GridTable(classes="grid-table")

    def on_mount(self) -> None:
        self.refresh_view()

    def on_show(self) -> None:
        self.refresh_view()

    def on_resize(self) -> None:
        self.refresh_view()

    def refresh_view(self) -> None:
        app = self.app
        if self.tab.stale and app.data_manager.is_initialized:
            app.data_manager.reload_tab(self.tab, app.mag_mode)
        width = self.size.width or app.config.grid_width
        height = max(1, self.size.height - CHROME_HEIGHT) if self.size.height else 0
        grid_commands.update_tab_viewport(self.tab, width, app.config.column_separator)
        text = render_tab(
            self.tab,
            width,
            height,
            app.mag_mode,
            app.config.column_separator,
            app.config.collapsed_separator,
        )
        try:
            self.query_one(".grid-summary", Static).update(self.summary_text())
            self.query_one(GridTable).show(text)
        except NoMatches:
            # Not composed yet; the next refresh after mount draws it.
            logger.debug("refresh before compose on %s", self.tab.name)

    def summary_text(self) -> str:
        tab = self.tab
        parts = [f"Rows: {len(tab.rows)}/{len(tab.full_meta)}"]
        if tab.pins:
            mode = "on" if tab.filter_active else "preview"
            if tab.filter_inverted:
                mode = f"{mode}, inverted"
            parts.append(f"Filter: {mode}")
            parts.append(f"Pins: {pin_summary(tab)}")
        elif tab.filter_active:
            parts.append("Filter: armed")
        hidden = hidden_column_names(tab.specs)
        if hidden:
            parts.append(f"Hidden: {', '.join(hidden)}")
        if tab.show_deleted:
            parts.append("Deleted: shown")
        if self.app.mag_mode:
            parts.append("Mag: on")
        return "  │  ".join(parts)

    def run_command(self, command: Callable[..., tuple[bool, str]], *args) -> tuple[bool, str]:
        ok, message = command(self.tab, *args)
        self.refresh_view()
        return ok, message

    def move_column(self, forward: bool) -> tuple[bool, str]:
        return self.run_command(grid_commands.move_column_cursor, forward)

    def jump_column(self, last: bool) -> tuple[bool, str]:
        return self.run_command(grid_commands.jump_column_edge, last)

    def move_selection(self, delta: int) -> tuple[bool, str]:
        return self.run_command(grid_commands.move_row_cursor, delta)

    def toggle_sort(self) -> tuple[bool, str]:
        return self.run_command(grid_commands.toggle_sort_at_cursor)

    def clear_sorts(self) -> tuple[bool, str]:
        return self.run_command(grid_commands.clear_all_sorts, self.app.mag_mode)

    def toggle_pin(self) -> tuple[bool, str]:
        return self.run_command(grid_commands.toggle_pin_at_cursor, self.app.mag_mode)

    def toggle_filter(self) -> tuple[bool, str]:
        return self.run_command(grid_commands.toggle_filter_activation, self.app.mag_mode)

    def toggle_invert(self) -> tuple[bool, str]:
        return self.run_command(grid_commands.toggle_filter_invert, self.app.mag_mode)

    def clear_pins(self) -> tuple[bool, str]:
        return self.run_command(grid_commands.clear_all_pins, self.app.mag_mode)

    def hide_column(self) -> tuple[bool, str]:
        return self.run_command(grid_commands.hide_current_column, self.app.mag_mode)

    def show_columns(self) -> tuple[bool, str]:
        return self.run_command(grid_commands.unhide_all_columns)

    def set_mag_mode(self, mag_mode: bool) -> tuple[bool, str]:
        return self.run_command(grid_commands.toggle_mag_mode, mag_mode)

    def toggle_settled(self) -> tuple[bool, str]:
        return self.run_command(grid_commands.toggle_settled_filter, self.app.mag_mode)

    def toggle_show_deleted(self) -> tuple[bool, str]:
        self.tab.show_deleted = not self.tab.show_deleted
        self.tab.stale = True
        self.refresh_view()
        return True, "Deleted rows shown." if self.tab.show_deleted else "Deleted rows hidden."
